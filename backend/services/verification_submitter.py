"""
Verification Submitter - primary REST API, then legacy RPC API

FLOW:
    REST verify ──ok──> VerificationSuccess(v2_api)
        │ non-2xx / transport error / bad body
        ▼
    RPC verify  ──ok──> VerificationSuccess(rpc_api)
        │ non-2xx                      │ transport error
        ▼                              ▼
    VerificationFailure(body)     VerificationFailure(exception text)

The REST attempt always finishes before the RPC attempt starts. Each
endpoint is tried once per call; retrying is up to the caller.
"""

import logging
from typing import Optional, Union

from sentry_config import capture_verification_breadcrumb
from .blockscout_client import REQUEST_ERRORS, BlockscoutClient
from .verification_models import (
    VerificationFailure,
    VerificationMethod,
    VerificationRequest,
    VerificationSuccess,
)

logger = logging.getLogger(__name__)

VerificationOutcome = Union[VerificationSuccess, VerificationFailure]

BOTH_REJECTED = "Verification failed with both v2 API and RPC methods"
BOTH_FAILED = "Both verification methods failed"


class VerificationSubmitter:
    def __init__(self, client: BlockscoutClient):
        self.client = client

    async def submit(self, request: VerificationRequest) -> VerificationOutcome:
        outcome = await self._try_v2(request)
        if outcome is not None:
            return outcome
        return await self._try_rpc(request)

    async def _try_v2(self, request: VerificationRequest) -> Optional[VerificationSuccess]:
        capture_verification_breadcrumb(VerificationMethod.V2_API.value, request.address)
        try:
            response = await self.client.verify_flattened(request)
            if response.is_success:
                result = response.json()
                logger.info(f"✅ v2 API verification accepted for {request.address}")
                return VerificationSuccess(VerificationMethod.V2_API, result)

            logger.warning(f"⚠️ v2 API failed ({response.status_code}), trying RPC method. Error: {response.text[:500]}")
        except REQUEST_ERRORS + (ValueError,) as e:
            # ValueError covers an undecodable JSON body
            logger.warning(f"⚠️ v2 API error, trying RPC method: {type(e).__name__}: {e}")
        return None

    async def _try_rpc(self, request: VerificationRequest) -> VerificationOutcome:
        capture_verification_breadcrumb(VerificationMethod.RPC_API.value, request.address)
        try:
            response = await self.client.verify_legacy(request)
            if response.is_success:
                result = response.json()
                logger.info(f"✅ RPC verification result for {request.address}: {result}")
                return VerificationSuccess(VerificationMethod.RPC_API, result)

            logger.error(f"❌ RPC verification failed ({response.status_code}): {response.text[:500]}")
            return VerificationFailure(
                address_hash=request.address,
                error=BOTH_REJECTED,
                details=response.text,
                explorer_status=response.status_code,
            )
        except REQUEST_ERRORS + (ValueError,) as e:
            logger.error(f"❌ RPC method error: {type(e).__name__}: {e}")
            return VerificationFailure(
                address_hash=request.address,
                error=BOTH_FAILED,
                details=str(e) or type(e).__name__,
            )
