"""
Explorer Status Reader

Read-only verification status for an address. "Not indexed / not
verified yet" is a normal state for a polling UI, so any non-2xx answer
from the explorer is reported as success with status "not_found".
"""

import logging

from .blockscout_client import REQUEST_ERRORS, BlockscoutClient
from .verification_models import VerificationStatus

logger = logging.getLogger(__name__)


class ExplorerStatusReader:
    def __init__(self, client: BlockscoutClient):
        self.client = client

    async def read(self, address: str) -> VerificationStatus:
        try:
            response = await self.client.get_smart_contract(address)
            if not response.is_success:
                return VerificationStatus(
                    success=True,
                    is_verified=False,
                    verification_status="not_found",
                    message=f"Contract not found on explorer (status: {response.status_code})",
                )

            data = response.json()
        except REQUEST_ERRORS + (ValueError,) as e:
            logger.error(f"Error checking verification status for {address}: {e}")
            return VerificationStatus(
                success=False,
                error="Failed to check verification status",
                details=str(e) or type(e).__name__,
            )

        if not isinstance(data, dict):
            data = {}
        return VerificationStatus(
            success=True,
            is_verified=bool(data.get("is_verified") or False),
            verification_status=data.get("verification_status") or "unknown",
        )
