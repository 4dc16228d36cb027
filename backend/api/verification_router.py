"""
Verification API Router
Submit flattened sources to the explorer and poll verification status
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from infrastructure.errors import ChainupError, RequestProcessingError, ValidationError, utc_timestamp
from services.contract_verification import ContractVerificationService, get_verification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chainup", tags=["Verification"])


# ============================================
# MODELS
# ============================================

class VerifyContractRequest(BaseModel):
    contractAddress: Optional[str] = None
    sourceCode: Optional[str] = None


# ============================================
# ENDPOINTS
# ============================================

@router.post("")
async def submit_verification(
    request: Request,
    service: ContractVerificationService = Depends(get_verification_service),
):
    """
    Flatten the submitted source and verify it against the deployed bytecode.

    Always answers 200 with a structured outcome unless the body is
    malformed (500) or a required field is missing (400).
    """
    try:
        payload = VerifyContractRequest.model_validate(await request.json())
    except ValueError as e:
        raise RequestProcessingError(details=str(e))

    logger.info(
        f"🔍 Verification request: address={payload.contractAddress} "
        f"sourceCodeLength={len(payload.sourceCode or '')}"
    )

    if not payload.contractAddress or not payload.sourceCode:
        raise ValidationError("Missing required fields: contractAddress and sourceCode")

    try:
        body = await service.verify(payload.contractAddress, payload.sourceCode)
    except ChainupError:
        raise
    except Exception as e:
        logger.error(f"❌ Error in verification endpoint: {e}")
        raise RequestProcessingError(details=str(e) or type(e).__name__) from e

    body["timestamp"] = utc_timestamp()
    return body


@router.get("")
async def get_verification_status(
    address: Optional[str] = Query(None),
    service: ContractVerificationService = Depends(get_verification_service),
):
    """Current verification status. An unknown address is not an error."""
    if not address:
        raise ValidationError("Address parameter is required")

    body = await service.status(address)
    body["timestamp"] = utc_timestamp()

    if not body.get("success"):
        return JSONResponse(status_code=500, content=body)
    return body
