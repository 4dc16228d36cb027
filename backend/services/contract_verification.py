"""
Contract Verification Service
Ties metadata extraction, flattening and submission together

Usage:
    service = get_verification_service()
    outcome = await service.verify("0x...", source_code)
    status = await service.status("0x...")
"""

import logging
from typing import Any, Dict, Optional

from infrastructure.config import ChainupConfig, get_config
from .blockscout_client import BlockscoutClient
from .contract_metadata import MetadataExtractor, RegexMetadataExtractor
from .explorer_status import ExplorerStatusReader
from .source_flattener import SourceFlattener
from .verification_models import ContractSource, VerificationRequest
from .verification_submitter import VerificationSubmitter

logger = logging.getLogger(__name__)


class ContractVerificationService:
    def __init__(
        self,
        client: Optional[BlockscoutClient] = None,
        flattener: Optional[SourceFlattener] = None,
        extractor: Optional[MetadataExtractor] = None,
        settings: Optional[ChainupConfig] = None,
    ):
        self.settings = settings or get_config()
        self.client = client or BlockscoutClient(self.settings.explorer)
        self.flattener = flattener or SourceFlattener()
        self.extractor = extractor or RegexMetadataExtractor(self.settings.compiler)
        self.submitter = VerificationSubmitter(self.client)
        self.status_reader = ExplorerStatusReader(self.client)

    def explorer_address_url(self, address: str) -> str:
        return self.settings.explorer.address_url(address)

    async def verify(self, address: str, source_code: str) -> Dict[str, Any]:
        # Metadata comes from the raw source so inlined dependencies never shadow the name
        metadata = self.extractor.extract(source_code)
        logger.info(f"📋 Extracted info: name={metadata.name} compiler={metadata.compiler_version} address={address}")

        flattened = await self.flattener.flatten_async(
            ContractSource(text=source_code, origin=f"{metadata.name}.sol"),
            metadata.name,
        )

        compiler = self.settings.compiler
        request = VerificationRequest(
            address=address,
            source_code=flattened.text,
            metadata=metadata,
            optimization_enabled=compiler.optimization_enabled,
            optimization_runs=compiler.optimization_runs,
            license_type=compiler.license_type,
            evm_version=compiler.evm_version,
        )

        outcome = await self.submitter.submit(request)
        body = outcome.to_dict()
        if outcome.success:
            body["blockscoutUrl"] = self.explorer_address_url(address)
        return body

    async def status(self, address: str) -> Dict[str, Any]:
        result = await self.status_reader.read(address)
        body = result.to_dict()
        body["address"] = address
        if result.success:
            body["blockscoutUrl"] = self.explorer_address_url(address)
        return body

    async def close(self):
        await self.client.close()


_service: Optional[ContractVerificationService] = None


def get_verification_service() -> ContractVerificationService:
    """Get or create the process-wide verification service."""
    global _service
    if _service is None:
        _service = ContractVerificationService()
    return _service


async def close_verification_service():
    global _service
    if _service is not None:
        await _service.close()
        _service = None
