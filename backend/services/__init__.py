"""
Verification Services
Flattening, metadata extraction and explorer verification
"""

from .dependency_registry import DependencyRegistry, DEFAULT_REGISTRY, get_registry, load_registry
from .contract_metadata import MetadataExtractor, RegexMetadataExtractor
from .source_flattener import (
    FlattenBackend,
    FlattenedSource,
    ForgeFlattener,
    ImportGraphFlattener,
    SourceFlattener,
)
from .verification_models import (
    ContractMetadata,
    ContractSource,
    VerificationFailure,
    VerificationMethod,
    VerificationRequest,
    VerificationStatus,
    VerificationSuccess,
)
from .blockscout_client import BlockscoutClient
from .verification_submitter import VerificationSubmitter
from .explorer_status import ExplorerStatusReader
from .contract_verification import ContractVerificationService, get_verification_service

__all__ = [
    # Dependency Registry
    "DependencyRegistry",
    "DEFAULT_REGISTRY",
    "get_registry",
    "load_registry",

    # Metadata
    "MetadataExtractor",
    "RegexMetadataExtractor",

    # Flattening
    "FlattenBackend",
    "FlattenedSource",
    "ForgeFlattener",
    "ImportGraphFlattener",
    "SourceFlattener",

    # Value types
    "ContractMetadata",
    "ContractSource",
    "VerificationFailure",
    "VerificationMethod",
    "VerificationRequest",
    "VerificationStatus",
    "VerificationSuccess",

    # Explorer
    "BlockscoutClient",
    "VerificationSubmitter",
    "ExplorerStatusReader",
    "ContractVerificationService",
    "get_verification_service",
]
