"""
Value types shared by the flattener, the submitter and the status reader.

Every instance is created per request and never mutated.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ContractSource:
    """Solidity source text plus the file identity it came from."""
    text: str
    origin: str = "Contract.sol"

    def with_text(self, text: str) -> "ContractSource":
        return replace(self, text=text)


@dataclass(frozen=True)
class ContractMetadata:
    name: str
    compiler_version: str


class VerificationMethod(str, Enum):
    V2_API = "v2_api"
    RPC_API = "rpc_api"


@dataclass(frozen=True)
class VerificationRequest:
    """
    One submission to the explorer.

    The same fields serialise two ways: a JSON body for the REST endpoint
    and query parameters for the legacy RPC endpoint.
    """
    address: str
    source_code: str
    metadata: ContractMetadata
    optimization_enabled: bool = False
    optimization_runs: int = 200
    license_type: str = "mit"
    evm_version: str = "default"
    autodetect_constructor_args: bool = True
    libraries: Dict[str, str] = field(default_factory=dict)

    def to_json_body(self) -> Dict[str, Any]:
        return {
            "compiler_version": self.metadata.compiler_version,
            "license_type": self.license_type,
            "source_code": self.source_code,
            "is_optimization_enabled": self.optimization_enabled,
            "optimization_runs": self.optimization_runs,
            "contract_name": self.metadata.name,
            "libraries": dict(self.libraries),
            "evm_version": self.evm_version,
            "autodetect_constructor_args": self.autodetect_constructor_args,
        }

    def to_query_params(self) -> Dict[str, str]:
        return {
            "module": "contract",
            "action": "verify",
            "addressHash": self.address,
            "name": self.metadata.name,
            "compilerVersion": self.metadata.compiler_version,
            "optimization": "1" if self.optimization_enabled else "0",
            "contractSourceCode": self.source_code,
            "autodetectConstructorArguments": "true" if self.autodetect_constructor_args else "false",
            "evmVersion": self.evm_version,
            "optimizationRuns": str(self.optimization_runs),
        }


@dataclass(frozen=True)
class VerificationSuccess:
    method: VerificationMethod
    payload: Any

    success = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "method": self.method.value,
            "result": self.payload,
        }


@dataclass(frozen=True)
class VerificationFailure:
    address_hash: str
    error: str
    details: str
    attempted_methods: Tuple[VerificationMethod, ...] = (VerificationMethod.V2_API, VerificationMethod.RPC_API)
    explorer_status: Optional[int] = None

    success = False

    def to_dict(self) -> Dict[str, Any]:
        body = {
            "success": False,
            "error": self.error,
            "details": self.details,
            "addressHash": self.address_hash,
            "attemptedMethods": [m.value for m in self.attempted_methods],
        }
        if self.explorer_status is not None:
            body["blockscoutStatus"] = self.explorer_status
        return body


@dataclass(frozen=True)
class VerificationStatus:
    success: bool
    is_verified: bool = False
    verification_status: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error, "details": self.details}

        body = {
            "success": True,
            "isVerified": self.is_verified,
            "verificationStatus": self.verification_status,
        }
        if self.message:
            body["message"] = self.message
        return body
