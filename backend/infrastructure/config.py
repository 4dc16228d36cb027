"""
Configuration Management for the Chainup verifier
Environment-based configuration for the explorer, compiler defaults and flattening

Features:
- Environment-based config (dev/staging/prod)
- .env loading via python-dotenv
- Dynamic reload
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional
from enum import Enum

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("Config")


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


@dataclass
class ExplorerConfig:
    """Blockscout explorer configuration"""
    base_url: str = "https://explorer.testnet.citrea.xyz"

    # Every explorer call is bounded by this timeout (seconds)
    request_timeout: float = 30.0
    user_agent: str = "Chainup-Verifier/1.0"

    def address_url(self, address: str) -> str:
        return f"{self.base_url.rstrip('/')}/address/{address}"


@dataclass
class CompilerDefaults:
    """Values sent to the explorer alongside the flattened source"""
    default_version: str = "0.8.19"
    commit_suffix: str = "commit.7dd6d404"
    license_type: str = "mit"
    evm_version: str = "default"
    optimization_enabled: bool = False
    optimization_runs: int = 200

    @property
    def default_compiler_version(self) -> str:
        return f"v{self.default_version}+{self.commit_suffix}"


@dataclass
class FlattenerConfig:
    """Source flattening configuration"""
    backend: str = "import_graph"  # import_graph or forge

    # Search root for library imports (e.g. @openzeppelin/...)
    import_root: str = "node_modules"

    # None means the system temp directory
    scratch_dir: Optional[str] = None

    # JSON file replacing the built-in dependency registry
    registry_path: Optional[str] = None

    forge_binary: str = "forge"
    forge_timeout: float = 60.0


@dataclass
class MonitoringConfig:
    """Monitoring configuration"""
    log_level: str = "INFO"


@dataclass
class ChainupConfig:
    """Main application configuration"""
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True

    explorer: ExplorerConfig = field(default_factory=ExplorerConfig)
    compiler: CompilerDefaults = field(default_factory=CompilerDefaults)
    flattener: FlattenerConfig = field(default_factory=FlattenerConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    @classmethod
    def from_env(cls) -> "ChainupConfig":
        """Create configuration from environment variables"""
        env = os.environ.get("CHAINUP_ENV", "development").lower()

        config = cls(
            environment=Environment(env) if env in [e.value for e in Environment] else Environment.DEVELOPMENT,
            debug=os.environ.get("DEBUG", "true").lower() == "true",
        )

        config.explorer = ExplorerConfig(
            base_url=os.environ.get("EXPLORER_BASE_URL", "https://explorer.testnet.citrea.xyz"),
            request_timeout=float(os.environ.get("EXPLORER_TIMEOUT_SECONDS", "30")),
        )

        config.compiler = CompilerDefaults(
            default_version=os.environ.get("SOLC_DEFAULT_VERSION", "0.8.19"),
            commit_suffix=os.environ.get("SOLC_COMMIT_SUFFIX", "commit.7dd6d404"),
            license_type=os.environ.get("VERIFY_LICENSE_TYPE", "mit"),
            evm_version=os.environ.get("VERIFY_EVM_VERSION", "default"),
            optimization_enabled=os.environ.get("VERIFY_OPTIMIZATION", "false").lower() == "true",
            optimization_runs=int(os.environ.get("VERIFY_OPTIMIZATION_RUNS", "200")),
        )

        config.flattener = FlattenerConfig(
            backend=os.environ.get("FLATTEN_BACKEND", "import_graph"),
            import_root=os.environ.get("FLATTEN_IMPORT_ROOT", "node_modules"),
            scratch_dir=os.environ.get("FLATTEN_SCRATCH_DIR") or None,
            registry_path=os.environ.get("DEPENDENCY_REGISTRY_PATH") or None,
            forge_binary=os.environ.get("FORGE_BINARY", "forge"),
            forge_timeout=float(os.environ.get("FORGE_TIMEOUT_SECONDS", "60")),
        )

        config.monitoring = MonitoringConfig(
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )

        # Production hardening
        if config.environment == Environment.PRODUCTION:
            config.debug = False
            config.monitoring.log_level = "WARNING"

        return config

    def to_dict(self) -> Dict:
        """Convert to dictionary (hiding secrets)"""
        def sanitize(obj):
            if isinstance(obj, dict):
                return {k: sanitize(v) for k, v in obj.items() if "password" not in k.lower() and "secret" not in k.lower()}
            elif hasattr(obj, '__dataclass_fields__'):
                return sanitize({k: getattr(obj, k) for k in obj.__dataclass_fields__})
            elif isinstance(obj, Enum):
                return obj.value
            else:
                return obj

        return sanitize(self)


# ============================================
# GLOBAL INSTANCE
# ============================================

# Load configuration on module import
config = ChainupConfig.from_env()

logger.info(f"Configuration loaded for environment: {config.environment.value}")


def get_config() -> ChainupConfig:
    """Get the global configuration"""
    return config
