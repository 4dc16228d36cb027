"""
Chainup Infrastructure Module
Configuration and error handling shared by the services and routers
"""

from .errors import (
    ChainupError,
    ValidationError,
    RequestProcessingError,
    FlattenError,
    ErrorCode,
    ErrorTracker,
    error_tracker,
    register_exception_handlers,
    utc_timestamp,
)

from .config import (
    ChainupConfig,
    Environment,
    ExplorerConfig,
    CompilerDefaults,
    FlattenerConfig,
    MonitoringConfig,
    get_config,
)

__all__ = [
    # Errors
    "ChainupError",
    "ValidationError",
    "RequestProcessingError",
    "FlattenError",
    "ErrorCode",
    "ErrorTracker",
    "error_tracker",
    "register_exception_handlers",
    "utc_timestamp",

    # Config
    "ChainupConfig",
    "Environment",
    "ExplorerConfig",
    "CompilerDefaults",
    "FlattenerConfig",
    "MonitoringConfig",
    "get_config",
]
