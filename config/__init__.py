from .loader import ConfigError, get_config, load_config, reload_config
from .schema import (
    AcquisitionConfig,
    ApiKeysConfig,
    HttpConfig,
    ReasoningConfig,
    SignalWeightsConfig,
    VectorScopeConfig,
)

__all__ = [
    "ConfigError",
    "load_config",
    "get_config",
    "reload_config",
    "VectorScopeConfig",
    "ApiKeysConfig",
    "HttpConfig",
    "ReasoningConfig",
    "AcquisitionConfig",
    "SignalWeightsConfig",
]
