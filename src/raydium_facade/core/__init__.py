"""Core models, errors and configuration."""

from raydium_facade.core.config import (
    CHAIN_TIME_TTL_MS,
    EPOCH_INFO_TTL_MS,
    FacadeConfig,
    JupTokenType,
    load_config,
)
from raydium_facade.core.errors import ConfigurationError, FacadeError
from raydium_facade.core.models import (
    ApiV3Token,
    AvailabilityFlags,
    ChainTimeData,
    EpochInfo,
    TokenListV3,
)

__all__ = [
    "CHAIN_TIME_TTL_MS",
    "EPOCH_INFO_TTL_MS",
    "ApiV3Token",
    "AvailabilityFlags",
    "ChainTimeData",
    "ConfigurationError",
    "EpochInfo",
    "FacadeConfig",
    "FacadeError",
    "JupTokenType",
    "TokenListV3",
    "load_config",
]
