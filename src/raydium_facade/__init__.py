"""Raydium client facade with per-source TTL caching of chain, token and availability data."""

from raydium_facade.core.config import FacadeConfig, load_config
from raydium_facade.core.errors import ConfigurationError, FacadeError
from raydium_facade.facade import FacadeContext, RaydiumFacade

__all__ = [
    "ConfigurationError",
    "FacadeConfig",
    "FacadeContext",
    "FacadeError",
    "RaydiumFacade",
    "load_config",
]
