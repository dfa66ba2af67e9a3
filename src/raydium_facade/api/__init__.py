"""Raydium API client."""

from raydium_facade.api.client import RaydiumApi, RaydiumAPIError, RequestRecord

__all__ = [
    "RaydiumAPIError",
    "RaydiumApi",
    "RequestRecord",
]
