"""Facade configuration with documented per-field defaults."""

from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

from raydium_facade.solana.cluster import Cluster

# Fixed freshness windows for chain-derived data
CHAIN_TIME_TTL_MS = 5 * 60 * 1000
EPOCH_INFO_TTL_MS = 30 * 1000


class JupTokenType(StrEnum):
    """Which external (Jupiter) token list to load."""

    STRICT = "strict"
    ALL = "all"
    NONE = "none"


class FacadeConfig(BaseModel):
    """
    Configuration for :class:`~raydium_facade.facade.RaydiumFacade`.

    Attributes
    ----------
    cluster : Cluster
        Solana cluster the facade talks to (default: mainnet)
    rpc_url : str | None
        Solana JSON-RPC endpoint; the cluster's public endpoint is used if None
    cache_ttl_ms : int
        Freshness window of the token lists in milliseconds (default: 5 minutes).
        A negative value never expires a populated list, 0 refetches on every read.
    api_request_timeout_ms : int
        Timeout for a single API request in milliseconds (default: 10 seconds)
    initial_chain_offset_ms : int | None
        Known chain time offset used to pre-seed the chain time cache
    initial_chain_time_ms : int | None
        Known chain time used to pre-seed the chain time cache
    skip_availability_check : bool
        Skip the one-time availability fetch at load (default: True)
    skip_token_load : bool
        Skip loading token lists at load (default: False)
    jup_token_type : JupTokenType
        External token list variant (default: strict)
    url_configs : dict[str, str]
        Overrides for individual entries of the endpoint catalog
    log_requests : bool
        Record every API request (default: False)
    log_count : int
        Number of recorded API requests kept in memory (default: 1000)
    blockhash_commitment : str
        Commitment level for RPC reads (default: confirmed)

    """

    model_config = ConfigDict(extra="forbid")

    cluster: Cluster = Cluster.MAINNET
    rpc_url: str | None = None
    cache_ttl_ms: int = 5 * 60 * 1000
    api_request_timeout_ms: int = Field(default=10 * 1000, gt=0)
    initial_chain_offset_ms: int | None = None
    initial_chain_time_ms: int | None = None
    skip_availability_check: bool = True
    skip_token_load: bool = False
    jup_token_type: JupTokenType = JupTokenType.STRICT
    url_configs: dict[str, str] = Field(default_factory=dict)
    log_requests: bool = False
    log_count: int = Field(default=1000, ge=1)
    blockhash_commitment: str = "confirmed"

    def merged(self, **overrides: Any) -> "FacadeConfig":
        """
        Return a new config with the given fields replaced.

        Each keyword replaces exactly one field; ``None`` values are ignored so
        callers can pass optional CLI arguments straight through.

        Parameters
        ----------
        **overrides : Any
            Field values to override

        Returns
        -------
        FacadeConfig
            Validated configuration

        """
        values = self.model_dump()
        for name, value in overrides.items():
            if value is not None:
                values[name] = value
        return FacadeConfig.model_validate(values)


def load_config(path: str | Path) -> FacadeConfig:
    """
    Load a facade configuration from a YAML file.

    Parameters
    ----------
    path : str | Path
        YAML file containing a mapping of config fields

    Returns
    -------
    FacadeConfig
        Validated configuration; missing fields keep their defaults

    Raises
    ------
    ValueError
        If the file does not contain a mapping

    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        msg = f"Config file {path} must contain a mapping, got {type(data).__name__}"
        raise ValueError(msg)
    return FacadeConfig.model_validate(data)
