"""Shared collaborator context handed to every facade sub-module."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from raydium_facade.cache.freshness import Clock, system_clock
from raydium_facade.core.config import JupTokenType
from raydium_facade.core.errors import EMPTY_CONNECTION, EMPTY_OWNER, ConfigurationError
from raydium_facade.core.models import AvailabilityFlags, TokenListV3
from raydium_facade.solana.cluster import Cluster
from raydium_facade.solana.connection import LedgerConnection
from raydium_facade.solana.owner import Owner

logger = logging.getLogger(__name__)

SignAllTransactions = Callable[[list[Any]], list[Any]]


class RemoteDataSource(Protocol):
    """Remote API reads the facade caches."""

    def get_chain_time_offset(self) -> float: ...

    def get_token_list(self) -> TokenListV3: ...

    def get_jup_token_list(self, token_type: JupTokenType = JupTokenType.STRICT) -> list[dict[str, Any]]: ...

    def fetch_availability_status(self) -> AvailabilityFlags: ...


@dataclass
class FacadeContext:
    """
    Mutable collaborator references shared by the facade and its sub-modules.

    Sub-modules hold this context rather than the facade itself. The references
    are only changed through the facade's setters.

    Attributes
    ----------
    api : RemoteDataSource
        Remote data source for chain time, token lists and availability
    cluster : Cluster
        Configured cluster
    connection : LedgerConnection | None
        Ledger connection
    owner : Owner | None
        Wallet owner
    sign_all_transactions : SignAllTransactions | None
        Callback signing a batch of transactions
    clock : Clock
        Millisecond clock shared by all cache slots
    blockhash_commitment : str
        Commitment level for ledger reads

    """

    api: RemoteDataSource
    cluster: Cluster = Cluster.MAINNET
    connection: LedgerConnection | None = None
    owner: Owner | None = None
    sign_all_transactions: SignAllTransactions | None = None
    clock: Clock = system_clock
    blockhash_commitment: str = "confirmed"

    def require_connection(self) -> LedgerConnection:
        """Return the connection or raise :class:`ConfigurationError` if unset."""
        if self.connection is None:
            raise ConfigurationError(EMPTY_CONNECTION)
        return self.connection

    def require_owner(self) -> Owner:
        """Return the owner or raise :class:`ConfigurationError` if unset."""
        if self.owner is None:
            logger.error(EMPTY_OWNER)
            raise ConfigurationError(EMPTY_OWNER)
        return self.owner
