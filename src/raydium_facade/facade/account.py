"""Owner token accounts, cached until the owner changes."""

import logging
from typing import Any

from raydium_facade.cache import CacheSlot, FallbackPolicy, FreshnessPolicy
from raydium_facade.facade.context import FacadeContext
from raydium_facade.solana.connection import TOKEN_PROGRAM_ID

logger = logging.getLogger(__name__)


class AccountModule:
    """
    Token accounts held by the current owner.

    The accounts never expire on their own; they are dropped whenever the
    facade's owner changes and refetched on the next read.

    Parameters
    ----------
    context : FacadeContext
        Shared collaborator context
    token_accounts : list[dict[str, Any]] | None
        Accounts already known to the caller, used instead of a first fetch
    program_id : str
        Token program whose accounts are read

    """

    def __init__(
        self,
        context: FacadeContext,
        token_accounts: list[dict[str, Any]] | None = None,
        program_id: str = TOKEN_PROGRAM_ID,
    ) -> None:
        self.context = context
        self.program_id = program_id
        self._accounts = CacheSlot(
            "token-accounts",
            FreshnessPolicy.never_expire(),
            self._fetch_token_accounts,
            FallbackPolicy.CLEAR_ENTRY,
            clock=context.clock,
        )
        if token_accounts is not None:
            self._accounts.seed(list(token_accounts))

    @property
    def token_accounts(self) -> list[dict[str, Any]]:
        """Accounts fetched so far, without triggering a fetch."""
        entry = self._accounts.entry
        return entry.value if entry is not None else []

    def fetch_wallet_token_accounts(self, force_refresh: bool = False) -> list[dict[str, Any]]:
        """
        Return the owner's token accounts, fetching them if not cached.

        Parameters
        ----------
        force_refresh : bool
            Refetch even if accounts are cached

        Returns
        -------
        list[dict[str, Any]]
            Raw ``{pubkey, account}`` records

        Raises
        ------
        ConfigurationError
            If the connection or owner is not set

        """
        return self._accounts.get(force_refresh)

    def reset_token_accounts(self) -> None:
        """Forget cached accounts, e.g. after the owner changed."""
        self._accounts.clear()
        logger.debug("Token accounts reset")

    def _fetch_token_accounts(self) -> list[dict[str, Any]]:
        connection = self.context.require_connection()
        owner = self.context.require_owner()
        return connection.get_token_accounts_by_owner(owner.public_key, self.program_id)
