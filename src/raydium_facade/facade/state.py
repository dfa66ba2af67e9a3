"""Raydium facade holding one cache slot per data class."""

import logging
from typing import Any

from pydantic import ValidationError

from raydium_facade.api.client import RaydiumApi
from raydium_facade.cache import CacheSlot, Clock, FallbackPolicy, FreshnessPolicy, system_clock
from raydium_facade.core.config import CHAIN_TIME_TTL_MS, EPOCH_INFO_TTL_MS, FacadeConfig
from raydium_facade.core.models import (
    ApiV3Token,
    AvailabilityFlags,
    ChainTimeData,
    EpochInfo,
    TokenListV3,
)
from raydium_facade.data import get_rpc_endpoint
from raydium_facade.facade.account import AccountModule
from raydium_facade.facade.context import FacadeContext, RemoteDataSource, SignAllTransactions
from raydium_facade.facade.token import TokenModule
from raydium_facade.solana.connection import LedgerConnection, SolanaConnection
from raydium_facade.solana.owner import Owner

logger = logging.getLogger(__name__)


def project_external_token(raw: dict[str, Any]) -> ApiV3Token:
    """
    Convert an external (Jupiter) token record into an :class:`ApiV3Token`.

    ``mint_authority`` and ``freeze_authority`` become ``mintAuthority`` and
    ``freezeAuthority``; empty authorities are treated as absent.

    Parameters
    ----------
    raw : dict[str, Any]
        Token record as returned by the external list

    Returns
    -------
    ApiV3Token
        Projected token

    """
    record = dict(raw)
    record["mintAuthority"] = record.pop("mint_authority", None) or record.get("mintAuthority") or None
    record["freezeAuthority"] = record.pop("freeze_authority", None) or record.get("freezeAuthority") or None
    return ApiV3Token.model_validate(record)


class RaydiumFacade:
    """
    Long-lived entry point aggregating chain, token and availability data.

    Each data class is cached in its own slot with its own freshness window
    and failure behaviour:

    =====================  ==============  ===========================
    Data class             TTL             On failed refresh
    =====================  ==============  ===========================
    chain time offset      5 minutes       cleared, offset 0
    epoch info             30 seconds      cleared, error raised
    v3 token list          cache_ttl_ms    empty list for this call
    external token list    cache_ttl_ms    empty list for this call
    availability flags     never expires   empty flags for this call
    =====================  ==============  ===========================

    Parameters
    ----------
    config : FacadeConfig
        Facade configuration
    api : RemoteDataSource
        Remote data source
    connection : LedgerConnection | None
        Ledger connection used for epoch info and token accounts
    owner : str | Any | None
        Owner public key or keypair
    sign_all_transactions : SignAllTransactions | None
        Callback signing a batch of transactions
    token_accounts : list[dict[str, Any]] | None
        Owner token accounts already known to the caller
    clock : Clock | None
        Millisecond clock, defaults to the system clock

    """

    def __init__(
        self,
        config: FacadeConfig,
        api: RemoteDataSource,
        connection: LedgerConnection | None = None,
        owner: Any | None = None,
        sign_all_transactions: SignAllTransactions | None = None,
        token_accounts: list[dict[str, Any]] | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.config = config
        self.cluster = config.cluster
        self.context = FacadeContext(
            api=api,
            cluster=config.cluster,
            connection=connection,
            owner=Owner(owner) if owner else None,
            sign_all_transactions=sign_all_transactions,
            clock=clock or system_clock,
            blockhash_commitment=config.blockhash_commitment,
        )
        clock = self.context.clock
        token_list_policy = FreshnessPolicy(config.cache_ttl_ms)

        self._chain_time: CacheSlot[ChainTimeData] = CacheSlot(
            "chain-time-offset",
            FreshnessPolicy(CHAIN_TIME_TTL_MS),
            self._fetch_chain_time,
            FallbackPolicy.CLEAR_ENTRY,
            default=self._local_chain_time,
            clock=clock,
        )
        self._epoch_info: CacheSlot[EpochInfo] = CacheSlot(
            "epoch-info",
            FreshnessPolicy(EPOCH_INFO_TTL_MS),
            self._fetch_epoch_info,
            FallbackPolicy.CLEAR_ENTRY,
            clock=clock,
        )
        self._token_list_v3: CacheSlot[TokenListV3] = CacheSlot(
            "v3-token-list",
            token_list_policy,
            self._fetch_token_list_v3,
            FallbackPolicy.SUBSTITUTE_DEFAULT,
            default=TokenListV3,
            clock=clock,
        )
        self._external_token_list: CacheSlot[list[ApiV3Token]] = CacheSlot(
            "external-token-list",
            token_list_policy,
            self._fetch_external_token_list,
            FallbackPolicy.SUBSTITUTE_DEFAULT,
            default=list,
            clock=clock,
        )
        self._availability: CacheSlot[AvailabilityFlags] = CacheSlot(
            "availability-flags",
            FreshnessPolicy.never_expire(),
            self._fetch_availability,
            FallbackPolicy.SUBSTITUTE_DEFAULT,
            default=AvailabilityFlags,
            clock=clock,
        )
        self._seed_chain_time(config.initial_chain_offset_ms, config.initial_chain_time_ms)

        self.account = AccountModule(self.context, token_accounts=token_accounts)
        self.token = TokenModule(self.get_token_list_v3, self.get_external_token_list, config.jup_token_type)

    @classmethod
    def load(
        cls,
        config: FacadeConfig | None = None,
        *,
        api: RemoteDataSource | None = None,
        connection: LedgerConnection | None = None,
        owner: Any | None = None,
        sign_all_transactions: SignAllTransactions | None = None,
        token_accounts: list[dict[str, Any]] | None = None,
        clock: Clock | None = None,
        **overrides: Any,
    ) -> "RaydiumFacade":
        """
        Build a facade and run its startup fetches.

        Runs the one-time availability check unless ``skip_availability_check``
        is set, then loads the token catalog unless ``skip_token_load`` is set.

        Parameters
        ----------
        config : FacadeConfig | None
            Base configuration, defaults to ``FacadeConfig()``
        api : RemoteDataSource | None
            Remote data source; a :class:`RaydiumApi` is built from the config if None
        connection : LedgerConnection | None
            Ledger connection; a :class:`SolanaConnection` to ``rpc_url`` or the
            cluster's public endpoint is built if None
        owner : str | Any | None
            Owner public key or keypair
        sign_all_transactions : SignAllTransactions | None
            Callback signing a batch of transactions
        token_accounts : list[dict[str, Any]] | None
            Owner token accounts already known to the caller
        clock : Clock | None
            Millisecond clock
        **overrides : Any
            Config fields overriding ``config``, one field at a time

        Returns
        -------
        RaydiumFacade
            Initialized facade

        """
        config = (config or FacadeConfig()).merged(**overrides)

        if api is None:
            api = RaydiumApi(
                cluster=config.cluster,
                timeout_ms=config.api_request_timeout_ms,
                url_configs=config.url_configs,
                log_requests=config.log_requests,
                log_count=config.log_count,
            )
        if connection is None:
            connection = SolanaConnection(
                config.rpc_url or get_rpc_endpoint(config.cluster),
                commitment=config.blockhash_commitment,
                timeout=config.api_request_timeout_ms / 1000,
            )

        facade = cls(
            config,
            api,
            connection=connection,
            owner=owner,
            sign_all_transactions=sign_all_transactions,
            token_accounts=token_accounts,
            clock=clock,
        )
        facade.fetch_availability_status()
        if not config.skip_token_load:
            facade.token.load()

        logger.info("Raydium facade loaded for %s", config.cluster)
        return facade

    # ---- collaborators ----

    @property
    def api(self) -> RemoteDataSource:
        return self.context.api

    @property
    def owner(self) -> Owner | None:
        return self.context.owner

    @property
    def owner_pubkey(self) -> str:
        """Owner public key; raises :class:`ConfigurationError` if no owner is set."""
        return self.context.require_owner().public_key

    def set_owner(self, owner: Any | None = None) -> "RaydiumFacade":
        """Replace the owner and drop the previous owner's token accounts."""
        self.context.owner = Owner(owner) if owner else None
        self.account.reset_token_accounts()
        return self

    @property
    def connection(self) -> LedgerConnection:
        """Ledger connection; raises :class:`ConfigurationError` if unset."""
        return self.context.require_connection()

    def set_connection(self, connection: LedgerConnection | None) -> "RaydiumFacade":
        self.context.connection = connection
        return self

    @property
    def sign_all_transactions(self) -> SignAllTransactions | None:
        return self.context.sign_all_transactions

    def set_sign_all_transactions(self, sign_all_transactions: SignAllTransactions | None = None) -> "RaydiumFacade":
        self.context.sign_all_transactions = sign_all_transactions
        return self

    def check_owner(self) -> None:
        """Raise :class:`ConfigurationError` if no owner is set."""
        self.context.require_owner()

    # ---- chain time ----

    @property
    def chain_time_data(self) -> ChainTimeData | None:
        """Cached chain time snapshot, without triggering a fetch."""
        entry = self._chain_time.entry
        return entry.value if entry is not None else None

    def fetch_chain_time(self) -> ChainTimeData:
        """Refetch the chain time offset regardless of freshness."""
        return self._chain_time.get(force_refresh=True)

    def get_chain_time_offset(self) -> int:
        """
        Return the chain time offset in milliseconds.

        Returns 0 if the offset cannot be fetched.

        """
        return self._chain_time.get().offset_ms

    def get_current_chain_time(self) -> int:
        """
        Return the chain time in milliseconds recorded with the cached offset.

        Falls back to the local clock if the offset cannot be fetched.

        """
        return self._chain_time.get().chain_time_ms

    def _fetch_chain_time(self) -> ChainTimeData:
        offset_ms = round(self.context.api.get_chain_time_offset() * 1000)
        return ChainTimeData(chain_time_ms=self.context.clock() + offset_ms, offset_ms=offset_ms)

    def _local_chain_time(self) -> ChainTimeData:
        return ChainTimeData(chain_time_ms=self.context.clock(), offset_ms=0)

    def _seed_chain_time(self, offset_ms: int | None, chain_time_ms: int | None) -> None:
        """Seed chain time as ``now + offset`` (the sign a fetched offset uses); an offset of 0 still seeds."""
        if offset_ms is None and chain_time_ms is None:
            return
        now = self.context.clock()
        if offset_ms is None:
            offset_ms = chain_time_ms - now
        if chain_time_ms is None:
            chain_time_ms = now + offset_ms
        self._chain_time.seed(ChainTimeData(chain_time_ms=chain_time_ms, offset_ms=offset_ms), fetched_at_ms=now)

    # ---- epoch ----

    def get_epoch_info(self) -> EpochInfo:
        """
        Return the current epoch information, cached for 30 seconds.

        Raises
        ------
        ConfigurationError
            If no connection is set
        Exception
            Whatever the connection raises; there is no default epoch

        """
        return self._epoch_info.get()

    def _fetch_epoch_info(self) -> EpochInfo:
        return self.context.require_connection().get_epoch_info()

    # ---- token lists ----

    def get_token_list_v3(self, force_refresh: bool = False) -> TokenListV3:
        """Return the Raydium v3 token list, or an empty list if it cannot be fetched."""
        return self._token_list_v3.get(force_refresh)

    def get_external_token_list(self, force_refresh: bool = False) -> list[ApiV3Token]:
        """Return the external token list, or an empty list if it cannot be fetched."""
        return self._external_token_list.get(force_refresh)

    def _fetch_token_list_v3(self) -> TokenListV3:
        return self.context.api.get_token_list()

    def _fetch_external_token_list(self) -> list[ApiV3Token]:
        raw_tokens = self.context.api.get_jup_token_list(self.config.jup_token_type)
        tokens = []
        for raw in raw_tokens:
            try:
                tokens.append(project_external_token(raw))
            except ValidationError as e:
                logger.warning("Skipping invalid external token %s: %s", raw.get("address", "?"), e)
        return tokens

    # ---- availability ----

    def get_availability(self) -> AvailabilityFlags:
        """
        Return the feature availability flags.

        The flags are fetched once and never expire. When the availability
        check is skipped, empty flags are returned without any request.

        """
        if self.config.skip_availability_check:
            return AvailabilityFlags()
        return self._availability.get()

    def fetch_availability_status(self, skip_check: bool | None = None) -> AvailabilityFlags:
        """
        Run the startup availability check.

        Parameters
        ----------
        skip_check : bool | None
            Skip the request; defaults to ``skip_availability_check``

        Returns
        -------
        AvailabilityFlags
            Committed flags, empty when skipped or failed

        """
        if skip_check is None:
            skip_check = self.config.skip_availability_check
        if skip_check:
            return AvailabilityFlags()
        return self._availability.get()

    def _fetch_availability(self) -> AvailabilityFlags:
        return self.context.api.fetch_availability_status().with_kill_switch()

    # ---- lifecycle ----

    def close(self) -> None:
        """Close the API client and connection if they own network resources."""
        for collaborator in (self.context.api, self.context.connection):
            close = getattr(collaborator, "close", None)
            if callable(close):
                close()

    def __enter__(self) -> "RaydiumFacade":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
