"""Pytest configuration and shared fakes for raydium-facade tests."""

from collections import Counter

import pytest

from raydium_facade.api import RaydiumAPIError
from raydium_facade.core.config import FacadeConfig, JupTokenType
from raydium_facade.core.models import ApiV3Token, AvailabilityFlags, EpochInfo, TokenListV3
from raydium_facade.facade import RaydiumFacade
from raydium_facade.solana import SolanaRPCError

START_MS = 1_700_000_000_000

SOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
RAY_MINT = "4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R"
SCAM_MINT = "Scam111111111111111111111111111111111111111"


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeApi:
    """Remote data source with settable results and per-method failures."""

    def __init__(self) -> None:
        self.calls: Counter[str] = Counter()
        self.failing: set[str] = set()
        self.chain_time_offset = 2.5
        self.token_list = TokenListV3(
            mint_list=[
                ApiV3Token(address=SOL_MINT, symbol="WSOL", name="Wrapped SOL", decimals=9),
                ApiV3Token(address=RAY_MINT, symbol="RAY", name="Raydium", decimals=6),
                ApiV3Token(address=SCAM_MINT, symbol="SCAM", name="Scam", decimals=6),
            ],
            blacklist=[SCAM_MINT],
            white_list=[RAY_MINT],
        )
        self.jup_tokens = [
            {
                "address": USDC_MINT,
                "symbol": "USDC",
                "name": "USD Coin",
                "decimals": 6,
                "logoURI": "https://example.com/usdc.png",
                "mint_authority": "BJE5MMbqXjVwjAF7oxwPYXnTXDyspzZyt4vwenNw5ruG",
                "freeze_authority": "",
                "daily_volume": 1000.5,
            },
            {"address": SOL_MINT, "symbol": "SOL", "name": "Wrapped SOL", "decimals": 9},
        ]
        self.availability = AvailabilityFlags(all=True, swap=True, add_farm=False)

    def _call(self, name: str, value):
        self.calls[name] += 1
        if name in self.failing:
            msg = f"{name} unavailable"
            raise RaydiumAPIError(msg)
        return value

    def get_chain_time_offset(self) -> float:
        return self._call("chain_time", self.chain_time_offset)

    def get_token_list(self) -> TokenListV3:
        return self._call("token_list", self.token_list)

    def get_jup_token_list(self, token_type: JupTokenType = JupTokenType.STRICT) -> list[dict]:
        return self._call("jup_token_list", self.jup_tokens)

    def fetch_availability_status(self) -> AvailabilityFlags:
        return self._call("availability", self.availability)


class FakeConnection:
    """Ledger connection returning a settable epoch and token accounts."""

    def __init__(self) -> None:
        self.calls: Counter[str] = Counter()
        self.fail = False
        self.epoch = EpochInfo(epoch=600, slot_index=1000, slots_in_epoch=432000, absolute_slot=259_201_000)
        self.accounts: dict[str, list[dict]] = {}

    def get_epoch_info(self) -> EpochInfo:
        self.calls["epoch"] += 1
        if self.fail:
            msg = "node unreachable"
            raise SolanaRPCError(msg)
        return self.epoch

    def get_token_accounts_by_owner(self, owner: str, program_id: str) -> list[dict]:
        self.calls["token_accounts"] += 1
        return self.accounts.get(owner, [])


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def facade(api, connection, clock) -> RaydiumFacade:
    config = FacadeConfig(cache_ttl_ms=300_000, skip_availability_check=False)
    return RaydiumFacade(config, api, connection=connection, clock=clock)
