"""Tests for Pydantic data models."""

import pytest
from pydantic import ValidationError

from raydium_facade.core.models import (
    ApiV3Token,
    AvailabilityFlags,
    ChainTimeData,
    EpochInfo,
    TokenListV3,
)


def test_epoch_info_from_rpc_payload():
    """Test EpochInfo accepts the camelCase RPC result."""
    info = EpochInfo.model_validate(
        {
            "absoluteSlot": 166598,
            "blockHeight": 166500,
            "epoch": 27,
            "slotIndex": 2790,
            "slotsInEpoch": 8192,
            "transactionCount": 22661093,
        }
    )

    assert info.epoch == 27
    assert info.slot_index == 2790
    assert info.slots_in_epoch == 8192
    assert info.block_height == 166500


def test_token_list_v3_from_api_payload():
    """Test TokenListV3 parses the Raydium mint list."""
    token_list = TokenListV3.model_validate(
        {
            "mintList": [
                {
                    "chainId": 101,
                    "address": "4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R",
                    "programId": "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA",
                    "logoURI": "https://img-v1.raydium.io/icon/ray.png",
                    "symbol": "RAY",
                    "name": "Raydium",
                    "decimals": 6,
                    "tags": [],
                    "extensions": {},
                }
            ],
            "blacklist": ["Bad1111111111111111111111111111111111111111"],
            "whiteList": [],
        }
    )

    token = token_list.mint_list[0]
    assert token.symbol == "RAY"
    assert token.program_id == "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
    assert token.logo_uri.endswith("ray.png")
    assert token_list.blacklist == ["Bad1111111111111111111111111111111111111111"]


def test_token_list_v3_defaults_are_empty():
    assert TokenListV3().model_dump(by_alias=True) == {"mintList": [], "blacklist": [], "whiteList": []}


def test_api_token_keeps_unknown_fields():
    token = ApiV3Token.model_validate({"address": "mint", "daily_volume": 12.5})
    assert token.daily_volume == 12.5
    assert token.chain_id == 101


def test_chain_time_data_is_immutable():
    data = ChainTimeData(chain_time_ms=1000, offset_ms=10)
    with pytest.raises(ValidationError):
        data.offset_ms = 20


def test_kill_switch_disables_every_flag():
    flags = AvailabilityFlags(all=False, swap=True, add_farm=True).with_kill_switch()

    assert flags.all is False
    for name in AvailabilityFlags.model_fields:
        assert getattr(flags, name) is False


def test_kill_switch_keeps_flags_when_enabled():
    raw = AvailabilityFlags(all=True, swap=False, add_farm=True)
    flags = raw.with_kill_switch()

    assert flags == raw
    assert flags is not raw


def test_kill_switch_without_global_flag():
    flags = AvailabilityFlags(swap=True).with_kill_switch()
    assert flags.to_wire() == {"swap": True}
