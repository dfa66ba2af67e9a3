"""Data models for chain time, epochs, token catalogs and feature availability."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model accepting the camelCase keys used by the Raydium API and Solana RPC."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChainTimeData(WireModel):
    """
    Chain clock snapshot derived from a single offset fetch.

    Attributes
    ----------
    chain_time_ms : int
        On-chain time in milliseconds at the moment the offset was fetched
    offset_ms : int
        Difference between chain time and local time in milliseconds

    """

    model_config = ConfigDict(frozen=True)

    chain_time_ms: int
    offset_ms: int


class EpochInfo(WireModel):
    """
    Solana epoch information as returned by ``getEpochInfo``.

    Attributes
    ----------
    epoch : int
        Current epoch
    slot_index : int
        Slot index relative to the start of the epoch
    slots_in_epoch : int
        Number of slots in this epoch
    absolute_slot : int
        Current slot
    block_height : int | None
        Current block height
    transaction_count : int | None
        Total transactions processed since genesis

    """

    epoch: int
    slot_index: int
    slots_in_epoch: int
    absolute_slot: int
    block_height: int | None = None
    transaction_count: int | None = None


class ApiV3Token(WireModel):
    """
    Token entry from the Raydium v3 mint list or an external token list.

    Unknown fields reported by the remote list are kept as extra attributes.

    Attributes
    ----------
    address : str
        Mint address
    symbol : str
        Token symbol
    name : str
        Token name
    decimals : int
        Number of decimal places
    chain_id : int
        Solana chain id (101 for mainnet)
    program_id : str | None
        Owning token program
    logo_uri : str | None
        Logo URL
    tags : list[str]
        Catalog tags
    extensions : dict[str, Any]
        Catalog-specific extension data
    mint_authority : str | None
        Mint authority, absent when revoked or unknown
    freeze_authority : str | None
        Freeze authority, absent when revoked or unknown

    """

    model_config = ConfigDict(extra="allow")

    address: str
    symbol: str = ""
    name: str = ""
    decimals: int = 0
    chain_id: int = 101
    program_id: str | None = None
    logo_uri: str | None = Field(default=None, alias="logoURI")
    tags: list[str] = Field(default_factory=list)
    extensions: dict[str, Any] = Field(default_factory=dict)
    mint_authority: str | None = None
    freeze_authority: str | None = None


class TokenListV3(WireModel):
    """
    Raydium v3 token list.

    Attributes
    ----------
    mint_list : list[ApiV3Token]
        Listed tokens
    blacklist : list[str]
        Mints that must not be shown
    white_list : list[str]
        Mints flagged as trusted

    """

    mint_list: list[ApiV3Token] = Field(default_factory=list)
    blacklist: list[str] = Field(default_factory=list)
    white_list: list[str] = Field(default_factory=list)


class AvailabilityFlags(WireModel):
    """
    Feature availability reported by the Raydium availability endpoint.

    Every flag is optional; ``None`` means the capability is unknown.

    """

    all: bool | None = None
    swap: bool | None = None
    create_concentrated_position: bool | None = None
    add_concentrated_position: bool | None = None
    add_standard_position: bool | None = None
    remove_concentrated_position: bool | None = None
    remove_standard_position: bool | None = None
    add_farm: bool | None = None
    remove_farm: bool | None = None

    def with_kill_switch(self) -> "AvailabilityFlags":
        """
        Apply the global ``all`` flag to every individual capability.

        Returns
        -------
        AvailabilityFlags
            Copy of the flags; when ``all`` is False every capability is False

        """
        if self.all is not False:
            return self.model_copy()
        disabled = {name: False for name in type(self).model_fields if name != "all"}
        return self.model_copy(update=disabled)

    def to_wire(self) -> dict[str, bool]:
        """Return the known flags keyed by their camelCase API names."""
        return self.model_dump(by_alias=True, exclude_none=True)
