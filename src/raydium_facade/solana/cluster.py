"""Solana cluster identifiers."""

from enum import StrEnum


class Cluster(StrEnum):
    """Solana network the facade is configured for."""

    MAINNET = "mainnet"
    DEVNET = "devnet"
