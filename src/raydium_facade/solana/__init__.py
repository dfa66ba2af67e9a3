"""Solana cluster types, ledger connection and owner identity."""

from raydium_facade.solana.cluster import Cluster
from raydium_facade.solana.connection import (
    TOKEN_PROGRAM_ID,
    LedgerConnection,
    SolanaConnection,
    SolanaRPCError,
)
from raydium_facade.solana.owner import Owner

__all__ = [
    "TOKEN_PROGRAM_ID",
    "Cluster",
    "LedgerConnection",
    "Owner",
    "SolanaConnection",
    "SolanaRPCError",
]
