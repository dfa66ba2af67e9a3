"""Facade state, shared context and sub-modules."""

from raydium_facade.facade.account import AccountModule
from raydium_facade.facade.context import FacadeContext, RemoteDataSource, SignAllTransactions
from raydium_facade.facade.state import RaydiumFacade, project_external_token
from raydium_facade.facade.token import TokenModule

__all__ = [
    "AccountModule",
    "FacadeContext",
    "RaydiumFacade",
    "RemoteDataSource",
    "SignAllTransactions",
    "TokenModule",
    "project_external_token",
]
