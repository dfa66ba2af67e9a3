"""Minimal Solana JSON-RPC connection used for ledger reads."""

import itertools
import logging
from typing import Any, Protocol

import httpx

from raydium_facade.core.models import EpochInfo

logger = logging.getLogger(__name__)

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"


class SolanaRPCError(Exception):
    """Exception raised for failed Solana JSON-RPC calls."""


class LedgerConnection(Protocol):
    """Ledger reads the facade depends on."""

    def get_epoch_info(self) -> EpochInfo:
        """Return the current epoch information."""
        ...


class SolanaConnection:
    """
    Solana JSON-RPC client.

    Parameters
    ----------
    endpoint : str
        RPC endpoint URL
    commitment : str
        Commitment level sent with every read (default: confirmed)
    timeout : float
        Request timeout in seconds
    client : httpx.Client | None
        HTTP client to use; a new one is created if None

    """

    def __init__(
        self,
        endpoint: str,
        commitment: str = "confirmed",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.commitment = commitment
        self.client = client or httpx.Client(timeout=timeout)
        self._ids = itertools.count(1)

    def make_request(self, method: str, params: list[Any]) -> Any:
        """
        Send a JSON-RPC request and return its ``result``.

        Parameters
        ----------
        method : str
            RPC method name (e.g., 'getEpochInfo')
        params : list[Any]
            Method parameters

        Returns
        -------
        Any
            The ``result`` member of the response

        Raises
        ------
        SolanaRPCError
            If the request fails or the node returns an error

        """
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            response = self.client.post(self.endpoint, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            msg = f"RPC call {method} timed out: {e}"
            raise SolanaRPCError(msg) from e
        except httpx.HTTPStatusError as e:
            msg = f"RPC call {method} failed with HTTP {e.response.status_code}"
            raise SolanaRPCError(msg) from e
        except httpx.HTTPError as e:
            msg = f"RPC call {method} failed: {e}"
            raise SolanaRPCError(msg) from e
        except ValueError as e:
            msg = f"RPC call {method} returned invalid JSON: {e}"
            raise SolanaRPCError(msg) from e

        if "error" in data:
            error = data["error"]
            msg = f"RPC call {method} returned error {error.get('code')}: {error.get('message')}"
            raise SolanaRPCError(msg)

        logger.debug("RPC call %s succeeded", method)
        return data.get("result")

    def get_epoch_info(self) -> EpochInfo:
        """
        Fetch the current epoch information.

        Returns
        -------
        EpochInfo
            Epoch, slot and block height at the configured commitment

        """
        result = self.make_request("getEpochInfo", [{"commitment": self.commitment}])
        return EpochInfo.model_validate(result)

    def get_token_accounts_by_owner(
        self,
        owner: str,
        program_id: str = TOKEN_PROGRAM_ID,
    ) -> list[dict[str, Any]]:
        """
        Fetch the parsed token accounts held by an owner.

        Parameters
        ----------
        owner : str
            Owner public key (base58)
        program_id : str
            Token program to query

        Returns
        -------
        list[dict[str, Any]]
            Raw ``{pubkey, account}`` records

        """
        result = self.make_request(
            "getTokenAccountsByOwner",
            [owner, {"programId": program_id}, {"encoding": "jsonParsed", "commitment": self.commitment}],
        )
        return list(result.get("value", [])) if result else []

    def close(self) -> None:
        """Close HTTP client."""
        self.client.close()

    def __enter__(self) -> "SolanaConnection":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
