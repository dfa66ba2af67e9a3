"""Raydium HTTP API client for chain time, token lists and feature availability."""

import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Any

import httpx

from raydium_facade.core.config import JupTokenType
from raydium_facade.core.models import AvailabilityFlags, TokenListV3
from raydium_facade.data import get_cluster_endpoints
from raydium_facade.solana.cluster import Cluster

logger = logging.getLogger(__name__)


class RaydiumAPIError(Exception):
    """Exception raised for Raydium API errors."""


@dataclass(frozen=True)
class RequestRecord:
    """One recorded API request."""

    url: str
    status_code: int | None
    elapsed_ms: float
    ok: bool


class RaydiumApi:
    """
    Client for the Raydium v3 API and the Jupiter token list.

    Raydium endpoints wrap their payload in ``{id, success, data}``; the
    envelope is removed before results are returned.

    Parameters
    ----------
    cluster : Cluster
        Cluster whose endpoints are used
    timeout_ms : int
        Request timeout in milliseconds
    url_configs : dict[str, str] | None
        Overrides for individual endpoint catalog entries
    log_requests : bool
        Record every request in :attr:`request_log`
    log_count : int
        Number of records kept
    client : httpx.Client | None
        HTTP client to use; a new one is created if None

    """

    def __init__(
        self,
        cluster: Cluster = Cluster.MAINNET,
        timeout_ms: int = 10_000,
        url_configs: dict[str, str] | None = None,
        log_requests: bool = False,
        log_count: int = 1000,
        client: httpx.Client | None = None,
    ) -> None:
        self.cluster = cluster
        self.endpoints = get_cluster_endpoints(cluster, url_configs)
        self.log_requests = log_requests
        self.request_log: deque[RequestRecord] = deque(maxlen=log_count)
        self.client = client or httpx.Client(timeout=timeout_ms / 1000)

    def get_chain_time_offset(self) -> float:
        """
        Fetch the difference between chain time and server time.

        Returns
        -------
        float
            Offset in seconds

        Raises
        ------
        RaydiumAPIError
            If the request fails or the payload has no offset

        """
        data = self._get_data(self._url("chain_time"))
        try:
            return float(data["offset"])
        except (KeyError, TypeError, ValueError) as e:
            msg = f"Invalid chain time payload: {data!r}"
            raise RaydiumAPIError(msg) from e

    def get_token_list(self) -> TokenListV3:
        """
        Fetch the Raydium v3 token list.

        Returns
        -------
        TokenListV3
            Mint list with black and white lists

        """
        data = self._get_data(self._url("token_list"))
        return self._validate(TokenListV3, data)

    def get_jup_token_list(self, token_type: JupTokenType = JupTokenType.STRICT) -> list[dict[str, Any]]:
        """
        Fetch the Jupiter token list.

        Parameters
        ----------
        token_type : JupTokenType
            List variant, 'strict' or 'all'

        Returns
        -------
        list[dict[str, Any]]
            Raw token records in Jupiter's snake_case format

        """
        if token_type is JupTokenType.NONE:
            return []
        data = self._get_json(self._url(f"jup_token_list_{token_type.value}"))
        if not isinstance(data, list):
            msg = f"Expected a token array, got {type(data).__name__}"
            raise RaydiumAPIError(msg)
        return data

    def fetch_availability_status(self) -> AvailabilityFlags:
        """
        Fetch the feature availability flags as reported by the API.

        Returns
        -------
        AvailabilityFlags
            Flags exactly as reported, before the global kill-switch is applied

        """
        data = self._get_data(self._url("check_availability", host="service_host"))
        return self._validate(AvailabilityFlags, data)

    def _url(self, name: str, host: str = "base_host") -> str:
        path = self.endpoints[name]
        if path.startswith(("http://", "https://")):
            return path
        return self.endpoints[host].rstrip("/") + path

    def _get_data(self, url: str) -> Any:
        payload = self._get_json(url)
        # Raydium envelope: {"id": ..., "success": bool, "data": ...}
        if isinstance(payload, dict) and "success" in payload:
            if not payload["success"]:
                msg = f"API reported failure for {url}: {payload.get('msg', 'unknown error')}"
                raise RaydiumAPIError(msg)
            return payload.get("data")
        return payload

    def _get_json(self, url: str) -> Any:
        started = time.perf_counter()
        status_code = None
        try:
            response = self.client.get(url)
            status_code = response.status_code
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            msg = f"Request timeout: {e}"
            raise RaydiumAPIError(msg) from e
        except httpx.HTTPStatusError as e:
            msg = f"HTTP error {e.response.status_code}: {e}"
            raise RaydiumAPIError(msg) from e
        except httpx.HTTPError as e:
            msg = f"HTTP request failed: {e}"
            raise RaydiumAPIError(msg) from e
        except ValueError as e:
            msg = f"Invalid JSON from {url}: {e}"
            raise RaydiumAPIError(msg) from e
        finally:
            self._record(url, status_code, started)
        return data

    def _record(self, url: str, status_code: int | None, started: float) -> None:
        if not self.log_requests:
            return
        elapsed_ms = (time.perf_counter() - started) * 1000
        ok = status_code is not None and status_code < 400
        self.request_log.append(RequestRecord(url=url, status_code=status_code, elapsed_ms=elapsed_ms, ok=ok))
        logger.debug("GET %s -> %s (%.1f ms)", url, status_code, elapsed_ms)

    @staticmethod
    def _validate(model: type, data: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValueError as e:
            msg = f"Invalid {model.__name__} payload: {e}"
            raise RaydiumAPIError(msg) from e

    def close(self) -> None:
        """Close HTTP client."""
        self.client.close()

    def __enter__(self) -> "RaydiumApi":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
