"""Endpoint catalog loader."""

from pathlib import Path
from typing import Any

import yaml


def load_endpoints() -> dict[str, Any]:
    """
    Load the endpoint catalog from endpoints.yaml.

    Returns
    -------
    dict[str, Any]
        Catalog keyed by cluster name

    """
    path = Path(__file__).parent / "endpoints.yaml"
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def get_cluster_endpoints(cluster: str, overrides: dict[str, str] | None = None) -> dict[str, str]:
    """
    Get the endpoints of a cluster with individual entries overridden.

    Parameters
    ----------
    cluster : str
        Cluster name (e.g., 'mainnet', 'devnet')
    overrides : dict[str, str] | None
        Entries replacing the catalog values, key by key

    Returns
    -------
    dict[str, str]
        Endpoint name to URL or path

    Raises
    ------
    KeyError
        If the cluster is not in the catalog

    """
    endpoints = dict(load_endpoints()["clusters"][str(cluster)])
    endpoints.update(overrides or {})
    return endpoints


def get_rpc_endpoint(cluster: str) -> str:
    """Return the public JSON-RPC endpoint of a cluster."""
    return get_cluster_endpoints(cluster)["rpc"]


def get_supported_clusters() -> list[str]:
    """Return the cluster names in the catalog."""
    return list(load_endpoints()["clusters"].keys())
