"""Endpoint catalog."""

from raydium_facade.data.loader import (
    get_cluster_endpoints,
    get_rpc_endpoint,
    get_supported_clusters,
    load_endpoints,
)

__all__ = [
    "get_cluster_endpoints",
    "get_rpc_endpoint",
    "get_supported_clusters",
    "load_endpoints",
]
