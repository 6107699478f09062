"""
Clients for services outside this process.
"""

from tirehub.remote.search_client import CatalogSearchClient, ExternalSearchError

__all__ = [
    "CatalogSearchClient",
    "ExternalSearchError",
]
