"""HTTP client utilities."""

from sitekit.core.http.api_client import ApiClient


__all__ = [
    "ApiClient",
]
