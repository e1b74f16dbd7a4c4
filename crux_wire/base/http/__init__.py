"""HTTP utilities package.

Exposes pooled httpx clients shared by the streaming and embedding transports.
"""

from .client import get_httpx_client, close_all_clients

__all__ = ["get_httpx_client", "close_all_clients"]
