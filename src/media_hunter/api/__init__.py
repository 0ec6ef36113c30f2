"""
HTTP API for the Media Hunter browser client.

Provides the search, download-proxy and health endpoints.
"""

from .server import create_api_server, run_api_server

__all__ = ["create_api_server", "run_api_server"]
