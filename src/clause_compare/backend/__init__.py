"""Comparison backend client."""

from .client import BackendClient, UpstreamResponse, decode_body

__all__ = [
    "BackendClient",
    "UpstreamResponse",
    "decode_body",
]
