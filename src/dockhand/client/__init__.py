"""Async Docker daemon client."""

from .client import DockerClient, HTTPXTransport, encode_params

__all__ = [
    "DockerClient",
    "HTTPXTransport",
    "encode_params",
]
