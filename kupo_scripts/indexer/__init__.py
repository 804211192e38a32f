"""Chain indexer clients."""

from .kupo_client import (
    BodyReadError,
    KupoClient,
    KupoError,
    RequestBuildError,
    StatusError,
    TransportError,
)

__all__ = [
    "KupoClient",
    "KupoError",
    "RequestBuildError",
    "TransportError",
    "StatusError",
    "BodyReadError",
]
