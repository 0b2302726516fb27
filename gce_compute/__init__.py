"""Cached, thread-safe provider of an authenticated compute API client."""

from gce_compute.client import ClientFactory, ComputeClient
from gce_compute.errors import (
    ClientBuildError,
    CredentialError,
    CredentialExchangeError,
    GceComputeError,
    TransportInitError,
)
from gce_compute.policy import RefreshPolicy
from gce_compute.provider import CacheEntry, CachedClientProvider
from gce_compute.token_source import Credential, MetadataTokenSource
from gce_compute.transport import TransportFactory

__all__ = [
    "CacheEntry",
    "CachedClientProvider",
    "ClientBuildError",
    "ClientFactory",
    "ComputeClient",
    "Credential",
    "CredentialError",
    "CredentialExchangeError",
    "GceComputeError",
    "MetadataTokenSource",
    "RefreshPolicy",
    "TransportFactory",
    "TransportInitError",
]
