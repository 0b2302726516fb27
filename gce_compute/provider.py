"""Cached, self-refreshing provider of the authenticated compute client."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from gce_compute.client import ClientFactory, ComputeClient
from gce_compute.config import APPLICATION_NAME
from gce_compute.errors import CredentialError
from gce_compute.policy import RefreshPolicy
from gce_compute.token_source import MetadataTokenSource
from gce_compute.transport import TransportFactory

logger = logging.getLogger("gce_compute.provider")


@dataclass(frozen=True)
class CacheEntry:
    handle: ComputeClient
    issued_at: float


class CachedClientProvider:
    """Hands out a ready-to-use ComputeClient, refreshing it only when stale.

    One lock guards the whole check-and-refresh sequence, so concurrent
    callers on a cold or expired cache trigger a single token exchange and
    all receive the handle it produced. Each instance owns its transport
    and cache; holding several providers never shares state between them.
    """

    def __init__(
        self,
        transport_factory: TransportFactory | None = None,
        token_source: MetadataTokenSource | None = None,
        client_factory: ClientFactory | None = None,
        application_id: str = APPLICATION_NAME,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.transport_factory = transport_factory or TransportFactory()
        self.token_source = token_source or MetadataTokenSource()
        self.client_factory = client_factory or ClientFactory()
        self.application_id = application_id
        self._clock = clock
        self._lock = threading.Lock()
        self._policy = RefreshPolicy.unset()
        self._entry: CacheEntry | None = None
        self._transport: httpx.Client | None = None
        self._started = False
        self._closed = False

    @property
    def policy(self) -> RefreshPolicy:
        with self._lock:
            return self._policy

    @property
    def issued_at(self) -> float | None:
        with self._lock:
            return self._entry.issued_at if self._entry else None

    @property
    def started(self) -> bool:
        return self._started

    @property
    def closed(self) -> bool:
        return self._closed

    def get_client(self) -> ComputeClient:
        """Return a valid compute client, refreshing the credential if needed.

        Raises CredentialError if the transport, the token exchange or the
        client construction fails. Nothing is cached on failure.
        """
        with self._lock:
            now = self._clock()
            issued_at = self._entry.issued_at if self._entry else None
            if self._policy.admits(issued_at, now):
                logger.debug("using cache to retrieve compute client")
                return self._entry.handle
            return self._refresh(now)

    def invalidate(self) -> None:
        """Drop the cached client so the next get_client() refreshes."""
        with self._lock:
            self._entry = None

    def _refresh(self, now: float) -> ComputeClient:
        logger.debug("refreshing compute client (policy: %s)", self._policy)
        try:
            transport = self._acquire_transport()
            credential = self.token_source.exchange(transport)
            policy = RefreshPolicy.from_ttl(credential.expires_in)
            handle = self.client_factory.build(transport, credential, self.application_id)
        except Exception as exc:
            logger.warning(
                "unable to obtain compute client: %s : %s", type(exc).__name__, exc
            )
            raise CredentialError.wrap(exc) from exc

        self._entry = CacheEntry(handle, now)
        self._policy = policy
        self._closed = False
        logger.debug("compute client refreshed, next refresh policy: %s", policy)
        return handle

    def _acquire_transport(self) -> httpx.Client:
        if self._transport is None or self._transport.is_closed:
            self._transport = self.transport_factory.new_secure_transport()
        return self._transport

    # Lifecycle

    def start(self) -> None:
        with self._lock:
            self._started = True
            self._closed = False
        logger.debug("compute client provider started")

    def stop(self) -> None:
        with self._lock:
            self._started = False
        logger.debug("compute client provider stopped")

    def close(self) -> None:
        """Release the cached client and the owned transport. Idempotent."""
        with self._lock:
            transport, self._transport = self._transport, None
            self._entry = None
            self._policy = RefreshPolicy.unset()
            self._started = False
            self._closed = True
        if transport is not None:
            transport.close()
        logger.debug("compute client provider closed")

    def __enter__(self) -> "CachedClientProvider":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
