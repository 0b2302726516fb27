import threading
import time

import httpx
import pytest

from gce_compute.client import ClientFactory
from gce_compute.provider import CachedClientProvider
from gce_compute.token_source import Credential
from gce_compute.transport import TransportFactory

TOKEN_URL = "http://metadata.test/token"
COMPUTE_URL = "https://compute.test/v1"


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTokenSource:
    """Returns a new Credential per exchange and counts the exchanges."""

    def __init__(self, expires_in: int | None = 3600, error: Exception | None = None, delay: float = 0):
        self.expires_in = expires_in
        self.error = error
        self.delay = delay
        self.calls = 0
        self._lock = threading.Lock()

    def exchange(self, transport: httpx.Client) -> Credential:
        with self._lock:
            self.calls += 1
            n = self.calls
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return Credential(f"token-{n}", self.expires_in)


class FlakyTransportFactory(TransportFactory):
    """Fails the first ``failures`` attempts, then builds real clients."""

    def __init__(self, failures: int, error: Exception):
        super().__init__(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})))
        self.failures = failures
        self.error = error
        self.calls = 0

    def new_secure_transport(self) -> httpx.Client:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return super().new_secure_transport()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mock_transport_factory():
    return TransportFactory(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})))


@pytest.fixture
def make_provider(clock, mock_transport_factory):
    created = []

    def _make(token_source, transport_factory=None, client_factory=None):
        provider = CachedClientProvider(
            transport_factory=transport_factory or mock_transport_factory,
            token_source=token_source,
            client_factory=client_factory or ClientFactory(COMPUTE_URL),
            application_id="gce-compute-test/1.0",
            clock=clock,
        )
        created.append(provider)
        return provider

    yield _make
    for provider in created:
        provider.close()
