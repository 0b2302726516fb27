"""Secure HTTP transport shared by the token exchange and the compute client."""

import logging
import ssl

import httpx

from gce_compute.config import HTTP_TIMEOUT
from gce_compute.errors import TransportInitError

logger = logging.getLogger("gce_compute.transport")


class TransportFactory:
    """Builds the ``httpx.Client`` used to reach the metadata server and the API.

    ``ca_bundle`` points at a PEM file of trusted CAs used instead of the
    default trust store. ``transport`` lets callers plug a custom
    ``httpx.BaseTransport`` (for instance ``httpx.MockTransport`` in tests)
    under the client.
    """

    def __init__(
        self,
        timeout: float = HTTP_TIMEOUT,
        verify: bool | ssl.SSLContext = True,
        ca_bundle: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.timeout = timeout
        self.verify = verify
        self.ca_bundle = ca_bundle
        self.transport = transport

    def _ssl_verify(self) -> bool | ssl.SSLContext:
        if self.ca_bundle:
            return ssl.create_default_context(cafile=self.ca_bundle)
        return self.verify

    def new_secure_transport(self) -> httpx.Client:
        try:
            client = httpx.Client(
                timeout=self.timeout,
                verify=self._ssl_verify(),
                transport=self.transport,
                follow_redirects=False,
            )
        except Exception as exc:
            raise TransportInitError(f"unable to create secure transport: {exc}") from exc
        logger.debug("created secure transport (timeout=%ss)", self.timeout)
        return client
