"""Authenticated compute API client and the factory that builds it."""

import logging
from typing import Any

import httpx

from gce_compute.config import COMPUTE_URL
from gce_compute.errors import ClientBuildError
from gce_compute.token_source import Credential

logger = logging.getLogger("gce_compute.client")


class ComputeClient:
    """Handle used to issue calls against the compute API.

    Shares the provider's transport; every request carries the credential
    and identifies itself with ``application_id`` as its User-Agent.
    """

    def __init__(self, transport: httpx.Client, credential: Credential, application_id: str, base_url: str):
        self.transport = transport
        self.credential = credential
        self.application_id = application_id
        self.base_url = base_url.rstrip("/")

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request relative to ``base_url`` and return the decoded JSON body.

        Raises httpx.HTTPStatusError on non-2xx responses.
        """
        headers = {"User-Agent": self.application_id, **(kwargs.pop("headers", None) or {})}
        resp = self.transport.request(
            method,
            f"{self.base_url}/{path.lstrip('/')}",
            headers=headers,
            auth=self.credential,
            **kwargs,
        )
        resp.raise_for_status()
        if not resp.content:
            return None
        return resp.json()

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def __repr__(self) -> str:
        return f"ComputeClient(base_url={self.base_url!r}, application_id={self.application_id!r})"


class ClientFactory:
    def __init__(self, base_url: str = COMPUTE_URL):
        self.base_url = base_url

    def build(self, transport: httpx.Client, credential: Credential, application_id: str) -> ComputeClient:
        if not application_id:
            raise ClientBuildError("application id must not be empty")
        if credential is None or not getattr(credential, "access_token", None):
            raise ClientBuildError("credential carries no access token")
        if transport.is_closed:
            raise ClientBuildError("transport is closed")
        logger.debug("building compute client for %s", self.base_url)
        return ComputeClient(transport, credential, application_id, self.base_url)
