"""Exchange the instance's ambient identity for a bearer token."""

import logging
from collections.abc import Generator

import httpx
from pydantic import ValidationError

from gce_compute.config import METADATA_TOKEN_URL
from gce_compute.errors import CredentialExchangeError
from gce_compute.models import TokenResponse

logger = logging.getLogger("gce_compute.token_source")


class Credential(httpx.Auth):
    """An access token that also authorizes every request it is attached to."""

    def __init__(self, access_token: str, expires_in: int | None = None, token_type: str = "Bearer"):
        self.access_token = access_token
        self.expires_in = expires_in
        self.token_type = token_type

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"{self.token_type} {self.access_token}"
        yield request

    def __repr__(self) -> str:
        return f"Credential(token_type={self.token_type!r}, expires_in={self.expires_in!r})"


class MetadataTokenSource:
    """Fetches tokens for the default service account from the metadata server.

    The server only answers requests carrying ``Metadata-Flavor: Google``;
    the reply is ``{"access_token": ..., "expires_in": ..., "token_type": ...}``.
    """

    def __init__(self, token_url: str = METADATA_TOKEN_URL, scopes: list[str] | None = None):
        self.token_url = token_url
        self.scopes = list(scopes or [])

    def exchange(self, transport: httpx.Client) -> Credential:
        params = {"scopes": ",".join(self.scopes)} if self.scopes else None
        try:
            resp = transport.get(
                self.token_url,
                params=params,
                headers={"Metadata-Flavor": "Google"},
            )
            resp.raise_for_status()
            data = TokenResponse.model_validate(resp.json())
        except httpx.HTTPStatusError as exc:
            raise CredentialExchangeError(
                f"token endpoint returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise CredentialExchangeError(f"token request failed: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise CredentialExchangeError(f"malformed token response: {exc}") from exc

        logger.debug("token will expire in [%s] s", data.expires_in)
        return Credential(data.access_token, data.expires_in, data.token_type)
