import httpx
import pytest

from gce_compute.errors import CredentialExchangeError
from gce_compute.token_source import Credential, MetadataTokenSource
from tests.conftest import TOKEN_URL


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_exchange_returns_credential():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"access_token": "ya29.abc", "expires_in": 3599, "token_type": "Bearer"})

    with _client(handler) as transport:
        credential = MetadataTokenSource(TOKEN_URL).exchange(transport)

    assert credential.access_token == "ya29.abc"
    assert credential.expires_in == 3599
    assert seen[0].headers["Metadata-Flavor"] == "Google"
    assert "scopes" not in seen[0].url.params


def test_exchange_passes_scopes():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"access_token": "t", "expires_in": 60})

    scopes = ["https://www.googleapis.com/auth/compute.readonly", "https://www.googleapis.com/auth/cloud-platform"]
    with _client(handler) as transport:
        MetadataTokenSource(TOKEN_URL, scopes).exchange(transport)

    assert seen[0].url.params["scopes"] == ",".join(scopes)


def test_missing_lifetime_is_none():
    with _client(lambda r: httpx.Response(200, json={"access_token": "t"})) as transport:
        assert MetadataTokenSource(TOKEN_URL).exchange(transport).expires_in is None


def test_http_error_status():
    with _client(lambda r: httpx.Response(403, text="Forbidden")) as transport:
        with pytest.raises(CredentialExchangeError, match="403"):
            MetadataTokenSource(TOKEN_URL).exchange(transport)


def test_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as transport:
        with pytest.raises(CredentialExchangeError, match="token request failed"):
            MetadataTokenSource(TOKEN_URL).exchange(transport)


@pytest.mark.parametrize("body", [b"not json", b'{"expires_in": 10}', b'{"access_token": "t", "expires_in": "soon"}'])
def test_malformed_response(body):
    with _client(lambda r: httpx.Response(200, content=body)) as transport:
        with pytest.raises(CredentialExchangeError, match="malformed"):
            MetadataTokenSource(TOKEN_URL).exchange(transport)


def test_credential_authorizes_requests_and_hides_token():
    credential = Credential("secret-token", 100)
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200)

    with _client(handler) as transport:
        transport.get("https://compute.test/v1/x", auth=credential)

    assert seen[0].headers["Authorization"] == "Bearer secret-token"
    assert "secret-token" not in repr(credential)
