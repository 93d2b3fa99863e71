"""Unit tests for RealOAuthClient."""

from unittest.mock import AsyncMock, MagicMock, patch
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from tether.adapter.oauth import OAuthClientError, RealOAuthClient
from tether.config import Settings
from tether.domain.value import AuthProvider, Email


def mock_response(status_code: int, body: dict | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json = MagicMock(return_value=body or {})
    response.text = str(body)
    return response


@pytest.fixture
def google_client(settings: Settings) -> RealOAuthClient:
    client_settings = settings.auth.google.model_copy(
        update={"client_id": "google-id", "client_secret": "google-secret"}
    )
    return RealOAuthClient(AuthProvider.GOOGLE, client_settings)


@pytest.fixture
def facebook_client(settings: Settings) -> RealOAuthClient:
    client_settings = settings.auth.facebook.model_copy(
        update={"client_id": "fb-id", "client_secret": "fb-secret"}
    )
    return RealOAuthClient(AuthProvider.FACEBOOK, client_settings)


class TestInitiateAuthorization:
    @pytest.mark.asyncio
    async def test_builds_authorization_url(self, google_client):
        """Should point at the provider with our client id, callback and state."""
        url = await google_client.initiate_authorization("signed-state")

        parsed = urlparse(url)
        params = parse_qs(parsed.query)
        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == (
            "https://accounts.google.com/o/oauth2/v2/auth"
        )
        assert params["client_id"] == ["google-id"]
        assert params["response_type"] == ["code"]
        assert params["state"] == ["signed-state"]
        assert params["scope"] == ["openid email profile"]
        assert params["redirect_uri"] == [
            "http://localhost:8000/auth/callback/google"
        ]


class TestCompleteAuthorization:
    @pytest.mark.asyncio
    async def test_exchanges_code_and_maps_profile(self, google_client):
        """Should exchange the code, fetch user info and build an assertion."""
        token_response = mock_response(200, {"access_token": "access-123"})
        userinfo_response = mock_response(
            200,
            {
                "sub": "g-42",
                "email": "alice@example.com",
                "email_verified": True,
                "name": "Alice",
            },
        )

        with patch("httpx.AsyncClient") as mock_client:
            http = mock_client.return_value.__aenter__.return_value
            http.post = AsyncMock(return_value=token_response)
            http.get = AsyncMock(return_value=userinfo_response)

            assertion = await google_client.complete_authorization("code-1", "state")

            assert assertion.uid == "g-42"
            assert assertion.email == Email("alice@example.com")
            assert http.post.call_args.kwargs["data"]["code"] == "code-1"
            assert http.get.call_args.kwargs["headers"] == {
                "Authorization": "Bearer access-123"
            }

    @pytest.mark.asyncio
    async def test_requests_facebook_fields(self, facebook_client):
        """Graph API only returns requested fields."""
        token_response = mock_response(200, {"access_token": "access-123"})
        userinfo_response = mock_response(
            200, {"id": "fb-1", "email": "bob@example.com", "verified": True}
        )

        with patch("httpx.AsyncClient") as mock_client:
            http = mock_client.return_value.__aenter__.return_value
            http.post = AsyncMock(return_value=token_response)
            http.get = AsyncMock(return_value=userinfo_response)

            assertion = await facebook_client.complete_authorization("code", "state")

            assert assertion.uid == "fb-1"
            assert "verified" in http.get.call_args.kwargs["params"]["fields"]

    @pytest.mark.asyncio
    async def test_raises_on_failed_token_exchange(self, google_client):
        with patch("httpx.AsyncClient") as mock_client:
            http = mock_client.return_value.__aenter__.return_value
            http.post = AsyncMock(return_value=mock_response(400, {"error": "bad"}))

            with pytest.raises(OAuthClientError, match="Token exchange failed"):
                await google_client.complete_authorization("code", "state")

    @pytest.mark.asyncio
    async def test_raises_on_http_error(self, google_client):
        with patch("httpx.AsyncClient") as mock_client:
            http = mock_client.return_value.__aenter__.return_value
            http.post = AsyncMock(side_effect=httpx.ConnectError("refused"))

            with pytest.raises(OAuthClientError, match="HTTP error"):
                await google_client.complete_authorization("code", "state")

    @pytest.mark.asyncio
    async def test_raises_on_malformed_profile(self, google_client):
        """A payload without a subject cannot become an assertion."""
        with patch("httpx.AsyncClient") as mock_client:
            http = mock_client.return_value.__aenter__.return_value
            http.post = AsyncMock(
                return_value=mock_response(200, {"access_token": "access-123"})
            )
            http.get = AsyncMock(
                return_value=mock_response(200, {"email": "alice@example.com"})
            )

            with pytest.raises(OAuthClientError, match="Malformed"):
                await google_client.complete_authorization("code", "state")
