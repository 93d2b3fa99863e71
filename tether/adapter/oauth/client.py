"""OAuth 2.0 authorization-code client.

One implementation serves every provider; endpoints and credentials come
from the provider's client settings and the payload shape from its mapper.
"""

from urllib.parse import urlencode

import httpx
import logfire
from pydantic import ValidationError as PydanticValidationError

from tether.adapter.error import ProviderError
from tether.config import OAuthClientSettings
from tether.domain.service.auth_service import OAuthClient
from tether.domain.value import AuthProvider, Email, OAuthAssertion

from .payload import PAYLOAD_MAPPERS, USERINFO_PARAMS


class OAuthClientError(ProviderError):
    """OAuth handshake with a provider failed."""

    pass


class RealOAuthClient(OAuthClient):
    """OAuth 2.0 Authorization Code Flow client backed by httpx.

    CSRF protection comes from the signed state parameter, which is verified
    before ``complete_authorization`` is called.
    """

    def __init__(
        self,
        provider: AuthProvider,
        settings: OAuthClientSettings,
        timeout: float = 30.0,
    ) -> None:
        """Initialize OAuth client.

        Args:
            provider: Provider this client talks to
            settings: Client registration and endpoints
            timeout: HTTP timeout in seconds
        """
        self.provider = provider
        self.settings = settings
        self.timeout = timeout
        self._map_payload = PAYLOAD_MAPPERS[provider]

    async def initiate_authorization(self, state: str) -> str:
        """Build the provider's authorization URL.

        Args:
            state: Signed state parameter

        Returns:
            Authorization URL to redirect user to
        """
        params = {
            "response_type": "code",
            "client_id": self.settings.client_id,
            "redirect_uri": self.settings.callback_url,
            "scope": self.settings.scope,
            "state": state,
        }

        logfire.info(
            "OAuth authorization initiated",
            provider=self.provider.value,
            redirect_uri=self.settings.callback_url,
        )

        return f"{self.settings.authorize_url}?{urlencode(params)}"

    async def complete_authorization(self, code: str, state: str) -> OAuthAssertion:
        """Exchange the code and fetch the provider's profile.

        Args:
            code: Authorization code from callback
            state: State parameter (already verified by the caller)

        Returns:
            Assertion built from the user-info payload

        Raises:
            OAuthClientError: If the exchange or user-info request fails, or
                the payload cannot be mapped
        """
        access_token = await self._exchange_code_for_token(code)
        payload = await self._get_user_info(access_token)

        try:
            assertion = self._map_payload(payload)
        except (KeyError, PydanticValidationError) as e:
            logfire.error(
                "OAuth user info payload rejected",
                provider=self.provider.value,
                error=str(e),
            )
            raise OAuthClientError(f"Malformed user info from {self.provider.value}")

        logfire.info(
            "OAuth user info received",
            provider=self.provider.value,
            uid=assertion.uid,
            has_email=assertion.email is not None,
        )
        return assertion

    async def _exchange_code_for_token(self, code: str) -> str:
        """Exchange authorization code for access token.

        Raises:
            OAuthClientError: If token exchange fails
        """
        data = {
            "code": code,
            "grant_type": "authorization_code",
            "client_id": self.settings.client_id,
            "client_secret": self.settings.client_secret,
            "redirect_uri": self.settings.callback_url,
        }

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.settings.token_url,
                    data=data,
                    headers={"Accept": "application/json"},
                    timeout=self.timeout,
                )

                if response.status_code != 200:
                    logfire.error(
                        "OAuth token exchange failed",
                        provider=self.provider.value,
                        status_code=response.status_code,
                        error=response.text,
                    )
                    raise OAuthClientError(
                        f"Token exchange failed: {response.status_code}"
                    )

                result = response.json()
                return result["access_token"]

        except httpx.HTTPError as e:
            logfire.error(
                "OAuth token exchange HTTP error",
                provider=self.provider.value,
                error=str(e),
            )
            raise OAuthClientError(f"HTTP error during token exchange: {e}")

    async def _get_user_info(self, access_token: str) -> dict:
        """Fetch the user-info payload.

        Raises:
            OAuthClientError: If the request fails
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    self.settings.userinfo_url,
                    params=USERINFO_PARAMS[self.provider],
                    headers={"Authorization": f"Bearer {access_token}"},
                    timeout=self.timeout,
                )

                if response.status_code != 200:
                    logfire.error(
                        "OAuth user info request failed",
                        provider=self.provider.value,
                        status_code=response.status_code,
                        error=response.text,
                    )
                    raise OAuthClientError(
                        f"User info request failed: {response.status_code}"
                    )

                return response.json()

        except httpx.HTTPError as e:
            logfire.error(
                "OAuth user info HTTP error",
                provider=self.provider.value,
                error=str(e),
            )
            raise OAuthClientError(f"HTTP error fetching user info: {e}")


class MockOAuthClient(OAuthClient):
    """Mock OAuth client for testing.

    Returns deterministic assertions without making real API calls. The
    authorization code selects the profile: ``uid`` and ``email`` are
    derived from it, and a code starting with ``unverified`` produces an
    assertion the verification policy rejects.
    """

    def __init__(self, provider: AuthProvider) -> None:
        self.provider = provider

    async def initiate_authorization(self, state: str) -> str:
        """Return mock authorization URL."""
        return f"https://{self.provider.value}.example.com/authorize?state={state}&mock=true"

    async def complete_authorization(self, code: str, state: str) -> OAuthAssertion:
        """Return a mock assertion derived from the code."""
        verified = not code.startswith("unverified")
        email = Email(f"{code}@example.com")
        name = f"Mock {self.provider.value.title()} User"
        avatar_url = f"https://example.com/{code}.jpg"

        if self.provider == AuthProvider.GOOGLE:
            extra = {"sub": f"mock-{code}", "email_verified": verified}
            info = {"email": email.root, "name": name, "image": avatar_url}
        else:
            extra = {"id": f"mock-{code}", "verified": verified}
            info = {
                "email": email.root,
                "name": name,
                "image": avatar_url,
                "verified": verified,
            }

        return OAuthAssertion(
            provider=self.provider,
            uid=f"mock-{code}",
            email=email,
            name=name,
            avatar_url=avatar_url,
            info=info,
            extra=extra,
        )
