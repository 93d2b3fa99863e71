"""Unit tests for provider payload mapping and the mock client."""

import pytest

from tether.adapter.oauth import (
    MockOAuthClient,
    facebook_assertion,
    google_assertion,
)
from tether.domain.service import VerificationPolicy
from tether.domain.value import AuthProvider, Email


class TestGooglePayload:
    def test_maps_userinfo(self):
        payload = {
            "sub": "1234567890",
            "email": "Alice@Gmail.com",
            "email_verified": True,
            "name": "Alice Smith",
            "picture": "https://lh3.googleusercontent.com/a/pic",
        }

        assertion = google_assertion(payload)

        assert assertion.provider == AuthProvider.GOOGLE
        assert assertion.uid == "1234567890"
        assert assertion.email == Email("alice@gmail.com")
        assert assertion.name == "Alice Smith"
        assert assertion.avatar_url == "https://lh3.googleusercontent.com/a/pic"
        assert assertion.extra["email_verified"] is True
        assert VerificationPolicy().verified(assertion)

    def test_missing_email(self):
        assertion = google_assertion({"sub": "1", "email_verified": True})

        assert assertion.email is None
        assert not VerificationPolicy().verified(assertion)

    def test_missing_subject(self):
        with pytest.raises(KeyError):
            google_assertion({"email": "alice@gmail.com"})


class TestFacebookPayload:
    def test_maps_graph_response(self):
        payload = {
            "id": 987654321,
            "email": "bob@example.com",
            "name": "Bob",
            "verified": True,
            "picture": {"data": {"url": "https://graph.facebook.com/pic.jpg"}},
        }

        assertion = facebook_assertion(payload)

        assert assertion.uid == "987654321"
        assert assertion.avatar_url == "https://graph.facebook.com/pic.jpg"
        assert assertion.info["verified"] is True
        assert VerificationPolicy().verified(assertion)

    def test_unverified_account(self):
        assertion = facebook_assertion(
            {"id": "1", "email": "bob@example.com", "verified": False}
        )

        assert assertion.avatar_url is None
        assert not VerificationPolicy().verified(assertion)


class TestMockOAuthClient:
    @pytest.mark.asyncio
    async def test_authorization_url_carries_state(self):
        client = MockOAuthClient(AuthProvider.GOOGLE)

        url = await client.initiate_authorization("state-123")

        assert url.startswith("https://google.example.com/authorize")
        assert "state=state-123" in url

    @pytest.mark.asyncio
    @pytest.mark.parametrize("provider", list(AuthProvider))
    async def test_code_selects_profile(self, provider):
        client = MockOAuthClient(provider)
        policy = VerificationPolicy()

        verified = await client.complete_authorization("carol", "state")
        unverified = await client.complete_authorization("unverified-carol", "state")

        assert verified.uid == "mock-carol"
        assert verified.email == Email("carol@example.com")
        assert policy.verified(verified)
        assert not policy.verified(unverified)
