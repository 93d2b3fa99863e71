"""Unit tests for JWT token utilities."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from tether.config import AuthSettings
from tether.util.jwt import (
    JWTError,
    create_state_token,
    create_token,
    new_state_nonce,
    verify_state_token,
    verify_token,
)


@pytest.fixture
def auth_settings() -> AuthSettings:
    return AuthSettings(jwt_secret="test-secret")


class TestSessionToken:
    def test_round_trip(self, auth_settings):
        token = create_token("acc-1", "alice@example.com", auth_settings)

        payload = verify_token(token, auth_settings)

        assert payload.account_id == "acc-1"
        assert payload.email == "alice@example.com"

    def test_wrong_secret(self, auth_settings):
        token = create_token("acc-1", "alice@example.com", auth_settings)

        with pytest.raises(JWTError, match="Invalid token"):
            verify_token(token, AuthSettings(jwt_secret="other-secret"))

    def test_expired(self, auth_settings):
        token = jwt.encode(
            {
                "account_id": "acc-1",
                "email": "alice@example.com",
                "purpose": "session",
                "exp": datetime.now(timezone.utc) - timedelta(seconds=1),
            },
            auth_settings.jwt_secret,
            algorithm=auth_settings.jwt_algorithm,
        )

        with pytest.raises(JWTError, match="expired"):
            verify_token(token, auth_settings)

    def test_state_token_rejected_as_session(self, auth_settings):
        """Purpose claim keeps the two token kinds apart."""
        state = create_state_token("google", "n1", auth_settings)

        with pytest.raises(JWTError):
            verify_token(state, auth_settings)


class TestStateToken:
    def test_round_trip(self, auth_settings):
        state = create_state_token("google", "n1", auth_settings)

        payload = verify_state_token(state, "google", "n1", auth_settings)

        assert payload.provider == "google"
        assert payload.nonce == "n1"

    def test_nonces_are_unique(self):
        assert new_state_nonce() != new_state_nonce()

    @pytest.mark.parametrize("nonce", [None, "", "n2", "ñ"])
    def test_nonce_mismatch(self, auth_settings, nonce):
        """A state only verifies together with the nonce it was issued with."""
        state = create_state_token("google", "n1", auth_settings)

        with pytest.raises(JWTError, match="not issued to this client"):
            verify_state_token(state, "google", nonce, auth_settings)

    def test_other_provider(self, auth_settings):
        state = create_state_token("google", "n1", auth_settings)

        with pytest.raises(JWTError, match="different provider"):
            verify_state_token(state, "facebook", "n1", auth_settings)

    def test_session_token_rejected_as_state(self, auth_settings):
        token = create_token("acc-1", "alice@example.com", auth_settings)

        with pytest.raises(JWTError, match="Invalid state"):
            verify_state_token(token, "google", "n1", auth_settings)
