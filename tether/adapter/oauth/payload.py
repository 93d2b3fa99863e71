"""Provider user-info payload mapping.

Each provider returns its profile in its own shape. These mappers turn the
raw payload into an OAuthAssertion, keeping provider verification flags
where the verification policy expects them.
"""

from collections.abc import Callable
from typing import Any

from tether.domain.value import AuthProvider, Email, OAuthAssertion

PayloadMapper = Callable[[dict[str, Any]], OAuthAssertion]


def _email(value: Any) -> Email | None:
    if not value:
        return None
    return Email(value)


def google_assertion(payload: dict[str, Any]) -> OAuthAssertion:
    """Map an OpenID Connect userinfo response.

    ``email_verified`` stays in ``extra``; Google sends it as a boolean or,
    from some endpoints, as the string "true".
    """
    return OAuthAssertion(
        provider=AuthProvider.GOOGLE,
        uid=str(payload["sub"]),
        email=_email(payload.get("email")),
        name=payload.get("name"),
        avatar_url=payload.get("picture"),
        info={
            "email": payload.get("email"),
            "name": payload.get("name"),
            "image": payload.get("picture"),
        },
        extra=payload,
    )


def facebook_assertion(payload: dict[str, Any]) -> OAuthAssertion:
    """Map a Graph API ``/me`` response.

    The picture field arrives nested as ``{"data": {"url": ...}}``.
    """
    picture = payload.get("picture") or {}
    avatar_url = picture.get("data", {}).get("url") if isinstance(picture, dict) else None
    return OAuthAssertion(
        provider=AuthProvider.FACEBOOK,
        uid=str(payload["id"]),
        email=_email(payload.get("email")),
        name=payload.get("name"),
        avatar_url=avatar_url,
        info={
            "email": payload.get("email"),
            "name": payload.get("name"),
            "image": avatar_url,
            "verified": payload.get("verified"),
        },
        extra=payload,
    )


PAYLOAD_MAPPERS: dict[AuthProvider, PayloadMapper] = {
    AuthProvider.GOOGLE: google_assertion,
    AuthProvider.FACEBOOK: facebook_assertion,
}

# Extra query parameters for the user-info request
USERINFO_PARAMS: dict[AuthProvider, dict[str, str]] = {
    AuthProvider.GOOGLE: {},
    AuthProvider.FACEBOOK: {"fields": "id,name,email,verified,picture"},
}
