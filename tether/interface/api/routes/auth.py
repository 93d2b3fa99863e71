"""Authentication routes."""

import logging
from urllib.parse import urlencode

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, HTTPException, Response, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from tether.adapter.error import ProviderError
from tether.application.usecase.auth import (
    GetCurrentAccountUseCase,
    OAuthCallbackUseCase,
    OAuthFlow,
)
from tether.application.usecase.auth.get_current_account import (
    GetCurrentAccountRequest,
    GetCurrentAccountResponse,
)
from tether.application.usecase.auth.oauth_callback import OAuthCallbackRequest
from tether.config import Settings
from tether.domain.error import (
    AuthenticationDenied,
    NotFoundError,
    UnsupportedProviderError,
    ValidationError,
)
from tether.domain.service import AuthService, JWTService
from tether.domain.value import AuthProvider
from tether.util.jwt import JWTError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)

AUTH_COOKIE = "auth_token"
STATE_COOKIE = "oauth_state"
STATE_COOKIE_PATH = "/auth/callback"


class InitiateLoginRequest(BaseModel):
    """Initiate login request."""

    provider: AuthProvider  # Which OAuth provider to use


class InitiateLoginResponse(BaseModel):
    """Initiate login response."""

    authorization_url: str


class LogoutResponse(BaseModel):
    """Logout response."""

    success: bool
    message: str


class AuthStatusResponse(BaseModel):
    """Response for checking authentication status.

    Used by /auth/me to return the current account if authenticated,
    or indicate unauthenticated state without raising an error.
    """

    authenticated: bool
    account: GetCurrentAccountResponse | None = None


@router.post("/login", response_model=InitiateLoginResponse)
async def initiate_login(
    request: InitiateLoginRequest,
    response: Response,
    auth_service: FromDishka[AuthService],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> InitiateLoginResponse:
    """Initiate OAuth login flow for a provider.

    The ``state`` carried through the provider is a signed, short-lived token
    bound to the provider, so the callback needs no server-side session. Its
    nonce is also set in the ``oauth_state`` cookie: a callback is only
    accepted from the browser that started the login.

    Args:
        request: Login request with provider
        response: FastAPI response object
        auth_service: Authentication domain service from DI
        jwt_service: JWT token domain service from DI
        settings: Application settings from DI

    Returns:
        Authorization URL to redirect to

    Raises:
        HTTPException: 400 if the provider is not enabled

    Example:
        POST /auth/login
        {"provider": "google"}

        Response:
        {"authorization_url": "https://accounts.google.com/o/oauth2/v2/auth?..."}
    """
    logger.info(f"Initiating {request.provider.value} login")

    nonce = jwt_service.new_state_nonce()
    state = jwt_service.create_state(request.provider.value, nonce)

    try:
        auth_url = await auth_service.initiate_login(request.provider, state)
    except UnsupportedProviderError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Provider not enabled: {request.provider.value}",
        )

    response.set_cookie(
        key=STATE_COOKIE,
        value=nonce,
        httponly=True,
        path=STATE_COOKIE_PATH,
        max_age=settings.auth.state_expiry_minutes * 60,
        **_cookie_security(settings),
    )

    return InitiateLoginResponse(authorization_url=auth_url)


@router.get("/callback/{provider}")
async def oauth_callback(
    provider: AuthProvider,
    code: str,
    state: str,
    callback_use_case: FromDishka[OAuthCallbackUseCase],
    settings: FromDishka[Settings],
    auth_token: str | None = Cookie(default=None),
    oauth_state: str | None = Cookie(default=None),
):
    """Handle an OAuth callback and complete sign-in or connect.

    Without a valid ``auth_token`` cookie the assertion signs in (or creates)
    an account and a session cookie is issued. With one, the identity is
    connected to the signed-in account and the cookie is left as is.

    The ``oauth_state`` cookie set by /auth/login must match the state, so a
    callback URL started by someone else is refused. It is cleared either way.

    Args:
        provider: Provider the callback is for
        code: Authorization code from the provider
        state: Signed state issued by /auth/login
        callback_use_case: OAuth callback use case from DI
        settings: Application settings from DI
        auth_token: Existing session cookie (optional)
        oauth_state: State nonce cookie set at login (optional)

    Returns:
        HTTP 302 redirect to the frontend. Failures redirect to
        ``/auth/error?error=<key>&provider=<provider>``.

    Example:
        GET /auth/callback/google?code=abc123&state=eyJ...

        Redirects to: https://example.com/
        Sets cookie: auth_token
    """
    logger.info(f"OAuth callback received: provider={provider.value}")

    redirect_response = await _complete_callback(
        OAuthCallbackRequest(
            provider=provider,
            code=code,
            state=state,
            state_nonce=oauth_state,
            session_token=auth_token,
        ),
        callback_use_case,
        settings,
    )
    redirect_response.delete_cookie(
        key=STATE_COOKIE, path=STATE_COOKIE_PATH, **_cookie_security(settings)
    )
    return redirect_response


async def _complete_callback(
    request: OAuthCallbackRequest,
    callback_use_case: OAuthCallbackUseCase,
    settings: Settings,
) -> RedirectResponse:
    provider = request.provider
    try:
        result = await callback_use_case.execute(request)
    except AuthenticationDenied as e:
        logger.warning(f"OAuth callback denied: {e}")
        return _error_redirect(settings, e.message_key, provider)
    except JWTError as e:
        logger.warning(f"OAuth state rejected: {e}")
        return _error_redirect(settings, "invalid_state", provider)
    except ProviderError as e:
        logger.error(f"OAuth provider error during callback: {e}")
        return _error_redirect(settings, "auth_failed", provider)
    except ValidationError as e:
        logger.warning(f"OAuth assertion unusable: {e}")
        return _error_redirect(settings, "missing_email", provider)
    except NotFoundError as e:
        logger.warning(f"Session account missing during connect: {e}")
        return _error_redirect(settings, "account_not_found", provider)
    except Exception as e:
        logger.exception(f"Unexpected error during OAuth callback: {e}")
        return _error_redirect(settings, "unexpected", provider)

    logger.info(
        f"OAuth callback resolved: flow={result.flow.value}, created={result.created}"
    )

    redirect_response = RedirectResponse(
        url=settings.api.frontend_url,
        status_code=status.HTTP_302_FOUND,
    )

    if result.flow == OAuthFlow.SIGN_IN and result.token:
        redirect_response.set_cookie(
            key=AUTH_COOKIE,
            value=result.token,
            httponly=True,
            path="/",
            max_age=settings.auth.jwt_expiry_days * 24 * 60 * 60,
            **_cookie_security(settings),
        )

    return redirect_response


def _cookie_security(settings: Settings) -> dict:
    """Cookie attributes shared by the session and state cookies."""
    # Production is cross-site (frontend and API on different hosts):
    # samesite="none" requires secure=True. Development is same-site over HTTP.
    is_production = settings.environment == "production"
    return {
        "secure": is_production,
        "samesite": "none" if is_production else "lax",
        "domain": settings.auth.cookie_domain,
    }


def _error_redirect(
    settings: Settings, error: str, provider: AuthProvider
) -> RedirectResponse:
    """Redirect to the frontend error page with a stable error key."""
    query = urlencode({"error": error, "provider": provider.value})
    return RedirectResponse(
        url=f"{settings.api.frontend_url}/auth/error?{query}",
        status_code=status.HTTP_302_FOUND,
    )


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    settings: FromDishka[Settings],
) -> LogoutResponse:
    """Logout by clearing the authentication cookie.

    Args:
        response: FastAPI response object
        settings: Application settings from DI

    Returns:
        Logout success message
    """
    # Delete cookie with same domain/path as when it was created
    response.delete_cookie(
        key=AUTH_COOKIE,
        domain=settings.auth.cookie_domain,
        path="/",
    )
    return LogoutResponse(success=True, message="Successfully logged out")


@router.get("/me", response_model=AuthStatusResponse)
async def get_current_account(
    get_current_account_use_case: FromDishka[GetCurrentAccountUseCase],
    auth_token: str | None = Cookie(default=None),
) -> AuthStatusResponse:
    """Get the current account if authenticated, or return unauthenticated status.

    Safe to call without authentication: it returns authenticated=false
    instead of raising an error.

    Args:
        get_current_account_use_case: Get current account use case from DI
        auth_token: JWT token from cookie (optional)

    Returns:
        Authentication status with account and linked identities if authenticated
    """
    if not auth_token:
        return AuthStatusResponse(authenticated=False)

    try:
        account = await get_current_account_use_case.execute(
            GetCurrentAccountRequest(token=auth_token)
        )
        return AuthStatusResponse(authenticated=True, account=account)

    except JWTError:
        # Invalid or expired token - expected, not an error
        return AuthStatusResponse(authenticated=False)
    except NotFoundError:
        # JWT valid but account not found in database (orphaned token)
        return AuthStatusResponse(authenticated=False)
