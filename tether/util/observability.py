"""Logfire setup for the API, migrations and provider calls.

Services and use cases log directly through logfire:

    import logfire

    logfire.info("Identity linked", account_id=str(account.id), provider="google")

    with logfire.span("account_resolver.resolve", provider="google"):
        ...

Provider codes, state tokens and session cookies pass through request
attributes, so they are scrubbed before anything leaves the process.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from tether.config import Settings

SERVICE_NAME = "tether-api"
SERVICE_VERSION = "0.1.0"

# Attribute names scrubbed in addition to logfire's defaults
SCRUBBED_ATTRIBUTES = [
    "auth_token",
    "access_token",
    "client_secret",
    "code",
    "state",
]


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire.

    Cloud export follows ``observability.send_to_logfire`` when set and
    otherwise turns on whenever a token is configured.

    Args:
        settings: Application settings
    """
    observability = settings.observability
    send_to_logfire = observability.send_to_logfire
    if send_to_logfire is None:
        send_to_logfire = bool(observability.logfire_token)

    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=SERVICE_VERSION,
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=observability.logfire_token,
        scrubbing=logfire.ScrubbingOptions(extra_patterns=SCRUBBED_ATTRIBUTES),
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        enabled_providers=[p.value for p in settings.auth.enabled_providers],
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace HTTP requests, keeping only method and path as request attributes.

    Args:
        app: FastAPI application instance
    """

    def _request_attributes(request, attributes):
        # Query strings on the callback route carry the provider code and state
        result = {k: v for k, v in attributes.items() if k != "values"}
        if hasattr(request, "method"):
            result["method"] = request.method
        if hasattr(request, "url"):
            result["path"] = request.url.path
        return result

    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        request_attributes_mapper=_request_attributes,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace queries issued by the account and identity repositories.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)


def instrument_httpx() -> None:
    """Trace outbound token exchange and user-info requests."""
    logfire.instrument_httpx()
