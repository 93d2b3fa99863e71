"""Dependency injection container."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from tether.util.di import select_providers


def create_container() -> AsyncContainer:
    """Build the production container.

    Settings are loaded from environment variables when first requested.

    Returns:
        Container with production providers and the FastAPI integration
    """
    return make_async_container(*select_providers(), FastapiProvider())


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach the container to the app for ``FromDishka`` injection.

    Args:
        app: FastAPI application
        container: DI container
    """
    setup_dishka(container, app)
