"""Authentication use cases."""

from .get_current_account import GetCurrentAccountUseCase
from .oauth_callback import OAuthCallbackUseCase
from .orchestrator import OAuthFlow, OAuthFlowState, OAuthOrchestrator

__all__ = [
    "GetCurrentAccountUseCase",
    "OAuthCallbackUseCase",
    "OAuthFlow",
    "OAuthFlowState",
    "OAuthOrchestrator",
]
