"""Provider verification policy.

Decides whether a provider assertion carries an email address that can be
trusted without a further confirmation step.
"""

from collections.abc import Callable, Iterable, Mapping

import logfire

from tether.domain.error import UnsupportedProviderError
from tether.domain.value import AuthProvider, OAuthAssertion

from .base import Service

VerificationPredicate = Callable[[OAuthAssertion], bool]


def _truthy(value: object) -> bool:
    # Some providers send JSON booleans, others the strings "true"/"false"
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def facebook_email_verified(assertion: OAuthAssertion) -> bool:
    """Facebook: the account is verified in either the info or raw section."""
    return _truthy(assertion.info.get("verified")) or _truthy(
        assertion.extra.get("verified")
    )


def google_email_verified(assertion: OAuthAssertion) -> bool:
    """Google: the raw user-info payload flags the email as verified."""
    return _truthy(assertion.extra.get("email_verified"))


DEFAULT_VERIFICATION_RULES: dict[AuthProvider, VerificationPredicate] = {
    AuthProvider.FACEBOOK: facebook_email_verified,
    AuthProvider.GOOGLE: google_email_verified,
}


class VerificationPolicy(Service):
    """Per-provider verification gate.

    Exactly one predicate is registered per provider. The mapping is fixed at
    construction; there is no fallback for unknown providers.
    """

    def __init__(
        self, rules: Mapping[AuthProvider, VerificationPredicate] | None = None
    ) -> None:
        """Initialize verification policy.

        Args:
            rules: Predicate per provider (defaults to DEFAULT_VERIFICATION_RULES)
        """
        self.rules = dict(DEFAULT_VERIFICATION_RULES if rules is None else rules)

    def ensure_complete(self, providers: Iterable[AuthProvider]) -> None:
        """Check every enabled provider has a predicate.

        Args:
            providers: Providers enabled in configuration

        Raises:
            UnsupportedProviderError: For the first provider without a rule
        """
        for provider in providers:
            if provider not in self.rules:
                logfire.error(
                    "Enabled provider has no verification rule",
                    provider=provider.value,
                )
                raise UnsupportedProviderError(provider.value)

    def verified(self, assertion: OAuthAssertion) -> bool:
        """Decide whether the assertion's email is verified by its provider.

        Assertions without an email are never verified.

        Args:
            assertion: Provider assertion

        Returns:
            True if the provider vouches for the email

        Raises:
            UnsupportedProviderError: If no rule exists for the provider
        """
        predicate = self.rules.get(assertion.provider)
        if predicate is None:
            raise UnsupportedProviderError(assertion.provider.value)

        result = assertion.email is not None and predicate(assertion)
        logfire.info(
            "Assertion verification checked",
            provider=assertion.provider.value,
            verified=result,
        )
        return result
