"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class UnsupportedProviderError(DomainError):
    """Raised when a provider has no registered verification rule.

    This is a configuration defect, not something the end user can fix.
    """

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"No verification rule registered for provider: {provider}")


class DuplicateIdentityError(DomainError):
    """Raised when (provider, uid) is already linked to an account."""

    def __init__(self, provider: str, uid: str):
        self.provider = provider
        self.uid = uid
        super().__init__(f"Identity already exists for {provider}:{uid}")


class DuplicateAccountError(DomainError):
    """Raised when an account with the same email already exists."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Account already exists for email: {email}")


class AuthenticationDenied(DomainError):
    """Base for user-facing authentication denials.

    Only the provider name and a stable message key are exposed to the
    caller; internal identifiers never appear in the message.
    """

    message_key: str = "denied"

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"{provider}: {self.message_key}")


class VerificationRejected(AuthenticationDenied):
    """Raised when a provider assertion does not carry a verified email."""

    message_key = "unverified_email"


class AlreadyLinkedElsewhere(AuthenticationDenied):
    """Raised when a provider identity belongs to another confirmed account.

    The user is directed to resolve the conflict from account settings.
    """

    message_key = "already_linked"
