"""Credential helpers for accounts that sign in only through a provider."""

import hashlib
import secrets

# Marks a credential hash that can never match a password
UNUSABLE_PREFIX = "!"


def generate_unusable_credential() -> str:
    """Generate a random credential hash no password can verify against.

    Returns:
        Unusable credential hash
    """
    digest = hashlib.sha256(secrets.token_bytes(32)).hexdigest()
    return f"{UNUSABLE_PREFIX}{digest}"


def is_usable_credential(credential_hash: str) -> bool:
    """Check whether a credential hash can be used for password login."""
    return not credential_hash.startswith(UNUSABLE_PREFIX)
