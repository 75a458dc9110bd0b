"""Capability checks for privileged operations.

An operation that "requires authority X" asks the verifier whether the
caller has proven control over identity X. The host platform decides what
proof means (a transaction signature, an authenticated session); the
default verifier trusts the host to have authenticated the caller and
compares identities.
"""

from __future__ import annotations

from typing import Protocol

import structlog

from launchpad.errors import Unauthorized

logger = structlog.get_logger()


class AuthorityVerifier(Protocol):
    """Answers whether caller has proven control over required."""

    def verify(self, caller: str, required: str) -> bool: ...


class IdentityVerifier:
    """Caller identities arrive pre-authenticated; authority is equality."""

    def verify(self, caller: str, required: str) -> bool:
        return bool(caller) and caller == required


def require_authority(
    caller: str,
    required: str,
    operation: str,
    verifier: AuthorityVerifier | None = None,
) -> None:
    """Raise unless caller controls the required identity.

    Raises:
        Unauthorized: If the verifier rejects the caller
    """
    verifier = verifier or DEFAULT_VERIFIER
    if not verifier.verify(caller, required):
        logger.warning("authority_check_failed", operation=operation, caller=caller[:12])
        raise Unauthorized(f"{operation} requires the config authority")


DEFAULT_VERIFIER = IdentityVerifier()
