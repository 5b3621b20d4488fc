"""Generated test identities.

Every account a journey registers gets a throwaway identity whose email and
password are derived from its full name:

    full_name = "usertest" + 12 random hex chars
    email     = f"{full_name}@example.com"
    password  = f"{full_name}-password"

There are two call patterns. ``generate_identity`` mints a fresh
identity on every call; ``cached_identity`` mints one on first use and returns
that same identity for the rest of the process, which is what a suite needs
when one test registers the account and a later test logs in with it.
"""
from __future__ import annotations

import secrets
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from blog_journeys.config import settings

PASSWORD_SUFFIX = "-password"
TOKEN_BYTES = 6


@dataclass(frozen=True)
class SessionArtifact:
    """Credentials that are enough to log an account back in."""

    email: str
    password: str
    full_name: Optional[str] = None

    def with_password(self, password: str) -> "SessionArtifact":
        """Return the credentials as they are after a password change."""
        return SessionArtifact(email=self.email, password=password, full_name=self.full_name)


@dataclass(frozen=True)
class TestIdentity:
    """Name, email and password of one generated account."""

    __test__ = False  # not a pytest test class

    full_name: str
    email: str
    password: str

    @classmethod
    def derive(cls, full_name: str, domain: Optional[str] = None) -> "TestIdentity":
        domain = domain or settings.email_domain
        return cls(
            full_name=full_name,
            email=f"{full_name}@{domain}",
            password=f"{full_name}{PASSWORD_SUFFIX}",
        )

    def session_artifact(self) -> SessionArtifact:
        return SessionArtifact(email=self.email, password=self.password, full_name=self.full_name)


def new_full_name(prefix: Optional[str] = None) -> str:
    prefix = settings.identity_prefix if prefix is None else prefix
    return f"{prefix}{secrets.token_hex(TOKEN_BYTES)}"


def generate_identity(prefix: Optional[str] = None, domain: Optional[str] = None) -> TestIdentity:
    """Mint a fresh identity; never returns the same one twice in practice."""
    return TestIdentity.derive(new_full_name(prefix), domain)


@lru_cache(maxsize=1)
def cached_identity() -> TestIdentity:
    """Return the identity shared by every caller in this process."""
    return generate_identity()


def reset_cached_identity() -> None:
    cached_identity.cache_clear()
