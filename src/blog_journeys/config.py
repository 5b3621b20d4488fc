"""Shared configuration for the blog UI journeys.

Values come from environment variables first, then from the repository's
``.env.defaults`` file, then from the hard-coded defaults below:

- UI_BASE_URL: root of the application under test
- PLAYWRIGHT_HEADLESS / PLAYWRIGHT_BROWSER: browser launch options
- UI_ACTION_TIMEOUT_MS: default Playwright action/navigation timeout
- UI_ASSERT_TIMEOUT: polling window (seconds) for UI assertions
- UI_IDENTITY_PREFIX / UI_EMAIL_DOMAIN: generated test identities
- UI_LOG_LEVEL: level for the ``blog_journeys`` logger
- SCREENSHOT_DIR: when set, failing journeys leave a screenshot here
- UI_REQUIRE_APP: fail (instead of skip) when the application is unreachable
"""
from __future__ import annotations

import os
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterator, Optional
from urllib.parse import urljoin

REPO_ROOT = Path(__file__).resolve().parents[2]

_TRUE_VALUES = {"1", "true", "yes", "on"}


@lru_cache(maxsize=1)
def _load_env_defaults() -> Dict[str, str]:
    env_defaults = REPO_ROOT / ".env.defaults"
    if not env_defaults.exists():
        return {}

    defaults: Dict[str, str] = {}
    for raw in env_defaults.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] in ('"', "'") and value[-1] == value[0]:
            value = value[1:-1]
        defaults[key.strip()] = value
    return defaults


def get_env_default(key: str) -> str | None:
    return _load_env_defaults().get(key)


def _setting(key: str, fallback: str) -> str:
    value = os.getenv(key)
    if value:
        return value
    return get_env_default(key) or fallback


def _flag(key: str, fallback: bool) -> bool:
    return _setting(key, "true" if fallback else "false").strip().lower() in _TRUE_VALUES


@dataclass
class UiTarget:
    """Where the application under test lives and how identities are minted there."""

    base_url: str
    identity_prefix: str = "usertest"
    email_domain: str = "example.com"


class UiTestConfig:
    """Configuration for one pytest process.

    The active target can be swapped temporarily with ``use_base_url`` so a
    single run can point a suite at another deployment.
    """

    def __init__(self) -> None:
        self.playwright_headless: bool = _flag("PLAYWRIGHT_HEADLESS", True)
        self.browser_type: str = _setting("PLAYWRIGHT_BROWSER", "chromium")
        self.action_timeout_ms: int = int(_setting("UI_ACTION_TIMEOUT_MS", "30000"))
        self.assert_timeout: float = float(_setting("UI_ASSERT_TIMEOUT", "5.0"))
        self.poll_interval: float = float(_setting("UI_POLL_INTERVAL", "0.1"))
        self.log_level: str = _setting("UI_LOG_LEVEL", "INFO").upper()
        self.require_app: bool = _flag("UI_REQUIRE_APP", False)

        screenshot_dir = _setting("SCREENSHOT_DIR", "")
        self.screenshot_dir: Optional[Path] = Path(screenshot_dir) if screenshot_dir else None

        self._active = UiTarget(
            base_url=_setting("UI_BASE_URL", "http://localhost:3000"),
            identity_prefix=_setting("UI_IDENTITY_PREFIX", "usertest"),
            email_domain=_setting("UI_EMAIL_DOMAIN", "example.com"),
        )

    # ---- active target helpers ---------------------------------------------------
    @property
    def base_url(self) -> str:
        return self._active.base_url

    @property
    def identity_prefix(self) -> str:
        return self._active.identity_prefix

    @property
    def email_domain(self) -> str:
        return self._active.email_domain

    @contextmanager
    def use_base_url(self, base_url: str) -> Iterator[UiTarget]:
        """Temporarily point every ``url()`` call at another deployment."""
        previous = self._active
        self._active = UiTarget(
            base_url=base_url,
            identity_prefix=previous.identity_prefix,
            email_domain=previous.email_domain,
        )
        try:
            yield self._active
        finally:
            self._active = previous

    # ---- utility helpers --------------------------------------------------------
    def url(self, path: str = "") -> str:
        """Return an absolute URL for the provided path."""
        if path.startswith(("http://", "https://")):
            return path
        return urljoin(self.base_url.rstrip("/") + "/", path.lstrip("/"))


# Singleton instance - initialized on first import
settings = UiTestConfig()
