"""Suite-scoped state shared by the ordered tests of one suite.

A slot is written by exactly one producing step (a setup hook or a test) and
read by later tests of the same suite. Reading a slot nobody wrote raises
``SuiteStateError`` instead of handing ``None`` to a browser action.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar
from urllib.parse import urlparse

from blog_journeys.browser import Browser
from blog_journeys.errors import SuiteStateError
from blog_journeys.identity import SessionArtifact
from blog_journeys.ui_contract import POST_PATTERN

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET = object()


@dataclass(frozen=True)
class ResourceAddress:
    """Navigable URL of a resource created during the suite."""

    url: str

    @classmethod
    def capture(cls, browser: Browser) -> "ResourceAddress":
        """Record where the page is right now."""
        return cls(browser.current_url)

    @property
    def path(self) -> str:
        return urlparse(self.url).path

    @property
    def post_id(self) -> int:
        match = re.fullmatch(POST_PATTERN, self.path.rstrip("/"))
        if not match:
            raise ValueError(f"{self.url} is not a post address")
        return int(match.group(1))

    @property
    def comment_id(self) -> int:
        """Comment anchor (``#<id>``) the app appends after creating or editing a comment."""
        fragment = urlparse(self.url).fragment
        if not fragment.isdigit():
            raise ValueError(f"{self.url} does not point at a comment")
        return int(fragment)


class Slot(Generic[T]):
    """One named value in the suite state."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._value: object = _UNSET

    @property
    def is_set(self) -> bool:
        return self._value is not _UNSET

    def set(self, value: T) -> T:
        if value is None:
            raise SuiteStateError(self.name, f"Refusing to store None in suite state slot '{self.name}'")
        if self.is_set:
            logger.debug("Replacing suite state slot %s", self.name)
        self._value = value
        return value

    def get(self) -> T:
        if not self.is_set:
            raise SuiteStateError(self.name)
        return self._value  # type: ignore[return-value]

    def peek(self) -> Optional[T]:
        return None if not self.is_set else self._value  # type: ignore[return-value]

    def clear(self) -> None:
        self._value = _UNSET

    def __repr__(self) -> str:
        state = repr(self._value) if self.is_set else "<unset>"
        return f"Slot({self.name}={state})"


class SuiteState:
    """All slots of one suite run.

    ``current_user`` holds the credentials of the account the suite works as;
    ``created_post`` and ``created_comment`` hold the addresses of the post and
    comment a test created.
    """

    def __init__(self, suite: str = "") -> None:
        self.suite = suite
        self.current_user: Slot[SessionArtifact] = Slot("current_user")
        self.created_post: Slot[ResourceAddress] = Slot("created_post")
        self.created_comment: Slot[ResourceAddress] = Slot("created_comment")

    def slots(self) -> list[Slot]:
        return [self.current_user, self.created_post, self.created_comment]

    def reset(self) -> None:
        for slot in self.slots():
            slot.clear()

    def __repr__(self) -> str:
        return f"SuiteState({self.suite!r}, {self.slots()!r})"
