"""Thin wrapper around a Playwright page for the journey workflows."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from playwright.async_api import Locator, Page

logger = logging.getLogger(__name__)

# Reads inside an assertion's polling loop must give up quickly so the loop
# can observe again instead of waiting out Playwright's full action timeout.
READ_TIMEOUT_MS = 1000


@dataclass
class ToolError(Exception):
    """Raised when a browser operation fails."""

    name: str
    payload: Dict[str, Any]
    message: str

    def __str__(self) -> str:  # pragma: no cover - human readable helper
        return f"{self.name} failed ({self.message}) with payload={self.payload}"


@dataclass(frozen=True)
class Target:
    """How to find one element on the page.

    ``kind`` is one of ``css`` (CSS or ``//xpath``), ``role``, ``placeholder``
    or ``text``. ``within`` scopes the lookup to another target.
    """

    kind: str
    value: str
    name: Optional[str] = None
    within: Optional["Target"] = field(default=None, repr=False)

    @classmethod
    def css(cls, selector: str, within: Optional["Target"] = None) -> "Target":
        return cls("css", selector, within=within)

    @classmethod
    def role(cls, role: str, name: Optional[str] = None, within: Optional["Target"] = None) -> "Target":
        return cls("role", role, name=name, within=within)

    @classmethod
    def placeholder(cls, text: str) -> "Target":
        return cls("placeholder", text)

    @classmethod
    def text(cls, text: str) -> "Target":
        return cls("text", text)

    def describe(self) -> str:
        label = f"{self.kind}={self.value}"
        if self.name:
            label += f"[name={self.name!r}]"
        if self.within is not None:
            label = f"{self.within.describe()} >> {label}"
        return label


class Browser:
    """Convenience wrapper over one Playwright page.

    Every action either completes or raises ``ToolError``; no action is
    retried here.
    """

    def __init__(self, page: Page) -> None:
        self._page = page

    @property
    def page(self) -> Page:
        return self._page

    @property
    def current_url(self) -> str:
        """Live URL of the page (never cached)."""
        return self._page.url

    def locator(self, target: Target) -> Locator:
        scope: Any = self._page if target.within is None else self.locator(target.within)
        if target.kind == "css":
            return scope.locator(target.value)
        if target.kind == "role":
            if target.name is None:
                return scope.get_by_role(target.value)
            return scope.get_by_role(target.value, name=target.name)
        if target.kind == "placeholder":
            return scope.get_by_placeholder(target.value)
        if target.kind == "text":
            return scope.get_by_text(target.value)
        raise ValueError(f"Unknown target kind: {target.kind}")

    async def goto(self, url: str, wait_until: str = "domcontentloaded") -> Dict[str, Any]:
        """Navigate to URL and return the response status."""
        try:
            response = await self._page.goto(url, wait_until=wait_until)
        except Exception as exc:
            raise ToolError(name="goto", payload={"url": url, "wait_until": wait_until}, message=str(exc)) from exc
        logger.debug("goto %s -> %s", url, self.current_url)
        return {"url": self.current_url, "status": response.status if response else None}

    async def fill(self, target: Target, value: str) -> Dict[str, Any]:
        """Fill input field."""
        try:
            await self.locator(target).fill(value)
        except Exception as exc:
            raise ToolError(name="fill", payload={"target": target.describe(), "value": value}, message=str(exc)) from exc
        return {"target": target.describe(), "value": value}

    async def click(self, target: Target) -> Dict[str, Any]:
        """Click element."""
        try:
            await self.locator(target).click()
        except Exception as exc:
            raise ToolError(name="click", payload={"target": target.describe()}, message=str(exc)) from exc
        return {"target": target.describe(), "url": self.current_url}

    async def set_input_files(self, target: Target, path: str | Path) -> Dict[str, Any]:
        """Attach a local file to a file input."""
        try:
            await self.locator(target).set_input_files(str(path))
        except Exception as exc:
            raise ToolError(name="set_input_files", payload={"target": target.describe(), "path": str(path)}, message=str(exc)) from exc
        return {"target": target.describe(), "path": str(path)}

    async def text(self, target: Target, timeout: int = READ_TIMEOUT_MS) -> str:
        """Get text content of element."""
        try:
            text = await self.locator(target).text_content(timeout=timeout)
        except Exception as exc:
            raise ToolError(name="text", payload={"target": target.describe()}, message=str(exc)) from exc
        return text or ""

    async def is_visible(self, target: Target) -> bool:
        try:
            return await self.locator(target).is_visible()
        except Exception as exc:
            raise ToolError(name="is_visible", payload={"target": target.describe()}, message=str(exc)) from exc

    async def get_attribute(self, target: Target, attribute: str, timeout: int = READ_TIMEOUT_MS) -> Optional[str]:
        """Get attribute value of element (``None`` when the attribute is absent)."""
        try:
            return await self.locator(target).get_attribute(attribute, timeout=timeout)
        except Exception as exc:
            raise ToolError(name="get_attribute", payload={"target": target.describe(), "attribute": attribute}, message=str(exc)) from exc

    async def wait_for_load_state(self, state: str = "domcontentloaded") -> None:
        try:
            await self._page.wait_for_load_state(state)
        except Exception as exc:
            raise ToolError(name="wait_for_load_state", payload={"state": state}, message=str(exc)) from exc

    async def screenshot(self, path: str | Path) -> Path:
        """Save a full-page PNG screenshot."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            await self._page.screenshot(path=str(path), type="png", full_page=True)
        except Exception as exc:
            raise ToolError(name="screenshot", payload={"path": str(path)}, message=str(exc)) from exc
        return path
