"""Fixtures for the engine tests; no browser or running application needed."""
from typing import Callable, Dict, List, Set, Tuple, Union

import pytest

from blog_journeys.browser import Target, ToolError
from blog_journeys.config import settings
from blog_journeys.identity import reset_cached_identity

Scripted = Union[str, List[str], None]


class FakeBrowser:
    """Stands in for ``blog_journeys.browser.Browser``.

    Reads return scripted values; a list is consumed one value per read and
    its last value repeats. Every action is appended to ``actions``.
    """

    def __init__(self, url: str = "") -> None:
        self.current_url = url or settings.url("/")
        self.actions: List[Tuple] = []
        self.texts: Dict[Target, Scripted] = {}
        self.visible: Dict[Target, Union[bool, List[bool]]] = {}
        self.attributes: Dict[Tuple[Target, str], Scripted] = {}
        self.unavailable: Set[Target] = set()
        self.on_click: Dict[Target, Callable[["FakeBrowser"], None]] = {}

    @staticmethod
    def _next(script):
        if isinstance(script, list):
            return script.pop(0) if len(script) > 1 else script[0]
        return script

    def _require(self, name: str, target: Target) -> None:
        if target in self.unavailable:
            raise ToolError(name=name, payload={"target": target.describe()}, message="element not found")

    async def goto(self, url: str, wait_until: str = "domcontentloaded"):
        self.actions.append(("goto", url))
        self.current_url = url
        return {"url": url, "status": 200}

    async def click(self, target: Target):
        self._require("click", target)
        self.actions.append(("click", target))
        callback = self.on_click.get(target)
        if callback is not None:
            callback(self)
        return {"target": target.describe(), "url": self.current_url}

    async def fill(self, target: Target, value: str):
        self._require("fill", target)
        self.actions.append(("fill", target, value))
        return {"target": target.describe(), "value": value}

    async def set_input_files(self, target: Target, path):
        self.actions.append(("set_input_files", target, str(path)))
        return {"target": target.describe(), "path": str(path)}

    async def wait_for_load_state(self, state: str = "domcontentloaded") -> None:
        self.actions.append(("wait_for_load_state", state))

    async def text(self, target: Target, timeout: int = 1000) -> str:
        self._require("text", target)
        return self._next(self.texts.get(target, "")) or ""

    async def is_visible(self, target: Target) -> bool:
        self._require("is_visible", target)
        return bool(self._next(self.visible.get(target, False)))

    async def get_attribute(self, target: Target, attribute: str, timeout: int = 1000):
        self._require("get_attribute", target)
        return self._next(self.attributes.get((target, attribute)))

    def filled(self) -> Dict[Target, str]:
        return {action[1]: action[2] for action in self.actions if action[0] == "fill"}

    def clicked(self) -> List[Target]:
        return [action[1] for action in self.actions if action[0] == "click"]


@pytest.fixture
def fake_browser() -> FakeBrowser:
    return FakeBrowser()


@pytest.fixture(autouse=True)
def fast_assertions(monkeypatch):
    """Short polling windows so failing expectations resolve quickly."""
    monkeypatch.setattr(settings, "assert_timeout", 0.3)
    monkeypatch.setattr(settings, "poll_interval", 0.01)


@pytest.fixture(autouse=True)
def fresh_cached_identity():
    reset_cached_identity()
    yield
    reset_cached_identity()
