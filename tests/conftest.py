"""Shared fixtures and Playwright page fakes."""
import os
import tempfile

# Must be set before config.settings is created on first import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(), "test.db")
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["SCREENSHOT_DIR"] = ""
os.environ["FETCH_DETAILS"] = "false"

import pytest  # noqa: E402
from playwright.async_api import TimeoutError as PWTimeout  # noqa: E402


class FakeLocator:
    def __init__(self, page, selector: str):
        self.page = page
        self.selector = selector

    @property
    def first(self):
        return self

    async def count(self) -> int:
        return 1 if self.selector in self.page.present else 0

    async def fill(self, value: str) -> None:
        self.page.filled[self.selector] = value

    async def click(self, timeout: int | None = None) -> None:
        if self.selector not in self.page.present:
            raise PWTimeout(f"Timeout {timeout}ms exceeded waiting for {self.selector}")
        self.page.clicked.append(self.selector)

    async def wait_for(self, timeout: int | None = None) -> None:
        if self.selector not in self.page.present:
            raise PWTimeout(f"Timeout {timeout}ms exceeded waiting for {self.selector}")


class FakeKeyboard:
    def __init__(self):
        self.pressed = []

    async def press(self, key: str) -> None:
        self.pressed.append(key)


class FakePage:
    """Just enough of playwright.async_api.Page for the adapters."""

    def __init__(self, present=(), evaluate_results=(), url_changes=False, solved_in_time=True):
        self.present = set(present)
        self.evaluate_results = list(evaluate_results)
        self.url_changes = url_changes
        self.solved_in_time = solved_in_time
        self.keyboard = FakeKeyboard()
        self.filled = {}
        self.clicked = []
        self.visited = []
        self.waits = []
        self.evaluated = []
        self.waited_for_function = False

    async def goto(self, url, wait_until=None, timeout=None):
        self.visited.append(url)

    async def wait_for_timeout(self, ms):
        self.waits.append(ms)

    async def wait_for_selector(self, selector, state=None, timeout=None):
        if selector not in self.present:
            raise PWTimeout(f"Timeout {timeout}ms exceeded waiting for {selector}")
        return object()

    async def wait_for_function(self, script, timeout=None):
        self.waited_for_function = True
        if not self.solved_in_time:
            raise PWTimeout(f"Timeout {timeout}ms exceeded")

    async def wait_for_url(self, pattern, timeout=None):
        if not self.url_changes:
            raise PWTimeout(f"Timeout {timeout}ms exceeded waiting for {pattern}")

    async def evaluate(self, script, arg=None):
        self.evaluated.append(script)
        if not self.evaluate_results:
            return None
        result = self.evaluate_results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def locator(self, selector):
        return FakeLocator(self, selector)


@pytest.fixture
def fake_page():
    return FakePage


NIKE_LINES = [
    "NIKE",
    "Owner",
    "Nike, Inc.",
    "Nice class",
    "25, 35",
    "Country of filing",
    "US",
    "Status",
    "Registered (2020-01-15)",
    "Number",
    "1234567",
]


@pytest.fixture
def nike_block():
    return {
        "text": "\n".join(NIKE_LINES),
        "link_text": "",
        "link_href": "",
        "image_url": "",
    }
