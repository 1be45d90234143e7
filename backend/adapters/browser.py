"""
Browser session lifecycle.

One Playwright instance, one Chromium browser, one context and one page per
search. The handle is owned by a single workflow run and closed on every exit
path; a leaked handle leaves a Chromium process behind.
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

from playwright.async_api import async_playwright

from config import Settings

logger = logging.getLogger(__name__)

LAUNCH_ARGS = ["--disable-blink-features=AutomationControlled"]


class SessionSetupError(Exception):
    """Browser, context or page could not be created."""


@dataclass
class SessionHandle:
    playwright: Any
    browser: Any
    context: Any
    page: Any
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    closed: bool = False


class BrowserSession:
    def __init__(self, settings: Settings):
        self.settings = settings

    async def open(self) -> SessionHandle:
        pw = browser = None
        try:
            pw = await async_playwright().start()
            browser = await pw.chromium.launch(
                headless=self.settings.headless,
                args=LAUNCH_ARGS,
            )
            context = await browser.new_context(
                user_agent=self.settings.user_agent,
                viewport={
                    "width": self.settings.viewport_width,
                    "height": self.settings.viewport_height,
                },
            )
            context.set_default_timeout(self.settings.browser_timeout)
            page = await context.new_page()
        except Exception as exc:
            # Release whatever did start before reporting the fault
            if browser is not None:
                await _quietly(browser.close())
            if pw is not None:
                await _quietly(pw.stop())
            raise SessionSetupError(f"{type(exc).__name__}: {exc}") from exc

        handle = SessionHandle(playwright=pw, browser=browser, context=context, page=page)
        logger.debug("Opened browser session %s", handle.session_id)
        return handle

    async def close(self, handle: SessionHandle | None) -> None:
        """Release the browser. Safe to call on an already-closed handle."""
        if handle is None or handle.closed:
            return
        handle.closed = True
        try:
            await handle.browser.close()
        except Exception as exc:
            logger.warning("Closing browser %s failed: %s", handle.session_id, exc)
        try:
            await handle.playwright.stop()
        except Exception as exc:
            logger.warning("Stopping playwright %s failed: %s", handle.session_id, exc)
        logger.debug("Closed browser session %s", handle.session_id)

    async def screenshot(self, handle: SessionHandle | None, path: str) -> bool:
        if handle is None or handle.closed:
            return False
        try:
            await handle.page.screenshot(path=path, full_page=True)
        except Exception as exc:
            logger.warning("Screenshot to %s failed: %s", path, exc)
            return False
        logger.info("Saved screenshot to %s", path)
        return True


async def _quietly(awaitable) -> None:
    try:
        await awaitable
    except Exception as exc:
        logger.debug("Cleanup after failed setup raised: %s", exc)
