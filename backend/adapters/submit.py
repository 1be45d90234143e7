"""
WIPO Global Brand Database search form.
URL: https://branddb.wipo.int/branddb/en/

The landing page is an SPA; the brand name box is the first text input. After
submission the app either routes to a `similarname` URL or renders a
"Displaying X-Y of Z results" banner. Neither marker is guaranteed, so both
waits are best effort and the step ends with a fixed settle delay.
"""
import logging

from playwright.async_api import TimeoutError as PWTimeout

from adapters.base import SubmitResult
from adapters.challenge import ChallengeSolver
from config import RESULTS_URL_PATTERN, WIPO_BASE_URL

logger = logging.getLogger(__name__)

SEARCH_INPUT = "input[type='text']"
SEARCH_BUTTON = "button:has-text('Search')"
RESULTS_MARKER = "text=Displaying"
MARKER_TIMEOUT = 10_000


class SearchSubmitter:
    def __init__(
        self,
        solver: ChallengeSolver | None = None,
        base_url: str = WIPO_BASE_URL,
        navigation_timeout: int = 30_000,
    ):
        self.solver = solver or ChallengeSolver()
        self.base_url = base_url
        self.navigation_timeout = navigation_timeout

    async def submit(self, page, query: str) -> SubmitResult:
        try:
            await page.goto(self.base_url, wait_until="networkidle", timeout=self.navigation_timeout)

            # A fresh challenge can show up after navigation
            challenge = await self.solver.solve(page)
            if not challenge.solved:
                logger.warning("Challenge after navigation: %s", challenge.detail)

            search_input = page.locator(SEARCH_INPUT).first
            if await search_input.count() == 0:
                return SubmitResult(False, "Search input not found. WIPO page structure may have changed.")

            logger.info("Filling search input with query: %s", query)
            await search_input.fill(query)

            try:
                await page.locator(SEARCH_BUTTON).first.click(timeout=2_000)
                logger.debug("Clicked Search button")
            except Exception:
                logger.debug("Search button not clickable, pressing Enter")
                await page.keyboard.press("Enter")

            try:
                await page.wait_for_url(RESULTS_URL_PATTERN, timeout=MARKER_TIMEOUT)
                logger.debug("Navigated to results page")
            except PWTimeout:
                logger.info("URL change to results view not detected, continuing")

            try:
                await page.locator(RESULTS_MARKER).first.wait_for(timeout=MARKER_TIMEOUT)
                logger.debug("Results banner rendered")
            except PWTimeout:
                logger.info("Results count text not found, continuing")

            await page.wait_for_timeout(3_000)
        except Exception as exc:
            return SubmitResult(False, f"Search failed: {type(exc).__name__}: {exc}")

        return SubmitResult(True, "Search submitted and results loaded")
