"""
ALTCHA challenge handling for the WIPO Global Brand Database.

The widget solves a proof-of-work puzzle in the page itself; all we can do is
wait for it. Two separate bounds:
  - a short probe for the widget's existence (absence is not an error)
  - a long wait for its `solved` property (timing out is retryable)
"""
import logging

from playwright.async_api import TimeoutError as PWTimeout

from adapters.base import ChallengeResult

logger = logging.getLogger(__name__)

WIDGET_SELECTOR = "altcha-widget"
PROBE_TIMEOUT = 5_000
SOLVE_TIMEOUT = 30_000

_READ_SOLVED_JS = f"""() => {{
    const widget = document.querySelector('{WIDGET_SELECTOR}');
    return Boolean(widget && widget.solved);
}}"""

_WAIT_SOLVED_JS = f"""() => {{
    const widget = document.querySelector('{WIDGET_SELECTOR}');
    return Boolean(widget && widget.solved === true);
}}"""


class ChallengeSolver:
    def __init__(self, probe_timeout: int = PROBE_TIMEOUT, solve_timeout: int = SOLVE_TIMEOUT):
        self.probe_timeout = probe_timeout
        self.solve_timeout = solve_timeout

    async def solve(self, page) -> ChallengeResult:
        try:
            widget = await page.wait_for_selector(
                WIDGET_SELECTOR, state="attached", timeout=self.probe_timeout,
            )
        except PWTimeout:
            widget = None
        except Exception as exc:
            return ChallengeResult(False, f"Challenge probe failed: {type(exc).__name__}: {exc}")

        if widget is None:
            logger.info("No challenge widget on page")
            return ChallengeResult(True, "not required")

        logger.info("Challenge widget found, waiting for it to solve")
        try:
            await page.wait_for_timeout(2_000)
            solved = await page.evaluate(_READ_SOLVED_JS)
            if not solved:
                await page.wait_for_function(_WAIT_SOLVED_JS, timeout=self.solve_timeout)
            await page.wait_for_timeout(1_000)
        except PWTimeout:
            return ChallengeResult(
                False, f"Challenge not solved within {self.solve_timeout // 1000} seconds.",
            )
        except Exception as exc:
            return ChallengeResult(False, f"Challenge handling failed: {type(exc).__name__}: {exc}")

        return ChallengeResult(True, "solved")
