"""
Search orchestrator.
Runs one WIPO search as an explicit state machine:

    initialize → authenticate → search → extract_results → format_results → complete
                      └────────────┴──────────┴──→ error → initialize (retry) | failed

Each handler takes a WorkflowState and returns a new one. The orchestrator is
the only place that moves to error and decides whether to retry:
authenticate and search failures are retryable, extraction and session setup
failures are not.
"""
import logging
import time
from dataclasses import replace
from pathlib import Path

from adapters.base import ResultExtractor
from adapters.browser import BrowserSession, SessionSetupError
from adapters.challenge import ChallengeSolver
from adapters.details import enrich_with_details
from adapters.extract import WipoResultExtractor
from adapters.submit import SearchSubmitter
from agents.formatter import ResultFormatter, build_formatter
from agents.state import WorkflowState, WorkflowStep
from config import Settings, settings as default_settings
from models import SearchOutcome, SearchParameters
from rules.filters import apply_filters

logger = logging.getLogger(__name__)


class SearchWorkflow:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        sessions: BrowserSession | None = None,
        solver: ChallengeSolver | None = None,
        submitter: SearchSubmitter | None = None,
        extractor: ResultExtractor | None = None,
        formatter: ResultFormatter | None = None,
        fetch_details: bool | None = None,
    ):
        self.settings = settings or default_settings
        self.sessions = sessions or BrowserSession(self.settings)
        self.solver = solver or ChallengeSolver()
        self.submitter = submitter or SearchSubmitter(
            self.solver, navigation_timeout=self.settings.browser_timeout,
        )
        self.extractor = extractor or WipoResultExtractor()
        self.formatter = formatter or build_formatter(self.settings)
        self.fetch_details = self.settings.fetch_details if fetch_details is None else fetch_details

        self._handlers = {
            WorkflowStep.INITIALIZE: self._initialize,
            WorkflowStep.AUTHENTICATE: self._authenticate,
            WorkflowStep.SEARCH: self._search,
            WorkflowStep.EXTRACT_RESULTS: self._extract_results,
            WorkflowStep.FORMAT_RESULTS: self._format_results,
            WorkflowStep.ERROR: self._error,
        }

    async def run(self, params: SearchParameters) -> SearchOutcome | None:
        """Run a search to completion. Returns None when the search failed."""
        state = WorkflowState(params=params)
        logger.info("Starting search for %r (%s, limit %d)", params.query, params.search_type, params.limit)

        try:
            while not state.done:
                state = await self.step(state)
        except Exception:
            logger.exception("Search workflow crashed at step %s", state.step.value)
            return None
        finally:
            await self.sessions.close(state.session)

        if state.outcome is None:
            message = state.error.message if state.error else "unknown error"
            logger.error("Search failed after %d attempt(s): %s", state.retry_count + 1, message)
            return None

        logger.info(
            "Search completed: %d of %d result(s) in %.0f ms",
            len(state.outcome.results), state.outcome.total_results, state.outcome.search_time,
        )
        return state.outcome

    async def step(self, state: WorkflowState) -> WorkflowState:
        """Execute exactly one unit of work and return the next state."""
        handler = self._handlers.get(state.step)
        if handler is None:
            raise ValueError(f"No handler for terminal step {state.step.value}")
        logger.debug("Step %s (attempt %d)", state.step.value, state.retry_count + 1)
        return await handler(state)

    # ------------------------------------------------------------------
    # Step handlers
    # ------------------------------------------------------------------

    async def _initialize(self, state: WorkflowState) -> WorkflowState:
        try:
            handle = await self.sessions.open()
        except SessionSetupError as exc:
            return state.fail(f"Browser session could not be created: {exc}", retryable=False)
        return state.advance(WorkflowStep.AUTHENTICATE, session=handle, error=None)

    async def _authenticate(self, state: WorkflowState) -> WorkflowState:
        result = await self.solver.solve(state.session.page)
        if not result.solved:
            return state.fail(result.detail or "Authentication failed", retryable=True)
        logger.info("Challenge: %s", result.detail)
        return state.advance(WorkflowStep.SEARCH)

    async def _search(self, state: WorkflowState) -> WorkflowState:
        result = await self.submitter.submit(state.session.page, state.params.query)
        if not result.success:
            return state.fail(result.detail or "Search failed", retryable=True)
        return state.advance(WorkflowStep.EXTRACT_RESULTS)

    async def _extract_results(self, state: WorkflowState) -> WorkflowState:
        result = await self.extractor.extract(state.session.page)
        if not result.success:
            return state.fail(result.detail or "Failed to extract results", retryable=False)

        raw_results = result.results
        if self.fetch_details and raw_results:
            raw_results = await enrich_with_details(
                state.session.page, raw_results, state.params.limit, timeout=self.settings.browser_timeout,
            )
        return state.advance(WorkflowStep.FORMAT_RESULTS, raw_results=tuple(raw_results))

    async def _format_results(self, state: WorkflowState) -> WorkflowState:
        try:
            records = await self.formatter.format(list(state.raw_results))
            records = apply_filters(records, state.params)
        finally:
            await self.sessions.close(state.session)

        outcome = SearchOutcome(
            query=state.params.query,
            total_results=len(records),
            page=1,
            results=records[: state.params.limit],
            search_time=round((time.monotonic() - state.started_at) * 1000, 1),
        )
        return state.advance(WorkflowStep.COMPLETE, outcome=outcome, session=None)

    async def _error(self, state: WorkflowState) -> WorkflowState:
        error = state.error
        failed_step = error.step.value if error and error.step else "unknown"
        logger.warning("Step %s failed: %s", failed_step, error.message if error else "")

        if self.settings.screenshot_dir and state.session is not None:
            folder = Path(self.settings.screenshot_dir)
            folder.mkdir(parents=True, exist_ok=True)
            name = f"{failed_step}-{state.session.session_id}-attempt{state.retry_count + 1}.png"
            await self.sessions.screenshot(state.session, str(folder / name))

        await self.sessions.close(state.session)
        state = replace(state, session=None)

        if error and error.retryable and state.retry_count + 1 < self.settings.retry_attempts:
            logger.info("Retrying search (attempt %d of %d)", state.retry_count + 2, self.settings.retry_attempts)
            return state.advance(
                WorkflowStep.INITIALIZE, retry_count=state.retry_count + 1, error=None, raw_results=(),
            )
        return state.advance(WorkflowStep.FAILED)
