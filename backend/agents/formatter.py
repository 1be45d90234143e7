"""
Raw result -> TrademarkRecord formatting.

Two strategies behind one interface, picked once by build_formatter():
  - DirectFormatter   → deterministic cleanup only (no API key configured)
  - AssistedFormatter → LLM parsing for long, unsplit mark text; any failure
                        falls back to the deterministic cleanup
Both are total: one output record per input record, in order.
"""
import asyncio
import logging
from abc import ABC, abstractmethod

from config import Settings
from llm.client import parse_trademark_text
from models import RawResult, TrademarkRecord
from rules.cleanup import clean, record_from_fields

logger = logging.getLogger(__name__)

# Marks longer than this are assumed to be concatenated, unparsed entry text
CONCATENATED_MARK_LENGTH = 50


class ResultFormatter(ABC):
    mode: str

    @abstractmethod
    async def format(self, raw_results: list[RawResult]) -> list[TrademarkRecord]:
        ...


class DirectFormatter(ResultFormatter):
    mode = "direct"

    async def format(self, raw_results: list[RawResult]) -> list[TrademarkRecord]:
        return [clean(raw) for raw in raw_results]


class AssistedFormatter(ResultFormatter):
    mode = "assisted"

    def __init__(self, parse=parse_trademark_text, concurrency: int = 4):
        self._parse = parse
        self.concurrency = max(1, concurrency)

    async def format(self, raw_results: list[RawResult]) -> list[TrademarkRecord]:
        semaphore = asyncio.Semaphore(self.concurrency)
        return list(await asyncio.gather(*(self._format_one(raw, semaphore) for raw in raw_results)))

    async def _format_one(self, raw: RawResult, semaphore: asyncio.Semaphore) -> TrademarkRecord:
        if raw.get("owner") and raw.get("application_number") and raw.get("country"):
            return clean(raw)

        mark = str(raw.get("mark") or "")
        if len(mark) <= CONCATENATED_MARK_LENGTH:
            return clean(raw)

        try:
            async with semaphore:
                fields = await self._parse(mark)
            return record_from_fields(fields, raw)
        except Exception as exc:
            logger.warning("Assisted formatting failed, using cleanup: %s: %s", type(exc).__name__, exc)
            return clean(raw)


def build_formatter(settings: Settings) -> ResultFormatter:
    if settings.anthropic_api_key:
        logger.debug("Using assisted formatter (%s)", settings.llm_model)
        return AssistedFormatter(concurrency=settings.llm_concurrency)
    logger.debug("No API key configured, using direct formatter")
    return DirectFormatter()
