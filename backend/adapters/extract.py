"""
WIPO results page extraction.

Result entries have no stable class names. Each one carries a selection
checkbox, and its visible text is a run of label/value lines:

    NIKE
    Owner
    Nike, Inc.
    Nice class
    25, 35
    Country of filing
    US
    Status
    Registered (2020-01-15)
    Number
    1234567

The in-page script only collects a page model (one block per checkbox
container: text, first link, first image). The label scan runs in Python on
that model via parse_block().

If no block yields a record, a last-resort pass wraps raw text of elements
mentioning the sentinel brand. Those records carry no structured fields.
"""
import logging
import re

from adapters.base import ExtractionResult, ResultExtractor
from models import RawResult

logger = logging.getLogger(__name__)

CONTAINER_LABELS = ("Owner", "Nice class")

# Sentinel used by the raw-text fallback. It matches one known query only.
SENTINEL_TOKEN = "NIKE"
FALLBACK_TEXT_LIMIT = 300

_STATUS_MARKS = re.compile(r"[✅❌✔✖]")
_PAREN = re.compile(r"\((.*?)\)")

COLLECT_BLOCKS_JS = """(labels) => {
    const blocks = [];
    const textOf = (el) => (el && (el.innerText || el.textContent)) || '';
    document.querySelectorAll('input[type="checkbox"]').forEach((checkbox) => {
        if (textOf(checkbox.parentElement).includes('Select all')) {
            return;
        }
        let container = checkbox.parentElement;
        while (container && container.parentElement) {
            const text = textOf(container);
            if (labels.some((label) => text.includes(label))) {
                break;
            }
            container = container.parentElement;
        }
        if (!container) {
            return;
        }
        const link = container.querySelector('a');
        const img = container.querySelector('img');
        blocks.push({
            text: textOf(container),
            link_text: link ? (link.textContent || '').trim() : '',
            link_href: link ? (link.href || '') : '',
            image_url: img ? (img.src || '') : '',
        });
    });
    return blocks;
}"""

COLLECT_SENTINEL_JS = """([token, limit]) => {
    return Array.from(document.querySelectorAll('*'))
        .filter((el) => {
            const text = el.textContent || '';
            return text.includes(token) && text.includes('Owner') && el.children.length < 10;
        })
        .map((el) => (el.textContent || '').substring(0, limit));
}"""


def _take_owner(record: RawResult, value: str) -> None:
    record["owner"] = value


def _take_nice(record: RawResult, value: str) -> None:
    record["nice_classes"] = [token.strip() for token in value.split(",")]


def _take_country(record: RawResult, value: str) -> None:
    record["country"] = value


def _take_status(record: RawResult, value: str) -> None:
    if "Registered" in value:
        record["status"] = "Registered"
        date = _PAREN.search(value)
        if date:
            record["registration_date"] = date.group(1)
    else:
        record["status"] = _STATUS_MARKS.sub("", value).strip()


def _take_number(record: RawResult, value: str) -> None:
    record["application_number"] = value


def _skip(record: RawResult, value: str) -> None:
    pass


# label line -> handler for the line that follows it
LABELS = {
    "Owner": _take_owner,
    "Nice class": _take_nice,
    "Country of filing": _take_country,
    "Status": _take_status,
    "Number": _take_number,
    "IPR": _skip,
}


def split_lines(text: str) -> list[str]:
    return [line.strip() for line in (text or "").split("\n") if line.strip()]


def parse_lines(lines: list[str], link_text: str = "") -> RawResult:
    """Scan label/value line pairs into a raw record."""
    record: RawResult = {"mark": (link_text or "").strip() or (lines[0] if lines else "")}

    i = 0
    while i < len(lines):
        handler = LABELS.get(lines[i])
        if handler is not None and i + 1 < len(lines):
            handler(record, lines[i + 1])
            i += 2
            continue
        i += 1

    return record


def parse_block(block: dict) -> RawResult | None:
    """Turn one collected container into a raw record, or None if it holds no mark/owner."""
    record = parse_lines(split_lines(block.get("text", "")), block.get("link_text", ""))

    if block.get("image_url"):
        record["image_url"] = block["image_url"]
    if block.get("link_href"):
        record["details_url"] = block["link_href"]

    if not (record.get("mark") or record.get("owner")):
        return None

    record["filing_date"] = record.get("registration_date", "")
    return record


def wrap_fallback_text(texts: list[str]) -> list[RawResult]:
    return [
        {"mark": SENTINEL_TOKEN, "raw_text": text[:FALLBACK_TEXT_LIMIT]}
        for text in texts
        if text
    ]


class WipoResultExtractor(ResultExtractor):
    def __init__(self, settle_ms: int = 2_000):
        self.settle_ms = settle_ms

    async def extract(self, page) -> ExtractionResult:
        try:
            await page.wait_for_timeout(self.settle_ms)
            blocks = await page.evaluate(COLLECT_BLOCKS_JS, list(CONTAINER_LABELS))
            results = [r for r in (parse_block(b) for b in blocks or []) if r is not None]

            if results:
                logger.info("Extracted %d results", len(results))
                return ExtractionResult(True, results, f"{len(results)} result(s) extracted")

            logger.info("No results from checkbox containers, trying raw-text fallback")
            texts = await page.evaluate(
                COLLECT_SENTINEL_JS, [SENTINEL_TOKEN, FALLBACK_TEXT_LIMIT],
            )
            results = wrap_fallback_text(texts or [])
        except Exception as exc:
            return ExtractionResult(
                False, [], f"Extraction failed: {type(exc).__name__}: {exc}", strategy="failed",
            )

        logger.info("Extracted %d raw-text fallback results", len(results))
        return ExtractionResult(True, results, f"{len(results)} fallback result(s)", strategy="fallback")
