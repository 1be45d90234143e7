"""
Trademark details page reader.

Opens a single result's details URL and pulls the fields the results list
does not show. Selectors cover both the class-based and data-field markup
variants seen on the site.
"""
import logging

from playwright.async_api import TimeoutError as PWTimeout

from adapters.base import DetailsResult
from models import RawResult

logger = logging.getLogger(__name__)

READ_DETAILS_JS = """() => {
    const textOf = (selector) => {
        const el = document.querySelector(selector);
        return el && el.textContent ? el.textContent.trim() : '';
    };
    return {
        registration_number: textOf('.registration-number, [data-field="registration_number"]'),
        registration_date: textOf('.registration-date, [data-field="registration_date"]'),
        expiry_date: textOf('.expiry-date, [data-field="expiry_date"]'),
        nice_classes: Array.from(document.querySelectorAll('.nice-class, [data-field="nice_class"]'))
            .map((el) => parseInt(el.textContent || '0', 10))
            .filter((n) => n > 0),
        goods_services: textOf('.goods-services, [data-field="goods_services"]'),
    };
}"""


async def fetch_details(page, url: str, timeout: int = 30_000) -> DetailsResult:
    try:
        await page.goto(url, wait_until="networkidle", timeout=timeout)
        await page.wait_for_timeout(2_000)
        details = await page.evaluate(READ_DETAILS_JS)
    except PWTimeout:
        return DetailsResult(False, {}, f"Details page timed out: {url}")
    except Exception as exc:
        return DetailsResult(False, {}, f"Details extraction failed: {type(exc).__name__}: {exc}")

    return DetailsResult(True, {k: v for k, v in (details or {}).items() if v}, "")


def merge_details(raw: RawResult, details: dict) -> RawResult:
    """Fill fields the list view left empty; never overwrite scraped values."""
    merged = dict(raw)
    for key, value in details.items():
        if key == "nice_classes":
            if not merged.get("nice_classes"):
                merged["nice_classes"] = [str(n) for n in value]
        elif not merged.get(key):
            merged[key] = value
    return merged


async def enrich_with_details(page, raw_results: list[RawResult], limit: int, timeout: int = 30_000) -> list[RawResult]:
    """Visit details pages for the first `limit` records that have one."""
    enriched = []
    for index, raw in enumerate(raw_results):
        url = raw.get("details_url")
        if index >= limit or not url:
            enriched.append(raw)
            continue
        result = await fetch_details(page, url, timeout=timeout)
        if result.success:
            enriched.append(merge_details(raw, result.details))
        else:
            logger.warning(result.detail)
            enriched.append(raw)
    return enriched
