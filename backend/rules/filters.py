"""
Optional result filters from the search parameters.
The site search itself only takes the query text, so country, Nice class and
status narrowing is applied to formatted records.
"""
import re

from models import SearchParameters, TrademarkRecord


def _matches_country(record: TrademarkRecord, country: str) -> bool:
    wanted = country.strip().lower()
    have = record.country.strip().lower()
    # "US" must not match inside "Australia" or "Russia"
    return bool(have) and (have == wanted or re.search(rf"\b{re.escape(wanted)}\b", have) is not None)


def _matches_nice(record: TrademarkRecord, nice: str) -> bool:
    classes = set(record.nice_classes)
    for token in nice.split(","):
        token = token.strip()
        if token.isdigit() and int(token) in classes:
            return True
    return False


def apply_filters(records: list[TrademarkRecord], params: SearchParameters) -> list[TrademarkRecord]:
    filtered = records
    if params.country:
        filtered = [r for r in filtered if _matches_country(r, params.country)]
    if params.nice:
        filtered = [r for r in filtered if _matches_nice(r, params.nice)]
    if params.status:
        filtered = [r for r in filtered if r.status == params.status]
    return filtered
