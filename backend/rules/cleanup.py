"""
Deterministic raw-result cleanup.

Scraped entries sometimes arrive un-split: every field concatenated into the
mark text ("NIKE Owner Nike Inc Number1234567 Nice class 25,35"). clean()
truncates the mark and back-fills each empty structured field from that text.
Applied without any network call, so it is also the fallback for the
assisted formatter.
"""
import re

from models import NEGATED_STATUS, RawResult, TrademarkRecord, TrademarkStatus

OWNER_PATTERN = re.compile(r"Owner\s*(.*?)\s*(?=Number|Nice|$)", re.DOTALL)
NUMBER_PATTERN = re.compile(r"Number\s*(\d+)")
NICE_PATTERN = re.compile(r"Nice class\s*([\d,\s]+)")

KNOWN_COUNTRIES = ("Qatar", "Egypt", "USA")


def _text(value) -> str:
    return str(value).strip() if value is not None else ""


def _optional(value) -> str | None:
    text = _text(value)
    return text or None


def parse_nice_classes(value) -> list[int]:
    """Accept a list of tokens or a comma string; drop anything non-numeric."""
    if value is None:
        return []
    if isinstance(value, int):
        return [value]
    tokens = value.split(",") if isinstance(value, str) else value
    classes = []
    for token in tokens:
        try:
            classes.append(int(str(token).strip()))
        except ValueError:
            continue
    return classes


def clean(raw: RawResult) -> TrademarkRecord:
    text = _text(raw.get("mark"))

    mark = text.split("Owner", 1)[0].strip() if "Owner" in text else text

    owner = _text(raw.get("owner"))
    if not owner and "Owner" in text:
        match = OWNER_PATTERN.search(text)
        if match:
            owner = match.group(1).strip()

    application_number = _text(raw.get("application_number"))
    if not application_number and "Number" in text:
        match = NUMBER_PATTERN.search(text)
        if match:
            application_number = match.group(1)

    country = _text(raw.get("country"))
    if not country:
        country = next((c for c in KNOWN_COUNTRIES if c in text), "")

    status = TrademarkStatus.coerce(raw.get("status"))
    if (status is TrademarkStatus.UNKNOWN and "Registered" in text
            and not NEGATED_STATUS.search(text.lower())):
        status = TrademarkStatus.REGISTERED

    nice_classes = parse_nice_classes(raw.get("nice_classes"))
    if not nice_classes and "Nice class" in text:
        match = NICE_PATTERN.search(text)
        if match:
            nice_classes = parse_nice_classes(match.group(1))

    registration_date = _optional(raw.get("registration_date"))

    return TrademarkRecord(
        application_number=application_number,
        registration_number=_optional(raw.get("registration_number")),
        mark=mark,
        owner=owner,
        country=country,
        filing_date=_text(raw.get("filing_date")) or registration_date or "",
        registration_date=registration_date,
        expiry_date=_optional(raw.get("expiry_date")),
        status=status,
        nice_classes=nice_classes,
        goods_services=_optional(raw.get("goods_services")),
        image_url=_optional(raw.get("image_url")),
        details_url=_optional(raw.get("details_url")),
    )


def record_from_fields(fields: dict, raw: RawResult | None = None) -> TrademarkRecord:
    """Map a loosely keyed object (e.g. an LLM reply) onto a TrademarkRecord.

    Accepts camelCase and alternate key names. Image and details URLs are not
    something the model can know, so they come from the scraped record.
    """
    raw = raw or {}

    def pick(*keys):
        for key in keys:
            value = fields.get(key)
            if value is not None and _text(value):
                return _text(value)
        return ""

    registration_date = pick("registrationDate", "registration_date") or None

    return TrademarkRecord(
        application_number=pick("applicationNumber", "application_number", "number"),
        registration_number=pick("registrationNumber", "registration_number") or None,
        mark=pick("mark", "brand"),
        owner=pick("owner"),
        country=pick("country", "countryOfFiling", "country_of_filing"),
        filing_date=pick("filingDate", "filing_date") or registration_date or "",
        registration_date=registration_date,
        expiry_date=pick("expiryDate", "expiry_date") or None,
        status=TrademarkStatus.coerce(pick("status")),
        nice_classes=parse_nice_classes(fields.get("niceClasses", fields.get("nice_classes"))),
        goods_services=pick("goodsServices", "goods_services") or None,
        image_url=_optional(raw.get("image_url")),
        details_url=_optional(raw.get("details_url")),
    )
