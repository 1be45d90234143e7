"""
Trademark search domain models.

RawResult is deliberately left as a plain dict: the scraper fills whatever it
can find, and the formatter turns it into a TrademarkRecord.
"""
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

RawResult = dict[str, Any]

# Negated status text has no enum member of its own
NEGATED_STATUS = re.compile(r"\b(?:inactive|unregistered|not\s+(?:active|registered))\b")


def utcnow():
    return datetime.now(timezone.utc)


class TrademarkStatus(str, Enum):
    ACTIVE = "Active"
    REGISTERED = "Registered"
    PENDING = "Pending"
    EXPIRED = "Expired"
    CANCELLED = "Cancelled"
    UNKNOWN = "Unknown"

    @classmethod
    def coerce(cls, value) -> "TrademarkStatus":
        """Map free status text ("Registered (2020)", "expired") onto the enum."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        if not text:
            return cls.UNKNOWN
        for status in cls:
            if text == status.value.lower():
                return status
        if NEGATED_STATUS.search(text):
            return cls.UNKNOWN
        for status in cls:
            if status is not cls.UNKNOWN and re.search(rf"\b{status.value.lower()}\b", text):
                return status
        if re.search(r"\bcanceled\b", text):
            return cls.CANCELLED
        return cls.UNKNOWN


class SearchParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str = Field(min_length=1)
    search_type: Literal["brand", "owner", "number"] = "brand"
    country: str | None = None
    nice: str | None = None
    status: TrademarkStatus | None = None
    limit: int = Field(default=10, ge=1, le=100)

    @field_validator("query")
    @classmethod
    def _query_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Search query is required")
        return value


class TrademarkRecord(BaseModel):
    application_number: str = ""
    registration_number: str | None = None
    mark: str = ""
    owner: str = ""
    country: str = ""
    filing_date: str = ""
    registration_date: str | None = None
    expiry_date: str | None = None
    status: TrademarkStatus = TrademarkStatus.UNKNOWN
    nice_classes: list[int] = Field(default_factory=list)
    goods_services: str | None = None
    image_url: str | None = None
    details_url: str | None = None


class SearchOutcome(BaseModel):
    query: str
    total_results: int    # before truncation to the requested limit
    page: int = 1
    results: list[TrademarkRecord] = Field(default_factory=list)
    search_time: float    # elapsed ms
    timestamp: datetime = Field(default_factory=utcnow)
