"""Tests for deterministic cleanup and result filters."""
from models import SearchParameters, TrademarkRecord, TrademarkStatus
from rules.cleanup import clean, parse_nice_classes, record_from_fields
from rules.filters import apply_filters


def test_concatenated_mark_is_split():
    record = clean({"mark": "NIKE Owner Nike Inc Number1234567 Nice class 25,35"})

    assert record.mark == "NIKE"
    assert record.owner == "Nike Inc"
    assert record.application_number == "1234567"
    assert record.nice_classes == [25, 35]
    assert record.status is TrademarkStatus.UNKNOWN


def test_owner_stops_at_nice():
    record = clean({"mark": "ACME Owner Acme Trading Co Nice class 9"})

    assert record.owner == "Acme Trading Co"
    assert record.nice_classes == [9]


def test_country_and_status_backfill():
    record = clean({"mark": "QNB Owner Qatar National Bank Registered Qatar"})

    assert record.country == "Qatar"
    assert record.status is TrademarkStatus.REGISTERED


def test_structured_fields_are_kept():
    record = clean({
        "mark": "NIKE",
        "owner": "Nike, Inc.",
        "application_number": "1234567",
        "country": "US",
        "status": "Registered",
        "registration_date": "2020-01-15",
        "nice_classes": ["25", "35", "n/a"],
    })

    assert record.owner == "Nike, Inc."
    assert record.nice_classes == [25, 35]
    assert record.filing_date == "2020-01-15"
    assert record.registration_date == "2020-01-15"


def test_empty_input_is_fully_shaped():
    record = clean({})

    assert record.mark == ""
    assert record.owner == ""
    assert record.application_number == ""
    assert record.country == ""
    assert record.filing_date == ""
    assert record.nice_classes == []
    assert record.status is TrademarkStatus.UNKNOWN


def test_parse_nice_classes_variants():
    assert parse_nice_classes("25, 35,") == [25, 35]
    assert parse_nice_classes(["9", 42, "x"]) == [9, 42]
    assert parse_nice_classes(None) == []


def test_record_from_llm_fields():
    record = record_from_fields(
        {
            "mark": "NIKE",
            "owner": "Nike, Inc. (USA)",
            "applicationNumber": 1234567,
            "niceClasses": "25, 35",
            "country": "USA",
            "status": "registered",
            "registrationDate": "2020-01-15",
        },
        {"image_url": "https://example.org/nike.png"},
    )

    assert record.application_number == "1234567"
    assert record.nice_classes == [25, 35]
    assert record.status is TrademarkStatus.REGISTERED
    assert record.filing_date == "2020-01-15"
    assert record.image_url == "https://example.org/nike.png"


def _records():
    return [
        TrademarkRecord(mark="NIKE", country="US", nice_classes=[25, 35], status=TrademarkStatus.REGISTERED),
        TrademarkRecord(mark="NIKE", country="Egypt", nice_classes=[3], status=TrademarkStatus.PENDING),
        TrademarkRecord(mark="NIKE", country="", nice_classes=[]),
    ]


def test_no_filters_pass_through():
    records = _records()
    assert apply_filters(records, SearchParameters(query="nike")) == records


def test_filters_combine():
    params = SearchParameters(query="nike", country="us", nice="35", status="Registered")
    assert [r.country for r in apply_filters(_records(), params)] == ["US"]

    params = SearchParameters(query="nike", nice="3, 9")
    assert [r.country for r in apply_filters(_records(), params)] == ["Egypt"]


def test_inactive_status_is_not_active():
    record = clean({"mark": "ACME", "status": "Inactive"})
    assert record.status is TrademarkStatus.UNKNOWN


def test_country_filter_matches_whole_words():
    records = [
        TrademarkRecord(mark="ACME", country="Australia"),
        TrademarkRecord(mark="ACME", country="Russia"),
        TrademarkRecord(mark="ACME", country="Belarus"),
    ]
    assert apply_filters(records, SearchParameters(query="acme", country="US")) == []

    records.append(TrademarkRecord(mark="ACME", country="US (federal)"))
    kept = apply_filters(records, SearchParameters(query="acme", country="US"))
    assert [r.country for r in kept] == ["US (federal)"]


def test_negated_registration_in_text_is_not_backfilled():
    record = clean({"mark": "ACMEOwner Acme Ltd Not Registered"})
    assert record.status is TrademarkStatus.UNKNOWN
