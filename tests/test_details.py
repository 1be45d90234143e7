"""Tests for details page enrichment."""
import asyncio

from adapters.details import enrich_with_details, fetch_details, merge_details


def test_fetch_details_drops_empty_fields(fake_page):
    page = fake_page(evaluate_results=[{
        "registration_number": "R-99",
        "registration_date": "",
        "expiry_date": "2030-01-15",
        "nice_classes": [25],
        "goods_services": "",
    }])

    result = asyncio.run(fetch_details(page, "https://branddb.wipo.int/details/1"))

    assert result.success is True
    assert result.details == {"registration_number": "R-99", "expiry_date": "2030-01-15", "nice_classes": [25]}


def test_merge_never_overwrites():
    raw = {"mark": "NIKE", "nice_classes": ["25"], "registration_date": "2020-01-15"}
    merged = merge_details(raw, {"nice_classes": [9], "registration_date": "1999", "expiry_date": "2030"})

    assert merged["nice_classes"] == ["25"]
    assert merged["registration_date"] == "2020-01-15"
    assert merged["expiry_date"] == "2030"
    assert "expiry_date" not in raw


def test_enrich_respects_limit_and_failures(fake_page):
    page = fake_page(evaluate_results=[
        {"goods_services": "Footwear"},
        RuntimeError("navigation failed"),
    ])
    raw_results = [
        {"mark": "A", "details_url": "https://x/1"},
        {"mark": "B"},
        {"mark": "C", "details_url": "https://x/3"},
        {"mark": "D", "details_url": "https://x/4"},
    ]

    enriched = asyncio.run(enrich_with_details(page, raw_results, limit=3))

    assert enriched[0]["goods_services"] == "Footwear"
    assert enriched[1] == {"mark": "B"}
    assert enriched[2] == raw_results[2]
    assert enriched[3] == raw_results[3]
    assert page.visited == ["https://x/1", "https://x/3"]
