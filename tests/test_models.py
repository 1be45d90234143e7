"""Tests for search parameter validation and status coercion."""
import pytest
from pydantic import ValidationError

from models import SearchParameters, TrademarkStatus


def test_defaults():
    params = SearchParameters(query="  Nike ")
    assert params.query == "Nike"
    assert params.search_type == "brand"
    assert params.limit == 10
    assert params.country is None


@pytest.mark.parametrize("kwargs", [
    {"query": ""},
    {"query": "   "},
    {"query": "nike", "limit": 0},
    {"query": "nike", "limit": 101},
    {"query": "nike", "search_type": "slogan"},
])
def test_invalid_parameters(kwargs):
    with pytest.raises(ValidationError):
        SearchParameters(**kwargs)


def test_parameters_are_immutable():
    params = SearchParameters(query="nike")
    with pytest.raises(ValidationError):
        params.limit = 50


@pytest.mark.parametrize("text, expected", [
    ("Registered", TrademarkStatus.REGISTERED),
    ("registered (2020-01-15)", TrademarkStatus.REGISTERED),
    ("Expired", TrademarkStatus.EXPIRED),
    ("Canceled", TrademarkStatus.CANCELLED),
    ("", TrademarkStatus.UNKNOWN),
    (None, TrademarkStatus.UNKNOWN),
    ("Opposed", TrademarkStatus.UNKNOWN),
    ("Inactive", TrademarkStatus.UNKNOWN),
    ("Not registered", TrademarkStatus.UNKNOWN),
    ("Unregistered", TrademarkStatus.UNKNOWN),
    ("Active (renewed)", TrademarkStatus.ACTIVE),
])
def test_status_coercion(text, expected):
    assert TrademarkStatus.coerce(text) is expected
