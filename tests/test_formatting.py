from datetime import datetime

import pytest

from shootbook.services.formatting import (
    format_currency,
    format_date,
    get_month_name,
    parse_date,
    parse_money,
)


def test_parse_money_reads_leading_number():
    assert parse_money("1500") == 1500.0
    assert parse_money("1500abc") == 1500.0
    assert parse_money(" 12.5 ") == 12.5
    assert parse_money("1,500") == 1.0

def test_parse_money_never_raises():
    assert parse_money("") == 0.0
    assert parse_money(None) == 0.0
    assert parse_money("abc") == 0.0
    assert parse_money("inf") == 0.0
    assert parse_money(float("nan")) == 0.0
    assert parse_money(42) == 42.0

def test_format_currency():
    assert format_currency(1234.5) == "1,234.50"
    assert format_currency(0) == "0.00"
    assert format_currency(-0.001) == "0.00"
    assert format_currency("250000") == "250,000.00"
    assert format_currency("junk") == "0.00"

def test_parse_date_formats():
    assert parse_date("05/03/2024") == datetime(2024, 3, 5, 9, 0)
    assert parse_date("05-03-2024") == datetime(2024, 3, 5, 9, 0)
    assert parse_date("2024-03-05") == datetime(2024, 3, 5)
    assert parse_date("2024-03-05T14:30:00") == datetime(2024, 3, 5, 14, 30)
    assert parse_date("31/02/2024") is None
    assert parse_date("next tuesday") is None
    assert parse_date("") is None

def test_parse_date_converts_aware_to_local():
    parsed = parse_date("2024-03-05T10:00:00Z")
    assert parsed is not None and parsed.tzinfo is None
    expected = datetime.fromisoformat("2024-03-05T10:00:00+00:00").astimezone().replace(tzinfo=None)
    assert parsed == expected

def test_format_date():
    assert format_date("2024-03-05") == "05.Mar.2024"
    assert format_date("25/12/2023") == "25.Dec.2023"
    assert format_date("") == ""
    assert format_date("soon") == "soon"

def test_month_names():
    assert get_month_name(1) == "January"
    assert get_month_name(12) == "December"

def test_format_currency_rounds_half_up():
    assert format_currency(0.125) == "0.13"
    assert format_currency("2.675") == "2.68"
    assert format_currency(-1.005) == "-1.01"

def test_month_name_out_of_range():
    for bad in (0, 13, -1):
        with pytest.raises(ValueError):
            get_month_name(bad)
