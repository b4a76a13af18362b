from datetime import date

from exercise_log import filter_log, format_day, parse_day


ENTRIES = [
    {"description": "a", "date": "Mon Jan 01 2024"},
    {"description": "b", "date": "Wed Jan 10 2024"},
    {"description": "c", "date": "garbage"},
    {"description": "d", "date": "Sat Jan 20 2024"},
]


def test_format_and_parse_day():
    assert format_day(date(2024, 1, 1)) == "Mon Jan 01 2024"
    assert parse_day("Mon Jan 01 2024") == date(2024, 1, 1)
    assert parse_day("nope") is None
    assert parse_day(None) is None


def test_no_filters_keeps_everything_in_order():
    assert [e["description"] for e in filter_log(ENTRIES)] == ["a", "b", "c", "d"]


def test_bounds_drop_unreadable_dates():
    result = filter_log(ENTRIES, date_from=date(2024, 1, 1))
    assert [e["description"] for e in result] == ["a", "b", "d"]


def test_date_comparison_not_string_comparison():
    # "Sat ..." sorts after "Wed ..." as text but is the later day
    result = filter_log(ENTRIES, date_to=date(2024, 1, 10))
    assert [e["description"] for e in result] == ["a", "b"]


def test_limit():
    assert len(filter_log(ENTRIES, limit=2)) == 2
    assert len(filter_log(ENTRIES, limit=10)) == 4
