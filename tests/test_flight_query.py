from datetime import date, datetime, timedelta

import pytest

from flightbook.models import Flight
from flightbook.reference import MAX_PASSENGER_COUNT
from flightbook.services.flight_query import (
    DestinationCriteria,
    build_destination_conditions,
    build_listing_conditions,
    local_day_window,
    parse_departure_date,
    parse_passenger_count,
    parse_price,
    price_conditions,
    time_of_day_condition,
    to_local,
)


def _numbers(db, conditions):
    rows = db.query(Flight).filter(*conditions).order_by(Flight.departure_time.asc()).all()
    return [f.flight_number for f in rows]


@pytest.mark.parametrize("day", [
    date(2025, 1, 31),
    date(2024, 2, 29),
    date(2025, 2, 28),
    date(2024, 12, 31),
    date(2025, 6, 11),
])
def test_day_window_spans_exactly_one_local_day(day):
    start, end = local_day_window(day)

    assert end - start + timedelta(seconds=1) == timedelta(hours=24)
    # Local midnight at UTC+7 is 17:00 UTC on the previous day
    assert start == datetime.combine(day, datetime.min.time()) - timedelta(hours=7)
    assert to_local(start).date() == day
    assert to_local(end).date() == day


def test_day_window_crosses_year_boundary():
    start, end = local_day_window(date(2025, 1, 1))
    assert start == datetime(2024, 12, 31, 17, 0, 0)
    assert end == datetime(2025, 1, 1, 16, 59, 59)


@pytest.mark.parametrize("value, expected", [
    ("2025-06-11", date(2025, 6, 11)),
    ("2025-06-11T00:00:00.000Z", date(2025, 6, 11)),
    ("2024-02-29 08:00", date(2024, 2, 29)),
])
def test_parse_departure_date_accepts_date_prefix(value, expected):
    assert parse_departure_date(value) == expected


@pytest.mark.parametrize("value", [None, "", "11-06-2025", "2025/06/11", "tomorrow", "2025-02-30", "2025-13-01"])
def test_parse_departure_date_rejects_malformed_values(value):
    with pytest.raises(ValueError):
        parse_departure_date(value)


def test_parse_price():
    assert parse_price(None) is None
    assert parse_price("  ") is None
    assert parse_price("1500000") == 1_500_000.0
    assert parse_price("99.5") == 99.5
    with pytest.raises(ValueError):
        parse_price("cheap")
    with pytest.raises(ValueError):
        parse_price("nan")


@pytest.mark.parametrize("value, expected", [(None, 1), ("", 1), ("abc", 1), ("0", 1), ("-3", 1), ("4", 4),
    ("99999999999999999999", MAX_PASSENGER_COUNT),
])
def test_parse_passenger_count(value, expected):
    assert parse_passenger_count(value) == expected


def test_price_bounds_are_independent(db, sample_data):
    assert price_conditions() == []

    only_min = _numbers(db, price_conditions(min_price=1_500_000))
    assert only_min == ["VN101", "QH303"]

    only_max = _numbers(db, price_conditions(max_price=900_000))
    assert only_max == ["BL404", "TG606"]

    both = _numbers(db, price_conditions(1_000_000, 1_200_000))
    assert both == ["VJ202", "VN505"]


@pytest.mark.parametrize("bucket, expected", [
    ("morning", ["VN101", "BL404", "TG606", "VN505"]),
    ("afternoon", ["VJ202"]),
    ("evening", ["QH303"]),
])
def test_time_of_day_uses_local_hour(db, sample_data, bucket, expected):
    condition = time_of_day_condition(bucket)
    assert sorted(_numbers(db, [condition])) == sorted(expected)


@pytest.mark.parametrize("bucket", [None, "", "night", "Morning"])
def test_unknown_time_of_day_adds_no_condition(bucket):
    assert time_of_day_condition(bucket) is None
    assert build_listing_conditions(time_of_day=bucket) == []


def _criteria(sample_data, **overrides):
    airports = sample_data["airports"]
    values = dict(
        departure_airport_id=airports["HAN"].airport_id,
        destination_airport_id=airports["SGN"].airport_id,
        departure_date=date(2025, 6, 11),
    )
    values.update(overrides)
    return DestinationCriteria(**values)


def test_destination_conditions_keep_scheduled_flights_of_the_local_day(db, sample_data):
    # BL404 is cancelled, VN505 is the next local day, TG606 goes elsewhere
    numbers = _numbers(db, build_destination_conditions(_criteria(sample_data)))
    assert numbers == ["VN101", "VJ202", "QH303"]


def test_destination_conditions_next_local_day(db, sample_data):
    numbers = _numbers(db, build_destination_conditions(_criteria(sample_data, departure_date=date(2025, 6, 12))))
    assert numbers == ["VN505"]


def test_destination_conditions_require_enough_seats(db, sample_data):
    numbers = _numbers(db, build_destination_conditions(_criteria(sample_data, passenger_count=3)))
    assert numbers == ["VN101", "QH303"]


def test_destination_conditions_combine_all_filters(db, sample_data):
    criteria = _criteria(sample_data, min_price=1_000_000, max_price=1_600_000, time_of_day="morning")
    assert _numbers(db, build_destination_conditions(criteria)) == ["VN101"]


def test_unknown_bucket_matches_omitted_bucket(db, sample_data):
    with_unknown = _numbers(db, build_destination_conditions(_criteria(sample_data, time_of_day="midnight")))
    without = _numbers(db, build_destination_conditions(_criteria(sample_data)))
    assert with_unknown == without


def test_listing_conditions_scheduled_only(db, sample_data):
    numbers = _numbers(db, build_listing_conditions(max_price=1_000_000, scheduled_only=True))
    assert numbers == ["TG606"]
