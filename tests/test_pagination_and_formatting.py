from datetime import datetime

import pytest

from flightbook.models import Flight
from flightbook.services.flight_formatting import (
    airline_from_flight_number,
    calculate_duration,
    format_flight,
)
from flightbook.services.flight_query import price_conditions
from flightbook.reference import MAX_LIMIT, MAX_PAGE
from flightbook.services.pagination import (
    PageParams,
    paginate_flights,
    pagination_payload,
    parse_pagination,
    total_pages,
)


@pytest.mark.parametrize("page, limit, expected", [
    (None, None, (1, 3)),
    ("2", "5", (2, 5)),
    ("0", "0", (1, 3)),
    ("-1", "-10", (1, 3)),
    ("abc", "x", (1, 3)),
    ("4", None, (4, 3)),
    ("99999999999999999999", "500", (MAX_PAGE, MAX_LIMIT)),
])
def test_parse_pagination_falls_back_to_defaults(page, limit, expected):
    params = parse_pagination(page, limit)
    assert (params.page, params.limit) == expected


def test_offset_and_total_pages():
    assert PageParams(page=3, limit=4).offset == 8
    assert total_pages(0, 3) == 0
    assert total_pages(7, 3) == 3
    assert total_pages(9, 3) == 3
    assert pagination_payload(10, PageParams(2, 3)) == {"total": 10, "page": 2, "limit": 3, "totalPages": 4}


def test_paginate_counts_all_matches_but_fetches_one_page(db, sample_data):
    conditions = price_conditions(min_price=1_000_000)
    total, rows = paginate_flights(db, conditions, Flight.price_economy.asc(), PageParams(page=2, limit=2))

    assert total == 4
    assert [f.flight_number for f in rows] == ["VN101", "QH303"]


@pytest.mark.parametrize("number, airline", [
    ("VN101", "Vietnam Airlines"),
    ("QH303", "Bamboo Airways"),
    ("VJ202", "Vietjet Air"),
    ("BL404", "Pacific Airlines"),
    ("TG606", "Thai Airways International"),
    ("AA100", "Unknown Airline"),
    ("", "Unknown Airline"),
])
def test_airline_lookup(number, airline):
    assert airline_from_flight_number(number) == airline


def test_calculate_duration():
    assert calculate_duration(datetime(2025, 6, 11, 6, 0), datetime(2025, 6, 11, 8, 15)) == "2h 15m"
    assert calculate_duration(datetime(2025, 6, 11, 23, 50), datetime(2025, 6, 12, 0, 5, 59)) == "0h 15m"


def test_format_flight_adds_derived_fields(sample_data):
    flight = sample_data["flights"]["VN505"]
    formatted = format_flight(flight).model_dump()

    # Departs 00:30 local on 12 June, 17:30 UTC on 11 June
    assert formatted["departure_date"] == "2025-06-12"
    assert formatted["aircraft_type"] == "Airbus A321"
    assert formatted["airline"] == "Vietnam Airlines"
    assert formatted["duration"] == "2h 0m"
    assert formatted["departureAirport"]["code"] == "HAN"
    assert formatted["destinationAirport"]["code"] == "SGN"
    assert formatted["price_economy"] == 1_100_000
