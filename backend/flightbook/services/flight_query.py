"""
Filter construction for flight searches.

Every function here returns plain SQLAlchemy column expressions so the same
conditions can feed both the count query and the paginated fetch.

Times are stored as naive UTC. Searches are expressed in a fixed local
offset (UTC+7 by default), so calendar dates are widened into a local
full-day window and converted back to UTC before comparison, and
time-of-day buckets are evaluated against the local hour.
"""
import math
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import List, Optional, Tuple

import pytz
from sqlalchemy import Integer, cast, extract

from flightbook.config import settings
from flightbook.models.flight import Flight
from flightbook.reference import BOOKABLE_STATUS, MAX_PASSENGER_COUNT, TIME_OF_DAY_BUCKETS

DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
END_OF_DAY = time(23, 59, 59)


@dataclass
class DestinationCriteria:
    departure_airport_id: int
    destination_airport_id: int
    departure_date: date
    passenger_count: int = 1
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    time_of_day: Optional[str] = None


def local_timezone():
    return pytz.FixedOffset(settings.local_utc_offset_hours * 60)


def to_naive_utc(value: datetime) -> datetime:
    return value.astimezone(pytz.utc).replace(tzinfo=None)


def to_local(value: datetime) -> datetime:
    """Convert a stored naive UTC datetime into the local offset."""
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    return value.astimezone(local_timezone())


def parse_departure_date(value: Optional[str]) -> date:
    """
    Accepts 'YYYY-MM-DD' optionally followed by a time part
    (e.g. '2025-06-11T00:00:00.000Z'); only the calendar date is kept.
    Raises ValueError for anything else, including impossible dates.
    """
    if not value or not DATE_PREFIX.match(value):
        raise ValueError(f"Invalid date: {value!r}")
    return datetime.strptime(value[:10], "%Y-%m-%d").date()


def parse_price(value: Optional[str]) -> Optional[float]:
    """Blank means 'no bound'. Anything non-numeric raises ValueError."""
    if value is None or not value.strip():
        return None
    price = float(value)
    if not math.isfinite(price):
        raise ValueError(f"Invalid price: {value!r}")
    return price


def parse_passenger_count(value: Optional[str]) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 1
    if count < 1:
        return 1
    return min(count, MAX_PASSENGER_COUNT)


def local_day_window(day: date) -> Tuple[datetime, datetime]:
    """Inclusive [00:00:00, 23:59:59] local window for `day`, as naive UTC bounds."""
    tz = local_timezone()
    start = tz.localize(datetime.combine(day, time.min))
    end = tz.localize(datetime.combine(day, END_OF_DAY))
    return to_naive_utc(start), to_naive_utc(end)


def local_hour_expression():
    # Works on SQLite (strftime) and PostgreSQL (EXTRACT) alike
    utc_hour = cast(extract("hour", Flight.departure_time), Integer)
    return (utc_hour + settings.local_utc_offset_hours + 24) % 24


def price_conditions(min_price: Optional[float] = None, max_price: Optional[float] = None) -> list:
    conditions = []
    if min_price is not None:
        conditions.append(Flight.price_economy >= min_price)
    if max_price is not None:
        conditions.append(Flight.price_economy <= max_price)
    return conditions


def time_of_day_condition(time_of_day: Optional[str]):
    """Returns None for missing or unrecognized buckets so callers skip the filter."""
    bounds = TIME_OF_DAY_BUCKETS.get(time_of_day) if time_of_day else None
    if bounds is None:
        return None
    start_hour, end_hour = bounds
    return local_hour_expression().between(start_hour, end_hour)


def date_conditions(departure_airport_id: int, destination_airport_id: int, day: date) -> list:
    start, end = local_day_window(day)
    return [
        Flight.departure_airport_id == departure_airport_id,
        Flight.destination_airport_id == destination_airport_id,
        Flight.departure_time.between(start, end),
        Flight.status == BOOKABLE_STATUS,
    ]


def build_destination_conditions(criteria: DestinationCriteria) -> List:
    conditions = date_conditions(
        criteria.departure_airport_id,
        criteria.destination_airport_id,
        criteria.departure_date,
    )
    conditions.append(Flight.available_seats >= criteria.passenger_count)
    conditions.extend(price_conditions(criteria.min_price, criteria.max_price))

    tod = time_of_day_condition(criteria.time_of_day)
    if tod is not None:
        conditions.append(tod)
    return conditions


def build_listing_conditions(
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    time_of_day: Optional[str] = None,
    scheduled_only: bool = False,
) -> List:
    conditions = []
    if scheduled_only:
        conditions.append(Flight.status == BOOKABLE_STATUS)
    conditions.extend(price_conditions(min_price, max_price))

    tod = time_of_day_condition(time_of_day)
    if tod is not None:
        conditions.append(tod)
    return conditions
