from datetime import datetime
from typing import Iterable, List

from flightbook.models.flight import Flight
from flightbook.reference import AIRLINE_CODES, UNKNOWN_AIRLINE
from flightbook.schemas.flight_schema import FlightWithAirports, FormattedFlight
from flightbook.services.flight_query import to_local

MS_PER_HOUR = 60 * 60 * 1000
MS_PER_MINUTE = 60 * 1000


def airline_from_flight_number(flight_number: str) -> str:
    return AIRLINE_CODES.get((flight_number or "")[:2], UNKNOWN_AIRLINE)


def calculate_duration(departure_time: datetime, arrival_time: datetime) -> str:
    """Elapsed time rendered as '<hours>h <minutes>m'."""
    diff_ms = int((arrival_time - departure_time).total_seconds() * 1000)
    hours = diff_ms // MS_PER_HOUR
    minutes = (diff_ms % MS_PER_HOUR) // MS_PER_MINUTE
    return f"{hours}h {minutes}m"


def aircraft_type(flight: Flight) -> str:
    if flight.aircraft is None:
        return ""
    return f"{flight.aircraft.manufacturer} {flight.aircraft.model}"


def format_flight(flight: Flight) -> FormattedFlight:
    base = FlightWithAirports.model_validate(flight)
    return FormattedFlight(
        **base.model_dump(),
        departure_date=to_local(flight.departure_time).date().isoformat(),
        aircraft_type=aircraft_type(flight),
        airline=airline_from_flight_number(flight.flight_number),
        duration=calculate_duration(flight.departure_time, flight.arrival_time),
    )


def format_flights(flights: Iterable[Flight]) -> List[FormattedFlight]:
    return [format_flight(f) for f in flights]
