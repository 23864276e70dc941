from flightbook.models.airport import Airport
from flightbook.models.aircraft import Aircraft
from flightbook.models.flight import Flight
from flightbook.models.user import User
from flightbook.models.booking import Booking

__all__ = [
    "Airport",
    "Aircraft",
    "Flight",
    "User",
    "Booking",
]
