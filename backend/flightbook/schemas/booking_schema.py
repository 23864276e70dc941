from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Literal

from flightbook.reference import SEAT_CLASSES, BOOKING_STATUSES
from flightbook.schemas.flight_schema import FlightWithAirports

class BookingResponse(BaseModel):
    booking_id: int
    user_id: int
    flight_id: int
    booking_date: datetime
    seat_class: Literal[SEAT_CLASSES]
    passenger_count: int
    total_price: float
    status: Literal[BOOKING_STATUSES]

    model_config = ConfigDict(from_attributes=True)

class BookingDetail(BookingResponse):
    flight: FlightWithAirports
