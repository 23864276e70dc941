from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from datetime import datetime, timezone
from typing import Literal, Optional

from flightbook.reference import FLIGHT_STATUSES
from flightbook.schemas.airport_schema import AirportSummary

FlightStatus = Literal[FLIGHT_STATUSES]

def as_naive_utc(v):
    # Stored times are naive UTC; offset-aware input is converted first
    if v is not None and v.tzinfo is not None:
        v = v.astimezone(timezone.utc).replace(tzinfo=None)
    return v

class FlightBase(BaseModel):
    aircraft_id: int
    flight_number: str = Field(..., min_length=3, max_length=10)
    departure_airport_id: int
    destination_airport_id: int
    departure_time: datetime
    arrival_time: datetime
    price_economy: float = Field(..., ge=0)
    price_business: float = Field(..., ge=0)
    available_seats: int = Field(..., ge=0)
    status: FlightStatus = "scheduled"

    @field_validator("departure_time", "arrival_time")
    def normalize_times(cls, v):
        return as_naive_utc(v)

class FlightCreate(FlightBase):

    @model_validator(mode="after")
    def check_times(self):
        if self.arrival_time <= self.departure_time:
            raise ValueError("arrival_time must be later than departure_time")
        if self.departure_airport_id == self.destination_airport_id:
            raise ValueError("departure and destination airports must differ")
        return self

class FlightUpdate(BaseModel):
    # Any status value may be written at any time; there is no transition guard.
    aircraft_id: Optional[int] = None
    flight_number: Optional[str] = Field(None, min_length=3, max_length=10)
    departure_airport_id: Optional[int] = None
    destination_airport_id: Optional[int] = None
    departure_time: Optional[datetime] = None
    arrival_time: Optional[datetime] = None
    price_economy: Optional[float] = Field(None, ge=0)
    price_business: Optional[float] = Field(None, ge=0)
    available_seats: Optional[int] = Field(None, ge=0)
    status: Optional[FlightStatus] = None

    @field_validator("departure_time", "arrival_time")
    def normalize_times(cls, v):
        return as_naive_utc(v)

class FlightResponse(FlightBase):
    flight_id: int

    model_config = ConfigDict(from_attributes=True)

class FlightWithAirports(FlightResponse):
    departureAirport: AirportSummary = Field(validation_alias="departure_airport")
    destinationAirport: AirportSummary = Field(validation_alias="destination_airport")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

class FormattedFlight(FlightWithAirports):
    """Flight plus the fields derived at response time."""
    departure_date: str
    aircraft_type: str
    airline: str
    duration: str
