from sqlalchemy import Column, Integer, String, Numeric, DateTime, Enum, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from flightbook.database import Base
from flightbook.reference import FLIGHT_STATUSES

class Flight(Base):
    __tablename__ = "flights"

    flight_id = Column(Integer, primary_key=True, index=True)
    aircraft_id = Column(Integer, ForeignKey("aircraft.aircraft_id"), nullable=False)
    flight_number = Column(String(10), unique=True, index=True, nullable=False)
    departure_airport_id = Column(Integer, ForeignKey("airports.airport_id"), nullable=False)
    destination_airport_id = Column(Integer, ForeignKey("airports.airport_id"), nullable=False)
    # Naive UTC timestamps
    departure_time = Column(DateTime, index=True, nullable=False)
    arrival_time = Column(DateTime, nullable=False)
    price_economy = Column(Numeric(10, 0, asdecimal=False), nullable=False)
    price_business = Column(Numeric(10, 0, asdecimal=False), nullable=False)
    available_seats = Column(Integer, nullable=False)
    status = Column(Enum(*FLIGHT_STATUSES, name="flight_status"), nullable=False, default="scheduled")

    aircraft = relationship("Aircraft", lazy="joined")
    departure_airport = relationship("Airport", foreign_keys=[departure_airport_id], lazy="joined")
    destination_airport = relationship("Airport", foreign_keys=[destination_airport_id], lazy="joined")
    bookings = relationship("Booking", back_populates="flight")

    __table_args__ = (
        CheckConstraint("available_seats >= 0", name="ck_available_seats_non_negative"),
        Index("idx_route_departure", "departure_airport_id", "destination_airport_id", "departure_time"),
    )
