from sqlalchemy import Column, Integer, Numeric, DateTime, Enum, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from flightbook.database import Base
from flightbook.reference import SEAT_CLASSES, BOOKING_STATUSES

class Booking(Base):
    __tablename__ = "bookings"

    booking_id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), index=True, nullable=False)
    flight_id = Column(Integer, ForeignKey("flights.flight_id"), index=True, nullable=False)
    booking_date = Column(DateTime, server_default=func.current_timestamp(), nullable=False)
    seat_class = Column(Enum(*SEAT_CLASSES, name="seat_class"), nullable=False, default="economy")
    passenger_count = Column(Integer, nullable=False, default=1)
    total_price = Column(Numeric(12, 0, asdecimal=False), nullable=False)
    status = Column(Enum(*BOOKING_STATUSES, name="booking_status"), nullable=False, default="pending")

    user = relationship("User", back_populates="bookings")
    flight = relationship("Flight", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("passenger_count > 0", name="ck_passenger_count_positive"),
    )
