from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from flightbook.database import Base
from flightbook.reference import USER_ROLES

class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(120), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    role = Column(Enum(*USER_ROLES, name="user_role"), nullable=False, default="customer")
    created_at = Column(DateTime, server_default=func.current_timestamp(), nullable=False)

    bookings = relationship("Booking", back_populates="user", cascade="all, delete-orphan")
