from sqlalchemy import Column, Integer, String
from flightbook.database import Base

class Aircraft(Base):
    __tablename__ = "aircraft"

    aircraft_id = Column(Integer, primary_key=True, index=True)
    manufacturer = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    total_seats = Column(Integer, nullable=False, default=0)
