from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func
from flightbook.database import get_db
from flightbook.models.airport import Airport
from flightbook.models.flight import Flight
from flightbook.models.user import User
from flightbook.reference import BOOKABLE_STATUS

router = APIRouter(prefix="/system-health", tags=["System"])

@router.get("")
def get_system_health(db: Session = Depends(get_db)):
    total_flights = db.query(func.count(Flight.flight_id)).scalar() or 0
    scheduled_flights = db.query(func.count(Flight.flight_id)).filter(Flight.status == BOOKABLE_STATUS).scalar() or 0
    total_airports = db.query(func.count(Airport.airport_id)).scalar() or 0
    total_users = db.query(func.count(User.user_id)).scalar() or 0

    return {
        "total_flights": total_flights,
        "scheduled_flights": scheduled_flights,
        "total_airports": total_airports,
        "total_users": total_users,
    }
