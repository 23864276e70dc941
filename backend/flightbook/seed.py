"""
Idempotent sample data loader for local development.

    python -m flightbook.seed

Creates the tables if needed, then inserts any missing sample airports,
aircraft, a week of scheduled flights and an admin account. Rows that
already exist (matched on their natural keys) are left untouched.
"""
import logging
import os
from datetime import datetime, timedelta
from itertools import cycle

from sqlalchemy.orm import Session

from flightbook.config import settings
from flightbook.database import SessionLocal, init_db
from flightbook.models.aircraft import Aircraft
from flightbook.models.airport import Airport
from flightbook.models.flight import Flight
from flightbook.models.user import User
from flightbook.security import hash_password
from flightbook.services.flight_query import local_timezone

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("Seed")

AIRPORTS = [
    # (code, name, city, country)
    ("HAN", "Noi Bai International Airport", "Hà Nội", "Vietnam"),
    ("SGN", "Tan Son Nhat International Airport", "Hồ Chí Minh", "Vietnam"),
    ("DAD", "Da Nang International Airport", "Đà Nẵng", "Vietnam"),
    ("PQC", "Phu Quoc International Airport", "Phú Quốc", "Vietnam"),
    ("BKK", "Suvarnabhumi Airport", "Bangkok", "Thailand"),
]

AIRCRAFT = [
    # (manufacturer, model, total_seats)
    ("Airbus", "A321", 184),
    ("Boeing", "787-9", 274),
    ("Airbus", "A320neo", 180),
]

# (flight number prefix, origin, destination, local departure hour, duration minutes, economy VND)
SCHEDULE = [
    ("VN", "HAN", "SGN", 6, 130, 1_850_000),
    ("VJ", "HAN", "SGN", 13, 130, 1_290_000),
    ("QH", "HAN", "SGN", 19, 135, 1_450_000),
    ("VN", "SGN", "HAN", 8, 130, 1_900_000),
    ("VJ", "HAN", "DAD", 10, 80, 890_000),
    ("BL", "SGN", "PQC", 15, 60, 750_000),
    ("TG", "SGN", "BKK", 20, 95, 2_600_000),
]

DAYS_AHEAD = 7


def seed_airports(db: Session) -> dict:
    existing = {a.code: a for a in db.query(Airport).all()}
    for code, name, city, country in AIRPORTS:
        if code not in existing:
            airport = Airport(code=code, name=name, city=city, country=country)
            db.add(airport)
            existing[code] = airport
    db.flush()
    return existing


def seed_aircraft(db: Session) -> list:
    fleet = db.query(Aircraft).all()
    if fleet:
        return fleet
    fleet = [Aircraft(manufacturer=m, model=model, total_seats=seats) for m, model, seats in AIRCRAFT]
    db.add_all(fleet)
    db.flush()
    return fleet


def seed_flights(db: Session, airports: dict, fleet: list, start: datetime) -> int:
    """Creates one flight per schedule row per day, stored in UTC."""
    known_numbers = {number for (number,) in db.query(Flight.flight_number).all()}
    aircraft_cycle = cycle(fleet)
    created = 0

    for day in range(DAYS_AHEAD):
        local_day = start + timedelta(days=day)
        for index, (prefix, origin, destination, hour, minutes, price) in enumerate(SCHEDULE):
            flight_number = f"{prefix}{local_day:%y%m%d}{index}"
            if flight_number in known_numbers:
                continue
            aircraft = next(aircraft_cycle)
            # Local departure hour converted to stored UTC
            departure = local_day.replace(hour=hour) - timedelta(hours=settings.local_utc_offset_hours)
            db.add(Flight(
                aircraft_id=aircraft.aircraft_id,
                flight_number=flight_number,
                departure_airport_id=airports[origin].airport_id,
                destination_airport_id=airports[destination].airport_id,
                departure_time=departure,
                arrival_time=departure + timedelta(minutes=minutes),
                price_economy=price,
                price_business=price * 3,
                available_seats=aircraft.total_seats,
                status="scheduled",
            ))
            known_numbers.add(flight_number)
            created += 1
    return created


def seed_admin(db: Session):
    email = os.getenv("SEED_ADMIN_EMAIL", "admin@flightbook.vn")
    if db.query(User).filter(User.email == email).first():
        return
    db.add(User(
        full_name="Administrator",
        email=email,
        password_hash=hash_password(os.getenv("SEED_ADMIN_PASSWORD", "admin123")),
        role="admin",
    ))


def run_seed():
    init_db()
    db = SessionLocal()
    try:
        airports = seed_airports(db)
        fleet = seed_aircraft(db)
        today = datetime.now(local_timezone()).replace(tzinfo=None, hour=0, minute=0, second=0, microsecond=0)
        created = seed_flights(db, airports, fleet, today)
        seed_admin(db)
        db.commit()
        logger.info(f"Seed complete: {len(airports)} airports, {len(fleet)} aircraft, {created} new flights.")
    except Exception as e:
        logger.error(f"Seeding failed: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    run_seed()
