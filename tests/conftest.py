import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from flightbook.database import Base, build_engine, get_db
from flightbook.main import app
from flightbook.models import Aircraft, Airport, Booking, Flight, User
from flightbook.security import create_access_token, hash_password

LOCAL_OFFSET = timedelta(hours=7)


def local_to_utc(value: datetime) -> datetime:
    return value - LOCAL_OFFSET


def make_flight(db, number, origin, destination, local_departure, *,
                aircraft, minutes=120, price=1_000_000, seats=100, status="scheduled"):
    departure = local_to_utc(local_departure)
    flight = Flight(
        aircraft_id=aircraft.aircraft_id,
        flight_number=number,
        departure_airport_id=origin.airport_id,
        destination_airport_id=destination.airport_id,
        departure_time=departure,
        arrival_time=departure + timedelta(minutes=minutes),
        price_economy=price,
        price_business=price * 3,
        available_seats=seats,
        status=status,
    )
    db.add(flight)
    db.flush()
    return flight


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_data(db):
    """
    Airports HAN/SGN/DAD and flights around 2025-06-11 local (UTC+7) time.

    HAN->SGN on 2025-06-11: VN101 06:00, VJ202 13:30 (2 seats), QH303 19:00,
    BL404 09:00 cancelled. VN505 departs 00:30 on 2025-06-12 local, which is
    still 2025-06-11 in UTC. TG606 flies HAN->DAD on 2025-06-11.
    """
    han = Airport(code="HAN", name="Noi Bai International Airport", city="Hà Nội", country="Vietnam")
    sgn = Airport(code="SGN", name="Tan Son Nhat International Airport", city="Hồ Chí Minh", country="Vietnam")
    dad = Airport(code="DAD", name="Da Nang International Airport", city="Đà Nẵng", country="Vietnam")
    a321 = Aircraft(manufacturer="Airbus", model="A321", total_seats=184)
    db.add_all([han, sgn, dad, a321])
    db.flush()

    flights = {
        "VN101": make_flight(db, "VN101", han, sgn, datetime(2025, 6, 11, 6, 0), aircraft=a321, price=1_500_000),
        "VJ202": make_flight(db, "VJ202", han, sgn, datetime(2025, 6, 11, 13, 30), aircraft=a321,
                             price=1_200_000, seats=2, minutes=135),
        "QH303": make_flight(db, "QH303", han, sgn, datetime(2025, 6, 11, 19, 0), aircraft=a321, price=2_000_000),
        "BL404": make_flight(db, "BL404", han, sgn, datetime(2025, 6, 11, 9, 0), aircraft=a321,
                             price=900_000, status="cancelled"),
        "VN505": make_flight(db, "VN505", han, sgn, datetime(2025, 6, 12, 0, 30), aircraft=a321, price=1_100_000),
        "TG606": make_flight(db, "TG606", han, dad, datetime(2025, 6, 11, 10, 0), aircraft=a321, price=800_000),
    }
    db.commit()
    return {"airports": {"HAN": han, "SGN": sgn, "DAD": dad}, "aircraft": a321, "flights": flights}


@pytest.fixture
def users(db):
    admin = User(full_name="Admin", email="admin@example.com",
                 password_hash=hash_password("admin123"), role="admin")
    customer = User(full_name="Nguyen Van A", email="customer@example.com",
                    password_hash=hash_password("secret123"), phone="0900000000", role="customer")
    other = User(full_name="Tran Thi B", email="other@example.com",
                 password_hash=hash_password("secret456"), role="customer")
    db.add_all([admin, customer, other])
    db.commit()
    return {"admin": admin, "customer": customer, "other": other}


@pytest.fixture
def auth_headers(users):
    def headers_for(name):
        user = users[name]
        return {"Authorization": f"Bearer {create_access_token(user.user_id, user.role)}"}
    return headers_for


@pytest.fixture
def bookings(db, users, sample_data):
    flights = sample_data["flights"]
    customer = users["customer"]
    rows = [
        Booking(user_id=customer.user_id, flight_id=flights["QH303"].flight_id,
                seat_class="economy", passenger_count=1, total_price=2_000_000, status="confirmed"),
        Booking(user_id=customer.user_id, flight_id=flights["QH303"].flight_id,
                seat_class="business", passenger_count=2, total_price=12_000_000, status="pending"),
        Booking(user_id=users["other"].user_id, flight_id=flights["TG606"].flight_id,
                seat_class="economy", passenger_count=1, total_price=800_000, status="confirmed"),
    ]
    db.add_all(rows)
    db.commit()
    return rows
