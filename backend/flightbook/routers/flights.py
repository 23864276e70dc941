from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional
import logging

from flightbook.database import get_db
from flightbook.dependencies import require_roles
from flightbook.models.booking import Booking
from flightbook.models.flight import Flight
from flightbook.reference import POPULAR_FLIGHTS_LIMIT
from flightbook.schemas.flight_schema import FlightCreate, FlightResponse, FlightUpdate, FlightWithAirports
from flightbook.services.airport_lookup import normalize_code, resolve_airport
from flightbook.services.flight_formatting import format_flights
from flightbook.services.flight_query import (
    DestinationCriteria,
    build_destination_conditions,
    build_listing_conditions,
    date_conditions,
    parse_departure_date,
    parse_passenger_count,
    parse_price,
)
from flightbook.services.pagination import paginate_flights, pagination_payload, parse_pagination

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/flights",
    tags=["flights"]
)

FLIGHT_NOT_FOUND = "Không tìm thấy chuyến bay."
INVALID_PRICE = "Giá trị không hợp lệ"
SAME_AIRPORT = "Điểm đi và điểm đến phải khác nhau"
INVALID_DATE = {
    "message": "Định dạng ngày không hợp lệ. Sử dụng YYYY-MM-DD",
    "example": "2025-06-11",
}


def _price_bounds(min_price: Optional[str], max_price: Optional[str]):
    try:
        return parse_price(min_price), parse_price(max_price)
    except ValueError:
        logger.warning(f"Rejected price bounds min={min_price!r} max={max_price!r}")
        raise HTTPException(status_code=400, detail=INVALID_PRICE)


def _get_flight_or_404(db: Session, flight_id: int) -> Flight:
    flight = db.get(Flight, flight_id)
    if not flight:
        raise HTTPException(status_code=404, detail=FLIGHT_NOT_FOUND)
    return flight


def _commit_or_400(db: Session):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Flight write rejected by database: {e.orig}")
        raise HTTPException(status_code=400, detail="Dữ liệu chuyến bay không hợp lệ hoặc số hiệu chuyến bay đã tồn tại")


@router.get("")
def get_all_flights(db: Session = Depends(get_db)):
    flights = db.query(Flight).order_by(Flight.departure_time.asc()).all()
    return [FlightWithAirports.model_validate(f) for f in flights]


@router.get("/popular")
def get_popular_flights(db: Session = Depends(get_db)):
    booking_counts = (
        db.query(Booking.flight_id, func.count(Booking.booking_id).label("booking_count"))
        .group_by(Booking.flight_id)
        .subquery()
    )
    flights = (
        db.query(Flight)
        .outerjoin(booking_counts, booking_counts.c.flight_id == Flight.flight_id)
        .order_by(func.coalesce(booking_counts.c.booking_count, 0).desc(), Flight.flight_id.asc())
        .limit(POPULAR_FLIGHTS_LIMIT)
        .all()
    )
    return [FlightWithAirports.model_validate(f) for f in flights]


@router.get("/paginated")
def get_paginated_flights(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    minPrice: Optional[str] = None,
    maxPrice: Optional[str] = None,
    timeOfDay: Optional[str] = None,
    db: Session = Depends(get_db),
):
    params = parse_pagination(page, limit)
    min_price, max_price = _price_bounds(minPrice, maxPrice)

    conditions = build_listing_conditions(min_price, max_price, timeOfDay)
    total, flights = paginate_flights(db, conditions, Flight.departure_time.desc(), params)

    return {
        "success": True,
        "flights": format_flights(flights),
        "pagination": pagination_payload(total, params),
        "filters": {
            "minPrice": min_price,
            "maxPrice": max_price,
            "timeOfDay": timeOfDay,
        },
    }


@router.get("/search")
def search_flights_by_destination(
    fromAirport: Optional[str] = None,
    toAirport: Optional[str] = None,
    departureDate: Optional[str] = None,
    tripType: Optional[str] = None,
    passengerCount: Optional[str] = None,
    returnDate: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    minPrice: Optional[str] = None,
    maxPrice: Optional[str] = None,
    timeOfDay: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """
    Search scheduled flights between two airports on one local calendar day.
    Unknown airport codes are a client error rather than an empty result.
    """
    if not normalize_code(fromAirport) or not normalize_code(toAirport) or not departureDate:
        raise HTTPException(status_code=400, detail={
            "message": "Thiếu thông tin điểm đi, điểm đến hoặc ngày đi",
            "required": "fromAirport, toAirport, departureDate (format: YYYY-MM-DD)",
        })

    try:
        departure_day = parse_departure_date(departureDate)
    except ValueError:
        logger.warning(f"Rejected departureDate {departureDate!r}")
        raise HTTPException(status_code=400, detail=INVALID_DATE)

    min_price, max_price = _price_bounds(minPrice, maxPrice)
    passenger_count = parse_passenger_count(passengerCount)
    params = parse_pagination(page, limit)

    from_airport = resolve_airport(db, fromAirport)
    to_airport = resolve_airport(db, toAirport)
    if not from_airport or not to_airport:
        raise HTTPException(status_code=400, detail="Không tìm thấy sân bay")

    criteria = DestinationCriteria(
        departure_airport_id=from_airport.airport_id,
        destination_airport_id=to_airport.airport_id,
        departure_date=departure_day,
        passenger_count=passenger_count,
        min_price=min_price,
        max_price=max_price,
        time_of_day=timeOfDay,
    )
    conditions = build_destination_conditions(criteria)
    total, flights = paginate_flights(db, conditions, Flight.departure_time.asc(), params)

    logger.info(
        f"Search {from_airport.code}->{to_airport.code} on {departure_day.isoformat()}: "
        f"{total} match(es), page {params.page}"
    )

    return {
        "success": True,
        "flights": format_flights(flights),
        "pagination": pagination_payload(total, params),
        "searchCriteria": {
            "fromAirport": from_airport.airport_id,
            "toAirport": to_airport.airport_id,
            "departureDate": departure_day.isoformat(),
            "tripType": tripType,
            "passengerCount": passenger_count,
            "returnDate": returnDate,
            "filters": {
                "minPrice": min_price,
                "maxPrice": max_price,
                "timeOfDay": timeOfDay,
            },
        },
    }


@router.get("/search/price")
def search_flights_by_price(
    minPrice: Optional[str] = None,
    maxPrice: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    db: Session = Depends(get_db),
):
    min_price, max_price = _price_bounds(minPrice, maxPrice)
    params = parse_pagination(page, limit)

    conditions = build_listing_conditions(min_price, max_price, scheduled_only=True)
    total, flights = paginate_flights(db, conditions, Flight.price_economy.asc(), params)

    return {
        "success": True,
        "flights": [FlightWithAirports.model_validate(f) for f in flights],
        "pagination": pagination_payload(total, params),
        "priceRange": {
            "min": min_price,
            "max": max_price,
        },
    }


@router.get("/search/date")
def search_flights_by_date(
    from_airport_id: Optional[int] = Query(None, alias="from"),
    to_airport_id: Optional[int] = Query(None, alias="to"),
    departureDate: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Every scheduled flight between two airport ids on one local day, unpaginated."""
    if from_airport_id is None or to_airport_id is None or not departureDate:
        raise HTTPException(status_code=400, detail="Thiếu thông tin cần thiết")

    try:
        departure_day = parse_departure_date(departureDate)
    except ValueError:
        raise HTTPException(status_code=400, detail=INVALID_DATE)

    conditions = date_conditions(from_airport_id, to_airport_id, departure_day)
    flights = db.query(Flight).filter(*conditions).order_by(Flight.departure_time.asc()).all()

    return {
        "success": True,
        "count": len(flights),
        "flights": [FlightWithAirports.model_validate(f) for f in flights],
    }


@router.get("/{flight_id}", response_model=FlightWithAirports)
def get_flight_by_id(flight_id: int, db: Session = Depends(get_db)):
    return _get_flight_or_404(db, flight_id)


@router.post("", status_code=201, response_model=FlightResponse)
def create_flight(
    payload: FlightCreate,
    db: Session = Depends(get_db),
    _admin=Depends(require_roles("admin")),
):
    flight = Flight(**payload.model_dump())
    db.add(flight)
    _commit_or_400(db)
    db.refresh(flight)
    logger.info(f"Created flight {flight.flight_number} (id={flight.flight_id})")
    return flight


@router.put("/{flight_id}", response_model=FlightResponse)
def update_flight(
    flight_id: int,
    payload: FlightUpdate,
    db: Session = Depends(get_db),
    _admin=Depends(require_roles("admin")),
):
    flight = _get_flight_or_404(db, flight_id)
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}

    departure = changes.get("departure_time", flight.departure_time)
    arrival = changes.get("arrival_time", flight.arrival_time)
    if arrival <= departure:
        raise HTTPException(status_code=400, detail="Giờ đến phải sau giờ khởi hành")

    origin = changes.get("departure_airport_id", flight.departure_airport_id)
    destination = changes.get("destination_airport_id", flight.destination_airport_id)
    if origin == destination:
        raise HTTPException(status_code=400, detail=SAME_AIRPORT)

    for field, value in changes.items():
        setattr(flight, field, value)
    _commit_or_400(db)
    db.refresh(flight)
    logger.info(f"Updated flight {flight.flight_number}: {sorted(changes)}")
    return flight


@router.delete("/{flight_id}", status_code=204)
def delete_flight(
    flight_id: int,
    db: Session = Depends(get_db),
    _admin=Depends(require_roles("admin")),
):
    flight = _get_flight_or_404(db, flight_id)
    booked = db.query(func.count(Booking.booking_id)).filter(Booking.flight_id == flight_id).scalar() or 0
    if booked:
        raise HTTPException(status_code=400, detail="Chuyến bay đã có đặt chỗ, không thể xóa")
    db.delete(flight)
    db.commit()
    logger.info(f"Deleted flight {flight_id}")
    return Response(status_code=204)
