from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List
import logging

from flightbook.database import get_db
from flightbook.dependencies import require_roles
from flightbook.models.airport import Airport
from flightbook.schemas.airport_schema import AirportCreate, AirportResponse, AirportUpdate
from flightbook.services.airport_lookup import resolve_airport

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/airports", tags=["airports"])

AIRPORT_NOT_FOUND = "Không tìm thấy sân bay"


def _get_airport_or_404(db: Session, airport_id: int) -> Airport:
    airport = db.get(Airport, airport_id)
    if not airport:
        raise HTTPException(status_code=404, detail=AIRPORT_NOT_FOUND)
    return airport


def _commit_or_400(db: Session):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Airport write rejected by database: {e.orig}")
        raise HTTPException(status_code=400, detail="Dữ liệu sân bay không hợp lệ hoặc mã sân bay đã tồn tại")


@router.get("", response_model=List[AirportResponse])
def get_airports(db: Session = Depends(get_db)):
    return db.query(Airport).order_by(Airport.code.asc()).all()


@router.get("/{code}", response_model=AirportResponse)
def get_airport_by_code(code: str, db: Session = Depends(get_db)):
    airport = resolve_airport(db, code)
    if not airport:
        raise HTTPException(status_code=404, detail=AIRPORT_NOT_FOUND)
    return airport


@router.post("", status_code=201, response_model=AirportResponse)
def create_airport(
    payload: AirportCreate,
    db: Session = Depends(get_db),
    _admin=Depends(require_roles("admin")),
):
    airport = Airport(**payload.model_dump())
    db.add(airport)
    _commit_or_400(db)
    db.refresh(airport)
    logger.info(f"Created airport {airport.code}")
    return airport


@router.put("/{airport_id}", response_model=AirportResponse)
def update_airport(
    airport_id: int,
    payload: AirportUpdate,
    db: Session = Depends(get_db),
    _admin=Depends(require_roles("admin")),
):
    airport = _get_airport_or_404(db, airport_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(airport, field, value)
    _commit_or_400(db)
    db.refresh(airport)
    return airport


@router.delete("/{airport_id}", status_code=204)
def delete_airport(
    airport_id: int,
    db: Session = Depends(get_db),
    _admin=Depends(require_roles("admin")),
):
    airport = _get_airport_or_404(db, airport_id)
    db.delete(airport)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Sân bay đang được sử dụng bởi chuyến bay")
    logger.info(f"Deleted airport {airport_id}")
    return Response(status_code=204)
