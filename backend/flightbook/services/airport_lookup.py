from typing import Optional

from sqlalchemy.orm import Session

from flightbook.models.airport import Airport


def normalize_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def resolve_airport(db: Session, code: Optional[str]) -> Optional[Airport]:
    """Return the single airport whose IATA code matches, or None."""
    code = normalize_code(code)
    if not code:
        return None
    return db.query(Airport).filter(Airport.code == code).first()
