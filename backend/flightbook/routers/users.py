from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from typing import List
import logging

from flightbook.database import get_db
from flightbook.dependencies import ensure_self_or_admin, get_current_user, require_roles
from flightbook.models.booking import Booking
from flightbook.models.user import User
from flightbook.schemas.booking_schema import BookingDetail, BookingResponse
from flightbook.schemas.user_schema import PasswordReset, UserLogin, UserRegister, UserResponse, UserUpdate
from flightbook.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

USER_NOT_FOUND = "Không tìm thấy người dùng"
EMAIL_TAKEN = "Email đã được sử dụng"


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail=USER_NOT_FOUND)
    return user


def _commit_user(db: Session):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail=EMAIL_TAKEN)


@router.get("", response_model=List[UserResponse])
def get_all_users(db: Session = Depends(get_db), _admin=Depends(require_roles("admin"))):
    return db.query(User).order_by(User.user_id.asc()).all()


@router.post("/register", status_code=201)
def register_user(payload: UserRegister, db: Session = Depends(get_db)):
    email = payload.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=400, detail=EMAIL_TAKEN)

    user = User(
        full_name=payload.full_name,
        email=email,
        password_hash=hash_password(payload.password),
        phone=payload.phone,
        role="customer",
    )
    db.add(user)
    _commit_user(db)
    db.refresh(user)
    logger.info(f"Registered user {user.user_id}")
    return {
        "success": True,
        "message": "Đăng ký thành công",
        "user": UserResponse.model_validate(user),
    }


@router.post("/login")
def login_user(payload: UserLogin, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email.lower()).first()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning(f"Failed login attempt for {payload.email}")
        raise HTTPException(status_code=401, detail="Email hoặc mật khẩu không đúng")

    return {
        "success": True,
        "token": create_access_token(user.user_id, user.role),
        "user": UserResponse.model_validate(user),
    }


@router.get("/me", response_model=UserResponse)
def get_current_user_profile(user: User = Depends(get_current_user)):
    return user


@router.post("/resetPassword")
def reset_password(
    payload: PasswordReset,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if not verify_password(payload.oldPassword, user.password_hash):
        raise HTTPException(status_code=400, detail="Mật khẩu cũ không đúng")

    user.password_hash = hash_password(payload.newPassword)
    db.commit()
    logger.info(f"Password changed for user {user.user_id}")
    return {"success": True, "message": "Đổi mật khẩu thành công"}


@router.get("/{user_id}", response_model=UserResponse)
def get_user_by_id(user_id: int, db: Session = Depends(get_db), _user=Depends(get_current_user)):
    return _get_user_or_404(db, user_id)


@router.put("/put/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    ensure_self_or_admin(current, user_id)
    user = _get_user_or_404(db, user_id)

    changes = payload.model_dump(exclude_unset=True)
    if "role" in changes and current.role != "admin":
        raise HTTPException(status_code=403, detail="Chỉ quản trị viên được đổi vai trò")
    if changes.get("email"):
        changes["email"] = changes["email"].lower()

    for field, value in changes.items():
        if value is not None:
            setattr(user, field, value)
    _commit_user(db)
    db.refresh(user)
    return user


@router.delete("/del/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    _admin=Depends(require_roles("admin")),
):
    user = _get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()
    logger.info(f"Deleted user {user_id}")
    return {"success": True, "message": "Xoá người dùng thành công"}


@router.get("/{user_id}/bookings", response_model=List[BookingResponse])
def get_user_bookings(
    user_id: int,
    db: Session = Depends(get_db),
    _admin=Depends(require_roles("admin")),
):
    _get_user_or_404(db, user_id)
    return (
        db.query(Booking)
        .filter(Booking.user_id == user_id)
        .order_by(Booking.booking_date.desc())
        .all()
    )


@router.get("/{user_id}/bookings/detail", response_model=List[BookingDetail])
def get_user_booking_details(
    user_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    ensure_self_or_admin(current, user_id)
    _get_user_or_404(db, user_id)
    return (
        db.query(Booking)
        .options(joinedload(Booking.flight))
        .filter(Booking.user_id == user_id)
        .order_by(Booking.booking_date.desc())
        .all()
    )
