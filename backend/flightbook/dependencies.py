from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from flightbook.database import get_db
from flightbook.models.user import User
from flightbook.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Không có token xác thực")

    payload = decode_access_token(credentials.credentials)
    if not payload or "sub" not in payload:
        raise HTTPException(status_code=401, detail="Token không hợp lệ hoặc đã hết hạn")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Token không hợp lệ hoặc đã hết hạn")

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Người dùng không tồn tại")
    return user


def require_roles(*roles: str):
    """Dependency factory rejecting authenticated users whose role is not listed."""

    def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail="Bạn không có quyền truy cập")
        return user

    return checker


def ensure_self_or_admin(user: User, user_id: int):
    if user.role != "admin" and user.user_id != user_id:
        raise HTTPException(status_code=403, detail="Bạn không có quyền truy cập")
