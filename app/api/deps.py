"""
FastAPI dependencies (DB session, authentication)
"""
from datetime import date

from fastapi import Request, HTTPException, status, Depends
from sqlalchemy.orm import Session

from app.config import get_settings
from app.infrastructure.db.session import get_db as _get_db
from app.infrastructure.db.models import User


# Re-export get_db для удобства
get_db = _get_db


def get_optional_account_id(request: Request, db: Session = Depends(get_db)) -> int | None:
    """
    ID текущего пользователя или None (не залогинен / пользователь удалён).

    Read endpoints pass None down to the read services, which answer with an
    empty state instead of querying.
    """
    user_id = request.session.get("user_id")
    if not user_id:
        return None
    user = db.query(User).filter(User.id == user_id).first()
    return user.id if user else None


def get_current_account_id(account_id: int | None = Depends(get_optional_account_id)) -> int:
    """
    ID текущего пользователя (для endpoints с изменениями)

    Raises:
        HTTPException(401): если не залогинен
    """
    if account_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return account_id


def get_today() -> date:
    """Calendar date in the configured timezone."""
    return get_settings().local_today()


def bad_request(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
