"""
Authentication routes (login, logout, current user)
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Request, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_optional_account_id
from app.auth import verify_password, get_user_by_email


router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: str
    password: str


@router.post("/login")
def login(request: Request, req: LoginRequest, db: Session = Depends(get_db)):
    """
    Вход: user_id сохраняется в session cookie
    """
    user = get_user_by_email(db, req.email)
    if not user or not verify_password(req.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Неверный email или пароль")

    request.session["user_id"] = user.id
    user.last_seen_at = datetime.now(timezone.utc)
    db.commit()
    return {"user_id": user.id, "email": user.email}


@router.post("/logout")
def logout(request: Request):
    """
    Выход из системы
    """
    request.session.clear()
    return {"ok": True}


@router.get("/me")
def me(account_id: int | None = Depends(get_optional_account_id)):
    return {"user_id": account_id}
