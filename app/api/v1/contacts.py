"""
Professional contacts API endpoints
"""
from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_account_id, get_optional_account_id, get_today, bad_request
from app.application.contacts import (
    CreateContactUseCase, UpdateContactUseCase, DeleteContactUseCase,
    ContactReadService, ContactValidationError,
)


router = APIRouter(prefix="/api/v1/contacts", tags=["contacts"])


class ContactRequest(BaseModel):
    name: str
    company: str | None = None
    role: str | None = None
    industry: str | None = None
    email: str | None = None
    phone: str | None = None
    last_contact: date | None = None
    next_contact: date | None = None
    notes: str | None = None


class ContactPatch(BaseModel):
    name: str | None = None
    company: str | None = None
    role: str | None = None
    industry: str | None = None
    email: str | None = None
    phone: str | None = None
    last_contact: date | None = None
    next_contact: date | None = None
    notes: str | None = None


@router.get("")
def contacts_overview(
    account_id: int | None = Depends(get_optional_account_id),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    return ContactReadService(db).get_overview(account_id, today)


@router.post("", status_code=201)
def create_contact(
    req: ContactRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        contact_id = CreateContactUseCase(db).execute(account_id=account_id, **req.model_dump())
    except ContactValidationError as e:
        raise bad_request(e)
    return {"id": contact_id}


@router.patch("/{contact_id}")
def update_contact(
    contact_id: int,
    req: ContactPatch,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        UpdateContactUseCase(db).execute(contact_id, account_id, **req.model_dump(exclude_unset=True))
    except ContactValidationError as e:
        raise bad_request(e)
    return {"ok": True}


@router.delete("/{contact_id}")
def delete_contact(
    contact_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        DeleteContactUseCase(db).execute(contact_id, account_id)
    except ContactValidationError as e:
        raise bad_request(e)
    return {"ok": True}
