"""
Contacts use cases: CRUD справочника профессиональных контактов.
"""
from datetime import date
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.infrastructure.db.models import ContactModel
from app.domain.contact import industries, upcoming_contacts
from app.utils.validation import parse_optional_date


class ContactValidationError(ValueError):
    pass


_TEXT_FIELDS = ("company", "role", "notes", "industry", "email", "phone")
_DATE_FIELDS = ("last_contact", "next_contact")


def _date(value) -> date | None:
    try:
        return parse_optional_date(value)
    except ValueError as e:
        raise ContactValidationError(str(e)) from e


class CreateContactUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int, name: str, **fields) -> int:
        name = (name or "").strip()
        if not name:
            raise ContactValidationError("Имя контакта не может быть пустым")
        unknown = set(fields) - set(_TEXT_FIELDS) - set(_DATE_FIELDS)
        if unknown:
            raise ContactValidationError(f"Неизвестные поля: {', '.join(sorted(unknown))}")

        contact = ContactModel(
            account_id=account_id,
            name=name,
            **{k: (fields.get(k) or "").strip() or None for k in _TEXT_FIELDS},
            **{k: _date(fields.get(k)) for k in _DATE_FIELDS},
        )
        self.db.add(contact)
        self.db.flush()
        self.db.commit()
        return contact.id


class UpdateContactUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, contact_id: int, account_id: int, **changes) -> None:
        contact = self.db.query(ContactModel).filter(
            ContactModel.id == contact_id,
            ContactModel.account_id == account_id,
        ).first()
        if not contact:
            raise ContactValidationError("Контакт не найден")

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ContactValidationError("Имя контакта не может быть пустым")
            contact.name = name
        for key in _TEXT_FIELDS:
            if key in changes:
                setattr(contact, key, (changes[key] or "").strip() or None)
        for key in _DATE_FIELDS:
            if key in changes:
                setattr(contact, key, _date(changes[key]))
        self.db.commit()


class DeleteContactUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, contact_id: int, account_id: int) -> None:
        contact = self.db.query(ContactModel).filter(
            ContactModel.id == contact_id,
            ContactModel.account_id == account_id,
        ).first()
        if not contact:
            raise ContactValidationError("Контакт не найден")
        self.db.delete(contact)
        self.db.commit()


class ContactReadService:
    def __init__(self, db: Session):
        self.db = db

    def list_contacts(self, account_id: int | None) -> List[ContactModel]:
        if account_id is None:
            return []
        return (
            self.db.query(ContactModel)
            .filter(ContactModel.account_id == account_id)
            .order_by(ContactModel.name.asc(), ContactModel.id.asc())
            .all()
        )

    def get_overview(self, account_id: int | None, today: date) -> Dict[str, Any]:
        contacts = self.list_contacts(account_id)
        upcoming = upcoming_contacts(contacts, today)
        return {
            "total": len(contacts),
            "upcoming_count": len(upcoming),
            "industries": industries(contacts),
            "upcoming": [_contact_dict(c) for c in upcoming],
            "contacts": [_contact_dict(c) for c in contacts],
        }


def _contact_dict(c: ContactModel) -> Dict[str, Any]:
    return {
        "id": c.id,
        "name": c.name,
        "company": c.company,
        "role": c.role,
        "industry": c.industry,
        "email": c.email,
        "phone": c.phone,
        "last_contact": c.last_contact,
        "next_contact": c.next_contact,
        "notes": c.notes,
    }
