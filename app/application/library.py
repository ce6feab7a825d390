"""
Library use-cases and read service (learning resources).
"""
from typing import List, Dict, Any

from sqlalchemy.orm import Session

from app.infrastructure.db.models import LibraryItemModel
from app.domain.library import (
    LIBRARY_TYPES, LIBRARY_STATUSES,
    filter_items, parse_tags, status_counts, type_distribution,
)


# ── Errors ──

class LibraryValidationError(ValueError):
    pass


_TEXT_FIELDS = ("topic", "source", "link", "summary", "insight")


def _tags(value) -> list[str] | None:
    if value is None or isinstance(value, str):
        return parse_tags(value)
    return parse_tags(",".join(value))


# ── Use Cases ──

class CreateLibraryItemUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        title: str,
        type: str = "article",
        status: str = "pending",
        tags: str | list[str] | None = None,
        **text_fields,
    ) -> int:
        title = (title or "").strip()
        if not title:
            raise LibraryValidationError("Название ресурса не может быть пустым")
        if type not in LIBRARY_TYPES:
            raise LibraryValidationError(f"Недопустимый тип: {type}")
        if status not in LIBRARY_STATUSES:
            raise LibraryValidationError(f"Недопустимый статус: {status}")
        unknown = set(text_fields) - set(_TEXT_FIELDS)
        if unknown:
            raise LibraryValidationError(f"Неизвестные поля: {', '.join(sorted(unknown))}")

        item = LibraryItemModel(
            account_id=account_id,
            title=title,
            type=type,
            status=status,
            tags=_tags(tags),
            **{k: (text_fields.get(k) or "").strip() or None for k in _TEXT_FIELDS},
        )
        self.db.add(item)
        self.db.flush()
        self.db.commit()
        return item.id


class UpdateLibraryItemUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, item_id: int, account_id: int, **changes) -> None:
        item = self._get(item_id, account_id)

        if "title" in changes:
            title = (changes["title"] or "").strip()
            if not title:
                raise LibraryValidationError("Название ресурса не может быть пустым")
            item.title = title
        if "type" in changes:
            if changes["type"] not in LIBRARY_TYPES:
                raise LibraryValidationError(f"Недопустимый тип: {changes['type']}")
            item.type = changes["type"]
        if "status" in changes:
            if changes["status"] not in LIBRARY_STATUSES:
                raise LibraryValidationError(f"Недопустимый статус: {changes['status']}")
            item.status = changes["status"]
        if "tags" in changes:
            item.tags = _tags(changes["tags"])
        for key in _TEXT_FIELDS:
            if key in changes:
                setattr(item, key, (changes[key] or "").strip() or None)

        self.db.commit()

    def _get(self, item_id: int, account_id: int) -> LibraryItemModel:
        item = self.db.query(LibraryItemModel).filter(
            LibraryItemModel.id == item_id,
            LibraryItemModel.account_id == account_id,
        ).first()
        if not item:
            raise LibraryValidationError("Ресурс не найден")
        return item


class DeleteLibraryItemUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, item_id: int, account_id: int) -> None:
        item = self.db.query(LibraryItemModel).filter(
            LibraryItemModel.id == item_id,
            LibraryItemModel.account_id == account_id,
        ).first()
        if not item:
            raise LibraryValidationError("Ресурс не найден")
        self.db.delete(item)
        self.db.commit()


# ── Read Service ──

class LibraryReadService:
    """Read-only queries for the library view."""

    def __init__(self, db: Session):
        self.db = db

    def list_items(
        self,
        account_id: int | None,
        status_filter: str | None = None,
        type_filter: str | None = None,
    ) -> List[LibraryItemModel]:
        if account_id is None:
            return []
        items = (
            self.db.query(LibraryItemModel)
            .filter(LibraryItemModel.account_id == account_id)
            .order_by(LibraryItemModel.created_at.desc(), LibraryItemModel.id.desc())
            .all()
        )
        return filter_items(items, status=status_filter, item_type=type_filter)

    def get_overview(
        self,
        account_id: int | None,
        status_filter: str | None = None,
        type_filter: str | None = None,
    ) -> Dict[str, Any]:
        """Stats are computed over all items; the list honours the filters."""
        items = self.list_items(account_id)
        return {
            "stats": status_counts(items),
            "types": type_distribution(items),
            "items": [
                _item_dict(i)
                for i in filter_items(items, status=status_filter, item_type=type_filter)
            ],
        }


def _item_dict(i: LibraryItemModel) -> Dict[str, Any]:
    return {
        "id": i.id,
        "title": i.title,
        "type": i.type,
        "status": i.status,
        "topic": i.topic,
        "source": i.source,
        "link": i.link,
        "tags": i.tags or [],
        "summary": i.summary,
        "insight": i.insight,
        "created_at": i.created_at,
    }
