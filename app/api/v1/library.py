"""
Library API endpoints (learning resources)
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_account_id, get_optional_account_id, bad_request
from app.application.library import (
    CreateLibraryItemUseCase, UpdateLibraryItemUseCase, DeleteLibraryItemUseCase,
    LibraryReadService, LibraryValidationError,
)


router = APIRouter(prefix="/api/v1/library", tags=["library"])


class LibraryItemRequest(BaseModel):
    title: str
    type: str = "article"
    status: str = "pending"
    tags: str | list[str] | None = None  # "a, b" или ["a", "b"]
    topic: str | None = None
    source: str | None = None
    link: str | None = None
    summary: str | None = None
    insight: str | None = None


class LibraryItemPatch(BaseModel):
    title: str | None = None
    type: str | None = None
    status: str | None = None
    tags: str | list[str] | None = None
    topic: str | None = None
    source: str | None = None
    link: str | None = None
    summary: str | None = None
    insight: str | None = None


@router.get("")
def library_overview(
    status: str | None = None,
    type: str | None = None,
    account_id: int | None = Depends(get_optional_account_id),
    db: Session = Depends(get_db),
):
    """Статистика по всем ресурсам + список с фильтрами ("all" = без фильтра)"""
    return LibraryReadService(db).get_overview(account_id, status_filter=status, type_filter=type)


@router.post("", status_code=201)
def create_item(
    req: LibraryItemRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        item_id = CreateLibraryItemUseCase(db).execute(account_id=account_id, **req.model_dump())
    except LibraryValidationError as e:
        raise bad_request(e)
    return {"id": item_id}


@router.patch("/{item_id}")
def update_item(
    item_id: int,
    req: LibraryItemPatch,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        UpdateLibraryItemUseCase(db).execute(item_id, account_id, **req.model_dump(exclude_unset=True))
    except LibraryValidationError as e:
        raise bad_request(e)
    return {"ok": True}


@router.delete("/{item_id}")
def delete_item(
    item_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    try:
        DeleteLibraryItemUseCase(db).execute(item_id, account_id)
    except LibraryValidationError as e:
        raise bad_request(e)
    return {"ok": True}
