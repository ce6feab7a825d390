"""Tests for library items and professional contacts"""
from datetime import date

import pytest

from app.infrastructure.db.models import LibraryItemModel, ContactModel
from app.application.library import (
    CreateLibraryItemUseCase, UpdateLibraryItemUseCase, DeleteLibraryItemUseCase,
    LibraryReadService, LibraryValidationError,
)
from app.application.contacts import (
    CreateContactUseCase, UpdateContactUseCase, DeleteContactUseCase,
    ContactReadService, ContactValidationError,
)

ACCOUNT = 1
TODAY = date(2025, 3, 10)


def _item(db, title="Clean Code", **kw):
    return CreateLibraryItemUseCase(db).execute(account_id=ACCOUNT, title=title, **kw)


class TestLibrary:
    def test_tags_from_csv(self, db_session):
        iid = _item(db_session, tags=" python, ,sql ")
        item = db_session.query(LibraryItemModel).filter(LibraryItemModel.id == iid).first()
        assert item.tags == ["python", "sql"]

    def test_blank_tags_become_none(self, db_session):
        iid = _item(db_session, tags=" , ")
        assert db_session.query(LibraryItemModel).filter(LibraryItemModel.id == iid).first().tags is None

    def test_invalid_type(self, db_session):
        with pytest.raises(LibraryValidationError, match="тип"):
            _item(db_session, type="podcast")

    def test_update_and_delete(self, db_session):
        iid = _item(db_session)
        UpdateLibraryItemUseCase(db_session).execute(iid, ACCOUNT, status="completed", tags=["a", "b"])
        item = db_session.query(LibraryItemModel).first()
        assert item.status == "completed"
        assert item.tags == ["a", "b"]
        DeleteLibraryItemUseCase(db_session).execute(iid, ACCOUNT)
        assert db_session.query(LibraryItemModel).count() == 0

    def test_overview_stats_ignore_filters(self, db_session):
        _item(db_session, title="A", type="book", status="completed")
        _item(db_session, title="B", type="book", status="pending")
        _item(db_session, title="C", type="video", status="completed")
        _item(db_session, title="D", type="course", status="in_progress")

        overview = LibraryReadService(db_session).get_overview(
            ACCOUNT, status_filter="completed", type_filter="book",
        )
        assert overview["stats"]["total"] == 4
        assert overview["stats"]["completion_rate"] == 50
        assert [i["title"] for i in overview["items"]] == ["A"]
        assert overview["types"][0] == {"type": "book", "count": 2, "bar_width": 100.0}

    def test_all_filter(self, db_session):
        _item(db_session)
        items = LibraryReadService(db_session).list_items(ACCOUNT, status_filter="all", type_filter="all")
        assert len(items) == 1

    def test_no_user(self, db_session):
        _item(db_session)
        overview = LibraryReadService(db_session).get_overview(None)
        assert overview["stats"]["total"] == 0
        assert overview["items"] == []


class TestContacts:
    def test_create(self, db_session):
        cid = CreateContactUseCase(db_session).execute(
            account_id=ACCOUNT, name="  Anna  ", industry="Fintech", next_contact="2025-03-20",
        )
        c = db_session.query(ContactModel).filter(ContactModel.id == cid).first()
        assert c.name == "Anna"
        assert c.next_contact == date(2025, 3, 20)

    def test_empty_name(self, db_session):
        with pytest.raises(ContactValidationError, match="Имя"):
            CreateContactUseCase(db_session).execute(account_id=ACCOUNT, name=" ")

    def test_bad_date(self, db_session):
        with pytest.raises(ContactValidationError, match="дата"):
            CreateContactUseCase(db_session).execute(account_id=ACCOUNT, name="A", next_contact="soon")

    def test_update_and_delete(self, db_session):
        cid = CreateContactUseCase(db_session).execute(account_id=ACCOUNT, name="Bob")
        UpdateContactUseCase(db_session).execute(cid, ACCOUNT, role="CTO")
        assert db_session.query(ContactModel).first().role == "CTO"
        DeleteContactUseCase(db_session).execute(cid, ACCOUNT)
        assert db_session.query(ContactModel).count() == 0

    def test_upcoming_boundary(self, db_session):
        create = CreateContactUseCase(db_session)
        create.execute(account_id=ACCOUNT, name="Today", next_contact=TODAY, industry="IT")
        create.execute(account_id=ACCOUNT, name="Yesterday", next_contact=date(2025, 3, 9))
        create.execute(account_id=ACCOUNT, name="Later", next_contact=date(2025, 4, 1), industry="Law")
        create.execute(account_id=ACCOUNT, name="Never")

        overview = ContactReadService(db_session).get_overview(ACCOUNT, TODAY)
        assert overview["total"] == 4
        assert overview["upcoming_count"] == 2
        assert [c["name"] for c in overview["upcoming"]] == ["Today", "Later"]
        assert overview["industries"] == ["IT", "Law"]

    def test_no_user(self, db_session):
        CreateContactUseCase(db_session).execute(account_id=ACCOUNT, name="Bob")
        assert ContactReadService(db_session).get_overview(None, TODAY)["total"] == 0
