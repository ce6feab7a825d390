"""Tests for objectives and key results"""
from decimal import Decimal

import pytest

from app.infrastructure.db.models import KeyResultModel, ObjectiveModel
from app.application.objectives import (
    CreateObjectiveUseCase, UpdateObjectiveUseCase, DeleteObjectiveUseCase,
    CreateKeyResultUseCase, UpdateKeyResultUseCase, UpdateKeyResultValueUseCase,
    DeleteKeyResultUseCase,
    ObjectiveReadService, ObjectiveValidationError,
)

ACCOUNT = 1


def _objective(db, title="Run a marathon", area="personal", status="active"):
    return CreateObjectiveUseCase(db).execute(
        account_id=ACCOUNT, objective=title, area=area, period="Q1 2026", status=status,
    )


def _kr(db, objective_id, baseline="0", target="50", current=None):
    return CreateKeyResultUseCase(db).execute(
        account_id=ACCOUNT, objective_id=objective_id, key_result="Weekly km",
        metric="km", baseline=baseline, target=target, current_value=current,
    )


class TestObjectives:
    def test_create(self, db_session):
        oid = _objective(db_session)
        o = db_session.query(ObjectiveModel).filter(ObjectiveModel.id == oid).first()
        assert o.priority == "medium"
        assert o.status == "active"

    def test_invalid_area(self, db_session):
        with pytest.raises(ObjectiveValidationError, match="area"):
            _objective(db_session, area="family")

    def test_status_is_manual(self, db_session):
        oid = _objective(db_session)
        _kr(db_session, oid, current="0")
        UpdateObjectiveUseCase(db_session).execute(oid, ACCOUNT, status="on_track")
        o = db_session.query(ObjectiveModel).filter(ObjectiveModel.id == oid).first()
        assert o.status == "on_track"

    def test_delete_cascades_key_results(self, db_session):
        oid = _objective(db_session)
        _kr(db_session, oid)
        DeleteObjectiveUseCase(db_session).execute(oid, ACCOUNT)
        assert db_session.query(KeyResultModel).count() == 0


class TestKeyResults:
    def test_current_defaults_to_baseline(self, db_session):
        oid = _objective(db_session)
        kr_id = _kr(db_session, oid, baseline="10", target="20")
        kr = db_session.query(KeyResultModel).filter(KeyResultModel.id == kr_id).first()
        assert kr.current_value == Decimal("10")
        assert kr.progress_percentage == 0

    def test_progress_computed(self, db_session):
        oid = _objective(db_session)
        kr_id = _kr(db_session, oid, baseline="0", target="50", current="25")
        kr = db_session.query(KeyResultModel).filter(KeyResultModel.id == kr_id).first()
        assert kr.progress_percentage == 50

    def test_target_equals_baseline(self, db_session):
        oid = _objective(db_session)
        kr_id = _kr(db_session, oid, baseline="10", target="10", current="10")
        kr = db_session.query(KeyResultModel).filter(KeyResultModel.id == kr_id).first()
        assert kr.progress_percentage == 0

    def test_value_update_recomputes(self, db_session):
        oid = _objective(db_session)
        kr_id = _kr(db_session, oid, target="50")
        assert UpdateKeyResultValueUseCase(db_session).execute(kr_id, ACCOUNT, "60") == 100
        assert UpdateKeyResultUseCase(db_session).execute(kr_id, ACCOUNT, target="120") == 50

    def test_bad_number(self, db_session):
        oid = _objective(db_session)
        with pytest.raises(ObjectiveValidationError, match="число"):
            _kr(db_session, oid, target="lots")

    @pytest.mark.parametrize("raw", ["inf", "-Infinity", "NaN"])
    def test_non_finite_number(self, db_session, raw):
        oid = _objective(db_session)
        with pytest.raises(ObjectiveValidationError, match="число"):
            _kr(db_session, oid, target=raw)
        assert db_session.query(KeyResultModel).count() == 0

    def test_unknown_objective(self, db_session):
        with pytest.raises(ObjectiveValidationError, match="не найдена"):
            _kr(db_session, 404)

    def test_delete(self, db_session):
        oid = _objective(db_session)
        kr_id = _kr(db_session, oid)
        DeleteKeyResultUseCase(db_session).execute(kr_id, ACCOUNT)
        assert db_session.query(KeyResultModel).count() == 0


class TestOverview:
    def test_objective_progress_is_mean(self, db_session):
        oid = _objective(db_session)
        _kr(db_session, oid, target="50", current="25")   # 50
        _kr(db_session, oid, target="10", current="10")   # 100
        _kr(db_session, oid, target="10", current="0")    # 0
        other = _objective(db_session, title="Ship v2", area="professional", status="at_risk")

        overview = ObjectiveReadService(db_session).get_overview(ACCOUNT)
        by_id = {o["id"]: o for o in overview["objectives"]}
        assert by_id[oid]["progress"] == 50
        assert len(by_id[oid]["key_results"]) == 3
        assert by_id[other]["progress"] == 0
        assert overview["summary"]["total"] == 2
        assert overview["summary"]["professional"] == 1
        assert [o["id"] for o in overview["at_risk"]] == [other]

    def test_no_user(self, db_session):
        _objective(db_session)
        overview = ObjectiveReadService(db_session).get_overview(None)
        assert overview["objectives"] == []
        assert overview["summary"]["total"] == 0
