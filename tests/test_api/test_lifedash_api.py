"""
Tests for the HTTP API (auth, mutations, read views, dashboard)
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.api.deps import get_db, get_today
from app.auth import create_user
from app.infrastructure.db.session import get_session_factory

TODAY = date(2025, 3, 10)


@pytest.fixture
def client(file_session_factory):
    """Test client поверх файловой SQLite (запросы идут из worker-потоков)"""
    def _get_db():
        db = file_session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    app.dependency_overrides[get_session_factory] = lambda: file_session_factory
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def authenticated_client(client, file_session_factory):
    """Client с авторизованной сессией"""
    db = file_session_factory()
    try:
        create_user(db, "User@Example.com", "secret123")
    finally:
        db.close()
    response = client.post("/api/v1/auth/login", json={"email": "user@example.com", "password": "secret123"})
    assert response.status_code == 200
    return client


class TestAuth:
    def test_wrong_password(self, client, file_session_factory):
        db = file_session_factory()
        try:
            create_user(db, "a@b.c", "right")
        finally:
            db.close()
        response = client.post("/api/v1/auth/login", json={"email": "a@b.c", "password": "wrong"})
        assert response.status_code == 401

    def test_me_anonymous(self, client):
        assert client.get("/api/v1/auth/me").json() == {"user_id": None}

    def test_me_and_logout(self, authenticated_client):
        assert authenticated_client.get("/api/v1/auth/me").json()["user_id"] is not None
        authenticated_client.post("/api/v1/auth/logout")
        assert authenticated_client.get("/api/v1/auth/me").json() == {"user_id": None}

    def test_mutation_requires_login(self, client):
        response = client.post("/api/v1/contacts", json={"name": "Anna"})
        assert response.status_code == 401


class TestReadViewsAnonymous:
    def test_empty_states(self, client):
        assert client.get("/api/v1/finances/transactions").json() == []
        assert client.get("/api/v1/projects/board").json() == {"todo": [], "in_progress": [], "done": []}
        assert client.get("/api/v1/library").json()["stats"]["total"] == 0

    def test_dashboard_without_user(self, client):
        snap = client.get("/api/v1/dashboard").json()
        assert snap["transactions"] == 0
        assert snap["unknown"] == []
        assert snap["date"] == "2025-03-10"


class TestFinancesApi:
    def test_summary(self, authenticated_client):
        c = authenticated_client
        for payload in (
            {"date": "2025-03-01", "amount": "1000", "type": "income", "category": "salary"},
            {"date": "2025-03-02", "amount": "300", "type": "expense", "category": "food"},
            {"date": "2025-03-03", "amount": "200", "type": "expense", "category": "food"},
            {"date": "2025-03-04", "amount": "100", "type": "expense", "category": "transport"},
        ):
            assert c.post("/api/v1/finances/transactions", json=payload).status_code == 201

        summary = c.get("/api/v1/finances/summary").json()
        assert summary["balance_label"] == "$400.00"
        assert summary["savings_ratio"] == 40.0
        assert summary["categories"][0]["category"] == "food"
        assert summary["categories"][0]["bar_width"] == 100.0

    def test_invalid_amount_rejected(self, authenticated_client):
        response = authenticated_client.post(
            "/api/v1/finances/transactions",
            json={"date": "2025-03-01", "amount": "1.234", "type": "income", "category": "x"},
        )
        assert response.status_code == 422

    def test_domain_error_is_400(self, authenticated_client):
        response = authenticated_client.post(
            "/api/v1/finances/transactions",
            json={"date": "2025-03-01", "amount": "10", "type": "transfer", "category": "x"},
        )
        assert response.status_code == 400


class TestHabitsAndProjectsApi:
    def test_habit_day(self, authenticated_client):
        c = authenticated_client
        hid = c.post("/api/v1/habits", json={"habit": "Run", "category": "health"}).json()["id"]
        c.post("/api/v1/habits", json={"habit": "Read", "category": "learning"})

        first = c.put(f"/api/v1/habits/{hid}/log", json={"log_date": "2025-03-10", "completed": True})
        second = c.put(f"/api/v1/habits/{hid}/log", json={"log_date": "2025-03-10", "completed": True})
        assert first.json()["id"] == second.json()["id"]

        day = c.get("/api/v1/habits/day").json()
        assert day["completion_rate"] == 50
        assert day["previous_date"] == "2025-03-09"

    def test_move_task(self, authenticated_client):
        c = authenticated_client
        tid = c.post("/api/v1/projects/tasks", json={"task": "Ship"}).json()["id"]
        assert c.post(f"/api/v1/projects/tasks/{tid}/move", json={"direction": "next"}).json() == {"status": "in_progress"}
        assert c.post(f"/api/v1/projects/tasks/{tid}/move", json={"direction": "previous"}).json() == {"status": "todo"}
        assert c.post(f"/api/v1/projects/tasks/{tid}/move", json={"direction": "previous"}).status_code == 400


class TestDashboardApi:
    def test_snapshot(self, authenticated_client):
        c = authenticated_client
        c.post("/api/v1/contacts", json={"name": "Anna", "next_contact": "2025-03-10"})
        c.post("/api/v1/library", json={"title": "SICP", "type": "book", "tags": "lisp, cs"})

        snap = c.get("/api/v1/dashboard").json()
        assert snap["contacts"] == 1
        assert snap["library_items"] == 1
        assert snap["unknown"] == []

        contacts = c.get("/api/v1/contacts").json()
        assert contacts["upcoming_count"] == 1
