"""
Dashboard API endpoint: today / current-month snapshot across all areas
"""
from datetime import date

from fastapi import APIRouter, Depends

from app.api.deps import get_optional_account_id, get_today
from app.application.dashboard import collect_snapshot
from app.infrastructure.db.session import get_session_factory


router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("")
async def dashboard_snapshot(
    account_id: int | None = Depends(get_optional_account_id),
    today: date = Depends(get_today),
    session_factory=Depends(get_session_factory),
):
    """
    Метрики считаются параллельно, каждая в своей сессии.
    Упавшая метрика приходит как null и перечисляется в "unknown".
    """
    return await collect_snapshot(session_factory, account_id, today)
