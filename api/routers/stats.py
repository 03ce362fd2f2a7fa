"""Handicap/stats API endpoints."""

from fastapi import APIRouter, Depends

from analytics.stats import handicap_summary, handicap_trend
from api.dependencies import get_current_user_id, get_db
from api.schemas import HandicapResponse
from database.db_manager import DatabaseManager

router = APIRouter()


@router.get("/handicap", response_model=HandicapResponse)
async def get_handicap(
    user_id: str = Depends(get_current_user_id),
    db: DatabaseManager = Depends(get_db),
):
    """Recompute the handicap index from every stored round."""
    rounds = await db.rounds.get_rounds_for_user(user_id)
    summary = handicap_summary(rounds)
    return HandicapResponse(**summary, trend=handicap_trend(rounds))
