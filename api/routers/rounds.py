"""Round API endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from api.dependencies import get_current_user_id, get_db
from api.schemas import ClearRoundsResponse, CreateRoundRequest, RoundResponse
from database.db_manager import DatabaseManager
from database.demo_data import build_demo_rounds
from database.exceptions import IntegrityError
from models import Round

log = logging.getLogger(__name__)

router = APIRouter()


def summarize_round(r: Round) -> RoundResponse:
    """Project a stored Round into the API shape."""
    return RoundResponse(
        id=r.id,
        date=r.date,
        course=r.course,
        rating=r.rating,
        slope=r.slope,
        gross=r.gross,
        differential=r.differential,
        display_differential=r.display_differential(),
        ocr_raw=r.ocr_raw,
        image_url=r.image_url,
    )


@router.get("", response_model=List[RoundResponse])
async def list_rounds(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    user_id: str = Depends(get_current_user_id),
    db: DatabaseManager = Depends(get_db),
):
    rounds = await db.rounds.get_rounds_for_user(user_id, limit=limit)
    return [summarize_round(r) for r in rounds]


@router.post("", response_model=RoundResponse, status_code=201)
async def add_round(
    req: CreateRoundRequest,
    user_id: str = Depends(get_current_user_id),
    db: DatabaseManager = Depends(get_db),
):
    """Store a confirmed round; its differential is derived here, once."""
    try:
        round_ = Round(user_id=user_id, **req.model_dump())
    except ValidationError as e:
        raise HTTPException(422, e.errors(include_url=False, include_context=False, include_input=False))

    try:
        stored = await db.rounds.add_round(round_, user_id)
    except IntegrityError as e:
        raise HTTPException(422, str(e))
    return summarize_round(stored)


@router.delete("", response_model=ClearRoundsResponse)
async def clear_rounds(
    user_id: str = Depends(get_current_user_id),
    db: DatabaseManager = Depends(get_db),
):
    """Delete every round belonging to the current user."""
    deleted = await db.rounds.clear_rounds_for_user(user_id)
    return ClearRoundsResponse(deleted=deleted)


@router.post("/demo", response_model=List[RoundResponse], status_code=201)
async def add_demo_rounds(
    user_id: str = Depends(get_current_user_id),
    db: DatabaseManager = Depends(get_db),
):
    stored = await db.rounds.add_rounds(build_demo_rounds(user_id), user_id)
    log.info("Added %d demo rounds for user %s", len(stored), user_id)
    return [summarize_round(r) for r in stored]
