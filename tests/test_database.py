import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import asyncpg
import pytest

from database.converters import ROUND_COLUMNS, round_from_row, round_to_row, round_to_values
from database.demo_data import DEMO_ROUNDS, build_demo_rounds
from database.exceptions import DatabaseError, IntegrityError
from database.repositories.round_repo import RoundRepositoryDB
from models import Round


# ================================================================
# Fixtures
# ================================================================

@pytest.fixture
def mock_pool():
    pool = MagicMock()
    conn = AsyncMock()
    conn.transaction = MagicMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    return pool, conn


def _round_row(*, user_id="user-1", gross=85, rating=Decimal("72.8"), slope=145, differential=9.5076):
    """Helper: minimal rounds row dict."""
    return {
        "id": uuid4(),
        "user_id": user_id,
        "round_date": datetime.date(2024, 1, 15),
        "course_name": "Pebble Beach Golf Links",
        "course_rating": rating,
        "slope_rating": slope,
        "gross_score": gross,
        "score_differential": differential,
        "ocr_raw": None,
        "image_url": None,
        "created_at": datetime.datetime(2024, 1, 15, 18, 30, tzinfo=datetime.timezone.utc),
    }


def _round(**overrides) -> Round:
    data = {
        "date": datetime.date(2024, 1, 15),
        "course": "Pebble Beach Golf Links",
        "rating": 72.8,
        "slope": 145,
        "gross": 85,
    }
    data.update(overrides)
    return Round(**data)


# ================================================================
# converters.py: pure function tests (no mocks needed)
# ================================================================

def test_round_from_row_converts_numeric_rating():
    """NUMERIC comes back as Decimal; the model holds a float."""
    rnd = round_from_row(_round_row())

    assert isinstance(rnd.rating, float)
    assert rnd.rating == 72.8
    assert rnd.course == "Pebble Beach Golf Links"
    assert rnd.date == datetime.date(2024, 1, 15)
    assert rnd.created_at.year == 2024


def test_round_from_row_keeps_stored_differential():
    """The persisted differential is not recomputed."""
    rnd = round_from_row(_round_row(differential=1.0))
    assert rnd.differential == 1.0


def test_round_to_row_and_values_follow_column_order():
    rnd = _round(ocr_raw="Total 85")
    row = round_to_row(rnd, "user-1")
    values = round_to_values(rnd, "user-1")

    assert tuple(row) == ROUND_COLUMNS
    assert values[0] == "user-1"
    assert values[ROUND_COLUMNS.index("gross_score")] == 85
    assert values[ROUND_COLUMNS.index("score_differential")] == pytest.approx(9.5076, abs=1e-4)
    assert values[ROUND_COLUMNS.index("ocr_raw")] == "Total 85"


# ================================================================
# RoundRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_round_repo_get_rounds_for_user(mock_pool):
    pool, conn = mock_pool
    conn.fetch.return_value = [_round_row(gross=90), _round_row(gross=85)]

    repo = RoundRepositoryDB(pool)
    rounds = await repo.get_rounds_for_user("user-1", limit=10)

    assert [r.gross for r in rounds] == [90, 85]
    sql, user_id, limit = conn.fetch.call_args[0]
    assert "ORDER BY round_date DESC, created_at DESC" in sql
    assert user_id == "user-1"
    assert limit == 10


@pytest.mark.asyncio
async def test_round_repo_get_rounds_empty(mock_pool):
    pool, conn = mock_pool
    conn.fetch.return_value = []

    repo = RoundRepositoryDB(pool)
    assert await repo.get_rounds_for_user("nobody") == []
    assert conn.fetch.call_args[0][2] is None


@pytest.mark.asyncio
async def test_round_repo_add_round(mock_pool):
    pool, conn = mock_pool
    conn.fetchrow.return_value = _round_row()

    repo = RoundRepositoryDB(pool)
    stored = await repo.add_round(_round(), "user-1")

    assert stored.id is not None
    assert stored.user_id == "user-1"
    sql, *values = conn.fetchrow.call_args[0]
    assert sql.startswith("INSERT INTO rounds (user_id, round_date, course_name")
    assert "RETURNING *" in sql
    assert len(values) == len(ROUND_COLUMNS)
    assert values[0] == "user-1"


@pytest.mark.asyncio
async def test_round_repo_add_round_requires_differential(mock_pool):
    pool, conn = mock_pool
    rnd = Round.model_construct(
        date=datetime.date(2024, 1, 15), course="X", rating=72.0, slope=113, gross=80,
        differential=None,
    )

    repo = RoundRepositoryDB(pool)
    with pytest.raises(ValueError):
        await repo.add_round(rnd, "user-1")
    conn.fetchrow.assert_not_awaited()


@pytest.mark.asyncio
async def test_round_repo_add_round_check_violation(mock_pool):
    pool, conn = mock_pool
    conn.fetchrow.side_effect = asyncpg.CheckViolationError("rounds_slope_rating_check")

    repo = RoundRepositoryDB(pool)
    with pytest.raises(IntegrityError):
        await repo.add_round(_round(), "user-1")


@pytest.mark.asyncio
async def test_round_repo_add_round_other_postgres_error(mock_pool):
    pool, conn = mock_pool
    conn.fetchrow.side_effect = asyncpg.UndefinedTableError("relation rounds does not exist")

    repo = RoundRepositoryDB(pool)
    with pytest.raises(DatabaseError):
        await repo.add_round(_round(), "user-1")


@pytest.mark.asyncio
async def test_round_repo_add_rounds_uses_transaction(mock_pool):
    pool, conn = mock_pool
    conn.fetchrow.side_effect = [_round_row(gross=85), _round_row(gross=92)]

    repo = RoundRepositoryDB(pool)
    stored = await repo.add_rounds([_round(), _round(gross=92)], "user-1")

    assert [r.gross for r in stored] == [85, 92]
    conn.transaction.assert_called_once()
    assert conn.fetchrow.await_count == 2


@pytest.mark.asyncio
async def test_round_repo_clear_rounds(mock_pool):
    pool, conn = mock_pool
    conn.execute.return_value = "DELETE 3"

    repo = RoundRepositoryDB(pool)
    assert await repo.clear_rounds_for_user("user-1") == 3
    sql, user_id = conn.execute.call_args[0]
    assert sql.startswith("DELETE FROM rounds")
    assert user_id == "user-1"


# ================================================================
# demo_data.py
# ================================================================

def test_build_demo_rounds():
    rounds = build_demo_rounds("user-1")

    assert len(rounds) == len(DEMO_ROUNDS) == 5
    assert all(r.user_id == "user-1" for r in rounds)
    assert all(r.differential is not None for r in rounds)
    assert rounds[0].date == datetime.date(2024, 1, 15)
    assert rounds[0].differential == pytest.approx(9.5076, abs=1e-4)
