"""Conversion between asyncpg rows and the Round model."""

from typing import Any, Dict, Tuple

from models import Round

ROUND_COLUMNS = (
    "user_id",
    "round_date",
    "course_name",
    "course_rating",
    "slope_rating",
    "gross_score",
    "score_differential",
    "ocr_raw",
    "image_url",
)


def round_from_row(row) -> Round:
    """rounds row -> Round model. The stored differential is kept as-is."""
    return Round(
        id=str(row["id"]),
        user_id=row["user_id"],
        date=row["round_date"],
        course=row["course_name"],
        rating=float(row["course_rating"]),
        slope=row["slope_rating"],
        gross=row["gross_score"],
        differential=row["score_differential"],
        ocr_raw=row["ocr_raw"],
        image_url=row["image_url"],
        created_at=row["created_at"],
    )


def round_to_row(round_: Round, user_id: str) -> Dict[str, Any]:
    """Round model -> column dict for INSERT."""
    return {
        "user_id": user_id,
        "round_date": round_.date,
        "course_name": round_.course,
        "course_rating": round_.rating,
        "slope_rating": round_.slope,
        "gross_score": round_.gross,
        "score_differential": round_.differential,
        "ocr_raw": round_.ocr_raw,
        "image_url": round_.image_url,
    }


def round_to_values(round_: Round, user_id: str) -> Tuple[Any, ...]:
    """Positional INSERT values in ROUND_COLUMNS order."""
    row = round_to_row(round_, user_id)
    return tuple(row[column] for column in ROUND_COLUMNS)
