import datetime
from pydantic import ConfigDict, Field, field_validator, model_validator
from typing import TYPE_CHECKING, Any, Optional

from analytics.handicap import differential, round_half_up

from .base import BaseGolfModel

if TYPE_CHECKING:
    from ocr.text_parser import ScorecardExtraction

MIN_SLOPE = 55
MAX_SLOPE = 155


class Round(BaseGolfModel):
    """A confirmed round of golf. Created once, never edited."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: Optional[str] = None
    user_id: Optional[str] = None
    date: datetime.date
    course: str = Field(..., min_length=1)
    rating: float = Field(..., ge=55.0, le=85.0)
    slope: int = Field(..., ge=MIN_SLOPE, le=MAX_SLOPE)
    gross: int = Field(..., gt=0)
    differential: Optional[float] = None  # derived from gross/rating/slope when omitted
    ocr_raw: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime.datetime] = None

    @model_validator(mode='before')
    @classmethod
    def derive_differential(cls, data: Any) -> Any:
        """Fill in the differential for a new round.

        Values read back from the store already carry one and are kept as-is.
        Out-of-range input is left for field validation to report.
        """
        if not isinstance(data, dict) or data.get('differential') is not None:
            return data
        try:
            gross = int(data['gross'])
            rating = float(data['rating'])
            slope = int(data['slope'])
        except (KeyError, TypeError, ValueError):
            return data
        if not MIN_SLOPE <= slope <= MAX_SLOPE:
            return data
        return {**data, 'differential': differential(gross, rating, slope)}

    @field_validator('rating')
    @classmethod
    def one_decimal_rating(cls, v: float) -> float:
        """Course ratings are published to one decimal and stored that way."""
        if round(v, 1) != v:
            raise ValueError("course rating must have at most one decimal place")
        return v

    def display_differential(self) -> Optional[float]:
        """Differential rounded to one decimal, half away from zero."""
        if self.differential is None:
            return None
        return round_half_up(self.differential, 1)

    @classmethod
    def from_extraction(
        cls,
        extraction: "ScorecardExtraction",
        *,
        date: datetime.date,
        user_id: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> "Round":
        """Build a round straight from an OCR guess, using form defaults for gaps.

        Raises ValidationError when the guess (e.g. a default gross of 0)
        does not make a valid round.
        """
        form = extraction.with_defaults()
        return cls(
            user_id=user_id,
            date=date,
            course=form.course,
            rating=form.rating,
            slope=form.slope,
            gross=form.gross,
            ocr_raw=extraction.ocr_raw,
            image_url=image_url,
        )
