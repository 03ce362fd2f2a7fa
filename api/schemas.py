"""API-specific request and response models."""

import datetime
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from ocr.text_parser import ScorecardExtraction, ScorecardForm


class CreateRoundRequest(BaseModel):
    """A round confirmed by the user. The differential is computed server-side."""
    date: datetime.date
    course: str
    rating: float
    slope: int
    gross: int
    ocr_raw: Optional[str] = None
    image_url: Optional[str] = None


class RoundResponse(BaseModel):
    id: str
    date: datetime.date
    course: str
    rating: float
    slope: int
    gross: int
    differential: float
    display_differential: float
    ocr_raw: Optional[str] = None
    image_url: Optional[str] = None


class ClearRoundsResponse(BaseModel):
    deleted: int


class ScanResponse(BaseModel):
    """OCR guess plus the values to pre-fill the form with."""
    extraction: ScorecardExtraction
    form: ScorecardForm
    missing_fields: List[str] = Field(default_factory=list)


class HandicapResponse(BaseModel):
    """Handicap index and the rounds behind it."""
    handicap_index: float
    total_rounds: int
    rounds_counted: int
    counting_differentials: List[float]
    scoring_average: Optional[float] = None
    best_gross: Optional[int] = None
    best_differential: Optional[float] = None
    trend: List[Dict[str, Any]] = Field(default_factory=list)
