import logging
from pydantic import ConfigDict
from typing import List, Optional, Sequence

from models.base import BaseGolfModel
from ocr.rules import DEFAULT_RULES, ExtractionRule

log = logging.getLogger(__name__)

# What a form shows for a field the scorecard didn't give up.
DEFAULT_COURSE = "Unknown Course"
DEFAULT_RATING = 72.0
DEFAULT_SLOPE = 113
DEFAULT_GROSS = 0

EXTRACTED_FIELDS = ("gross", "rating", "slope", "course")


class ScorecardForm(BaseGolfModel):
    """Fully populated values for the round entry form."""
    course: str
    rating: float
    slope: int
    gross: int


class ScorecardExtraction(BaseGolfModel):
    """Best-effort guess at a scorecard's fields.

    None means "not confidently found", never zero. No range checks are
    applied here; that happens when a Round is created.
    """
    model_config = ConfigDict(str_strip_whitespace=False)

    course: Optional[str] = None
    rating: Optional[float] = None
    slope: Optional[int] = None
    gross: Optional[int] = None
    ocr_raw: str = ""

    @property
    def missing_fields(self) -> List[str]:
        return [name for name in EXTRACTED_FIELDS if getattr(self, name) is None]

    def with_defaults(self) -> ScorecardForm:
        """Fill gaps with the form defaults; found values are kept."""
        return ScorecardForm(
            course=self.course if self.course is not None else DEFAULT_COURSE,
            rating=self.rating if self.rating is not None else DEFAULT_RATING,
            slope=self.slope if self.slope is not None else DEFAULT_SLOPE,
            gross=self.gross if self.gross is not None else DEFAULT_GROSS,
        )


def parse_ocr_text(
    text: str, rules: Sequence[ExtractionRule] = DEFAULT_RULES
) -> ScorecardExtraction:
    """Run every rule over ``text`` and collect what they find.

    Rules are independent: one missing field never stops another from being
    found. The raw text is returned untouched. When two rules target the same
    field, the earlier one wins.
    """
    found = {}
    for rule in rules:
        if found.get(rule.field) is not None:
            continue
        value = rule.apply(text)
        if value is not None:
            found[rule.field] = value
            log.debug("Rule %s matched %s=%r", rule.name, rule.field, value)

    log.debug("Extracted %d/%d fields", len(found), len(EXTRACTED_FIELDS))
    return ScorecardExtraction(ocr_raw=text, **found)
