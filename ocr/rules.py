"""Named, independent rules that pull one scorecard field out of OCR text.

Each rule is a pure function of the text; the first match in the text wins.
Rules never raise on a miss, they return None.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Pattern


@dataclass(frozen=True)
class ExtractionRule:
    """One heuristic: a labelled pattern whose first group is converted."""
    name: str
    field: str
    pattern: Pattern[str]
    convert: Callable[[str], Any]

    def apply(self, text: str) -> Optional[Any]:
        match = self.pattern.search(text)
        if match is None:
            return None
        return self.convert(match.group(1))


# Labels are case-insensitive and must start a word; the gap between
# label and value may hold colons and whitespace only.
GROSS_PATTERN = re.compile(r"\b(?:Total|Gross)[:\s]*(\d{2,3})(?!\d)", re.IGNORECASE)
RATING_PATTERN = re.compile(
    r"\b(?:Course\s*Rating|CR|Rating)[:\s]*(\d{2}\.\d)(?!\d|\.\d)", re.IGNORECASE
)
SLOPE_PATTERN = re.compile(
    r"\b(?:Slope(?:\s*Rating)?|SR)[:\s]*(\d{2,3})(?!\d|\.\d)", re.IGNORECASE
)

# Case-sensitive: capitalised words ending in a course word. Only a line made
# up entirely of course words ("Golf Links") may continue the previous line.
_COURSE_WORD = r"[A-Z][A-Za-z0-9.'&-]*"
_COURSE_TERM = r"(?:Golf|Country|Club|Course|Links)"
COURSE_PATTERN = re.compile(
    rf"(?<![\w.'&-])({_COURSE_WORD}(?:[ \t]+{_COURSE_WORD})*"
    rf"(?:[ \t]+{_COURSE_TERM}(?![\w'&-])"
    rf"|[ \t]*\r?\n[ \t]*{_COURSE_TERM}(?:[ \t]+{_COURSE_TERM})*(?=[ \t]*(?:\r?\n|$))))"
)


def _clean_course(value: str) -> str:
    return " ".join(value.split())


GROSS_RULE = ExtractionRule("gross_total", "gross", GROSS_PATTERN, int)
RATING_RULE = ExtractionRule("course_rating", "rating", RATING_PATTERN, float)
SLOPE_RULE = ExtractionRule("slope_rating", "slope", SLOPE_PATTERN, int)
COURSE_RULE = ExtractionRule("course_name", "course", COURSE_PATTERN, _clean_course)

DEFAULT_RULES: List[ExtractionRule] = [GROSS_RULE, RATING_RULE, SLOPE_RULE, COURSE_RULE]


def extract_gross(text: str) -> Optional[int]:
    return GROSS_RULE.apply(text)


def extract_rating(text: str) -> Optional[float]:
    return RATING_RULE.apply(text)


def extract_slope(text: str) -> Optional[int]:
    return SLOPE_RULE.apply(text)


def extract_course(text: str) -> Optional[str]:
    return COURSE_RULE.apply(text)
