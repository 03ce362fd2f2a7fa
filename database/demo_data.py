"""Sample rounds for trying the app without a scorecard."""

import datetime
from typing import List

from models import Round

DEMO_ROUNDS = [
    {"date": "2024-01-15", "course": "Pebble Beach Golf Links", "rating": 72.8, "slope": 145, "gross": 85},
    {"date": "2024-01-22", "course": "Augusta National", "rating": 78.1, "slope": 137, "gross": 92},
    {"date": "2024-01-29", "course": "St. Andrews Old Course", "rating": 72.9, "slope": 133, "gross": 88},
    {"date": "2024-02-05", "course": "TPC Sawgrass", "rating": 76.4, "slope": 155, "gross": 89},
    {"date": "2024-02-12", "course": "Whistling Straits", "rating": 77.2, "slope": 152, "gross": 91},
]


def build_demo_rounds(user_id: str) -> List[Round]:
    """Demo rounds owned by ``user_id``, differentials derived as for any new round."""
    return [
        Round(user_id=user_id, **{**data, "date": datetime.date.fromisoformat(data["date"])})
        for data in DEMO_ROUNDS
    ]
