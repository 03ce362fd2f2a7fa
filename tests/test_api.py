import datetime
import io
from itertools import count
from typing import Dict, List, Optional
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from api.dependencies import get_db, get_ocr_engine
from api.main import create_app
from models import Round

USER = {"X-User-Id": "user-1"}


# ================================================================
# Fakes
# ================================================================

class FakeRoundRepo:
    """In-memory stand-in for RoundRepositoryDB."""

    def __init__(self):
        self.rounds: Dict[str, List[Round]] = {}
        self._clock = count()

    def _store(self, round_: Round, user_id: str) -> Round:
        stamp = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)
        stored = round_.model_copy(update={
            "id": str(uuid4()),
            "user_id": user_id,
            "created_at": stamp + datetime.timedelta(seconds=next(self._clock)),
        })
        self.rounds.setdefault(user_id, []).append(stored)
        return stored

    async def get_rounds_for_user(self, user_id: str, *, limit: Optional[int] = None) -> List[Round]:
        rounds = sorted(
            self.rounds.get(user_id, []),
            key=lambda r: (r.date, r.created_at),
            reverse=True,
        )
        return rounds[:limit] if limit else rounds

    async def add_round(self, round_: Round, user_id: str) -> Round:
        return self._store(round_, user_id)

    async def add_rounds(self, rounds, user_id: str) -> List[Round]:
        return [self._store(r, user_id) for r in rounds]

    async def clear_rounds_for_user(self, user_id: str) -> int:
        return len(self.rounds.pop(user_id, []))


class FakeDB:
    def __init__(self):
        self.rounds = FakeRoundRepo()


class FakeEngine:
    def __init__(self, text: str = "", error: Exception = None):
        self.text = text
        self.error = error
        self.closed = False

    def recognize(self, image):
        if self.error is not None:
            raise self.error
        return self.text

    def close(self):
        self.closed = True


# ================================================================
# Fixtures
# ================================================================

@pytest.fixture
def fake_db():
    return FakeDB()


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def client(fake_db, engine):
    app = create_app()
    app.dependency_overrides[get_db] = lambda: fake_db
    app.dependency_overrides[get_ocr_engine] = lambda: engine
    return TestClient(app)


def _png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (16, 16), "white").save(buf, format="PNG")
    return buf.getvalue()


PEBBLE = {
    "date": "2024-01-15",
    "course": "Pebble Beach Golf Links",
    "rating": 72.8,
    "slope": 145,
    "gross": 85,
}


# ================================================================
# Health / auth
# ================================================================

def test_health_reports_degraded_without_database(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.json() == {"status": "degraded", "database": False}


@pytest.mark.parametrize("method,path", [
    ("get", "/api/rounds"),
    ("delete", "/api/rounds"),
    ("post", "/api/rounds/demo"),
    ("get", "/api/stats/handicap"),
])
def test_round_endpoints_require_user(client, method, path):
    res = getattr(client, method)(path)
    assert res.status_code == 401


def test_blank_user_header_is_rejected(client):
    res = client.get("/api/rounds", headers={"X-User-Id": "  "})
    assert res.status_code == 401


# ================================================================
# Rounds
# ================================================================

def test_add_round_derives_differential(client, fake_db):
    res = client.post("/api/rounds", json=PEBBLE, headers=USER)

    assert res.status_code == 201
    body = res.json()
    assert body["differential"] == pytest.approx(9.5076, abs=1e-4)
    assert body["display_differential"] == 9.5
    assert body["id"]
    assert len(fake_db.rounds.rounds["user-1"]) == 1


def test_add_round_ignores_client_differential(client):
    res = client.post("/api/rounds", json={**PEBBLE, "differential": -50}, headers=USER)
    assert res.status_code == 201
    assert res.json()["differential"] == pytest.approx(9.5076, abs=1e-4)


@pytest.mark.parametrize("field,value", [
    ("slope", 0),
    ("slope", 200),
    ("rating", 20.0),
    ("rating", 72.85),
    ("gross", 0),
    ("course", "   "),
])
def test_add_round_rejects_invalid_values(client, fake_db, field, value):
    res = client.post("/api/rounds", json={**PEBBLE, field: value}, headers=USER)

    assert res.status_code == 422
    assert fake_db.rounds.rounds == {}


def test_list_rounds_newest_first(client):
    client.post("/api/rounds", json=PEBBLE, headers=USER)
    client.post("/api/rounds", json={**PEBBLE, "date": "2024-03-01", "gross": 90}, headers=USER)
    client.post("/api/rounds", json={**PEBBLE, "date": "2023-12-01", "gross": 95}, headers=USER)

    res = client.get("/api/rounds", headers=USER)

    assert res.status_code == 200
    assert [r["gross"] for r in res.json()] == [90, 85, 95]

    res = client.get("/api/rounds", params={"limit": 1}, headers=USER)
    assert [r["gross"] for r in res.json()] == [90]


def test_rounds_are_scoped_to_user(client):
    client.post("/api/rounds", json=PEBBLE, headers=USER)

    res = client.get("/api/rounds", headers={"X-User-Id": "user-2"})
    assert res.json() == []


def test_clear_rounds(client):
    client.post("/api/rounds", json=PEBBLE, headers=USER)
    client.post("/api/rounds", json=PEBBLE, headers=USER)

    res = client.delete("/api/rounds", headers=USER)

    assert res.json() == {"deleted": 2}
    assert client.get("/api/rounds", headers=USER).json() == []


def test_demo_rounds_then_handicap(client):
    res = client.post("/api/rounds/demo", headers=USER)
    assert res.status_code == 201
    assert len(res.json()) == 5

    res = client.get("/api/stats/handicap", headers=USER)

    assert res.status_code == 200
    body = res.json()
    assert body["handicap_index"] == 9.7
    assert body["total_rounds"] == 5
    assert body["rounds_counted"] == 3
    assert body["counting_differentials"] == [9.2, 9.5, 10.3]
    assert [row["round_index"] for row in body["trend"]] == [1, 2, 3, 4, 5]
    assert body["trend"][0]["course"] == "Pebble Beach Golf Links"


def test_handicap_without_rounds(client):
    res = client.get("/api/stats/handicap", headers=USER)

    body = res.json()
    assert body["handicap_index"] == 0
    assert body["total_rounds"] == 0
    assert body["trend"] == []


# ================================================================
# Scan
# ================================================================

def test_scan_extracts_fields(client, engine):
    engine.text = "Pebble Beach Golf Links\nCR 72.8 SR 145\nTotal 85"

    res = client.post(
        "/api/scan/extract",
        files={"file": ("card.png", _png_bytes(), "image/png")},
        headers=USER,
    )

    assert res.status_code == 200
    body = res.json()
    assert body["extraction"]["gross"] == 85
    assert body["extraction"]["ocr_raw"] == engine.text
    assert body["form"] == {
        "course": "Pebble Beach Golf Links",
        "rating": 72.8,
        "slope": 145,
        "gross": 85,
    }
    assert body["missing_fields"] == []


def test_scan_fills_defaults_for_missing_fields(client, engine):
    engine.text = "Gross 101"

    res = client.post(
        "/api/scan/extract",
        files={"file": ("card.jpg", _png_bytes(), "image/jpeg")},
        headers=USER,
    )

    body = res.json()
    assert body["form"] == {"course": "Unknown Course", "rating": 72.0, "slope": 113, "gross": 101}
    assert body["missing_fields"] == ["rating", "slope", "course"]


def test_scan_engine_failure_is_reported(client, engine):
    engine.error = RuntimeError("engine crashed")

    res = client.post(
        "/api/scan/extract",
        files={"file": ("card.png", _png_bytes(), "image/png")},
        headers=USER,
    )

    assert res.status_code == 502
    assert "enter the round manually" in res.json()["detail"]


def test_scan_rejects_unsupported_type(client):
    res = client.post(
        "/api/scan/extract",
        files={"file": ("card.pdf", b"%PDF-1.4", "application/pdf")},
        headers=USER,
    )
    assert res.status_code == 400


def test_scan_rejects_unreadable_image(client):
    res = client.post(
        "/api/scan/extract",
        files={"file": ("card.png", b"not an image", "image/png")},
        headers=USER,
    )
    assert res.status_code == 400


def test_scan_requires_user(client):
    res = client.post(
        "/api/scan/extract",
        files={"file": ("card.png", _png_bytes(), "image/png")},
    )
    assert res.status_code == 401
