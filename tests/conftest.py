"""
Shared pytest fixtures for the EthnoGuessr test suite.

Strategy:
- Game, geo and map tests: pure in-memory, zero I/O.
- Backend tests: FastAPI TestClient against an in-memory SQLite catalog and a
  temporary image cache. requests.get is always monkeypatched; no test
  touches the network.
"""
import os
import tempfile

import pytest

# ---------------------------------------------------------------------------
# Point the backend at throwaway storage before it is imported
# ---------------------------------------------------------------------------
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CACHE_DIR"] = tempfile.mkdtemp(prefix="ethnoguessr-cache-")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import requests

from frontend.geo import Coordinate
from frontend.rounds import RoundDefinition

JAVANESE = Coordinate(-7.1544, 110.1451)


class FakeResponse:
    def __init__(self, status_code=200, content=b"\xff\xd8jpeg", content_type="image/jpeg", json_body=None):
        self.status_code = status_code
        self.content = content
        self.headers = {"content-type": content_type} if content_type else {}
        self._json = json_body

    def json(self):
        return self._json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


def make_round(name="Javanese", location=JAVANESE, **kwargs) -> RoundDefinition:
    defaults = {
        "image_male": f"https://images.test/{name.lower()}_male.jpg",
        "image_female": f"https://images.test/{name.lower()}_female.jpg",
    }
    defaults.update(kwargs)
    return RoundDefinition(name=name, reference_location=location, **defaults)


@pytest.fixture
def rounds():
    return (
        make_round("Javanese", JAVANESE),
        make_round("Balinese", Coordinate(-8.3405, 115.0920)),
        make_round("Filipino", Coordinate(12.8797, 121.7740)),
        make_round("Dayak", Coordinate(0.9619, 114.5548)),
        make_round("Minangkabau", Coordinate(-0.7893, 100.9975)),
    )


@pytest.fixture
def controller(rounds):
    from frontend.game import GameController

    return GameController(rounds)


@pytest.fixture
def image_cache_dir():
    return os.environ["CACHE_DIR"]


@pytest.fixture
def client(image_cache_dir):
    """TestClient over a freshly reset catalog: empty cache, no cached paths or errors."""
    from fastapi.testclient import TestClient
    from backend.database import EthnicGroup, SessionLocal
    from backend.main import app

    for f in os.listdir(image_cache_dir):
        os.remove(os.path.join(image_cache_dir, f))
    db = SessionLocal()
    try:
        for group in db.query(EthnicGroup).all():
            group.image_male_path = None
            group.image_female_path = None
            group.image_male_error = None
            group.image_female_error = None
        db.commit()
    finally:
        db.close()

    return TestClient(app)
