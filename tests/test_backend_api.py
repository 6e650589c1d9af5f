"""
API tests for the catalog backend.

Uses the shared TestClient from conftest.py (in-memory catalog, temporary
image cache). Image downloads go through a monkeypatched requests.get and
run as background tasks, which TestClient completes before returning.
"""
import os

import pytest
import requests
from fastapi import BackgroundTasks

from backend import images
from backend.catalog import ETHNIC_GROUPS
from backend.database import SessionLocal, seed_groups_if_needed
from backend.main import cache_group_images, list_rounds
from tests.conftest import FakeResponse


@pytest.fixture
def downloads(monkeypatch):
    """Serve every image download successfully and record the URLs fetched."""
    seen = []

    def fake_get(url, timeout):
        seen.append(url)
        return FakeResponse(content=b"jpeg-bytes")

    monkeypatch.setattr(images.requests, "get", fake_get)
    return seen


class TestListRounds:
    def test_rounds_in_catalog_order(self, client, downloads):
        resp = client.get("/rounds")
        assert resp.status_code == 200
        data = resp.json()
        assert [r["name"] for r in data] == [g[0] for g in ETHNIC_GROUPS]
        assert [r["round_number"] for r in data] == list(range(1, len(ETHNIC_GROUPS) + 1))

    def test_first_round_reference_location(self, client, downloads):
        first = client.get("/rounds").json()[0]
        assert first["name"] == "Javanese"
        assert first["lat"] == pytest.approx(-7.1544)
        assert first["lng"] == pytest.approx(110.1451)

    def test_first_request_serves_source_urls(self, client, downloads):
        first = client.get("/rounds").json()[0]
        assert first["image_male_url"] == ETHNIC_GROUPS[0][1]
        assert first["image_female_url"] == ETHNIC_GROUPS[0][2]
        assert first["image_male_error"] is None

    def test_rounds_answer_without_waiting_for_downloads(self, client, monkeypatch):
        def no_download_during_request(url, timeout):
            raise AssertionError(f"downloaded {url} while answering /rounds")

        monkeypatch.setattr(images.requests, "get", no_download_during_request)
        tasks = BackgroundTasks()
        db = SessionLocal()
        try:
            data = list_rounds(tasks, db)
        finally:
            db.close()

        assert [r.image_male_url for r in data] == [g[1] for g in ETHNIC_GROUPS]
        assert len(tasks.tasks) == len(ETHNIC_GROUPS)
        assert all(task.func is cache_group_images for task in tasks.tasks)

    def test_images_cached_to_disk_after_first_request(self, client, downloads, image_cache_dir):
        client.get("/rounds")
        assert len(downloads) == 2 * len(ETHNIC_GROUPS)
        first = client.get("/rounds").json()[0]
        assert first["image_male_error"] is None
        assert first["image_male_url"].startswith(image_cache_dir)
        assert os.path.exists(first["image_male_url"])

    def test_cached_images_not_downloaded_again(self, client, downloads):
        client.get("/rounds")
        count = len(downloads)
        client.get("/rounds")
        assert len(downloads) == count

    def test_cached_image_served_statically(self, client, downloads):
        client.get("/rounds")
        first = client.get("/rounds").json()[0]
        filename = os.path.basename(first["image_female_url"])
        resp = client.get(f"/cache/{filename}")
        assert resp.status_code == 200
        assert resp.content == b"jpeg-bytes"

    def test_failed_download_reports_error(self, client, monkeypatch):
        monkeypatch.setattr(images.requests, "get", lambda url, timeout: FakeResponse(status_code=404))
        client.get("/rounds")
        first = client.get("/rounds").json()[0]
        assert first["image_male_error"] == "Failed to download image"
        assert first["image_male_url"] == ETHNIC_GROUPS[0][1]

    def test_failed_download_retried_on_next_request(self, client, monkeypatch, image_cache_dir):
        calls = []

        def flaky(url, timeout):
            calls.append(url)
            if len(calls) == 1:
                return FakeResponse(status_code=500)
            return FakeResponse()

        monkeypatch.setattr(images.requests, "get", flaky)
        client.get("/rounds/1")
        assert client.get("/rounds/1").json()["image_male_error"] == "Failed to download image"
        recovered = client.get("/rounds/1").json()
        assert recovered["image_male_error"] is None
        assert recovered["image_male_url"].startswith(image_cache_dir)

    def test_network_error_reports_error(self, client, monkeypatch):
        def boom(url, timeout):
            raise requests.Timeout("slow")

        monkeypatch.setattr(images.requests, "get", boom)
        assert client.get("/rounds").status_code == 200
        resp = client.get("/rounds")
        assert resp.status_code == 200
        assert all(r["image_female_error"] for r in resp.json())

    def test_non_image_response_not_cached(self, client, monkeypatch):
        monkeypatch.setattr(
            images.requests, "get", lambda url, timeout: FakeResponse(content_type="text/html")
        )
        client.get("/rounds")
        first = client.get("/rounds").json()[0]
        assert first["image_male_error"] == "Failed to download image"


class TestGetRound:
    def test_single_round(self, client, downloads):
        resp = client.get("/rounds/2")
        assert resp.status_code == 200
        assert resp.json()["name"] == "Balinese"

    def test_missing_round_404(self, client, downloads):
        resp = client.get("/rounds/99")
        assert resp.status_code == 404
        assert resp.json() == {"detail": "Round 99 not found"}


class TestDebugAndSeed:
    def test_debug_lists_cache_files(self, client, downloads):
        client.get("/rounds/1")
        files = client.get("/debug").json()["cache_files"]
        assert files == ["group_1_female.jpg", "group_1_male.jpg"]

    def test_seed_is_not_repeated(self, client):
        db = SessionLocal()
        try:
            assert seed_groups_if_needed(db) == 0
        finally:
            db.close()
