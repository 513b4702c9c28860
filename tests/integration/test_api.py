"""Integration tests for the comment analysis API.

Each test builds the real application (store, probe, services, middleware)
over a throwaway SQLite docket and drives it through FastAPI's TestClient.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from fedcomments.config.settings import Settings
from fedcomments.main import create_app


def _client(db_path: Path, **overrides) -> TestClient:
    settings = Settings(_env_file=None, database_path=str(db_path), **overrides)
    return TestClient(create_app(app_settings=settings))


def _seed(comment_db) -> None:
    comment_db.add_comment(
        "CMS-2025-0050-0031-0001",
        attributes={
            "comment": "The payment cuts will close Riverside Health clinics.",
            "firstName": "Maria",
            "lastName": "Gomez",
            "organization": "Riverside Health",
            "postedDate": "2025-06-01",
            "commentURL": "https://www.regulations.gov/comment/CMS-2025-0050-0031-0001",
        },
        sections={
            "keyPoints": ["Payment cuts", "Clinic closures"],
            "category": "Hospitals",
            "detailedContent": "Riverside Health and Valley Medical expect closures.",
        },
        created_at="2025-06-01T10:00:00",
    )
    comment_db.add_comment(
        "CMS-2025-0050-0031-0002",
        attributes={"commentText": "Support for telehealth flexibilities."},
        sections={"keyPoints": ["Telehealth"], "category": "Hospitals"},
        created_at="2025-06-02T10:00:00",
    )
    comment_db.add_comment(
        "CMS-2025-0050-0031-0003",
        attributes={"comment": "Pending review"},
        sections=None,
        status="pending",
        created_at="2025-06-03T10:00:00",
    )


# ─── Service endpoints ────────────────────────────────────────────────


class TestServiceEndpoints:
    def test_health(self, comment_db) -> None:
        with _client(comment_db.path) as client:
            resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["database"] == str(comment_db.path)
        assert "timestamp" in body

    def test_api_info(self, comment_db) -> None:
        with _client(comment_db.path) as client:
            resp = client.get("/")
        assert resp.status_code == 200
        body = resp.json()
        assert body["endpoints"]["comments"] == "/api/comments"
        assert body["version"]


# ─── Listing ──────────────────────────────────────────────────────────


class TestListComments:
    def test_envelope_and_pagination(self, comment_db) -> None:
        _seed(comment_db)
        with _client(comment_db.path) as client:
            resp = client.get("/api/comments")

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert "timestamp" in body
        assert body["data"]["pagination"] == {"page": 1, "limit": 20, "total": 2, "totalPages": 1}
        ids = [c["comment_id"] for c in body["data"]["comments"]]
        assert ids == ["CMS-2025-0050-0031-0002", "CMS-2025-0050-0031-0001"]

    def test_normalized_fields(self, comment_db) -> None:
        _seed(comment_db)
        with _client(comment_db.path) as client:
            resp = client.get("/api/comments", params={"search": "Riverside"})

        comment = resp.json()["data"]["comments"][0]
        assert comment["original_text"].startswith("The payment cuts")
        assert comment["submitter_name"] == "Maria Gomez"
        assert comment["organization_name"] == "Riverside Health"
        assert comment["submission_date"] == "2025-06-01"
        assert comment["comment_url"].endswith("0001")
        assert comment["parsed_content"]["category"] == "Hospitals"

    def test_bad_paging_values_are_clamped(self, comment_db) -> None:
        _seed(comment_db)
        with _client(comment_db.path) as client:
            resp = client.get("/api/comments", params={"page": "abc", "limit": "0"})

        pagination = resp.json()["data"]["pagination"]
        assert resp.status_code == 200
        assert pagination["page"] == 1
        assert pagination["limit"] == 1
        assert pagination["totalPages"] == 2

    def test_huge_page_is_past_the_end(self, comment_db) -> None:
        _seed(comment_db)
        with _client(comment_db.path) as client:
            resp = client.get("/api/comments", params={"page": "99999999999999999999"})

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["comments"] == []
        assert data["pagination"]["total"] == 2
        assert data["pagination"]["totalPages"] == 1

    def test_limit_capped(self, comment_db) -> None:
        _seed(comment_db)
        with _client(comment_db.path) as client:
            resp = client.get("/api/comments", params={"limit": "100000"})
        assert resp.json()["data"]["pagination"]["limit"] == 100

    def test_status_filter(self, comment_db) -> None:
        _seed(comment_db)
        with _client(comment_db.path) as client:
            resp = client.get("/api/comments", params={"status": "pending"})
        data = resp.json()["data"]
        assert data["pagination"]["total"] == 1
        assert data["comments"][0]["parsed_content"] == {}

    def test_unknown_status_rejected(self, comment_db) -> None:
        with _client(comment_db.path) as client:
            resp = client.get("/api/comments", params={"status": "archived"})
        assert resp.status_code == 422
        body = resp.json()
        assert body["success"] is False
        assert "detail" not in body
        assert "status" in body["error"]
        assert "timestamp" in body

    def test_entity_filter(self, comment_db) -> None:
        _seed(comment_db)
        with _client(comment_db.path) as client:
            resp = client.get("/api/comments", params={"entity": "Telehealth"})
        data = resp.json()["data"]
        assert data["pagination"]["total"] == 1
        assert data["comments"][0]["original_text"] == "Support for telehealth flexibilities."


class TestGetComment:
    def test_found(self, comment_db) -> None:
        _seed(comment_db)
        with _client(comment_db.path) as client:
            resp = client.get("/api/comments/CMS-2025-0050-0031-0003")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["status"] == "pending"
        assert data["original_text"] == "Pending review"

    def test_not_found(self, comment_db) -> None:
        with _client(comment_db.path) as client:
            resp = client.get("/api/comments/nope")
        assert resp.status_code == 404
        body = resp.json()
        assert body == {"success": False, "error": "Comment not found", "timestamp": body["timestamp"]}


# ─── Entities, themes, stats ──────────────────────────────────────────


class TestEntities:
    def test_fallback_mining(self, comment_db) -> None:
        _seed(comment_db)
        with _client(comment_db.path) as client:
            resp = client.get("/api/entities")

        entities = resp.json()["data"]
        assert entities[0] == {
            "entity_name": "Hospitals",
            "entity_type": "category",
            "comment_count": 2,
            "entity_id": None,
            "taxonomy_type": None,
        }
        by_name = {e["entity_name"]: e for e in entities}
        assert by_name["Riverside Health"]["entity_type"] == "organization"
        assert by_name["Valley Medical"]["comment_count"] == 1
        assert by_name["Payment cuts"]["entity_type"] == "keypoint"

    def test_precomputed_taxonomy(self, comment_db) -> None:
        _seed(comment_db)
        comment_db.enable_entities()
        comment_db.add_taxonomy_entity(
            7, "Site-neutral payments", "policy",
            ["CMS-2025-0050-0031-0001", "CMS-2025-0050-0031-0002"],
        )
        with _client(comment_db.path) as client:
            resp = client.get("/api/entities")

        entities = resp.json()["data"]
        assert len(entities) == 1
        assert entities[0]["entity_name"] == "Site-neutral payments"
        assert entities[0]["entity_type"] == "taxonomy"
        assert entities[0]["taxonomy_type"] == "policy"
        assert entities[0]["comment_count"] == 2


class TestThemes:
    def test_empty_without_tables(self, comment_db) -> None:
        with _client(comment_db.path) as client:
            resp = client.get("/api/themes")
        assert resp.status_code == 200
        assert resp.json()["data"] == []

    def test_precomputed_themes(self, comment_db) -> None:
        comment_db.enable_themes()
        comment_db.add_theme(1, "Access", "Access to care", ["a", "b"])
        with _client(comment_db.path) as client:
            resp = client.get("/api/themes")
        themes = resp.json()["data"]
        assert themes[0]["theme_name"] == "Access"
        assert themes[0]["comment_count"] == 2


class TestStats:
    def test_wire_keys(self, comment_db) -> None:
        _seed(comment_db)
        with _client(comment_db.path) as client:
            resp = client.get("/api/stats")

        data = resp.json()["data"]
        assert data == {
            "totalComments": 3,
            "condensedComments": 2,
            "entities": 0,
            "themes": 0,
            "processing": {"pending": 1, "completed": 2, "failed": 0},
            "completionRate": 67,
        }


# ─── Export ───────────────────────────────────────────────────────────


class TestExport:
    def test_small_export(self, comment_db) -> None:
        _seed(comment_db)
        with _client(comment_db.path) as client:
            resp = client.get("/api/export")

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["totalComments"] == 2
        assert "exportDate" in data
        first = {c["comment_id"]: c for c in data["comments"]}["CMS-2025-0050-0031-0001"]
        # Export resolves fewer attribute keys than the listing.
        assert first["submitter_name"] == ""
        assert first["organization_name"] == "Riverside Health"
        assert "comment_url" not in first

    def test_over_ceiling_is_refused(self, comment_db) -> None:
        for i in range(4):
            comment_db.add_comment(f"c{i}", sections={})
        with _client(comment_db.path, export_max_rows=3) as client:
            resp = client.get("/api/export")

        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["totalComments"] == 4
        assert body["error"] == "Dataset too large for direct export. Use pagination or contact admin."


# ─── Storage failures ─────────────────────────────────────────────────


class TestMissingDatabase:
    @pytest.mark.parametrize("path", ["/api/comments", "/api/entities", "/api/stats", "/api/export"])
    def test_storage_error_is_500(self, tmp_path, path) -> None:
        with _client(tmp_path / "absent.sqlite") as client:
            resp = client.get(path)

        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert "Database error" in body["error"]

    def test_health_still_answers(self, tmp_path) -> None:
        with _client(tmp_path / "absent.sqlite") as client:
            resp = client.get("/health")
        assert resp.status_code == 200


class TestMissingComponents:
    def test_unwired_service_is_503_envelope(self, comment_db) -> None:
        settings = Settings(_env_file=None, database_path=str(comment_db.path))
        with TestClient(create_app(app_settings=settings, components={})) as client:
            resp = client.get("/api/stats")

        assert resp.status_code == 503
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "comment_service unavailable"
