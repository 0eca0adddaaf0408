"""Tests for the admin API: login gate, sync trigger, merges and edits."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from residency_board.api.deps import ADMIN_PASSWORD_HEADER
from residency_board.config import get_settings
from residency_board.ingestion.source_client import MissingCredentialError
from residency_board.models import Company, Residency
from tests.test_constants import TEST_ADMIN_PASSWORD, TEST_ADMIN_PASSWORD_WRONG

AUTH = {ADMIN_PASSWORD_HEADER: TEST_ADMIN_PASSWORD}
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


# ── Login ────────────────────────────────────────────────────────────


class TestLogin:
    def test_correct_password(self, client_with_db: TestClient) -> None:
        resp = client_with_db.post("/api/admin/login", json={"password": TEST_ADMIN_PASSWORD})
        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        assert resp.headers["Cache-Control"] == "no-store"

    def test_wrong_password_returns_401(self, client_with_db: TestClient) -> None:
        resp = client_with_db.post(
            "/api/admin/login", json={"password": TEST_ADMIN_PASSWORD_WRONG}
        )
        assert resp.status_code == 401

    def test_sixth_attempt_is_rate_limited(self, client_with_db: TestClient) -> None:
        for _ in range(5):
            resp = client_with_db.post(
                "/api/admin/login", json={"password": TEST_ADMIN_PASSWORD_WRONG}
            )
            assert resp.status_code == 401

        resp = client_with_db.post("/api/admin/login", json={"password": TEST_ADMIN_PASSWORD})

        assert resp.status_code == 429
        assert int(resp.headers["Retry-After"]) > 0

    def test_unconfigured_password_returns_500(
        self, client_with_db: TestClient, monkeypatch
    ) -> None:
        monkeypatch.setattr(get_settings(), "admin_password", "")
        resp = client_with_db.post("/api/admin/login", json={"password": "anything"})
        assert resp.status_code == 500


# ── Admin gate ───────────────────────────────────────────────────────


class TestAdminGate:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("post", "/api/admin/sync"),
            ("put", "/api/admin/companies/1/website"),
            ("put", "/api/admin/residencies/1/location"),
        ],
    )
    def test_missing_password_returns_401(
        self, client_with_db: TestClient, method: str, path: str
    ) -> None:
        resp = getattr(client_with_db, method)(path, json={})
        assert resp.status_code == 401

    def test_wrong_password_returns_401(self, client_with_db: TestClient) -> None:
        resp = client_with_db.post(
            "/api/admin/companies/merge",
            json={"target_id": 1, "source_ids": [2]},
            headers={ADMIN_PASSWORD_HEADER: TEST_ADMIN_PASSWORD_WRONG},
        )
        assert resp.status_code == 401


# ── Sync ─────────────────────────────────────────────────────────────


class TestSyncTrigger:
    @patch("residency_board.api.admin.run_sync")
    def test_sync_returns_summary(self, mock_sync, client_with_db: TestClient) -> None:
        mock_sync.return_value = {
            "status": "completed",
            "job_run_id": 7,
            "synced": 12,
            "fetched": 13,
            "endpoints_failed": 1,
            "error": "rec9: bad",
        }

        resp = client_with_db.post("/api/admin/sync", headers=AUTH)

        assert resp.status_code == 200
        data = resp.json()
        assert data["synced"] == 12
        assert data["endpoints_failed"] == 1
        mock_sync.assert_called_once()

    @patch("residency_board.api.admin.run_sync")
    def test_missing_token_is_generic_500(self, mock_sync, client_with_db: TestClient) -> None:
        mock_sync.side_effect = MissingCredentialError("SOFTR_JWT_TOKEN environment variable is not set")

        resp = client_with_db.post("/api/admin/sync", headers=AUTH)

        assert resp.status_code == 500
        assert resp.json()["detail"] == "Sync failed"

    @patch("residency_board.api.admin.run_sync")
    def test_failed_run_is_500(self, mock_sync, client_with_db: TestClient) -> None:
        mock_sync.return_value = {"status": "failed", "job_run_id": 1, "error": "boom"}

        resp = client_with_db.post("/api/admin/sync", headers=AUTH)

        assert resp.status_code == 500
        assert "boom" not in resp.text


# ── Merge ────────────────────────────────────────────────────────────


class TestMergeEndpoint:
    def test_merge(self, client_with_db: TestClient, db, make_company, make_residency) -> None:
        target = make_company("Acme", "acme")
        source = make_company("Foo", "foo")
        residency = make_residency(company_id=source.id)

        resp = client_with_db.post(
            "/api/admin/companies/merge",
            json={"target_id": target.id, "source_ids": [source.id]},
            headers=AUTH,
        )

        assert resp.status_code == 200
        data = resp.json()
        assert data["merged_ids"] == [source.id]
        assert data["aliases"] == ["foo"]
        db.expire_all()
        assert db.get(Company, source.id) is None
        assert db.get(Residency, residency.id).company_id == target.id

    def test_missing_target_returns_404(self, client_with_db: TestClient, make_company) -> None:
        source = make_company("Foo", "foo")
        resp = client_with_db.post(
            "/api/admin/companies/merge",
            json={"target_id": 999, "source_ids": [source.id]},
            headers=AUTH,
        )
        assert resp.status_code == 404

    def test_empty_sources_returns_422(self, client_with_db: TestClient) -> None:
        resp = client_with_db.post(
            "/api/admin/companies/merge",
            json={"target_id": 1, "source_ids": []},
            headers=AUTH,
        )
        assert resp.status_code == 422

    def test_concurrent_merge_returns_409(self, client_with_db: TestClient, make_company) -> None:
        from residency_board.services import company_merge

        target = make_company("Acme", "acme")
        source = make_company("Foo", "foo")
        company_merge._merge_lock.acquire()
        try:
            resp = client_with_db.post(
                "/api/admin/companies/merge",
                json={"target_id": target.id, "source_ids": [source.id]},
                headers=AUTH,
            )
        finally:
            company_merge._merge_lock.release()
        assert resp.status_code == 409


# ── Company edits ────────────────────────────────────────────────────


class TestCompanyEdits:
    def test_upload_image(self, client_with_db: TestClient, make_company) -> None:
        company = make_company("Acme", "acme")

        resp = client_with_db.post(
            f"/api/admin/companies/{company.id}/image",
            files={"file": ("logo.png", PNG_BYTES, "image/png")},
            headers=AUTH,
        )

        assert resp.status_code == 200
        data = resp.json()
        assert data["image_id"].endswith(".png")
        assert data["image_url"] == f"/media/{data['image_id']}"
        stored = Path(get_settings().media_dir) / data["image_id"]
        assert stored.read_bytes() == PNG_BYTES

    def test_upload_rejects_non_image(self, client_with_db: TestClient, make_company) -> None:
        company = make_company("Acme", "acme")
        resp = client_with_db.post(
            f"/api/admin/companies/{company.id}/image",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=AUTH,
        )
        assert resp.status_code == 422

    def test_upload_without_file_returns_422(
        self, client_with_db: TestClient, make_company
    ) -> None:
        company = make_company("Acme", "acme")
        resp = client_with_db.post(
            f"/api/admin/companies/{company.id}/image",
            data={"other": "value"},
            headers=AUTH,
        )
        assert resp.status_code == 422

    def test_upload_unknown_company_returns_404(self, client_with_db: TestClient) -> None:
        resp = client_with_db.post(
            "/api/admin/companies/999/image",
            files={"file": ("logo.png", PNG_BYTES, "image/png")},
            headers=AUTH,
        )
        assert resp.status_code == 404

    def test_set_and_clear_website(self, client_with_db: TestClient, make_company) -> None:
        company = make_company("Acme", "acme")

        resp = client_with_db.put(
            f"/api/admin/companies/{company.id}/website",
            json={"website": " https://acme.test "},
            headers=AUTH,
        )
        assert resp.status_code == 200
        assert resp.json()["website"] == "https://acme.test"

        resp = client_with_db.put(
            f"/api/admin/companies/{company.id}/website",
            json={"website": ""},
            headers=AUTH,
        )
        assert resp.json()["website"] is None

    def test_website_unknown_company_returns_404(self, client_with_db: TestClient) -> None:
        resp = client_with_db.put(
            "/api/admin/companies/999/website", json={"website": "x"}, headers=AUTH
        )
        assert resp.status_code == 404


# ── Residency edits ──────────────────────────────────────────────────


class TestResidencyEdits:
    def test_update_description(self, client_with_db: TestClient, make_residency) -> None:
        residency = make_residency()
        resp = client_with_db.put(
            f"/api/admin/residencies/{residency.id}/description",
            json={"description": "New description"},
            headers=AUTH,
        )
        assert resp.status_code == 200
        assert resp.json()["description"] == "New description"

    def test_blank_location_clears(self, client_with_db: TestClient, make_residency) -> None:
        residency = make_residency(location="Porto")
        resp = client_with_db.put(
            f"/api/admin/residencies/{residency.id}/location",
            json={"location": "   "},
            headers=AUTH,
        )
        assert resp.status_code == 200
        assert resp.json()["location"] is None

    def test_unknown_residency_returns_404(self, client_with_db: TestClient) -> None:
        resp = client_with_db.put(
            "/api/admin/residencies/999/description",
            json={"description": "x"},
            headers=AUTH,
        )
        assert resp.status_code == 404
