import asyncio
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock, patch

from app.middleware.error_handlers import ExceptionHandlerMiddleware

HEADERS = {"X-User-Id": "rec-1", "X-User-Role": "RECRUITER"}

RESUME = b"""Jane Doe
jane.doe@example.com | +1 415-555-0100

Senior engineer, 5 years of experience with React and Node.js.
"""


@pytest.fixture
def test_app():
    from app.routers import resumes

    app = FastAPI()
    app.add_middleware(ExceptionHandlerMiddleware)
    app.include_router(resumes.router, prefix="/upload")
    return app


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


@pytest.fixture
def candidate_store():
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=[
        {"candidate_id": "c1", "name": "Jane Doe", "email": "jane.doe@example.com", "recruiter_id": "rec-9"},
    ])
    coll = MagicMock()
    coll.aggregate = MagicMock(return_value=cursor)
    with patch("app.services.duplicates.candidates_coll", coll):
        yield coll


class TestResumeUploadRouter:
    """Test cases for resume upload and auto-fill"""

    def test_parses_text_resume_and_flags_duplicate(self, client, candidate_store):
        response = client.post(
            "/upload/resume",
            files={"file": ("jane.txt", RESUME, "text/plain")},
            headers=HEADERS,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["parsed"]["name"] == "Jane Doe"
        assert data["parsed"]["email"] == "jane.doe@example.com"
        assert data["parsed"]["phone"] == "+14155550100"
        assert data["parsed"]["experience"] == 5
        assert data["parsed"]["skills"][:2] == ["React", "Node.js"]
        assert data["fingerprint"] == "email:jane.doe@example.com|phone:4155550100|name:jane doe"
        assert data["duplicates"][0]["score"] == 70
        assert data["duplicates"][0]["matched_fields"] == ["email", "name"]
        assert data["alert"].endswith("currently being handled by Unknown.")
        assert data["raw_text"].startswith("Jane Doe")
        candidate_store.aggregate.assert_called_once()

    @patch("app.routers.resumes.config")
    def test_raw_text_preview_is_truncated(self, mock_config, client, candidate_store):
        mock_config.MAX_UPLOAD_BYTES = 1024
        mock_config.RAW_TEXT_PREVIEW_CHARS = 8

        response = client.post(
            "/upload/resume",
            files={"file": ("jane.txt", RESUME, "text/plain")},
            headers=HEADERS,
        )

        assert response.json()["raw_text"] == "Jane Doe"

    def test_unsupported_type(self, client):
        response = client.post(
            "/upload/resume",
            files={"file": ("photo.png", b"\x89PNG....", "image/png")},
            headers=HEADERS,
        )

        assert response.status_code == 415
        assert response.json()["error"]["error_code"] == "UNSUPPORTED_DOCUMENT"

    def test_empty_file(self, client):
        response = client.post(
            "/upload/resume",
            files={"file": ("empty.txt", b"", "text/plain")},
            headers=HEADERS,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "No file provided"

    @patch("app.helpers.parsing.read_pdf", side_effect=ValueError("bad xref"))
    def test_broken_pdf(self, mock_read_pdf, client):
        response = client.post(
            "/upload/resume",
            files={"file": ("cv.pdf", b"%PDF-1.4 broken", "application/pdf")},
            headers=HEADERS,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Failed to parse PDF file"

    def test_requires_identity(self, client):
        response = client.post("/upload/resume", files={"file": ("jane.txt", RESUME, "text/plain")})

        assert response.status_code == 401

    @patch("app.routers.resumes.config")
    def test_oversized_file_is_rejected(self, mock_config, client):
        mock_config.MAX_UPLOAD_BYTES = 16
        mock_config.RAW_TEXT_PREVIEW_CHARS = 8

        response = client.post(
            "/upload/resume",
            files={"file": ("jane.txt", RESUME, "text/plain")},
            headers=HEADERS,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "File exceeds the 16 byte limit"

    @patch("app.routers.resumes.asyncio.to_thread", new_callable=AsyncMock, wraps=asyncio.to_thread)
    def test_conversion_runs_in_worker_thread(self, mock_to_thread, client, candidate_store):
        from app.routers.resumes import _convert_and_parse

        response = client.post(
            "/upload/resume",
            files={"file": ("jane.txt", RESUME, "text/plain")},
            headers=HEADERS,
        )

        assert response.status_code == 200
        mock_to_thread.assert_awaited_once_with(_convert_and_parse, "jane.txt", "text/plain", RESUME)
