"""
Tests for CV blob storage and the /api/cv/store routes
"""
from unittest.mock import AsyncMock, Mock, MagicMock, patch

import pytest
from google.api_core.exceptions import NotFound

from core.exceptions import ProviderNotConfiguredException, StorageException
from infrastructure.external.cv_storage_service import (
    GCSCVStorageService,
    cv_latex_key,
    cv_pdf_key,
)
from presentation.api.container import get_cv_storage_service, get_job_analysis_service
from main import app
from conftest import make_settings


PDF_BYTES = b"%PDF-1.4\n%fake cv\n"

EXTRACTED_LATEX = "\\documentclass[10pt]{article}\n\\begin{document}\nAda\n\\end{document}"


def _blob(name: str) -> Mock:
    blob = Mock()
    blob.name = name
    blob.public_url = f"https://storage.googleapis.com/careerpal-cv/{name}"
    return blob


class TestGCSCVStorageService:

    @pytest.fixture
    def bucket(self):
        bucket = MagicMock()
        bucket.blob.side_effect = _blob
        return bucket

    @pytest.fixture
    def service(self, bucket):
        return GCSCVStorageService(make_settings(), bucket=bucket)

    def test_keys(self):
        assert cv_pdf_key("user-1") == "cv/user-1/cv.pdf"
        assert cv_latex_key("user-1") == "cv/user-1/cv.tex"

    @pytest.mark.asyncio
    async def test_upload_pdf_targets_fixed_key(self, service, bucket):
        first = await service.upload_cv_pdf("user-1", PDF_BYTES)
        second = await service.upload_cv_pdf("user-1", b"%PDF-1.4\nnewer")

        assert first == second == "https://storage.googleapis.com/careerpal-cv/cv/user-1/cv.pdf"
        assert [c.args[0] for c in bucket.blob.call_args_list] == ["cv/user-1/cv.pdf"] * 2

    @pytest.mark.asyncio
    async def test_upload_latex_content_type(self, service, bucket):
        tex = _blob("cv/user-1/cv.tex")
        bucket.blob.side_effect = None
        bucket.blob.return_value = tex

        url = await service.upload_cv_latex("user-1", "\\documentclass{article}")

        assert url.endswith("cv/user-1/cv.tex")
        bucket.blob.assert_called_once_with("cv/user-1/cv.tex")
        tex.upload_from_string.assert_called_once_with(
            "\\documentclass{article}", content_type="text/x-tex"
        )

    @pytest.mark.asyncio
    async def test_upload_failure(self, service, bucket):
        failing = _blob("cv/user-1/cv.pdf")
        failing.upload_from_string.side_effect = RuntimeError("bucket unavailable")
        bucket.blob.side_effect = None
        bucket.blob.return_value = failing

        with pytest.raises(StorageException):
            await service.upload_cv_pdf("user-1", PDF_BYTES)

    @pytest.mark.asyncio
    async def test_delete_all_files(self, service, bucket):
        pdf, tex = _blob("cv/user-1/cv.pdf"), _blob("cv/user-1/cv.tex")
        bucket.list_blobs.return_value = [pdf, tex]

        deleted = await service.delete_cv_files("user-1")

        assert deleted == ["cv/user-1/cv.pdf", "cv/user-1/cv.tex"]
        bucket.list_blobs.assert_called_once_with(prefix="cv/user-1/")
        pdf.delete.assert_called_once()
        tex.delete.assert_called_once()

    @pytest.mark.asyncio
    async def test_delete_reports_failed_keys(self, service, bucket):
        pdf, tex = _blob("cv/user-1/cv.pdf"), _blob("cv/user-1/cv.tex")
        tex.delete.side_effect = RuntimeError("permission denied")
        bucket.list_blobs.return_value = [pdf, tex]

        with pytest.raises(StorageException) as exc_info:
            await service.delete_cv_files("user-1")

        assert exc_info.value.failed_keys == ["cv/user-1/cv.tex"]
        # The other deletion still ran
        pdf.delete.assert_called_once()

    @pytest.mark.asyncio
    async def test_delete_with_nothing_stored(self, service, bucket):
        bucket.list_blobs.return_value = []

        assert await service.delete_cv_files("user-1") == []

    @pytest.mark.asyncio
    async def test_delete_latex(self, service, bucket):
        tex = _blob("cv/user-1/cv.tex")
        bucket.blob.side_effect = None
        bucket.blob.return_value = tex

        assert await service.delete_cv_latex("user-1") is True
        bucket.blob.assert_called_once_with("cv/user-1/cv.tex")
        tex.delete.assert_called_once()

    @pytest.mark.asyncio
    async def test_delete_latex_when_none_stored(self, service, bucket):
        tex = _blob("cv/user-1/cv.tex")
        tex.delete.side_effect = NotFound("No such object: careerpal-cv/cv/user-1/cv.tex")
        bucket.blob.side_effect = None
        bucket.blob.return_value = tex

        assert await service.delete_cv_latex("user-1") is False

    @pytest.mark.asyncio
    async def test_delete_latex_failure(self, service, bucket):
        tex = _blob("cv/user-1/cv.tex")
        tex.delete.side_effect = RuntimeError("permission denied")
        bucket.blob.side_effect = None
        bucket.blob.return_value = tex

        with pytest.raises(StorageException) as exc_info:
            await service.delete_cv_latex("user-1")

        assert exc_info.value.failed_keys == ["cv/user-1/cv.tex"]

    @pytest.mark.asyncio
    async def test_download_non_success(self, service):
        with patch('httpx.AsyncClient') as mock_client_class:
            mock_response = Mock()
            mock_response.is_success = False
            mock_response.reason_phrase = "Not Found"

            mock_client_instance = AsyncMock()
            mock_client_instance.get.return_value = mock_response
            mock_client_class.return_value.__aenter__.return_value = mock_client_instance

            with pytest.raises(StorageException, match="Failed to download from blob: Not Found"):
                await service.download_from_blob("https://storage.googleapis.com/careerpal-cv/cv/u/cv.pdf")

            with pytest.raises(StorageException, match="Failed to download LaTeX: Not Found"):
                await service.download_latex_content("https://storage.googleapis.com/careerpal-cv/cv/u/cv.tex")

    @pytest.mark.asyncio
    async def test_download_latex(self, service):
        with patch('httpx.AsyncClient') as mock_client_class:
            mock_response = Mock()
            mock_response.is_success = True
            mock_response.text = "\\section{Experience}"

            mock_client_instance = AsyncMock()
            mock_client_instance.get.return_value = mock_response
            mock_client_class.return_value.__aenter__.return_value = mock_client_instance

            content = await service.download_latex_content("https://example.com/cv.tex")

            assert content == "\\section{Experience}"


class TestCVRoutes:
    """Route tests with storage and LaTeX extraction replaced by mocks"""

    @pytest.fixture
    def storage(self):
        storage = Mock()
        storage.upload_cv_pdf = AsyncMock(return_value="https://blob/cv/u/cv.pdf")
        storage.upload_cv_latex = AsyncMock(return_value="https://blob/cv/u/cv.tex")
        storage.delete_cv_latex = AsyncMock(return_value=True)
        storage.download_latex_content = AsyncMock(return_value="\\documentclass{article}")
        storage.delete_cv_files = AsyncMock(return_value=["cv/u/cv.pdf", "cv/u/cv.tex"])
        app.dependency_overrides[get_cv_storage_service] = lambda: storage
        return storage

    @pytest.fixture(autouse=True)
    def analysis_service(self):
        service = Mock()
        service.extract_latex = AsyncMock(return_value=EXTRACTED_LATEX)
        app.dependency_overrides[get_job_analysis_service] = lambda: service
        return service

    @pytest.mark.asyncio
    async def test_store_and_fetch(self, client, user, storage):
        response = await client.post(
            "/api/cv/store",
            data={"userId": user.id, "latex": "\\documentclass{article}"},
            files={"file": ("cv.pdf", PDF_BYTES, "application/pdf")},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["pdfUrl"] == "https://blob/cv/u/cv.pdf"
        assert body["data"]["latexUrl"] == "https://blob/cv/u/cv.tex"
        assert body["data"]["filename"] == "cv.pdf"
        storage.upload_cv_pdf.assert_awaited_once_with(user.id, PDF_BYTES)

        fetched = await client.get("/api/cv/store", params={"userId": user.id})
        assert fetched.status_code == 200
        assert fetched.json()["data"]["latexContent"] == "\\documentclass{article}"

    @pytest.mark.asyncio
    async def test_supplied_latex_skips_extraction(self, client, user, storage, analysis_service):
        response = await client.post(
            "/api/cv/store",
            data={"userId": user.id, "latex": "\\documentclass{article}"},
            files={"file": ("cv.pdf", PDF_BYTES, "application/pdf")},
        )

        assert response.json()["message"] == "CV uploaded successfully."
        analysis_service.extract_latex.assert_not_called()
        storage.upload_cv_latex.assert_awaited_once_with(user.id, "\\documentclass{article}")

    @pytest.mark.asyncio
    async def test_extracts_latex_when_not_supplied(self, client, user, storage, analysis_service):
        response = await client.post(
            "/api/cv/store",
            data={"userId": user.id},
            files={"file": ("cv.pdf", PDF_BYTES, "application/pdf")},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "CV uploaded and LaTeX extracted successfully."
        assert body["data"]["latexUrl"] == "https://blob/cv/u/cv.tex"
        assert body["data"]["latexContent"] == EXTRACTED_LATEX
        analysis_service.extract_latex.assert_awaited_once_with(PDF_BYTES)
        storage.upload_cv_latex.assert_awaited_once_with(user.id, EXTRACTED_LATEX)
        storage.delete_cv_latex.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_extraction_stores_pdf_and_drops_old_latex(self, client, user, storage, analysis_service):
        await client.post(
            "/api/cv/store",
            data={"userId": user.id, "latex": "\\documentclass{article}"},
            files={"file": ("cv.pdf", PDF_BYTES, "application/pdf")},
        )
        analysis_service.extract_latex.side_effect = ProviderNotConfiguredException("anthropic", "AI analysis")

        response = await client.post(
            "/api/cv/store",
            data={"userId": user.id},
            files={"file": ("cv-v2.pdf", b"%PDF-1.4\nnewer", "application/pdf")},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "CV uploaded successfully."
        assert body["data"]["latexUrl"] is None
        assert body["data"]["latexContent"] is None
        storage.delete_cv_latex.assert_awaited_once_with(user.id)

        fetched = await client.get("/api/cv/store", params={"userId": user.id})
        assert fetched.json()["data"]["latexUrl"] is None
        assert fetched.json()["data"]["filename"] == "cv-v2.pdf"

    @pytest.mark.asyncio
    async def test_fetch_survives_latex_download_failure(self, client, user, storage):
        await client.post(
            "/api/cv/store",
            data={"userId": user.id, "latex": "\\documentclass{article}"},
            files={"file": ("cv.pdf", PDF_BYTES, "application/pdf")},
        )
        storage.download_latex_content.side_effect = StorageException("Failed to download LaTeX: Not Found")

        fetched = await client.get("/api/cv/store", params={"userId": user.id})

        assert fetched.status_code == 200
        assert fetched.json()["data"]["latexContent"] is None

    @pytest.mark.asyncio
    async def test_rejects_non_pdf(self, client, user, storage):
        response = await client.post(
            "/api/cv/store",
            data={"userId": user.id},
            files={"file": ("cv.docx", b"PK\x03\x04", "application/vnd.openxmlformats-officedocument.wordprocessingml.document")},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Only PDF files are supported for the CV editor."}
        storage.upload_cv_pdf.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_missing_file(self, client, user, storage):
        response = await client.post("/api/cv/store", data={"userId": user.id})

        assert response.status_code == 400
        assert response.json() == {"error": "No file uploaded"}

    @pytest.mark.asyncio
    async def test_rejects_oversized_file(self, client, user, storage):
        oversized = b"%PDF" + b"0" * (5 * 1024 * 1024)

        response = await client.post(
            "/api/cv/store",
            data={"userId": user.id},
            files={"file": ("cv.pdf", oversized, "application/pdf")},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "File too large. Maximum size is 5MB."}

    @pytest.mark.asyncio
    async def test_fetch_without_cv_is_404(self, client, user, storage):
        response = await client.get("/api/cv/store", params={"userId": user.id})

        assert response.status_code == 404
        assert response.json() == {"error": "CV not found"}

    @pytest.mark.asyncio
    async def test_delete_clears_references(self, client, user, storage):
        await client.post(
            "/api/cv/store",
            data={"userId": user.id},
            files={"file": ("cv.pdf", PDF_BYTES, "application/pdf")},
        )

        response = await client.delete("/api/cv/store", params={"userId": user.id})

        assert response.status_code == 200
        assert response.json() == {"success": True, "deleted": ["cv/u/cv.pdf", "cv/u/cv.tex"]}
        storage.delete_cv_files.assert_awaited_once_with(user.id)

        fetched = await client.get("/api/cv/store", params={"userId": user.id})
        assert fetched.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_partial_failure_is_500(self, client, user, storage):
        storage.delete_cv_files.side_effect = StorageException(
            "Failed to delete 1 of 2 CV files", failed_keys=["cv/u/cv.tex"]
        )

        response = await client.delete("/api/cv/store", params={"userId": user.id})

        assert response.status_code == 500
        assert response.json() == {"error": "File storage operation failed. Please try again."}
