"""
Tests for application tracking: service rules and /api/applications routes
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

from core.exceptions import ResourceNotFoundException, ValidationException
from domain.entities import Application
from domain.value_objects import ApplicationStatus
from infrastructure.persistence.models import ApplicationModel
from infrastructure.services.application_tracking_service import ApplicationTrackingService


def _as_utc(value: str) -> datetime:
    # SQLite hands back naive UTC timestamps
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _application(**overrides) -> Application:
    values = dict(
        id="abc",
        user_id="user-1",
        company="Acme",
        role="Backend Engineer",
        job_description="Build APIs",
        status=ApplicationStatus.SAVED,
    )
    values.update(overrides)
    return Application(**values)


class TestApplicationTrackingService:
    """Unit tests against a mocked repository"""

    @pytest.fixture
    def repo(self):
        repo = Mock()
        repo.get_by_id = AsyncMock()
        repo.list_by_user = AsyncMock(return_value=[])
        repo.create = AsyncMock(side_effect=lambda application: application)
        repo.update_fields = AsyncMock()
        repo.delete = AsyncMock(return_value=True)
        return repo

    @pytest.fixture
    def service(self, repo):
        return ApplicationTrackingService(repo)

    @pytest.mark.asyncio
    async def test_update_to_applied_stamps_applied_at(self, service, repo):
        repo.update_fields.return_value = _application(status=ApplicationStatus.APPLIED)
        before = datetime.now(timezone.utc)

        await service.update_application("abc", {"status": "applied"})

        application_id, fields = repo.update_fields.call_args.args
        assert application_id == "abc"
        assert fields["status"] is ApplicationStatus.APPLIED
        assert fields["applied_at"] >= before

    @pytest.mark.asyncio
    async def test_other_status_leaves_applied_at(self, service, repo):
        repo.update_fields.return_value = _application(status=ApplicationStatus.INTERVIEWING)

        await service.update_application("abc", {"status": ApplicationStatus.INTERVIEWING})

        _, fields = repo.update_fields.call_args.args
        assert "applied_at" not in fields

    @pytest.mark.asyncio
    async def test_notes_only_update(self, service, repo):
        repo.update_fields.return_value = _application(notes="Called recruiter")

        await service.update_application("abc", {"notes": "Called recruiter"})

        repo.update_fields.assert_awaited_once_with("abc", {"notes": "Called recruiter"})

    @pytest.mark.asyncio
    async def test_empty_update_returns_current_record(self, service, repo):
        current = _application()
        repo.get_by_id.return_value = current

        result = await service.update_application("abc", {})

        assert result is current
        repo.update_fields.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_id_raises_not_found(self, service, repo):
        repo.update_fields.return_value = None

        with pytest.raises(ResourceNotFoundException):
            await service.update_application("missing", {"notes": "x"})

    @pytest.mark.asyncio
    async def test_rejects_unknown_fields_and_bad_status(self, service):
        with pytest.raises(ValidationException):
            await service.update_application("abc", {"company": "Other"})

        with pytest.raises(ValidationException):
            await service.update_application("abc", {"status": "hired"})

        with pytest.raises(ValidationException):
            await service.update_application("abc", {"status": None})

    @pytest.mark.asyncio
    async def test_create_as_applied_stamps_applied_at(self, service):
        created = await service.create_application(
            user_id="user-1",
            company="Acme",
            role="Engineer",
            job_description="Build APIs",
            status=ApplicationStatus.APPLIED,
        )

        assert created.applied_at is not None
        assert created.id

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self, service, repo):
        repo.delete.return_value = False

        with pytest.raises(ResourceNotFoundException):
            await service.delete_application("missing")


class TestApplicationRoutes:
    """End-to-end through the API with an in-memory database"""

    @pytest_asyncio.fixture
    async def saved_application(self, session_factory, user):
        async with session_factory() as session:
            session.add(ApplicationModel(
                id="abc",
                user_id=user.id,
                company="Acme",
                role="Backend Engineer",
                job_description="Build APIs",
                status="saved",
            ))
            await session.commit()
        return "abc"

    @pytest.mark.asyncio
    async def test_create_and_list(self, client, user):
        response = await client.post("/api/applications", json={
            "userId": user.id,
            "company": "Acme",
            "role": "Backend Engineer",
            "jobDescription": "Build APIs",
            "matchScore": 82,
        })

        assert response.status_code == 201
        body = response.json()
        assert body["company"] == "Acme"
        assert body["status"] == "saved"
        assert body["appliedAt"] is None

        listing = await client.get("/api/applications", params={"userId": user.id})
        assert listing.status_code == 200
        assert [a["id"] for a in listing.json()] == [body["id"]]

    @pytest.mark.asyncio
    async def test_list_is_newest_first(self, client, session_factory, user):
        now = datetime.now(timezone.utc)
        async with session_factory() as session:
            for offset, company in enumerate(["Oldest", "Middle", "Newest"]):
                session.add(ApplicationModel(
                    user_id=user.id,
                    company=company,
                    role="Engineer",
                    job_description="JD",
                    created_at=now + timedelta(minutes=offset),
                ))
            await session.commit()

        response = await client.get("/api/applications", params={"userId": user.id})

        assert [a["company"] for a in response.json()] == ["Newest", "Middle", "Oldest"]

    @pytest.mark.asyncio
    async def test_create_missing_fields_is_400(self, client, user):
        response = await client.post("/api/applications", json={"userId": user.id, "company": "Acme"})

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    @pytest.mark.asyncio
    async def test_patch_applied_sets_applied_at(self, client, saved_application):
        before = datetime.now(timezone.utc) - timedelta(seconds=1)

        response = await client.patch(f"/api/applications/{saved_application}", json={"status": "applied"})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "applied"
        assert body["appliedAt"] is not None
        assert _as_utc(body["appliedAt"]) >= before

    @pytest.mark.asyncio
    async def test_patch_notes_keeps_status(self, client, saved_application):
        response = await client.patch(f"/api/applications/{saved_application}", json={"notes": "Referral from Bob"})

        assert response.status_code == 200
        body = response.json()
        assert body["notes"] == "Referral from Bob"
        assert body["status"] == "saved"
        assert body["appliedAt"] is None

    @pytest.mark.asyncio
    async def test_patch_invalid_status_is_400(self, client, saved_application):
        response = await client.patch(f"/api/applications/{saved_application}", json={"status": "hired"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_patch_unknown_id_is_404(self, client):
        response = await client.patch("/api/applications/does-not-exist", json={"notes": "x"})

        assert response.status_code == 404
        assert response.json() == {"error": "Application not found"}

    @pytest.mark.asyncio
    async def test_delete_then_delete_again(self, client, saved_application):
        first = await client.delete(f"/api/applications/{saved_application}")
        assert first.status_code == 200
        assert first.json() == {"success": True}

        second = await client.delete(f"/api/applications/{saved_application}")
        assert second.status_code == 404
