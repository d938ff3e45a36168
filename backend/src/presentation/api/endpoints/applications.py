"""
Application Endpoints
/api/applications/* routes
"""
from typing import List

from fastapi import APIRouter, Depends, Query, status
from loguru import logger

from application.services.application_tracking import IApplicationTrackingService
from presentation.api.container import get_application_tracking_service
from presentation.api.schemas.applications import (
    ApplicationCreateRequest,
    ApplicationResponse,
    ApplicationUpdateRequest,
    DeleteResponse,
)


router = APIRouter()


@router.get("/applications", response_model=List[ApplicationResponse])
async def list_applications(
    user_id: str = Query(..., alias="userId", min_length=1),
    tracking: IApplicationTrackingService = Depends(get_application_tracking_service)
):
    """All applications of a user, newest first"""
    applications = await tracking.list_applications(user_id)
    return [ApplicationResponse.from_entity(a) for a in applications]


@router.post("/applications", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def create_application(
    request: ApplicationCreateRequest,
    tracking: IApplicationTrackingService = Depends(get_application_tracking_service)
):
    application = await tracking.create_application(
        user_id=request.user_id,
        company=request.company,
        role=request.role,
        job_description=request.job_description,
        job_url=request.job_url,
        match_score=request.match_score,
        analysis=request.analysis,
        cover_letter=request.cover_letter,
        status=request.status,
        notes=request.notes,
    )
    return ApplicationResponse.from_entity(application)


@router.patch("/applications/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: str,
    request: ApplicationUpdateRequest,
    tracking: IApplicationTrackingService = Depends(get_application_tracking_service)
):
    """
    Update status and/or notes.

    Fields missing from the body are left as they are. Setting status
    to "applied" records appliedAt.
    """
    application = await tracking.update_application(application_id, request.changes())
    return ApplicationResponse.from_entity(application)


@router.delete("/applications/{application_id}", response_model=DeleteResponse)
async def delete_application(
    application_id: str,
    tracking: IApplicationTrackingService = Depends(get_application_tracking_service)
):
    await tracking.delete_application(application_id)
    logger.info(f"Application {application_id} deleted via API")
    return DeleteResponse(success=True)
