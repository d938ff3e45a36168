"""
CV Storage Endpoints
/api/cv/store: upload, fetch and delete the stored CV (PDF + LaTeX)
"""
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from loguru import logger

from core.config import Settings, get_settings
from core.exceptions import (
    ProviderNotConfiguredException,
    ResourceNotFoundException,
    StorageException,
    UpstreamServiceException,
    ValidationException,
)
from application.repositories.interfaces import IUserRepository
from application.services.job_analysis import IJobAnalysisService
from infrastructure.external.cv_storage_service import GCSCVStorageService, PDF_CONTENT_TYPE
from presentation.api.container import (
    get_cv_storage_service,
    get_job_analysis_service,
    get_user_repository,
)
from presentation.api.dependencies import load_user
from presentation.api.schemas.cv import CVDeleteResponse, CVStoreResponse, StoredCV


router = APIRouter()


@router.post("/cv/store", response_model=CVStoreResponse)
async def store_cv(
    user_id: str = Form(..., alias="userId", min_length=1),
    file: Optional[UploadFile] = File(None),
    latex: Optional[str] = Form(None),
    settings: Settings = Depends(get_settings),
    user_repo: IUserRepository = Depends(get_user_repository),
    storage: GCSCVStorageService = Depends(get_cv_storage_service),
    analysis_service: IJobAnalysisService = Depends(get_job_analysis_service)
):
    """
    Store a CV PDF together with its LaTeX source.

    Without a `latex` form field the source is extracted from the PDF
    by the AI model. If extraction is unavailable or fails, the PDF is
    stored alone. A new upload replaces the user's previous files.
    """
    if file is None:
        raise ValidationException("No file uploaded", field="file")

    if file.content_type != PDF_CONTENT_TYPE:
        raise ValidationException("Only PDF files are supported for the CV editor.", field="file")

    content = await file.read()
    if len(content) > settings.MAX_CV_SIZE_MB * 1024 * 1024:
        raise ValidationException(
            f"File too large. Maximum size is {settings.MAX_CV_SIZE_MB}MB.", field="file"
        )

    await load_user(user_repo, user_id)

    message = "CV uploaded successfully."
    if not latex:
        try:
            latex = await analysis_service.extract_latex(content)
            message = "CV uploaded and LaTeX extracted successfully."
        except (ProviderNotConfiguredException, UpstreamServiceException) as e:
            logger.warning(f"LaTeX extraction failed for user {user_id}, storing PDF only: {e}")

    pdf_url = await storage.upload_cv_pdf(user_id, content)
    if latex:
        latex_url = await storage.upload_cv_latex(user_id, latex)
    else:
        # Drop source left over from a previous upload
        await storage.delete_cv_latex(user_id)
        latex_url = None

    user = await user_repo.update_fields(user_id, {
        "cv_pdf_url": pdf_url,
        "cv_latex_url": latex_url,
        "cv_filename": file.filename,
        "cv_uploaded_at": datetime.now(timezone.utc),
    })

    logger.info(f"Stored CV for user {user_id}: {file.filename} ({len(content)} bytes)")

    return CVStoreResponse(
        data=StoredCV(
            pdf_url=pdf_url,
            latex_url=latex_url,
            latex_content=latex,
            filename=file.filename,
            uploaded_at=user.cv_uploaded_at if user else None,
        ),
        message=message,
    )


@router.get("/cv/store", response_model=CVStoreResponse)
async def get_stored_cv(
    user_id: str = Query(..., alias="userId", min_length=1),
    user_repo: IUserRepository = Depends(get_user_repository),
    storage: GCSCVStorageService = Depends(get_cv_storage_service)
):
    """Stored CV URLs, with the LaTeX source inlined when available"""
    user = await user_repo.get_by_id(user_id)
    if user is None or not user.has_cv():
        raise ResourceNotFoundException("CV", user_id)

    latex_content = None
    if user.cv_latex_url:
        try:
            latex_content = await storage.download_latex_content(user.cv_latex_url)
        except StorageException as e:
            logger.warning(f"Failed to fetch LaTeX content for user {user_id}: {e}")

    return CVStoreResponse(
        data=StoredCV(
            pdf_url=user.cv_pdf_url,
            latex_url=user.cv_latex_url,
            latex_content=latex_content,
            filename=user.cv_filename,
            uploaded_at=user.cv_uploaded_at,
        ),
    )


@router.delete("/cv/store", response_model=CVDeleteResponse)
async def delete_stored_cv(
    user_id: str = Query(..., alias="userId", min_length=1),
    user_repo: IUserRepository = Depends(get_user_repository),
    storage: GCSCVStorageService = Depends(get_cv_storage_service)
):
    """Delete every stored CV file and clear the user's CV references"""
    await load_user(user_repo, user_id)

    deleted = await storage.delete_cv_files(user_id)
    await user_repo.update_fields(user_id, {
        "cv_pdf_url": None,
        "cv_latex_url": None,
        "cv_filename": None,
        "cv_uploaded_at": None,
    })

    return CVDeleteResponse(deleted=deleted)
