"""
AI Endpoints
/api/analyze and /api/cover-letter
"""
from fastapi import APIRouter, Depends

from domain.value_objects import JobAnalysisResult
from application.repositories.interfaces import IUserRepository
from application.services.job_analysis import IJobAnalysisService, build_user_cv
from presentation.api.container import get_job_analysis_service, get_user_repository
from presentation.api.dependencies import load_user
from presentation.api.schemas.analyze import AnalyzeJobRequest, CoverLetterRequest, CoverLetterResponse


router = APIRouter()


@router.post("/analyze", response_model=JobAnalysisResult)
async def analyze_job(
    request: AnalyzeJobRequest,
    user_repo: IUserRepository = Depends(get_user_repository),
    analysis_service: IJobAnalysisService = Depends(get_job_analysis_service)
):
    """Analyze a job description against the user's CV profile"""
    user = await load_user(user_repo, request.user_id)
    return await analysis_service.analyze_job(request.job_description, build_user_cv(user))


@router.post("/cover-letter", response_model=CoverLetterResponse)
async def generate_cover_letter(
    request: CoverLetterRequest,
    user_repo: IUserRepository = Depends(get_user_repository),
    analysis_service: IJobAnalysisService = Depends(get_job_analysis_service)
):
    """Write a cover letter from a previous analysis"""
    user = await load_user(user_repo, request.user_id)
    cover_letter = await analysis_service.generate_cover_letter(
        request.job_description,
        build_user_cv(user),
        request.analysis,
    )
    return CoverLetterResponse(cover_letter=cover_letter)
