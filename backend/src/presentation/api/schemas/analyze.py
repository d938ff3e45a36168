"""
AI Analysis Request/Response Schemas
"""
from pydantic import Field

from domain.value_objects import JobAnalysisResult
from .base import CamelModel


class AnalyzeJobRequest(CamelModel):
    job_description: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)


class CoverLetterRequest(AnalyzeJobRequest):
    analysis: JobAnalysisResult


class CoverLetterResponse(CamelModel):
    cover_letter: str
