"""
Job Analysis Value Object
Structured result of comparing a job description against a CV
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class JobAnalysisResult(BaseModel):
    """AI job-fit analysis. Serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    company: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    match_score: float = Field(..., alias="matchScore", ge=0, le=100)
    top_requirements: List[str] = Field(..., alias="topRequirements")
    skills_match: List[str] = Field(..., alias="skillsMatch")
    gaps: List[str]
    red_flags: List[str] = Field(..., alias="redFlags")
    key_points: List[str] = Field(..., alias="keyPoints")

    def to_json(self) -> str:
        """Serialize for storage on an application record"""
        return self.model_dump_json(by_alias=True)
