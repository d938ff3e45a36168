"""
Job Analysis Service Interface
AI job-fit analysis and cover letter generation
"""
from abc import ABC, abstractmethod

from domain.entities import User
from domain.value_objects import JobAnalysisResult


def build_user_cv(user: User) -> str:
    """CV text sent to the model for a user profile"""
    return user.to_cv_text()


class IJobAnalysisService(ABC):
    """AI job analysis service interface"""

    @abstractmethod
    async def analyze_job(self, job_description: str, cv: str) -> JobAnalysisResult:
        """
        Analyze a job description against a candidate CV

        Args:
            job_description: Raw job posting text
            cv: Candidate CV text (see User.to_cv_text)

        Returns:
            Validated JobAnalysisResult

        Raises:
            MalformedModelOutputException: Model output is not a valid analysis
            UpstreamServiceException: Model call failed or returned no text
        """
        pass

    @abstractmethod
    async def generate_cover_letter(
        self,
        job_description: str,
        cv: str,
        analysis: JobAnalysisResult
    ) -> str:
        """
        Write a cover letter (at most 250 words, by instruction)

        Returns:
            Trimmed cover letter text
        """
        pass

    @abstractmethod
    async def extract_latex(self, pdf: bytes) -> str:
        """
        Transcribe a CV PDF into a complete LaTeX document

        Returns:
            LaTeX source from \\documentclass through \\end{document}

        Raises:
            MalformedModelOutputException: Output is not a complete LaTeX document
            UpstreamServiceException: Model call failed or returned no text
        """
        pass
