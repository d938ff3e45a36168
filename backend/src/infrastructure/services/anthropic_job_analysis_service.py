"""
Anthropic Job Analysis Service
Job-fit analysis, cover letters and CV LaTeX extraction via the Claude Messages API
"""
import base64
import re
from typing import Any, Dict, List, Optional, Union

import anthropic
from anthropic import AsyncAnthropic
from pydantic import ValidationError

from application.services.job_analysis import IJobAnalysisService
from domain.value_objects import JobAnalysisResult
from core.config import Settings
from core.exceptions import (
    MalformedModelOutputException,
    ProviderNotConfiguredException,
    UpstreamServiceException,
)
from core.logging_config import logger


ANALYSIS_PROMPT = """You are a job application expert. Analyze this job description against the candidate's CV.

Job Description:
{job_description}

Candidate CV:
{cv}

Provide a JSON response with:
1. company: Company name (string)
2. role: Job title (string)
3. matchScore: 0-100 score (number)
4. topRequirements: Top 5 requirements from the job (array of strings)
5. skillsMatch: Skills the candidate has that match (array of strings)
6. gaps: Skills the candidate lacks (array of strings)
7. redFlags: Any concerns like timezone, visa, location issues (array of strings)
8. keyPoints: 3-5 points to emphasize in cover letter (array of strings)

IMPORTANT CONTEXT:
- Candidate is fluent English speaker (11 years in London) - English teams are NOT a concern
- Candidate is open to contract roles (12+ months) - Don't flag contracts as concerning
- Focus on technical fit and role alignment

Be honest about gaps but focus on strengths. Match score should be realistic.
Return ONLY valid JSON, no other text."""

COVER_LETTER_PROMPT = """Write a concise, professional cover letter (max 250 words) for this job.

Job Description:
{job_description}

Candidate CV:
{cv}

Job Analysis:
{analysis_summary}

Write the cover letter with:
- Direct, honest, professional tone (no fluff)
- Highlight 1-2 most relevant achievements
- Address any location/timezone concerns if relevant
- Maximum 250 words
- Professional but authentic voice

Return ONLY the cover letter text, no introduction or explanation."""

LATEX_EXTRACTION_PROMPT = r"""You are an expert LaTeX typesetter. Replicate the attached CV as a LaTeX document, preserving its visual layout as closely as possible.

Preserve:
1. Page margins
2. Font family (serif or sans-serif) and sizes
3. Line, paragraph and section spacing
4. Column structure, alignment and indentation
5. Bold, italic and underline patterns, horizontal rules and bullet styles

Use the article class with geometry, enumitem, titlesec, hyperref, xcolor and tabularx as needed.
For bullet lists use \begin{itemize}[nosep, leftmargin=*] ... \end{itemize}.

Output requirements:
- Start with \documentclass and end with \end{document}
- Must compile with pdflatex
- Include the complete document, do not truncate
- Return ONLY LaTeX code, no markdown code blocks and no explanations"""

# A single fenced block, optionally tagged as json
_CODE_FENCE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?\s*```$", re.DOTALL | re.IGNORECASE)

_LATEX_FENCE = re.compile(r"^```(?:latex|tex)?\s*\n?|\n?```$", re.IGNORECASE)

_DOCUMENT_END = r"\end{document}"


def summarize_analysis(analysis: JobAnalysisResult) -> str:
    """Bullet summary of an analysis, embedded in the cover letter prompt"""
    lines = [
        f"- Company: {analysis.company}",
        f"- Role: {analysis.role}",
        f"- Match Score: {analysis.match_score:g}/100",
        f"- Key Points to Emphasize: {', '.join(analysis.key_points)}",
        f"- Skills Match: {', '.join(analysis.skills_match)}",
    ]
    if analysis.gaps:
        lines.append(f"- Gaps to Address: {', '.join(analysis.gaps)}")
    return "\n".join(lines)


def parse_analysis(text: str) -> JobAnalysisResult:
    """
    Strictly parse model output into a JobAnalysisResult

    The whole text must be one JSON object of the expected shape,
    optionally wrapped in a markdown code fence.

    Raises:
        MalformedModelOutputException: On invalid JSON or a shape mismatch
    """
    candidate = text.strip()
    fenced = _CODE_FENCE.match(candidate)
    if fenced:
        candidate = fenced.group(1).strip()

    try:
        return JobAnalysisResult.model_validate_json(candidate)
    except ValidationError as e:
        logger.warning(f"Rejected model analysis output: {e.error_count()} validation errors")
        raise MalformedModelOutputException(f"Model output is not a valid job analysis: {e}")


def clean_latex(text: str) -> str:
    """
    Cut model output down to the LaTeX document it contains

    Drops code fences and anything before \\documentclass or after
    \\end{document}.

    Raises:
        MalformedModelOutputException: Either boundary is missing
    """
    latex = _LATEX_FENCE.sub("", text.strip())

    start = latex.find(r"\documentclass")
    if start < 0:
        raise MalformedModelOutputException("Model did not return valid LaTeX (missing \\documentclass)")

    end = latex.find(_DOCUMENT_END, start)
    if end < 0:
        raise MalformedModelOutputException("Model returned incomplete LaTeX (missing \\end{document})")

    return latex[start:end + len(_DOCUMENT_END)]


class AnthropicJobAnalysisService(IJobAnalysisService):
    """Job analysis service using the Anthropic Messages API"""

    def __init__(self, settings: Settings, client: Optional[AsyncAnthropic] = None):
        self.model = settings.AI_MODEL_NAME
        self.analysis_max_tokens = settings.AI_ANALYSIS_MAX_TOKENS
        self.cover_letter_max_tokens = settings.AI_COVER_LETTER_MAX_TOKENS
        self.latex_max_tokens = settings.AI_LATEX_MAX_TOKENS

        if client is None and settings.ANTHROPIC_API_KEY:
            client = AsyncAnthropic(api_key=settings.ANTHROPIC_API_KEY)
        if client is None:
            logger.warning("ANTHROPIC_API_KEY not set - job analysis is unavailable")
        self.client = client

    async def analyze_job(self, job_description: str, cv: str) -> JobAnalysisResult:
        prompt = ANALYSIS_PROMPT.format(job_description=job_description, cv=cv)
        text = await self._complete(prompt, self.analysis_max_tokens)

        analysis = parse_analysis(text)
        logger.info(f"Analyzed job: {analysis.company} - {analysis.role} (score {analysis.match_score:g})")
        return analysis

    async def generate_cover_letter(
        self,
        job_description: str,
        cv: str,
        analysis: JobAnalysisResult
    ) -> str:
        prompt = COVER_LETTER_PROMPT.format(
            job_description=job_description,
            cv=cv,
            analysis_summary=summarize_analysis(analysis),
        )
        text = await self._complete(prompt, self.cover_letter_max_tokens)

        logger.info(f"Generated cover letter for {analysis.company} - {analysis.role}")
        return text.strip()

    async def extract_latex(self, pdf: bytes) -> str:
        content = [
            {
                "type": "document",
                "source": {
                    "type": "base64",
                    "media_type": "application/pdf",
                    "data": base64.b64encode(pdf).decode("ascii"),
                },
            },
            {"type": "text", "text": LATEX_EXTRACTION_PROMPT},
        ]
        text = await self._complete(content, self.latex_max_tokens)

        latex = clean_latex(text)
        logger.info(f"Extracted LaTeX from CV PDF ({len(pdf)} bytes -> {len(latex)} chars)")
        return latex

    async def _complete(self, content: Union[str, List[Dict[str, Any]]], max_tokens: int) -> str:
        """Request one completion and return the text of its first content block"""
        if self.client is None:
            raise ProviderNotConfiguredException("anthropic", "AI analysis")

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": content}],
            )
        except anthropic.APIError as e:
            logger.error(f"Anthropic API call failed: {e}")
            raise UpstreamServiceException(f"Anthropic API call failed: {e}")

        block = response.content[0] if response.content else None
        if block is None or getattr(block, "type", None) != "text":
            block_type = getattr(block, "type", None) if block is not None else "empty"
            logger.error(f"Unexpected response type from Claude: {block_type}")
            raise UpstreamServiceException(f"Unexpected response type from Claude: {block_type}")

        return block.text
