"""
RPC Endpoint
/api/trpc/{procedure}: one route dispatching to named procedures
"""
import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Type
from uuid import uuid4

from fastapi import APIRouter, Depends, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from core.config import Settings, get_settings
from core.exceptions import DomainException, ErrorKind, ResourceNotFoundException, status_for
from domain.entities import User
from application.repositories.interfaces import ISocialProfileRepository, IUserRepository
from application.services.application_tracking import IApplicationTrackingService
from application.services.job_analysis import IJobAnalysisService, build_user_cv
from infrastructure.services.social_connection_service import SocialConnectionService
from infrastructure.social.config import (
    SocialConfig,
    SocialProvider,
    get_configured_providers,
    is_provider_configured,
)
from presentation.api.container import (
    get_application_tracking_service,
    get_job_analysis_service,
    get_social_config,
    get_social_profile_repository,
    get_token_cipher,
    get_user_repository,
)
from presentation.api.dependencies import get_caller_id, load_user, require_caller_id
from presentation.api.schemas.analyze import AnalyzeJobRequest, CoverLetterRequest, CoverLetterResponse
from presentation.api.schemas.applications import ApplicationCreateRequest, ApplicationResponse
from presentation.api.schemas.base import CamelModel
from presentation.api.schemas.social import IntegrationStatus, SocialProviderInput
from presentation.api.schemas.user import UserProfileInput, UserResponse


router = APIRouter()

RPC_ERROR_CODES = {
    ErrorKind.NOT_FOUND: "NOT_FOUND",
    ErrorKind.VALIDATION_FAILED: "BAD_REQUEST",
    ErrorKind.CONFLICT: "CONFLICT",
    ErrorKind.UNCONFIGURED: "SERVICE_UNAVAILABLE",
    ErrorKind.UPSTREAM_FAILURE: "INTERNAL_SERVER_ERROR",
    ErrorKind.UNAUTHENTICATED: "UNAUTHORIZED",
}


# ============================================================================
# Procedure inputs
# ============================================================================

class ApplicationCreateInput(ApplicationCreateRequest):
    """The owner comes from the caller, not the payload"""
    user_id: Optional[str] = None


class ApplicationUpdateInput(CamelModel):
    id: str = Field(..., min_length=1)
    status: Optional[str] = None
    notes: Optional[str] = None


class ApplicationIdInput(CamelModel):
    id: str = Field(..., min_length=1)


# ============================================================================
# Context and registry
# ============================================================================

@dataclass
class RpcContext:
    """Per-request services handed to every procedure"""
    caller_id: Optional[str]
    user_repo: IUserRepository
    tracking: IApplicationTrackingService
    analysis: IJobAnalysisService
    social_config: SocialConfig
    social_profiles: ISocialProfileRepository
    settings: Settings

    def require_caller(self) -> str:
        return require_caller_id(self.caller_id)

    def social_connections(self) -> SocialConnectionService:
        # The token cipher is only built by procedures that need it
        return SocialConnectionService(
            self.social_config, self.social_profiles, get_token_cipher(self.settings)
        )


async def get_rpc_context(
    caller_id: Optional[str] = Depends(get_caller_id),
    user_repo: IUserRepository = Depends(get_user_repository),
    tracking: IApplicationTrackingService = Depends(get_application_tracking_service),
    analysis: IJobAnalysisService = Depends(get_job_analysis_service),
    social_config: SocialConfig = Depends(get_social_config),
    social_profiles: ISocialProfileRepository = Depends(get_social_profile_repository),
    settings: Settings = Depends(get_settings)
) -> RpcContext:
    return RpcContext(caller_id, user_repo, tracking, analysis, social_config, social_profiles, settings)


@dataclass(frozen=True)
class Procedure:
    handler: Callable[[RpcContext, Any], Awaitable[Any]]
    method: str  # GET for queries, POST for mutations
    input_model: Optional[Type[BaseModel]] = None


PROCEDURES: Dict[str, Procedure] = {}


def procedure(name: str, method: str, input_model: Optional[Type[BaseModel]] = None):
    """Register a procedure under a dotted name"""
    def decorator(handler):
        PROCEDURES[name] = Procedure(handler, method, input_model)
        return handler
    return decorator


def query(name: str, input_model: Optional[Type[BaseModel]] = None):
    return procedure(name, "GET", input_model)


def mutation(name: str, input_model: Optional[Type[BaseModel]] = None):
    return procedure(name, "POST", input_model)


# ============================================================================
# Procedures
# ============================================================================

@query("user.get")
async def get_user(ctx: RpcContext, _input: None) -> Dict[str, Any]:
    """The profile user (single-user mode)"""
    user = await ctx.user_repo.get_first()
    return {"user": UserResponse.from_entity(user) if user else None}


@mutation("user.upsert", UserProfileInput)
async def upsert_user(ctx: RpcContext, data: UserProfileInput) -> Dict[str, Any]:
    fields = {
        "name": data.name,
        "email": data.email,
        "phone": data.phone,
        "location": data.location,
        "summary": data.summary,
        "experience": data.experience,
        "skills": data.skills,
    }

    existing = await ctx.user_repo.get_first()
    if existing:
        user = await ctx.user_repo.update_fields(existing.id, fields)
        return {"user": UserResponse.from_entity(user), "created": False}

    user = await ctx.user_repo.create(User(id=str(uuid4()), **fields))
    return {"user": UserResponse.from_entity(user), "created": True}


@query("applications.list")
async def list_applications(ctx: RpcContext, _input: None):
    applications = await ctx.tracking.list_applications(ctx.require_caller())
    return [ApplicationResponse.from_entity(a) for a in applications]


@mutation("applications.create", ApplicationCreateInput)
async def create_application(ctx: RpcContext, data: ApplicationCreateInput):
    application = await ctx.tracking.create_application(
        user_id=ctx.require_caller(),
        company=data.company,
        role=data.role,
        job_description=data.job_description,
        job_url=data.job_url,
        match_score=data.match_score,
        analysis=data.analysis,
        cover_letter=data.cover_letter,
        status=data.status,
        notes=data.notes,
    )
    return ApplicationResponse.from_entity(application)


@mutation("applications.update", ApplicationUpdateInput)
async def update_application(ctx: RpcContext, data: ApplicationUpdateInput):
    await _owned_application(ctx, data.id)
    changes = data.model_dump(exclude_unset=True, exclude={"id"})
    application = await ctx.tracking.update_application(data.id, changes)
    return ApplicationResponse.from_entity(application)


@mutation("applications.delete", ApplicationIdInput)
async def delete_application(ctx: RpcContext, data: ApplicationIdInput):
    await _owned_application(ctx, data.id)
    await ctx.tracking.delete_application(data.id)
    return {"success": True}


@mutation("analyze.analyzeJob", AnalyzeJobRequest)
async def analyze_job(ctx: RpcContext, data: AnalyzeJobRequest):
    user = await load_user(ctx.user_repo, data.user_id)
    return await ctx.analysis.analyze_job(data.job_description, build_user_cv(user))


@mutation("analyze.generateCoverLetter", CoverLetterRequest)
async def generate_cover_letter(ctx: RpcContext, data: CoverLetterRequest):
    user = await load_user(ctx.user_repo, data.user_id)
    cover_letter = await ctx.analysis.generate_cover_letter(
        data.job_description, build_user_cv(user), data.analysis
    )
    return CoverLetterResponse(cover_letter=cover_letter)


@query("social.providers")
async def social_providers(ctx: RpcContext, _input: None):
    return {
        "providers": [
            {
                "provider": provider.value,
                "name": provider.display_name,
                "configured": is_provider_configured(ctx.social_config, provider),
            }
            for provider in SocialProvider
        ]
    }


@query("social.getIntegrations")
async def social_integrations(ctx: RpcContext, _input: None):
    """Connection status of every configured provider for the caller"""
    profiles = {p.provider: p for p in await ctx.social_profiles.list_by_user(ctx.require_caller())}
    return [
        IntegrationStatus.for_provider(provider, profiles.get(provider.stored_name))
        for provider in get_configured_providers(ctx.social_config)
    ]


@mutation("social.disconnect", SocialProviderInput)
async def social_disconnect(ctx: RpcContext, data: SocialProviderInput):
    caller_id = ctx.require_caller()
    if not await ctx.social_connections().disconnect(data.provider, caller_id):
        raise ResourceNotFoundException("Social profile", data.provider.stored_name)
    return {"success": True}


async def _owned_application(ctx: RpcContext, application_id: str):
    """Applications of other users look like missing ones"""
    caller_id = ctx.require_caller()
    application = await ctx.tracking.get_application(application_id)
    if application.user_id != caller_id:
        raise ResourceNotFoundException("Application", application_id)
    return application


# ============================================================================
# HTTP dispatch
# ============================================================================

class PayloadTooLarge(Exception):
    """Request body exceeds RPC_MAX_BODY_BYTES"""


def rpc_error(http_status: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(status_code=http_status, content={"error": {"message": message, "code": code}})


def _content_length(request: Request) -> Optional[int]:
    raw = request.headers.get("content-length")
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value >= 0 else None


async def _read_input(request: Request, settings: Settings) -> Any:
    """Raw procedure input: `input` query param for GET, JSON body for POST"""
    if request.method == "GET":
        raw = request.query_params.get("input")
        return json.loads(raw) if raw else None

    body = await request.body()
    if len(body) > settings.RPC_MAX_BODY_BYTES:
        raise PayloadTooLarge(len(body))
    return json.loads(body) if body.strip() else None


@router.api_route("/trpc/{procedure_name}", methods=["GET", "POST"])
async def dispatch(
    procedure_name: str,
    request: Request,
    settings: Settings = Depends(get_settings),
    ctx: RpcContext = Depends(get_rpc_context)
):
    """Run one procedure. Queries use GET, mutations POST."""
    if request.method == "POST":
        content_length = _content_length(request)
        if content_length is not None and content_length > settings.RPC_MAX_BODY_BYTES:
            return rpc_error(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Payload Too Large", "PAYLOAD_TOO_LARGE")

        content_type = request.headers.get("content-type")
        if content_type and not content_type.lower().startswith("application/json"):
            return rpc_error(status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, "Unsupported Media Type", "UNSUPPORTED_MEDIA_TYPE")

    proc = PROCEDURES.get(procedure_name)
    if proc is None:
        return rpc_error(status.HTTP_404_NOT_FOUND, f'No procedure found on path "{procedure_name}"', "NOT_FOUND")

    if request.method != proc.method:
        return rpc_error(
            status.HTTP_405_METHOD_NOT_ALLOWED,
            f'Unsupported {request.method} request to procedure "{procedure_name}"',
            "METHOD_NOT_SUPPORTED",
        )

    try:
        raw_input = await _read_input(request, settings)
    except PayloadTooLarge:
        return rpc_error(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Payload Too Large", "PAYLOAD_TOO_LARGE")
    except ValueError:
        return rpc_error(status.HTTP_400_BAD_REQUEST, "Input is not valid JSON", "PARSE_ERROR")

    try:
        data = proc.input_model.model_validate(raw_input) if proc.input_model else None
    except ValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": {
                "message": "Validation failed",
                "code": "BAD_REQUEST",
                "issues": jsonable_encoder(e.errors(include_url=False, include_context=False)),
            }},
        )

    try:
        result = await proc.handler(ctx, data)
    except DomainException as e:
        http_status = status_for(e.kind)
        if http_status >= 500:
            logger.error(f"RPC {procedure_name} failed: {str(e)}")
        else:
            logger.warning(f"RPC {procedure_name} rejected: {str(e)}")
        return rpc_error(http_status, e.public_message, RPC_ERROR_CODES[e.kind])

    return JSONResponse(content={"result": {"data": jsonable_encoder(result, by_alias=True)}})
