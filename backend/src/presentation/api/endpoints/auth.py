"""
Authentication Endpoints
/api/auth/* routes: sign-up and GitHub/LinkedIn account connection
"""
from typing import Optional
from urllib.parse import quote, urlencode

from fastapi import APIRouter, Cookie, Depends, Query, status
from fastapi.responses import RedirectResponse
from loguru import logger

from core.config import Settings, get_settings
from core.exceptions import OAuthStateException, UpstreamServiceException, ValidationException
from domain.value_objects import OAuthState
from application.services.auth.interfaces import IAuthService
from application.services.security.interfaces import IOAuthStateSigner
from infrastructure.services.social_connection_service import SocialConnectionService
from infrastructure.social.config import SocialConfig, SocialProvider, get_provider_config
from infrastructure.social.providers import get_oauth_provider
from infrastructure.social.errors import SocialIntegrationError, to_social_error
from presentation.api.container import (
    get_auth_service,
    get_oauth_state_signer,
    get_social_config,
    get_social_connection_service,
)
from presentation.api.schemas.auth import SignUpRequest, SignUpResponse, SignUpUser


router = APIRouter()

OAUTH_STATE_COOKIE = "oauth_state"


@router.post("/sign-up", response_model=SignUpResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    request: SignUpRequest,
    auth_service: IAuthService = Depends(get_auth_service)
):
    """Create an account with email and password"""
    user = await auth_service.register(
        name=request.name,
        email=request.email,
        password=request.password,
    )
    return SignUpResponse(user=SignUpUser.from_entity(user))


@router.get("/github")
async def connect_github(
    user_id: Optional[str] = Query(None, alias="userId"),
    settings: Settings = Depends(get_settings),
    signer: IOAuthStateSigner = Depends(get_oauth_state_signer),
    config: SocialConfig = Depends(get_social_config)
):
    """Redirect to GitHub to connect an account"""
    return _start_oauth(SocialProvider.GITHUB, user_id, settings, signer, config)


@router.get("/linkedin")
async def connect_linkedin(
    user_id: Optional[str] = Query(None, alias="userId"),
    settings: Settings = Depends(get_settings),
    signer: IOAuthStateSigner = Depends(get_oauth_state_signer),
    config: SocialConfig = Depends(get_social_config)
):
    """Redirect to LinkedIn to connect an account"""
    return _start_oauth(SocialProvider.LINKEDIN, user_id, settings, signer, config)


@router.get("/{provider}/callback")
async def oauth_callback(
    provider: SocialProvider,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    error_description: Optional[str] = None,
    oauth_state_cookie: Optional[str] = Cookie(None, alias=OAUTH_STATE_COOKIE),
    settings: Settings = Depends(get_settings),
    signer: IOAuthStateSigner = Depends(get_oauth_state_signer),
    connections: SocialConnectionService = Depends(get_social_connection_service)
):
    """
    Finish an OAuth connection.

    Always redirects to the settings page, with either
    `connected=<provider>&success=true` or `error=<message>&provider=<provider>`.
    """
    if error:
        logger.warning(f"[{provider.display_name} callback] OAuth error: {error} {error_description}")
        return _settings_redirect(
            settings, error=error_description or f"{provider.display_name} authorization was denied",
            provider=provider.value,
        )

    if not code or not state:
        return _settings_redirect(settings, error="Missing authorization code or state", provider=provider.value)

    if not oauth_state_cookie:
        return _settings_redirect(settings, error="OAuth session expired. Please try again.", provider=provider.value)

    try:
        oauth_state = signer.verify(oauth_state_cookie)
    except OAuthStateException as e:
        message = "OAuth session expired. Please try again." if e.expired else "Invalid OAuth state. Please try again."
        return _settings_redirect(settings, error=message, provider=provider.value)

    if not oauth_state.matches(state, provider.value):
        logger.warning(f"[{provider.display_name} callback] State mismatch for user {oauth_state.user_id}")
        return _settings_redirect(settings, error="Invalid OAuth state. Please try again.", provider=provider.value)

    try:
        await connections.connect(provider, oauth_state.user_id, code)
    except (SocialIntegrationError, UpstreamServiceException) as e:
        social_error = to_social_error(e, provider.value)
        response = _settings_redirect(settings, error=social_error.user_friendly_message, provider=provider.value)
    else:
        response = _settings_redirect(settings, connected=provider.value, success="true")

    # State is single-use
    response.delete_cookie(OAUTH_STATE_COOKIE, path="/")
    return response


def _start_oauth(
    provider: SocialProvider,
    user_id: Optional[str],
    settings: Settings,
    signer: IOAuthStateSigner,
    config: SocialConfig
) -> RedirectResponse:
    if not user_id or not user_id.strip():
        raise ValidationException("Missing userId parameter", field="userId")

    oauth_state = OAuthState.issue(user_id.strip(), provider.value)
    oauth_config = get_provider_config(config, provider)
    authorization_url = get_oauth_provider(config, provider).get_authorization_url(oauth_state.state, oauth_config)

    response = RedirectResponse(authorization_url, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        OAUTH_STATE_COOKIE,
        signer.sign(oauth_state),
        max_age=settings.OAUTH_STATE_MAX_AGE_SECONDS,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="lax",
    )

    logger.info(f"Starting {provider.display_name} OAuth for user {oauth_state.user_id}")
    return response


def _settings_redirect(settings: Settings, **params: str) -> RedirectResponse:
    query = urlencode(params, quote_via=quote)
    return RedirectResponse(f"{settings.APP_URL}/settings?{query}", status_code=status.HTTP_302_FOUND)
