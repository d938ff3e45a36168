"""
Dependency Injection Container
Manages service and repository instances
"""
from typing import Any, Callable, Dict, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import Depends

from core.config import Settings, get_settings
from core.database import get_db
from application.repositories.interfaces import (
    IApplicationRepository,
    ISocialProfileRepository,
    IUserRepository,
)
from application.services.application_tracking import IApplicationTrackingService
from application.services.auth.interfaces import IAuthService, IPasswordHasher
from application.services.job_analysis import IJobAnalysisService
from application.services.security.interfaces import IEncryptionService, IOAuthStateSigner
from infrastructure.external.cv_storage_service import GCSCVStorageService
from infrastructure.persistence.repositories.application import SQLAlchemyApplicationRepository
from infrastructure.persistence.repositories.social_profile import SQLAlchemySocialProfileRepository
from infrastructure.persistence.repositories.user import SQLAlchemyUserRepository
from infrastructure.security.oauth_state_signer import JwtOAuthStateSigner
from infrastructure.security.password_hasher import BcryptPasswordHasher
from infrastructure.security.token_cipher import AesGcmTokenCipher
from infrastructure.services.anthropic_job_analysis_service import AnthropicJobAnalysisService
from infrastructure.services.application_tracking_service import ApplicationTrackingService
from infrastructure.services.social_connection_service import SocialConnectionService
from infrastructure.social.config import SocialConfig


# Singleton instances
_password_hasher: IPasswordHasher | None = None

# Instances derived from Settings, rebuilt only when a different Settings is injected
_settings_bound: Dict[str, Tuple[Settings, Any]] = {}


def _bound_to(name: str, settings: Settings, factory: Callable[[Settings], Any]) -> Any:
    cached = _settings_bound.get(name)
    if cached is None or cached[0] is not settings:
        cached = (settings, factory(settings))
        _settings_bound[name] = cached
    return cached[1]


def get_password_hasher() -> IPasswordHasher:
    """Get password hasher instance (singleton)"""
    global _password_hasher
    if _password_hasher is None:
        _password_hasher = BcryptPasswordHasher(rounds=12)
    return _password_hasher


def get_social_config(settings: Settings = Depends(get_settings)) -> SocialConfig:
    """Provider configuration, built once per Settings"""
    return _bound_to("social_config", settings, SocialConfig.from_settings)


def get_oauth_state_signer(settings: Settings = Depends(get_settings)) -> IOAuthStateSigner:
    return _bound_to("oauth_state_signer", settings, JwtOAuthStateSigner)


def get_token_cipher(settings: Settings = Depends(get_settings)) -> IEncryptionService:
    return _bound_to("token_cipher", settings, AesGcmTokenCipher)


def get_job_analysis_service(settings: Settings = Depends(get_settings)) -> IJobAnalysisService:
    """Get AI job analysis service (one Anthropic client per Settings)"""
    return _bound_to("job_analysis_service", settings, AnthropicJobAnalysisService)


def get_cv_storage_service(settings: Settings = Depends(get_settings)) -> GCSCVStorageService:
    return _bound_to("cv_storage_service", settings, GCSCVStorageService)


def get_user_repository(
    session: AsyncSession = Depends(get_db)
) -> IUserRepository:
    """Get user repository instance (per-request)"""
    return SQLAlchemyUserRepository(session)


def get_application_repository(
    session: AsyncSession = Depends(get_db)
) -> IApplicationRepository:
    """Get application repository instance (per-request)"""
    return SQLAlchemyApplicationRepository(session)


def get_social_profile_repository(
    session: AsyncSession = Depends(get_db)
) -> ISocialProfileRepository:
    """Get social profile repository instance (per-request)"""
    return SQLAlchemySocialProfileRepository(session)


def get_auth_service(
    user_repo: IUserRepository = Depends(get_user_repository),
    password_hasher: IPasswordHasher = Depends(get_password_hasher)
) -> IAuthService:
    """Get auth service instance (per-request)"""
    from application.services.auth.impl import AuthService
    return AuthService(user_repo, password_hasher)


def get_application_tracking_service(
    application_repo: IApplicationRepository = Depends(get_application_repository)
) -> IApplicationTrackingService:
    """Get application tracking service instance (per-request)"""
    return ApplicationTrackingService(application_repo)


def get_social_connection_service(
    config: SocialConfig = Depends(get_social_config),
    profile_repo: ISocialProfileRepository = Depends(get_social_profile_repository),
    token_cipher: IEncryptionService = Depends(get_token_cipher)
) -> SocialConnectionService:
    """Get social connection service instance (per-request)"""
    return SocialConnectionService(config, profile_repo, token_cipher)
