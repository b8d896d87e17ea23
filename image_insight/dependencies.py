from functools import lru_cache
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from .database import get_session
from .exceptions import AuthError
from .services.auth import decode_jwt_token
from .application.ports.ai_provider import AIProvider
from .application.ports.image_host import ImageHost
from .application.services.analysis_service import AnalysisService
from .application.services.auth_service import AuthService
from .infrastructure.ai.gemini_provider import GeminiProvider
from .infrastructure.hosting.freeimage_host import FreeImageHost
from .infrastructure.persistence.sqlalchemy.repositories.analysis_repository_sql import SqlAnalysisRepository
from .infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository

logger = logging.getLogger(__name__)

oauth2_scheme = HTTPBearer(auto_error=False)

def get_current_user(request: Request, credentials: HTTPAuthorizationCredentials = Depends(oauth2_scheme)) -> str:
    """Resolve the bearer token to the caller's user id."""
    if not credentials or not credentials.credentials:
        raise AuthError("Not authenticated")
    payload = decode_jwt_token(credentials.credentials)
    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing user ID")
        raise AuthError("Invalid token")
    request.state.user_id = user_id
    return user_id

@lru_cache()
def get_image_host() -> ImageHost:
    return FreeImageHost()

@lru_cache()
def get_ai_provider() -> AIProvider:
    return GeminiProvider()

def get_auth_service(session: Session = Depends(get_session)) -> AuthService:
    return AuthService(user_repo=SqlUserRepository(session))

def get_analysis_service(
    session: Session = Depends(get_session),
    image_host: ImageHost = Depends(get_image_host),
    ai_provider: AIProvider = Depends(get_ai_provider),
) -> AnalysisService:
    return AnalysisService(
        analysis_repo=SqlAnalysisRepository(session),
        image_host=image_host,
        ai_provider=ai_provider,
    )
