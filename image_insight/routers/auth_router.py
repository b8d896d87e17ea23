from fastapi import APIRouter, Depends
import logging

from ..application.ports.user_repo import UserDto
from ..application.services.auth_service import AuthService
from ..dependencies import get_auth_service, get_current_user
from ..schemas.auth.auth import SignupRequest, LoginRequest, AuthResponse, MeResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

def _user_response(user: UserDto) -> UserResponse:
    return UserResponse(id=user.id, email=user.email, createdAt=user.created_at)

@router.post("/signup", response_model=AuthResponse, status_code=201)
def signup(body: SignupRequest, auth_service: AuthService = Depends(get_auth_service)):
    user, token = auth_service.signup(body.email, body.password)
    return AuthResponse(token=token, user=_user_response(user))

@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    user, token = auth_service.login(body.email, body.password)
    logger.info(f"User {user.id} logged in")
    return AuthResponse(token=token, user=_user_response(user))

@router.get("/me", response_model=MeResponse)
def get_me(
    current_user: str = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    return MeResponse(user=_user_response(auth_service.get_user(current_user)))
