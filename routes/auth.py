from fastapi import APIRouter, Depends
from schemas.auth import SignupRequest, LoginRequest, AuthResponse, User
from auth import create_session_token
from errors import CampusError
from services.session import SessionService
from utils.route_helpers import get_current_user, get_session_service, to_http_exception

router = APIRouter(prefix="/auth", tags=["authentication"])

@router.post("/signup", response_model=AuthResponse, status_code=201)
def signup(data: SignupRequest, sessions: SessionService = Depends(get_session_service)):
    try:
        user = sessions.signup(data.email, data.name, data.password)
    except CampusError as exc:
        raise to_http_exception(exc)
    return AuthResponse(access_token=create_session_token(user), user=user)

@router.post("/login", response_model=AuthResponse)
def login(data: LoginRequest, sessions: SessionService = Depends(get_session_service)):
    try:
        user = sessions.login(data.email, data.password)
    except CampusError as exc:
        raise to_http_exception(exc)
    return AuthResponse(access_token=create_session_token(user), user=user)

@router.post("/logout")
def logout(
    current_user: User = Depends(get_current_user),
    sessions: SessionService = Depends(get_session_service)
):
    try:
        sessions.logout(current_user)
    except CampusError as exc:
        raise to_http_exception(exc)
    return {"msg": "You've been logged out"}

@router.get("/me", response_model=User)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current user information from token"""
    return current_user
