from typing import Optional
from fastapi import Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordBearer
from auth import verify_token
from errors import CampusError
from schemas.auth import User
from services.content import ContentService
from services.session import SessionService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

def get_session_service(request: Request) -> SessionService:
    return request.app.state.session_service

def get_content_service(request: Request) -> ContentService:
    return request.app.state.content_service

def to_http_exception(error: CampusError) -> HTTPException:
    """Turn a domain error into the HTTP error shown to the user"""
    return HTTPException(status_code=error.status_code, detail=str(error))

def user_from_token(token: str, sessions: SessionService) -> User:
    payload = verify_token(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid token")
    if not payload.get("sub") or not payload.get("uid"):
        raise HTTPException(status_code=401, detail="Invalid token payload")
    user = sessions.get_session(payload["uid"])
    if user is None or user.email != payload["sub"]:
        raise HTTPException(status_code=401, detail="Session has ended, please log in again")
    return user

def get_current_user(
    token: str = Depends(oauth2_scheme),
    sessions: SessionService = Depends(get_session_service)
) -> User:
    """Get the user of the active session named by the bearer token"""
    return user_from_token(token, sessions)

def get_optional_user(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    sessions: SessionService = Depends(get_session_service)
) -> Optional[User]:
    if not token:
        return None
    return user_from_token(token, sessions)

def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user
