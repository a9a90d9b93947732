from typing import Optional

from fastapi import APIRouter, Depends, Request, Response, status
from sqlmodel import Session

from ..config import ACCESS_TOKEN_EXPIRE_MINUTES
from ..database import get_db
from ..errors import Unauthorized
from ..schemas.user import AuthResponse, UserCreate, UserLogin
from ..security import decode_access_token
from ..services import users as user_service

router = APIRouter()


def _get_token_from_request(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return request.cookies.get("token")


def get_current_user_id(request: Request) -> str:
    """Caller identity resolved from the bearer token or the session cookie."""
    token = _get_token_from_request(request)
    if not token:
        raise Unauthorized("Not authenticated")

    user_id = decode_access_token(token)
    if not user_id:
        raise Unauthorized("Could not validate credentials")
    return user_id


def _set_token_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key="token",
        value=token,
        httponly=True,
        secure=False,  # Set to True in production with HTTPS
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    payload: UserCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    """Create a new user account."""
    user, token = user_service.signup(db, payload)
    _set_token_cookie(response, token)
    return AuthResponse(user_id=user.id, email=user.email, token=token)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: UserLogin,
    response: Response,
    db: Session = Depends(get_db),
):
    """Sign in and get JWT token."""
    user, token = user_service.authenticate(db, payload.email, payload.password)
    _set_token_cookie(response, token)
    return AuthResponse(user_id=user.id, email=user.email, token=token)


@router.post("/logout")
def logout(response: Response):
    """Sign out and clear session cookie."""
    response.delete_cookie(key="token")
    return {"success": True}
