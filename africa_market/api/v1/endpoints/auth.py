"""Authentication endpoints (cookie JWT with bearer fallback)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from africa_market.core.errors import ValidationError
from africa_market.core.security import (
    clear_auth_cookie,
    create_access_token,
    get_current_user,
    get_password_hash,
    set_auth_cookie,
    verify_password,
)
from africa_market.db.session import get_db
from africa_market.models.user import User
from africa_market.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserRead
from africa_market.services.user_service import create_user, ensure_password_strength, get_user_by_email

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


def _issue_token(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "role": user.role})


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, response: Response, db: Session = Depends(get_db)) -> AuthResponse:
    username = payload.username.strip()
    email = payload.email.strip().lower()
    if not username or not email or not payload.password:
        raise ValidationError("Please provide username, email, and password")
    ensure_password_strength(payload.password)

    user = create_user(
        db=db,
        username=username,
        email=email,
        hashed_password=get_password_hash(payload.password),
    )
    token = _issue_token(user)
    set_auth_cookie(response, token)
    return AuthResponse(message="User registered successfully", user=UserRead.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)) -> AuthResponse:
    user: User | None = get_user_by_email(db=db, email=payload.email.strip().lower())
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("[AUTH] Failed login for email=%s", payload.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User account is disabled")

    token = _issue_token(user)
    set_auth_cookie(response, token)
    logger.info("[AUTH] user_id=%s logged in", user.id)
    return AuthResponse(message="Login successful", user=UserRead.model_validate(user), token=token)


@router.post("/logout")
def logout(response: Response) -> dict[str, bool | str]:
    clear_auth_cookie(response)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", response_model=UserRead)
def me(current_user: User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user)
