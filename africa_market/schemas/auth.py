"""Authentication-related request and response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RegisterRequest(BaseModel):
    """Payload for user registration."""

    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    """Payload for user login."""

    email: str
    password: str


class UserRead(BaseModel):
    """Public user profile."""

    id: int
    username: str
    email: str
    role: str
    is_active: bool
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    user: UserRead
    token: str | None = None


class PasswordReset(BaseModel):
    new_password: str
