"""User Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from tavrezsi.models.enums import UserRole


class UserBase(BaseModel):
    """Base user schema."""

    username: str = Field(min_length=1, max_length=50)
    email: EmailStr
    name: str = Field(min_length=1, max_length=100)


class UserCreate(UserBase):
    """Schema for creating a new user."""

    password: str = Field(min_length=8)
    role: UserRole = UserRole.TENANT


class UserResponse(UserBase):
    """Schema for user response."""

    id: int
    role: UserRole
    created_at: datetime
    is_active: bool

    model_config = {"from_attributes": True}


class Token(BaseModel):
    """Schema for JWT token response."""

    access_token: str
    token_type: str


class TokenData(BaseModel):
    """Schema for token payload data."""

    username: str | None = None


class LoginRequest(BaseModel):
    """Schema for login request."""

    username: str
    password: str


class PasswordResetRequest(BaseModel):
    """Schema for requesting a password reset email."""

    email: EmailStr


class PasswordResetPerform(BaseModel):
    """Schema for setting a new password with a reset token."""

    token: str = Field(min_length=1)
    password: str = Field(min_length=8)


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
