"""Authentication routes for login and the current user."""

from datetime import timedelta

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tavrezsi.api.dependencies import get_current_user
from tavrezsi.core.config import settings
from tavrezsi.core.database import get_db
from tavrezsi.core.exceptions import AuthenticationError
from tavrezsi.models.user import User
from tavrezsi.schemas.user import LoginRequest, Token, UserResponse
from tavrezsi.services.auth import authenticate_user, create_access_token

router = APIRouter(tags=["authentication"])


@router.post("/auth/login", response_model=Token)
def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    """Login and receive a JWT access token."""
    user = authenticate_user(db, login_data.username, login_data.password)
    if not user:
        raise AuthenticationError("Incorrect username or password")

    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": user.username}, expires_delta=access_token_expires
    )

    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/user", response_model=UserResponse)
def read_current_user(user: User = Depends(get_current_user)):
    """Get the authenticated user."""
    return user
