"""Authentication routes.

This module handles HTTP endpoints for user registration and login, and
provides the bearer-token and role dependencies used by the other routers.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET_KEY
from core.dependencies import UserManagerDep
from core.exceptions import AuthError, ForbiddenError
from schemas.common import MessageResponse
from schemas.user import (
    AuthResponse,
    ChangePasswordRequest,
    CurrentUserResponse,
    LoginRequest,
    RegisterRequest,
    User,
)
from utils.converters import user_to_public

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# HTTP Bearer token security; missing tokens are reported as 401 below
security = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Args:
        data: Data to encode in the token.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(pytz.utc) + expires_delta
    else:
        expire = datetime.now(pytz.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """Verify JWT token from Authorization header.

    Args:
        credentials: HTTP Bearer token credentials.

    Returns:
        Decoded token payload.

    Raises:
        AuthError: If the token is missing, invalid or expired.
    """
    if credentials is None:
        raise AuthError("Not authorized to access this route")
    try:
        payload = jwt.decode(
            credentials.credentials, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM]
        )
    except JWTError:
        raise AuthError("Not authorized, token failed")
    if payload.get("sub") is None:
        raise AuthError("Not authorized, token failed")
    return payload


def get_current_user(
    user_manager: UserManagerDep,
    token_payload: dict = Depends(verify_token),
) -> User:
    """Get current authenticated user.

    Args:
        user_manager: Injected UserManager instance.
        token_payload: Decoded JWT token payload.

    Returns:
        Current User object.

    Raises:
        AuthError: If the user no longer exists.
    """
    user = user_manager.get_user_by_id(token_payload["sub"])
    if user is None:
        raise AuthError("User not found")
    return user


def require_role(*roles: str):
    """Build a dependency admitting only users with one of ``roles``."""

    def _check_role(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise ForbiddenError(
                f"User role {current_user.role} is not authorized to access this route"
            )
        return current_user

    return _check_role


def _auth_response(user: User) -> AuthResponse:
    token = create_access_token(data={"sub": user.user_id})
    return AuthResponse(token=token, user=user_to_public(user))


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a student or faculty account",
)
def register(req: RegisterRequest, user_manager: UserManagerDep) -> AuthResponse:
    """Register a new user and log them in.

    Raises:
        UserAlreadyExistsError: If the email is already registered.
    """
    user = user_manager.create_user(
        name=req.name,
        email=req.email,
        password=req.password,
        role=req.role,
        college_name=req.college_name,
        course=req.course,
        year=req.year,
    )
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse, summary="Log in")
def login(req: LoginRequest, user_manager: UserManagerDep) -> AuthResponse:
    """Login with email and password.

    Raises:
        AuthError: If the credentials do not match.
    """
    user = user_manager.authenticate(req.email, req.password)
    if user is None:
        raise AuthError("Invalid credentials")
    logger.info("User logged in: %s", user.user_id)
    return _auth_response(user)


@router.get("/me", response_model=CurrentUserResponse, summary="Current user")
def get_current_user_info(
    current_user: User = Depends(get_current_user),
) -> CurrentUserResponse:
    return CurrentUserResponse(user=user_to_public(current_user))


@router.put("/password", response_model=MessageResponse, summary="Change password")
def change_password(
    req: ChangePasswordRequest,
    user_manager: UserManagerDep,
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Change the caller's password.

    Raises:
        AuthError: If the current password is wrong.
    """
    try:
        changed = user_manager.change_password(
            current_user.user_id, req.current_password, req.new_password
        )
    except ValueError as e:
        raise AuthError(str(e))
    message = "Password updated successfully" if changed else "Password unchanged"
    return MessageResponse(message=message)
