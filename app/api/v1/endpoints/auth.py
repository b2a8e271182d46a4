"""Authentication endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import (
    get_current_active_user,
    get_db,
)
from app.core.exceptions import DuplicateNameException
from app.core.security import create_access_token
from app.crud import crud_user
from app.models.user import User
from app.schemas.user import (
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
)


def _token_response(user: User) -> TokenResponse:
    access_token = create_access_token(data={"sub": str(user.id), "role": user.role})
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
)
def register(
    user_in: UserCreate,
    db: Session = Depends(get_db),
) -> TokenResponse:
    """
    Register a new user with the trial participant role.
    
    Raises:
        DuplicateNameException: 409 if username or email is already in use
    """
    if crud_user.get_by_username_or_email(db, username=user_in.username, email=user_in.email):
        raise DuplicateNameException("Username or email address is already in use")

    try:
        db_user = crud_user.create_user(db, user_in=user_in)
    except IntegrityError:
        raise DuplicateNameException("Username or email address is already in use")

    logger.info(f"[AUTH] User registered: id={db_user.id}, username={db_user.username}")
    return _token_response(db_user)


@router.post(
    "/login",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Login user",
)
def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
) -> TokenResponse:
    """
    Login with email and password.
    
    Raises:
        HTTPException: 401 if credentials invalid or account inactive
    """
    user = crud_user.authenticate(db, email=credentials.email, password=credentials.password)
    if not user:
        logger.info("[AUTH] Login failed for supplied email")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is inactive",
        )

    logger.info(f"[AUTH] User logged in: id={user.id}, role={user.role}")
    return _token_response(user)


@router.get(
    "/me",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Get current user info",
)
def get_me(
    current_user: User = Depends(get_current_active_user),
) -> User:
    """Get current authenticated user information."""
    return current_user
