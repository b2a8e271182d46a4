"""User endpoints: profile editing, role administration, deactivation and per-user post listing."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import (
    get_current_active_user,
    get_db,
    require_admin,
)
from app.core.exceptions import DuplicateNameException, InvalidInputException, NotFoundException
from app.core.roles import is_admin, parse_role
from app.crud import crud_user
from app.models.user import User
from app.schemas.post import MessageResponse, PostListResponse
from app.schemas.user import UserProfileUpdate, UserResponse, UserRoleUpdate
from app.services import forum_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"],
)


@router.get(
    "",
    response_model=List[UserResponse],
    status_code=status.HTTP_200_OK,
    summary="List all users",
)
def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> List[User]:
    """
    Get list of all users, newest first (administrator only).
    
    Args:
        skip: Number of records to skip (pagination)
        limit: Maximum records to return
        current_user: Current administrator (injected via require_admin)
        db: Database session
    """
    return crud_user.list_newest_first(db, skip=skip, limit=limit)


@router.put(
    "/me/profile",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Update own profile",
)
def update_profile(
    profile_in: UserProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> User:
    """
    Update the current user's username, bio and avatar URL.
    
    Raises:
        DuplicateNameException: 409 if another user already has the username
    """
    if crud_user.get_by_username(db, profile_in.username, exclude_id=current_user.id):
        raise DuplicateNameException("Username is already in use")

    try:
        user = crud_user.update_profile(
            db,
            user=current_user,
            username=profile_in.username,
            bio=profile_in.bio,
            avatar_url=profile_in.avatar_url,
        )
    except IntegrityError:
        raise DuplicateNameException("Username is already in use")
    logger.info(f"[AUTH] Profile updated: user_id={user.id}")
    return user


@router.put(
    "/{user_id}/role",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Change user role",
)
def update_user_role(
    user_id: int,
    role_in: UserRoleUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> User:
    """Change the role of a user (administrator only)."""
    role = parse_role(role_in.role)
    if role is None:
        raise InvalidInputException(f"Invalid role: {role_in.role}")

    user = crud_user.update_role(db, user_id=user_id, role=role)
    if user is None:
        raise NotFoundException("User not found")
    logger.info(f"[AUTH] Role changed: user_id={user_id}, role={user.role}, by={current_user.id}")
    return user


@router.get(
    "/{user_id}/posts",
    response_model=PostListResponse,
    status_code=status.HTTP_200_OK,
    summary="List posts by user",
)
def list_user_posts(
    user_id: int,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> PostListResponse:
    """List a user's posts in channels the current user can view."""
    return forum_service.list_user_posts(
        db,
        user_id=user_id,
        requester_id=current_user.id,
        page=page,
        page_size=page_size,
    )


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Deactivate user",
    description="""
    Deactivate a user account. The account can no longer log in or call the
    API; its posts and comments stay in place.
    
    **Access:** Server administrator only
    """,
)
def delete_user(
    user_id: int,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MessageResponse:
    if user_id == current_user.id:
        raise InvalidInputException("You cannot delete your own account")

    user = crud_user.get(db, user_id)
    if user is None:
        raise NotFoundException("User not found")
    if is_admin(user.role):
        raise InvalidInputException("Server administrators cannot be deleted")

    crud_user.delete(db, id=user_id)
    logger.info(f"[AUTH] User deactivated: user_id={user_id}, by={current_user.id}")
    return MessageResponse(message="User deleted")
