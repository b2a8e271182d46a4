"""Search endpoints."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_active_user, get_db
from app.models.user import User
from app.schemas.search import PostSearchResponse, SearchResponse
from app.services import forum_service

router = APIRouter(
    prefix="/search",
    tags=["Search"],
)


@router.get(
    "",
    response_model=SearchResponse,
    status_code=status.HTTP_200_OK,
    summary="Search posts, users and channels",
    description="""
    Case-insensitive substring search over post content, usernames and channel
    names/descriptions. Posts and channels the caller cannot view are never
    returned. At most 20 results per kind.
    
    **Access:** All authenticated users
    """,
)
def search(
    q: Optional[str] = Query(None, description="Search text"),
    result_type: Optional[str] = Query(None, alias="type", description="posts, users or channels"),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> SearchResponse:
    return forum_service.search(
        db, query=q, requester_id=current_user.id, result_type=result_type
    )


@router.get(
    "/advanced",
    response_model=PostSearchResponse,
    status_code=status.HTTP_200_OK,
    summary="Search posts with filters",
)
def search_posts(
    q: Optional[str] = Query(None, description="Search text"),
    channel_id: Optional[int] = Query(None),
    user_id: Optional[int] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> PostSearchResponse:
    """Search post content, optionally within one channel, by one author or in a date range."""
    return forum_service.search_posts(
        db,
        query=q,
        requester_id=current_user.id,
        channel_id=channel_id,
        user_id=user_id,
        date_from=date_from,
        date_to=date_to,
    )
