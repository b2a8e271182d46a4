"""Channel post, comment and like endpoints."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_active_user, get_db
from app.models.user import User
from app.schemas.post import (
    CommentCreate,
    CommentListResponse,
    CommentResponse,
    LikeResponse,
    MessageResponse,
    PostCreate,
    PostListResponse,
    PostResponse,
)
from app.services import forum_service

router = APIRouter(
    tags=["Posts"],
)


@router.get(
    "/channels/{channel_id}/posts",
    response_model=PostListResponse,
    status_code=status.HTTP_200_OK,
    summary="List channel posts",
    description="""
    Get posts of a channel, newest first, with `like_count`, `comment_count`
    and `user_liked` for the current user.
    
    **Access:** Roles that may view the channel
    """,
)
def list_posts(
    channel_id: int,
    page: int = Query(1, ge=1, description="1-based page number"),
    page_size: int = Query(20, ge=1, le=100, description="Posts per page"),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> PostListResponse:
    return forum_service.list_posts(
        db,
        channel_id=channel_id,
        requester_id=current_user.id,
        page=page,
        page_size=page_size,
    )


@router.post(
    "/channels/{channel_id}/posts",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
    description="""
    Create a post in a channel.
    
    **Access:** Roles that may post in the channel; never trial participants
    """,
)
def create_post(
    channel_id: int,
    post_in: PostCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> PostResponse:
    return forum_service.create_post(
        db,
        channel_id=channel_id,
        author_id=current_user.id,
        content=post_in.content,
        image_url=post_in.image_url,
    )


@router.get(
    "/posts/{post_id}",
    response_model=PostResponse,
    status_code=status.HTTP_200_OK,
    summary="Get post",
)
def get_post(
    post_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> PostResponse:
    return forum_service.get_post(db, post_id=post_id, requester_id=current_user.id)


@router.delete(
    "/posts/{post_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete post",
    description="""
    Delete a post together with its comments and likes.
    
    **Access:** Post author or server administrator
    """,
)
def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    forum_service.delete_post(
        db, post_id=post_id, requester_id=current_user.id, requester_role=current_user.role
    )
    return MessageResponse(message="Post deleted")


@router.post(
    "/posts/{post_id}/like",
    response_model=LikeResponse,
    status_code=status.HTTP_200_OK,
    summary="Toggle like on post",
    description="""
    Like or unlike a post. If already liked, it will unlike. If not liked, it will like.
    
    **Access:** All authenticated users
    """,
)
def toggle_like(
    post_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> LikeResponse:
    return forum_service.toggle_like(db, post_id=post_id, user_id=current_user.id)


@router.get(
    "/posts/{post_id}/comments",
    response_model=CommentListResponse,
    status_code=status.HTTP_200_OK,
    summary="Get post comments",
)
def list_comments(
    post_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> CommentListResponse:
    return forum_service.list_comments(db, post_id=post_id, requester_id=current_user.id)


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create comment",
)
def create_comment(
    post_id: int,
    comment_in: CommentCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> CommentResponse:
    return forum_service.create_comment(
        db, post_id=post_id, author_id=current_user.id, content=comment_in.content
    )


@router.delete(
    "/comments/{comment_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete comment",
)
def delete_comment(
    comment_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    forum_service.delete_comment(
        db, comment_id=comment_id, requester_id=current_user.id, requester_role=current_user.role
    )
    return MessageResponse(message="Comment deleted")
