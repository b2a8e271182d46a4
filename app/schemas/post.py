"""Pydantic schemas for Post, Comment and Like."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Schema for creating a new post."""
    content: str = Field(..., description="Post content")
    image_url: Optional[str] = Field(None, max_length=500, description="Optional image URL")


class PostResponse(BaseModel):
    """Schema for Post response.

    ``like_count``, ``comment_count`` and ``user_liked`` are computed at read
    time; ``user_liked`` is relative to the requesting user.
    """
    id: int
    content: str
    user_id: int
    channel_id: int
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    author_name: Optional[str] = None
    author_role: Optional[str] = None
    channel_name: Optional[str] = None
    category_name: Optional[str] = None
    like_count: int = 0
    comment_count: int = 0
    user_liked: bool = False

    model_config = ConfigDict(from_attributes=True)


class PostListResponse(BaseModel):
    """Response for listing posts."""
    posts: List[PostResponse]
    page: int
    page_size: int
    total: int
    has_more: bool = Field(..., description="Whether there are more posts to load")


class LikeResponse(BaseModel):
    """Response for like action."""
    post_id: int
    liked: bool
    like_count: int
    message: str


class CommentCreate(BaseModel):
    """Schema for creating a comment."""
    content: str = Field(..., description="Comment content")


class CommentResponse(BaseModel):
    """Schema for Comment response."""
    id: int
    post_id: int
    user_id: int
    content: str
    created_at: Optional[datetime] = None
    author_name: Optional[str] = None
    author_role: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CommentListResponse(BaseModel):
    """Response for listing comments."""
    comments: List[CommentResponse]
    total: int


class MessageResponse(BaseModel):
    message: str
