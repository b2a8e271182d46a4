"""Pydantic schemas for search results."""

from typing import List, Optional
from pydantic import BaseModel

from app.schemas.category import ChannelResponse
from app.schemas.post import PostResponse
from app.schemas.user import UserSummaryResponse


class ChannelSearchResult(ChannelResponse):
    category_name: Optional[str] = None


class SearchResponse(BaseModel):
    """Matches grouped by kind; kinds not requested stay empty."""
    posts: List[PostResponse] = []
    users: List[UserSummaryResponse] = []
    channels: List[ChannelSearchResult] = []


class PostSearchResponse(BaseModel):
    posts: List[PostResponse]
