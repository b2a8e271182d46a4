"""Pydantic schemas for Category and Channel."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.core.roles import ChannelType


class CategoryCreate(BaseModel):
    """Schema for creating or renaming a category."""
    name: str = Field(..., max_length=100, description="Category name (unique, case-insensitive)")


class CategoryUpdate(CategoryCreate):
    pass


class ChannelBase(BaseModel):
    name: str = Field(..., max_length=100, description="Channel name")
    description: Optional[str] = Field("", description="Channel description")
    # Validated by the catalog service so an unknown value maps to InvalidChannelType
    channel_type: str = Field(..., description="One of the channel type values", examples=[ChannelType.ALL_POST_ALL_VIEW.value])


class ChannelCreate(ChannelBase):
    """Schema for creating a new channel."""
    pass


class ChannelUpdate(ChannelBase):
    """Schema for updating a channel (full replacement of editable fields)."""
    pass


class ChannelResponse(BaseModel):
    """Schema for Channel response."""
    id: int
    category_id: int
    name: str
    description: str = ""
    channel_type: str
    display_order: int
    post_count: int = 0
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_row(cls, channel, post_count: Optional[int]) -> "ChannelResponse":
        """Build from a Channel row plus its counted posts."""
        return cls(
            id=channel.id,
            category_id=channel.category_id,
            name=channel.name,
            description=channel.description or "",
            channel_type=channel.channel_type,
            display_order=channel.display_order,
            post_count=post_count or 0,
            created_at=channel.created_at,
        )


class CategoryResponse(BaseModel):
    """Schema for Category response."""
    id: int
    name: str
    display_order: int
    is_collapsed: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CategoryWithChannelsResponse(CategoryResponse):
    channels: List[ChannelResponse] = []


class CategoryListResponse(BaseModel):
    """Response for listing categories."""
    categories: List[CategoryWithChannelsResponse]


class ChannelListResponse(BaseModel):
    channels: List[ChannelResponse]


class CategoryReorderRequest(BaseModel):
    category_ids: List[int]


class ChannelReorderRequest(BaseModel):
    channel_ids: List[int]


class ReorderResponse(BaseModel):
    message: str
    updated_count: int


class CategoryToggleResponse(BaseModel):
    category_id: int
    is_collapsed: bool
