"""Category and channel catalog endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_active_user, get_db
from app.models.user import User
from app.schemas.category import (
    CategoryCreate,
    CategoryListResponse,
    CategoryReorderRequest,
    CategoryResponse,
    CategoryToggleResponse,
    CategoryUpdate,
    ChannelCreate,
    ChannelListResponse,
    ChannelReorderRequest,
    ChannelResponse,
    ChannelUpdate,
    ReorderResponse,
)
from app.schemas.post import MessageResponse
from app.services import catalog_service

router = APIRouter(
    tags=["Channels"],
)


# ----- Categories -----
@router.get(
    "/categories",
    response_model=CategoryListResponse,
    status_code=status.HTTP_200_OK,
    summary="List categories with channels",
    description="""
    Get all categories in display order. Each category carries its channels in
    display order, annotated with `post_count`. Channels the current user
    cannot view are left out.
    
    **Access:** All authenticated users
    """,
)
def list_categories(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> CategoryListResponse:
    categories = catalog_service.list_categories(db, requester_role=current_user.role)
    return CategoryListResponse(categories=categories)


@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create category",
    description="""
    Create a category at the end of the display order. Names are unique
    regardless of case.
    
    **Access:** Server administrator only
    """,
)
def create_category(
    category_in: CategoryCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> CategoryResponse:
    return catalog_service.create_category(
        db, name=category_in.name, requester_role=current_user.role
    )


@router.put(
    "/categories/reorder",
    response_model=ReorderResponse,
    status_code=status.HTTP_200_OK,
    summary="Reorder categories",
)
def reorder_categories(
    reorder_in: CategoryReorderRequest,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> ReorderResponse:
    """Apply a new category order in one batch (server administrator only)."""
    updated = catalog_service.reorder_categories(
        db, category_ids=reorder_in.category_ids, requester_role=current_user.role
    )
    return ReorderResponse(message="Category order updated", updated_count=updated)


@router.put(
    "/categories/{category_id}",
    response_model=CategoryResponse,
    status_code=status.HTTP_200_OK,
    summary="Rename category",
)
def update_category(
    category_id: int,
    category_in: CategoryUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> CategoryResponse:
    return catalog_service.update_category(
        db, category_id=category_id, name=category_in.name, requester_role=current_user.role
    )


@router.put(
    "/categories/{category_id}/toggle",
    response_model=CategoryToggleResponse,
    status_code=status.HTTP_200_OK,
    summary="Toggle category collapsed state",
)
def toggle_category(
    category_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> CategoryToggleResponse:
    is_collapsed = catalog_service.toggle_category_collapsed(db, category_id=category_id)
    return CategoryToggleResponse(category_id=category_id, is_collapsed=is_collapsed)


@router.delete(
    "/categories/{category_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete category",
    description="""
    Delete a category. Fails with 409 while the category still owns channels.
    
    **Access:** Server administrator only
    """,
)
def delete_category(
    category_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    catalog_service.delete_category(db, category_id=category_id, requester_role=current_user.role)
    return MessageResponse(message="Category deleted")


# ----- Channels -----
@router.get(
    "/categories/{category_id}/channels",
    response_model=ChannelListResponse,
    status_code=status.HTTP_200_OK,
    summary="List channels of a category",
    description="""
    Get the channels of a category that the current user's role may view,
    in display order.
    
    **Access:** All authenticated users
    """,
)
def list_channels(
    category_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> ChannelListResponse:
    channels = catalog_service.list_channels_for_category(
        db, category_id=category_id, requester_role=current_user.role
    )
    return ChannelListResponse(channels=channels)


@router.post(
    "/categories/{category_id}/channels",
    response_model=ChannelResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create channel",
)
def create_channel(
    category_id: int,
    channel_in: ChannelCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> ChannelResponse:
    """Create a channel in a category (server administrator only)."""
    return catalog_service.create_channel(
        db,
        category_id=category_id,
        name=channel_in.name,
        description=channel_in.description,
        channel_type=channel_in.channel_type,
        requester_role=current_user.role,
    )


@router.put(
    "/channels/reorder",
    response_model=ReorderResponse,
    status_code=status.HTTP_200_OK,
    summary="Reorder channels",
)
def reorder_channels(
    reorder_in: ChannelReorderRequest,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> ReorderResponse:
    updated = catalog_service.reorder_channels(
        db, channel_ids=reorder_in.channel_ids, requester_role=current_user.role
    )
    return ReorderResponse(message="Channel order updated", updated_count=updated)


@router.get(
    "/channels/{channel_id}",
    response_model=ChannelResponse,
    status_code=status.HTTP_200_OK,
    summary="Get channel",
)
def get_channel(
    channel_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> ChannelResponse:
    return catalog_service.get_channel(db, channel_id=channel_id, requester_role=current_user.role)


@router.put(
    "/channels/{channel_id}",
    response_model=ChannelResponse,
    status_code=status.HTTP_200_OK,
    summary="Update channel",
)
def update_channel(
    channel_id: int,
    channel_in: ChannelUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> ChannelResponse:
    return catalog_service.update_channel(
        db,
        channel_id=channel_id,
        name=channel_in.name,
        description=channel_in.description,
        channel_type=channel_in.channel_type,
        requester_role=current_user.role,
    )


@router.delete(
    "/channels/{channel_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete channel",
)
def delete_channel(
    channel_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Delete a channel and everything posted in it (server administrator only)."""
    catalog_service.delete_channel(db, channel_id=channel_id, requester_role=current_user.role)
    return MessageResponse(message="Channel deleted")
