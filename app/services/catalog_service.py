"""Category/Channel catalog service.

Serves the ordered catalog filtered through the channel access policy and
performs the administrator-only catalog mutations. Every mutation checks the
administrator role and validates its input before anything is written.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core import channel_policy
from app.core.exceptions import (
    DuplicateNameException,
    ForbiddenException,
    InvalidChannelTypeException,
    InvalidInputException,
    NotEmptyException,
    NotFoundException,
    ValidationException,
)
from app.core.roles import is_admin, parse_channel_type
from app.crud import crud_category, crud_channel
from app.models.category import Category
from app.schemas.category import (
    CategoryResponse,
    CategoryWithChannelsResponse,
    ChannelResponse,
)

logger = logging.getLogger(__name__)


def _require_admin(requester_role: Optional[str], action: str) -> None:
    if not is_admin(requester_role):
        logger.warning(f"[CATALOG] Non-admin role {requester_role!r} attempted to {action}")
        raise ForbiddenException("Administrator permission is required")


def _clean_name(name: Optional[str], label: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationException(f"Please enter a {label} name")
    return cleaned


def _validate_channel_type(channel_type: Optional[str]) -> str:
    parsed = parse_channel_type(channel_type)
    if parsed is None:
        raise InvalidChannelTypeException()
    return parsed.value


def _validate_id_sequence(ids: Sequence[int], label: str) -> List[int]:
    if not ids:
        raise InvalidInputException(f"{label} must not be empty")
    if len(set(ids)) != len(ids):
        raise InvalidInputException(f"{label} must not contain duplicates")
    return list(ids)


class CatalogService:
    """Service for the category/channel catalog."""

    # ----- Read -----
    def list_categories(
        self,
        db: Session,
        *,
        requester_role: Optional[str] = None,
    ) -> List[CategoryWithChannelsResponse]:
        """
        List categories in display order, each with its ordered channels.

        Args:
            db: Database session
            requester_role: When given, channels the role cannot view are left out

        Returns:
            List[CategoryWithChannelsResponse]: Categories with annotated channels
        """
        categories = crud_category.get_all_ordered(db)
        channels_by_category = {category.id: [] for category in categories}
        for channel, post_count in crud_channel.get_by_category_with_post_count(db):
            if requester_role is not None and not channel_policy.can_view(
                channel.channel_type, requester_role
            ):
                continue
            channels_by_category.setdefault(channel.category_id, []).append(
                ChannelResponse.from_row(channel, post_count)
            )

        return [
            CategoryWithChannelsResponse(
                **CategoryResponse.model_validate(category).model_dump(),
                channels=channels_by_category[category.id],
            )
            for category in categories
        ]

    def list_channels_for_category(
        self,
        db: Session,
        *,
        category_id: int,
        requester_role: Optional[str],
    ) -> List[ChannelResponse]:
        """List the channels of a category that ``requester_role`` may view."""
        if crud_category.get(db, category_id) is None:
            raise NotFoundException("Category not found")

        rows = crud_channel.get_by_category_with_post_count(db, category_id=category_id)
        visible = [
            ChannelResponse.from_row(channel, post_count)
            for channel, post_count in rows
            if channel_policy.can_view(channel.channel_type, requester_role)
        ]
        logger.info(
            f"[CATALOG] Channel filter for role {requester_role!r}: "
            f"{len(visible)} of {len(rows)} visible in category {category_id}"
        )
        return visible

    def get_channel(
        self,
        db: Session,
        *,
        channel_id: int,
        requester_role: Optional[str],
    ) -> ChannelResponse:
        row = crud_channel.get_with_post_count(db, channel_id=channel_id)
        if row is None:
            raise NotFoundException("Channel not found")
        channel, post_count = row
        if not channel_policy.can_view(channel.channel_type, requester_role):
            raise ForbiddenException("You do not have permission to view this channel")
        return ChannelResponse.from_row(channel, post_count)

    # ----- Categories -----
    def create_category(
        self,
        db: Session,
        *,
        name: str,
        requester_role: Optional[str],
    ) -> CategoryResponse:
        """
        Create a category at the end of the display order.

        Raises:
            ForbiddenException: requester is not an administrator
            ValidationException: name is empty after trimming
            DuplicateNameException: a category with the same name exists (case-insensitive)
        """
        _require_admin(requester_role, "create a category")
        trimmed = _clean_name(name, "category")

        if crud_category.get_by_name(db, trimmed):
            logger.info(f"[CATALOG] Duplicate category rejected: {trimmed!r}")
            raise DuplicateNameException("This category name already exists")

        try:
            category = crud_category.create_category(db, name=trimmed)
        except IntegrityError:
            # Lost the race against a concurrent insert of the same name
            raise DuplicateNameException("This category name already exists")

        logger.info(f"[CATALOG] Category created: id={category.id}, name={category.name!r}")
        return CategoryResponse.model_validate(category)

    def update_category(
        self,
        db: Session,
        *,
        category_id: int,
        name: str,
        requester_role: Optional[str],
    ) -> CategoryResponse:
        _require_admin(requester_role, "rename a category")
        trimmed = _clean_name(name, "category")

        category = crud_category.get(db, category_id)
        if category is None:
            raise NotFoundException("Category not found")
        if crud_category.get_by_name(db, trimmed, exclude_id=category_id):
            raise DuplicateNameException("This category name already exists")

        try:
            category = crud_category.update(db, db_obj=category, obj_in={"name": trimmed})
        except IntegrityError:
            raise DuplicateNameException("This category name already exists")
        logger.info(f"[CATALOG] Category renamed: id={category.id}, name={category.name!r}")
        return CategoryResponse.model_validate(category)

    def toggle_category_collapsed(self, db: Session, *, category_id: int) -> bool:
        """Flip the presentation-only collapsed flag; returns the new state."""
        category = crud_category.get(db, category_id)
        if category is None:
            raise NotFoundException("Category not found")
        category = crud_category.toggle_collapsed(db, category=category)
        return bool(category.is_collapsed)

    def delete_category(
        self,
        db: Session,
        *,
        category_id: int,
        requester_role: Optional[str],
    ) -> None:
        """
        Delete a category that owns no channels.

        Raises:
            ForbiddenException: requester is not an administrator
            NotFoundException: category does not exist
            NotEmptyException: category still owns at least one channel
        """
        _require_admin(requester_role, "delete a category")
        category: Optional[Category] = crud_category.get(db, category_id)
        if category is None:
            raise NotFoundException("Category not found")
        if crud_category.count_channels(db, category_id=category_id) > 0:
            raise NotEmptyException("Remove all channels from this category before deleting it")

        try:
            crud_category.delete(db, id=category_id)
        except IntegrityError:
            # A channel was added between the check and the delete
            raise NotEmptyException("Remove all channels from this category before deleting it")
        logger.info(f"[CATALOG] Category deleted: id={category_id}")

    def reorder_categories(
        self,
        db: Session,
        *,
        category_ids: Sequence[int],
        requester_role: Optional[str],
    ) -> int:
        """Set each category's display_order to its index in ``category_ids``."""
        _require_admin(requester_role, "reorder categories")
        ids = _validate_id_sequence(category_ids, "category_ids")
        missing = set(ids) - set(crud_category.existing_ids(db, ids))
        if missing:
            raise NotFoundException(f"Categories not found: {sorted(missing)}")

        updated = crud_category.reorder(db, ids=ids)
        logger.info(f"[CATALOG] Categories reordered: {ids}")
        return updated

    # ----- Channels -----
    def create_channel(
        self,
        db: Session,
        *,
        category_id: int,
        name: str,
        description: Optional[str],
        channel_type: str,
        requester_role: Optional[str],
    ) -> ChannelResponse:
        """
        Create a channel at the end of its category.

        Raises:
            ForbiddenException: requester is not an administrator
            ValidationException: name is empty after trimming
            InvalidChannelTypeException: channel_type outside the enumeration
            NotFoundException: category does not exist
            DuplicateNameException: the category already has a channel with that name
        """
        _require_admin(requester_role, "create a channel")
        trimmed = _clean_name(name, "channel")
        channel_type = _validate_channel_type(channel_type)

        if crud_category.get(db, category_id) is None:
            raise NotFoundException("Category not found")
        if crud_channel.get_by_name(db, category_id=category_id, name=trimmed):
            raise DuplicateNameException("This channel name already exists in the category")

        try:
            channel = crud_channel.create_channel(
                db,
                category_id=category_id,
                name=trimmed,
                description=(description or "").strip(),
                channel_type=channel_type,
            )
        except IntegrityError:
            raise DuplicateNameException("This channel name already exists in the category")

        logger.info(
            f"[CATALOG] Channel created: id={channel.id}, category_id={category_id}, "
            f"type={channel_type}"
        )
        return ChannelResponse.from_row(channel, 0)

    def update_channel(
        self,
        db: Session,
        *,
        channel_id: int,
        name: str,
        description: Optional[str],
        channel_type: str,
        requester_role: Optional[str],
    ) -> ChannelResponse:
        _require_admin(requester_role, "edit a channel")
        trimmed = _clean_name(name, "channel")
        channel_type = _validate_channel_type(channel_type)

        channel = crud_channel.get(db, channel_id)
        if channel is None:
            raise NotFoundException("Channel not found")
        if crud_channel.get_by_name(
            db, category_id=channel.category_id, name=trimmed, exclude_id=channel_id
        ):
            raise DuplicateNameException("This channel name already exists in the category")

        try:
            crud_channel.update(
                db,
                db_obj=channel,
                obj_in={
                    "name": trimmed,
                    "description": (description or "").strip(),
                    "channel_type": channel_type,
                },
            )
        except IntegrityError:
            raise DuplicateNameException("This channel name already exists in the category")

        logger.info(f"[CATALOG] Channel updated: id={channel_id}, type={channel_type}")
        channel, post_count = crud_channel.get_with_post_count(db, channel_id=channel_id)
        return ChannelResponse.from_row(channel, post_count)

    def delete_channel(
        self,
        db: Session,
        *,
        channel_id: int,
        requester_role: Optional[str],
    ) -> None:
        """Delete a channel together with its posts, comments and likes."""
        _require_admin(requester_role, "delete a channel")
        if crud_channel.delete(db, id=channel_id) is None:
            raise NotFoundException("Channel not found")
        logger.info(f"[CATALOG] Channel deleted: id={channel_id}")

    def reorder_channels(
        self,
        db: Session,
        *,
        channel_ids: Sequence[int],
        requester_role: Optional[str],
    ) -> int:
        """Set each channel's display_order to its index in ``channel_ids``."""
        _require_admin(requester_role, "reorder channels")
        ids = _validate_id_sequence(channel_ids, "channel_ids")
        missing = set(ids) - set(crud_channel.existing_ids(db, ids))
        if missing:
            raise NotFoundException(f"Channels not found: {sorted(missing)}")

        updated = crud_channel.reorder(db, ids=ids)
        logger.info(f"[CATALOG] Channels reordered: {ids}")
        return updated


# Singleton instance
catalog_service = CatalogService()
