"""CRUD operations for Channel."""

from typing import List, Optional, Tuple
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.channel import Channel
from app.models.post import Post
from app.schemas.category import ChannelCreate, ChannelUpdate


def _post_count_column():
    return (
        select(func.count(Post.id))
        .where(Post.channel_id == Channel.id)
        .correlate(Channel)
        .scalar_subquery()
        .label("post_count")
    )


class CRUDChannel(CRUDBase[Channel, ChannelCreate, ChannelUpdate]):
    """CRUD operations for Channel."""
    
    def get_with_post_count(self, db: Session, *, channel_id: int) -> Optional[Tuple[Channel, int]]:
        """Get a channel together with the number of posts in it."""
        stmt = select(Channel, _post_count_column()).where(Channel.id == channel_id)
        row = db.execute(stmt).first()
        if row is None:
            return None
        return row[0], row[1]
    
    def get_by_category_with_post_count(
        self,
        db: Session,
        *,
        category_id: Optional[int] = None
    ) -> List[Tuple[Channel, int]]:
        """Get channels (optionally for one category) in display order with post counts."""
        stmt = select(Channel, _post_count_column())
        if category_id is not None:
            stmt = stmt.where(Channel.category_id == category_id)
        stmt = stmt.order_by(
            Channel.category_id.asc(),
            Channel.display_order.asc(),
            Channel.created_at.asc(),
            Channel.id.asc(),
        )
        return [(row[0], row[1]) for row in db.execute(stmt).all()]
    
    def get_by_name(
        self,
        db: Session,
        *,
        category_id: int,
        name: str,
        exclude_id: Optional[int] = None
    ) -> Optional[Channel]:
        """Get channel in a category by name, ignoring case."""
        stmt = select(Channel).where(
            Channel.category_id == category_id,
            Channel.name_key == name.casefold(),
        )
        if exclude_id is not None:
            stmt = stmt.where(Channel.id != exclude_id)
        return db.scalars(stmt.limit(1)).first()
    
    def create_channel(
        self,
        db: Session,
        *,
        category_id: int,
        name: str,
        description: str,
        channel_type: str
    ) -> Channel:
        """Create a channel appended at the end of its category."""
        return self.create(
            db,
            obj_in={
                "category_id": category_id,
                "name": name,
                "description": description,
                "channel_type": channel_type,
                "display_order": self.next_display_order(db, Channel.category_id == category_id),
            },
        )


# Singleton instance
crud_channel = CRUDChannel(Channel)
