"""CRUD operations for Post."""

from datetime import datetime
from typing import Any, Collection, Dict, List, Optional
from sqlalchemy import Select, desc, func, select
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.category import Category
from app.models.channel import Channel
from app.models.comment import Comment
from app.models.like import Like
from app.models.post import Post
from app.models.user import User
from app.schemas.post import PostCreate


def _feed_query(requester_id: Optional[int]) -> Select:
    """Select posts with author/channel info and counts computed from child rows."""
    like_count = (
        select(func.count(Like.id))
        .where(Like.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )
    comment_count = (
        select(func.count(Comment.id))
        .where(Comment.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )
    user_liked = (
        select(func.count(Like.id))
        .where(Like.post_id == Post.id, Like.user_id == requester_id)
        .correlate(Post)
        .scalar_subquery()
    )
    return (
        select(
            Post.id,
            Post.content,
            Post.user_id,
            Post.channel_id,
            Post.image_url,
            Post.created_at,
            User.username.label("author_name"),
            User.role.label("author_role"),
            Channel.name.label("channel_name"),
            Category.name.label("category_name"),
            like_count.label("like_count"),
            comment_count.label("comment_count"),
            user_liked.label("user_liked"),
        )
        .join(User, User.id == Post.user_id)
        .join(Channel, Channel.id == Post.channel_id)
        .join(Category, Category.id == Channel.category_id)
    )


def _as_dict(row: Any) -> Dict[str, Any]:
    data = dict(row._mapping)
    data["user_liked"] = bool(data["user_liked"])
    return data


class CRUDPost(CRUDBase[Post, PostCreate, dict]):
    """CRUD operations for Post."""
    
    def create_post(
        self,
        db: Session,
        *,
        user_id: int,
        channel_id: int,
        content: str,
        image_url: Optional[str] = None
    ) -> Post:
        """Create a new post."""
        return self.create(
            db,
            obj_in={
                "user_id": user_id,
                "channel_id": channel_id,
                "content": content,
                "image_url": image_url,
            },
        )
    
    def get_channel_feed(
        self,
        db: Session,
        *,
        channel_id: int,
        requester_id: Optional[int],
        skip: int = 0,
        limit: int = 20
    ) -> List[Dict[str, Any]]:
        """Get posts of a channel, newest first, with counts."""
        stmt = (
            _feed_query(requester_id)
            .where(Post.channel_id == channel_id)
            .order_by(desc(Post.created_at), desc(Post.id))
            .offset(skip)
            .limit(limit)
        )
        return [_as_dict(row) for row in db.execute(stmt).all()]
    
    def count_by_channel(self, db: Session, *, channel_id: int) -> int:
        stmt = select(func.count(Post.id)).where(Post.channel_id == channel_id)
        return db.scalar(stmt) or 0
    
    def get_user_feed(
        self,
        db: Session,
        *,
        user_id: int,
        requester_id: Optional[int],
        channel_ids: Collection[int],
        skip: int = 0,
        limit: int = 20
    ) -> List[Dict[str, Any]]:
        """Get posts by one author restricted to the given channels, newest first."""
        if not channel_ids:
            return []
        stmt = (
            _feed_query(requester_id)
            .where(Post.user_id == user_id, Post.channel_id.in_(channel_ids))
            .order_by(desc(Post.created_at), desc(Post.id))
            .offset(skip)
            .limit(limit)
        )
        return [_as_dict(row) for row in db.execute(stmt).all()]
    
    def count_by_user(self, db: Session, *, user_id: int, channel_ids: Collection[int]) -> int:
        if not channel_ids:
            return 0
        stmt = select(func.count(Post.id)).where(
            Post.user_id == user_id, Post.channel_id.in_(channel_ids)
        )
        return db.scalar(stmt) or 0
    
    def search_feed(
        self,
        db: Session,
        *,
        term: str,
        requester_id: Optional[int],
        channel_ids: Collection[int],
        user_id: Optional[int] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        limit: int = 20
    ) -> List[Dict[str, Any]]:
        """Posts in ``channel_ids`` whose content contains ``term``, newest first."""
        if not channel_ids:
            return []
        stmt = _feed_query(requester_id).where(
            Post.channel_id.in_(channel_ids),
            Post.content.icontains(term, autoescape=True),
        )
        if user_id is not None:
            stmt = stmt.where(Post.user_id == user_id)
        if date_from is not None:
            stmt = stmt.where(Post.created_at >= date_from)
        if date_to is not None:
            stmt = stmt.where(Post.created_at <= date_to)
        stmt = stmt.order_by(desc(Post.created_at), desc(Post.id)).limit(limit)
        return [_as_dict(row) for row in db.execute(stmt).all()]
    
    def get_with_counts(
        self,
        db: Session,
        *,
        post_id: int,
        requester_id: Optional[int]
    ) -> Optional[Dict[str, Any]]:
        """Get one post with counts relative to ``requester_id``."""
        row = db.execute(_feed_query(requester_id).where(Post.id == post_id)).first()
        return _as_dict(row) if row is not None else None


# Singleton instance
crud_post = CRUDPost(Post)
