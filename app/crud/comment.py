"""CRUD operations for Comment."""

from typing import Any, Dict, List
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.comment import Comment
from app.models.user import User


class CRUDComment(CRUDBase[Comment, dict, dict]):
    """CRUD operations for Comment."""
    
    def create_comment(
        self,
        db: Session,
        *,
        post_id: int,
        user_id: int,
        content: str
    ) -> Comment:
        """Create a new comment on a post."""
        return self.create(
            db,
            obj_in={"post_id": post_id, "user_id": user_id, "content": content},
        )
    
    def get_by_post(self, db: Session, *, post_id: int) -> List[Dict[str, Any]]:
        """Get all comments for a post, oldest first, with author info."""
        stmt = (
            select(
                Comment.id,
                Comment.post_id,
                Comment.user_id,
                Comment.content,
                Comment.created_at,
                User.username.label("author_name"),
                User.role.label("author_role"),
            )
            .join(User, User.id == Comment.user_id)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        return [dict(row._mapping) for row in db.execute(stmt).all()]
    
    def count_by_post(self, db: Session, *, post_id: int) -> int:
        stmt = select(func.count(Comment.id)).where(Comment.post_id == post_id)
        return db.scalar(stmt) or 0


# Singleton instance
crud_comment = CRUDComment(Comment)
