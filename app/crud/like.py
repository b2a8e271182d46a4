"""CRUD operations for Like."""

import logging
from typing import Optional

from sqlalchemy import and_, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.like import Like

logger = logging.getLogger(__name__)


class CRUDLike(CRUDBase[Like, dict, dict]):
    """CRUD operations for Like."""
    
    def add_like(self, db: Session, *, post_id: int, user_id: int) -> bool:
        """
        Insert a like inside a savepoint.
        
        The (user_id, post_id) unique constraint is the source of truth: a
        violation means another request already liked the post.
        
        Any other integrity failure, such as the post vanishing before the
        insert, is re-raised.
        
        Returns:
            True if a row was created, False if it already existed.
        """
        try:
            with db.begin_nested():
                db.add(Like(post_id=post_id, user_id=user_id))
        except IntegrityError:
            if self.get_like(db, post_id=post_id, user_id=user_id) is None:
                raise
            logger.info(f"[FORUM] Like already present: post_id={post_id}, user_id={user_id}")
            return False
        return True
    
    def toggle_like(
        self,
        db: Session,
        *,
        post_id: int,
        user_id: int
    ) -> bool:
        """
        Toggle like on a post.
        
        Removes the like if present, otherwise creates it, in one transaction.
        
        Returns:
            is_liked: bool
        """
        try:
            result = db.execute(
                delete(Like).where(
                    and_(
                        Like.post_id == post_id,
                        Like.user_id == user_id
                    )
                )
            )
            if result.rowcount:
                is_liked = False
            else:
                self.add_like(db, post_id=post_id, user_id=user_id)
                is_liked = True
            db.commit()
        except Exception:
            db.rollback()
            raise
        
        return is_liked
    
    def get_like(
        self,
        db: Session,
        *,
        post_id: int,
        user_id: int
    ) -> Optional[Like]:
        """Get like record if exists."""
        stmt = select(Like).where(
            and_(
                Like.post_id == post_id,
                Like.user_id == user_id
            )
        )
        return db.scalars(stmt).first()
    
    def count_by_post(self, db: Session, *, post_id: int) -> int:
        stmt = select(func.count(Like.id)).where(Like.post_id == post_id)
        return db.scalar(stmt) or 0


# Singleton instance
crud_like = CRUDLike(Like)
