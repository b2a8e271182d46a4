"""Comment model for post comments."""

from sqlalchemy import Column, Integer, Text, TIMESTAMP, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class Comment(Base):
    """Model for a comment on a post."""
    
    __tablename__ = "comments"
    
    id = Column(Integer, primary_key=True, index=True)
    
    # Foreign Keys
    post_id = Column(
        Integer, 
        ForeignKey("posts.id", ondelete="CASCADE"), 
        nullable=False, 
        index=True
    )
    user_id = Column(
        Integer, 
        ForeignKey("users.id"), 
        nullable=False, 
        index=True
    )
    
    # Comment Content
    content = Column(Text, nullable=False)
    
    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)
    
    # Constraints & Indexes
    __table_args__ = (
        Index('idx_comment_post_created', 'post_id', 'created_at'),
    )
    
    # Relationships
    post = relationship("Post", back_populates="comments")
    author = relationship("User", foreign_keys=[user_id])
