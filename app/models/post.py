"""Post model for channel discussion."""

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class Post(Base):
    """Model for a post in a channel.

    Like and comment counts are never stored here; they are counted from the
    child tables at read time.
    """
    
    __tablename__ = "posts"
    
    id = Column(Integer, primary_key=True, index=True)
    
    # Foreign Keys
    user_id = Column(
        Integer, 
        ForeignKey("users.id"), 
        nullable=False, 
        index=True
    )
    channel_id = Column(
        Integer,
        ForeignKey("channels.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    # Post Content
    content = Column(Text, nullable=False)
    image_url = Column(String(500), nullable=True)
    
    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)
    
    # Constraints & Indexes
    __table_args__ = (
        # Index for the channel feed (newest first)
        Index('idx_post_channel_created', 'channel_id', 'created_at'),
        # Index for query posts by author
        Index('idx_post_user_created', 'user_id', 'created_at'),
    )
    
    # Relationships
    author = relationship("User", foreign_keys=[user_id])
    channel = relationship("Channel", back_populates="posts")
    likes = relationship(
        "Like", 
        back_populates="post",
        cascade="all, delete-orphan",
    )
    comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Comment.created_at.asc()"
    )
