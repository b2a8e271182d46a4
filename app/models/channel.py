"""Channel model: a communication channel inside a category."""

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, validates
from ..database import Base


class Channel(Base):
    """Model for a forum channel.

    ``channel_type`` is stored as plain text rather than a database enum so a
    stale value stays readable; the access policy treats it as a deny.
    """
    
    __tablename__ = "channels"
    
    id = Column(Integer, primary_key=True, index=True)
    
    # Foreign Keys
    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    
    name = Column(String(100), nullable=False)
    name_key = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    channel_type = Column(String(50), nullable=False, index=True)
    display_order = Column(Integer, nullable=False, default=0)
    
    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now())
    
    # Constraints & Indexes
    __table_args__ = (
        Index("uq_channel_category_name_key", category_id, name_key, unique=True),
        Index("idx_channel_category_order", category_id, display_order),
    )
    
    # Relationships
    category = relationship("Category", back_populates="channels")
    posts = relationship(
        "Post",
        back_populates="channel",
        cascade="all, delete-orphan",
    )

    @validates("name")
    def _sync_name_key(self, key, value):
        self.name_key = value.casefold() if value is not None else None
        return value
