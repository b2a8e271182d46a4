"""Category model: ordered grouping of channels."""

from sqlalchemy import Column, Integer, String, Boolean, TIMESTAMP, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, validates
from ..database import Base


class Category(Base):
    """Model for a category that groups channels."""
    
    __tablename__ = "categories"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    # casefold() of name; backs the case-insensitive uniqueness check
    name_key = Column(String(100), nullable=False)
    display_order = Column(Integer, nullable=False, default=0, index=True)
    is_collapsed = Column(Boolean, nullable=False, default=False)
    
    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now())
    
    # Constraints & Indexes
    __table_args__ = (
        Index("uq_category_name_key", name_key, unique=True),
    )
    
    # Relationships
    channels = relationship(
        "Channel",
        back_populates="category",
        order_by="Channel.display_order",
        passive_deletes="all",
    )

    @validates("name")
    def _sync_name_key(self, key, value):
        self.name_key = value.casefold() if value is not None else None
        return value
