"""
SQLAlchemy Models for the community forum
"""

from ..database import Base
from .user import User
from .category import Category
from .channel import Channel
from .post import Post
from .comment import Comment
from .like import Like

# Export all models
__all__ = [
    "Base",
    "User",
    "Category",
    "Channel",
    "Post",
    "Comment",
    "Like",
]
