"""CRUD operations package - exports singleton instances for all models."""

from .base import CRUDBase
from .user import crud_user
from .category import crud_category
from .channel import crud_channel
from .post import crud_post
from .comment import crud_comment
from .like import crud_like


__all__ = [
    # Base
    "CRUDBase",
    # CRUD instances
    "crud_user",
    "crud_category",
    "crud_channel",
    "crud_post",
    "crud_comment",
    "crud_like",
]
