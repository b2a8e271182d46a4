"""Services package for the community application."""

from .catalog_service import catalog_service, CatalogService
from .forum_service import forum_service, ForumService

__all__ = [
    "catalog_service",
    "CatalogService",
    "forum_service",
    "ForumService",
]
