"""Custom exceptions for the community API.

Each error kind carries its own HTTP status so FastAPI can surface it to the
caller directly. Services raise these before any write is committed.
"""

from fastapi import HTTPException, status


class CommunityException(HTTPException):
    """Base exception for community domain errors."""

    default_status = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed"

    def __init__(self, detail: str = None):
        super().__init__(
            status_code=self.default_status,
            detail=detail or self.default_detail,
        )


class ValidationException(CommunityException):
    """Exception when required input is missing or empty (content, name)."""

    default_detail = "Required input is missing or empty"


class InvalidInputException(CommunityException):
    """Exception when structured input is malformed (e.g. an empty reorder list)."""

    default_detail = "Invalid input"


class InvalidChannelTypeException(CommunityException):
    """Exception when a channel_type is outside the known enumeration."""

    default_detail = "Please choose a valid channel type"


class ForbiddenException(CommunityException):
    """
    Exception when a role or ownership check fails.

    Status Code: 403 Forbidden

    Usage:
        >>> from app.core.exceptions import ForbiddenException
        >>> raise ForbiddenException("You are not allowed to post in this channel")
    """

    default_status = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action"


class NotFoundException(CommunityException):
    """Exception when a referenced category/channel/post/comment/user is absent."""

    default_status = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class DuplicateNameException(CommunityException):
    """Exception when a category or channel name already exists (case-insensitive)."""

    default_status = status.HTTP_409_CONFLICT
    default_detail = "This name already exists"


class NotEmptyException(CommunityException):
    """Exception when deleting a category that still owns channels."""

    default_status = status.HTTP_409_CONFLICT
    default_detail = "Category still contains channels"


__all__ = [
    "CommunityException",
    "ValidationException",
    "InvalidInputException",
    "InvalidChannelTypeException",
    "ForbiddenException",
    "NotFoundException",
    "DuplicateNameException",
    "NotEmptyException",
]
