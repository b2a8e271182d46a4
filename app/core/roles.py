"""Closed enumerations for user roles and channel types."""

from enum import Enum
from typing import FrozenSet, Optional


class Role(str, Enum):
    """User roles, the sole authorization attribute of a user."""
    SERVER_ADMIN = "サーバー管理者"
    ECG_INSTRUCTOR = "ECG講師"
    JCG_INSTRUCTOR = "JCG講師"
    CLASS1_MEMBER = "Class1 Members"
    ECG_MEMBER = "ECGメンバー"
    JCG_MEMBER = "JCGメンバー"
    TRIAL = "Trial参加者"


class ChannelType(str, Enum):
    """Channel types; each one encodes both the read and the write policy."""
    ALL_POST_ALL_VIEW = "all_post_all_view"
    ADMIN_ONLY_ALL_VIEW = "admin_only_all_view"
    INSTRUCTORS_POST_ALL_VIEW = "instructors_post_all_view"
    ADMIN_ONLY_INSTRUCTORS_VIEW = "admin_only_instructors_view"
    CLASS1_POST_CLASS1_VIEW = "class1_post_class1_view"


ALL_ROLES: FrozenSet[Role] = frozenset(Role)
STAFF_ROLES: FrozenSet[Role] = frozenset(
    {Role.SERVER_ADMIN, Role.ECG_INSTRUCTOR, Role.JCG_INSTRUCTOR}
)
CLASS1_ROLES: FrozenSet[Role] = STAFF_ROLES | {Role.CLASS1_MEMBER}

DEFAULT_ROLE = Role.TRIAL


def parse_role(value: Optional[str]) -> Optional[Role]:
    """Return the matching Role, or None for anything outside the enumeration."""
    if value is None:
        return None
    try:
        return Role(value)
    except ValueError:
        return None


def parse_channel_type(value: Optional[str]) -> Optional[ChannelType]:
    if value is None:
        return None
    try:
        return ChannelType(value)
    except ValueError:
        return None


def is_admin(role: Optional[str]) -> bool:
    return parse_role(role) is Role.SERVER_ADMIN


__all__ = [
    "Role",
    "ChannelType",
    "ALL_ROLES",
    "STAFF_ROLES",
    "CLASS1_ROLES",
    "DEFAULT_ROLE",
    "parse_role",
    "parse_channel_type",
    "is_admin",
]
