"""Core module exports."""

from .security import (
    create_access_token,
    decode_token,
    get_password_hash,
    get_token_user_id,
    verify_password,
    ALGORITHM,
)
from .roles import ChannelType, Role, is_admin
from .channel_policy import ChannelAccess, PolicyConfigurationWarning, evaluate

__all__ = [
    "create_access_token",
    "decode_token",
    "get_password_hash",
    "get_token_user_id",
    "verify_password",
    "ALGORITHM",
    "ChannelType",
    "Role",
    "is_admin",
    "ChannelAccess",
    "PolicyConfigurationWarning",
    "evaluate",
]
