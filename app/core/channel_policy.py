"""Channel access policy.

A single decision table maps ``(channel_type, role)`` to the pair of
permissions ``can_view`` / ``can_post``. Every caller that gates on a
channel goes through :func:`evaluate`.

An unrecognized channel type is denied. Because it means a bad value was
persisted rather than a legitimate denial, it is logged, emitted as a
:class:`PolicyConfigurationWarning` and counted.
"""

import logging
import threading
import warnings
from collections import Counter
from typing import Dict, FrozenSet, NamedTuple, Optional

from app.core.roles import (
    ALL_ROLES,
    CLASS1_ROLES,
    STAFF_ROLES,
    ChannelType,
    Role,
    parse_channel_type,
    parse_role,
)

logger = logging.getLogger(__name__)


class PolicyConfigurationWarning(RuntimeWarning):
    """A channel carries a channel_type outside the known enumeration."""


class ChannelAccess(NamedTuple):
    can_view: bool
    can_post: bool


class ChannelRule(NamedTuple):
    viewers: FrozenSet[Role]
    posters: FrozenSet[Role]


CHANNEL_RULES: Dict[ChannelType, ChannelRule] = {
    ChannelType.ALL_POST_ALL_VIEW: ChannelRule(
        viewers=ALL_ROLES,
        posters=ALL_ROLES - {Role.TRIAL},
    ),
    ChannelType.ADMIN_ONLY_ALL_VIEW: ChannelRule(viewers=ALL_ROLES, posters=STAFF_ROLES),
    ChannelType.INSTRUCTORS_POST_ALL_VIEW: ChannelRule(viewers=ALL_ROLES, posters=STAFF_ROLES),
    ChannelType.ADMIN_ONLY_INSTRUCTORS_VIEW: ChannelRule(viewers=STAFF_ROLES, posters=STAFF_ROLES),
    ChannelType.CLASS1_POST_CLASS1_VIEW: ChannelRule(viewers=CLASS1_ROLES, posters=CLASS1_ROLES),
}

DENY = ChannelAccess(can_view=False, can_post=False)

_misconfigurations: Counter = Counter()
_misconfigurations_lock = threading.Lock()


def _report_unknown_channel_type(channel_type: Optional[str]) -> None:
    with _misconfigurations_lock:
        _misconfigurations[channel_type] += 1
    message = f"Unknown channel_type {channel_type!r}; denying access"
    logger.warning(f"[POLICY] {message}")
    try:
        warnings.warn(message, PolicyConfigurationWarning, stacklevel=3)
    except PolicyConfigurationWarning:
        # An "error" filter raises here; the log line and counter already record it
        pass


def evaluate(channel_type: Optional[str], role: Optional[str]) -> ChannelAccess:
    """Return the view/post permissions of ``role`` in a channel of ``channel_type``.

    Never raises. Unknown channel types and unknown roles are denied.
    """
    parsed_type = parse_channel_type(channel_type)
    if parsed_type is None:
        _report_unknown_channel_type(channel_type)
        return DENY

    parsed_role = parse_role(role)
    if parsed_role is None:
        logger.debug(f"[POLICY] Unknown role {role!r}; denying access")
        return DENY

    rule = CHANNEL_RULES[parsed_type]
    can_view = parsed_role in rule.viewers
    can_post = can_view and parsed_role in rule.posters
    return ChannelAccess(can_view=can_view, can_post=can_post)


def can_view(channel_type: Optional[str], role: Optional[str]) -> bool:
    return evaluate(channel_type, role).can_view


def can_post(channel_type: Optional[str], role: Optional[str]) -> bool:
    return evaluate(channel_type, role).can_post


def policy_misconfiguration_counts() -> Dict[Optional[str], int]:
    """Snapshot of unknown channel_type values seen so far, with hit counts."""
    with _misconfigurations_lock:
        return dict(_misconfigurations)


def reset_policy_misconfiguration_counts() -> None:
    with _misconfigurations_lock:
        _misconfigurations.clear()


__all__ = [
    "ChannelAccess",
    "ChannelRule",
    "CHANNEL_RULES",
    "PolicyConfigurationWarning",
    "evaluate",
    "can_view",
    "can_post",
    "policy_misconfiguration_counts",
    "reset_policy_misconfiguration_counts",
]
