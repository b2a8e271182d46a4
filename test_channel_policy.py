"""Tests for the channel access decision table."""

import warnings

import pytest

from app.core import channel_policy
from app.core.channel_policy import PolicyConfigurationWarning, evaluate
from app.core.roles import ChannelType, Role

ADMIN = Role.SERVER_ADMIN
ECG_I = Role.ECG_INSTRUCTOR
JCG_I = Role.JCG_INSTRUCTOR
CLASS1 = Role.CLASS1_MEMBER
ECG_M = Role.ECG_MEMBER
JCG_M = Role.JCG_MEMBER
TRIAL = Role.TRIAL

# (channel_type, role, can_view, can_post)
EXPECTED = [
    (ChannelType.ALL_POST_ALL_VIEW, ADMIN, True, True),
    (ChannelType.ALL_POST_ALL_VIEW, ECG_I, True, True),
    (ChannelType.ALL_POST_ALL_VIEW, JCG_I, True, True),
    (ChannelType.ALL_POST_ALL_VIEW, CLASS1, True, True),
    (ChannelType.ALL_POST_ALL_VIEW, ECG_M, True, True),
    (ChannelType.ALL_POST_ALL_VIEW, JCG_M, True, True),
    (ChannelType.ALL_POST_ALL_VIEW, TRIAL, True, False),
    (ChannelType.ADMIN_ONLY_ALL_VIEW, ADMIN, True, True),
    (ChannelType.ADMIN_ONLY_ALL_VIEW, ECG_I, True, True),
    (ChannelType.ADMIN_ONLY_ALL_VIEW, JCG_I, True, True),
    (ChannelType.ADMIN_ONLY_ALL_VIEW, CLASS1, True, False),
    (ChannelType.ADMIN_ONLY_ALL_VIEW, ECG_M, True, False),
    (ChannelType.ADMIN_ONLY_ALL_VIEW, JCG_M, True, False),
    (ChannelType.ADMIN_ONLY_ALL_VIEW, TRIAL, True, False),
    (ChannelType.INSTRUCTORS_POST_ALL_VIEW, ADMIN, True, True),
    (ChannelType.INSTRUCTORS_POST_ALL_VIEW, ECG_I, True, True),
    (ChannelType.INSTRUCTORS_POST_ALL_VIEW, JCG_I, True, True),
    (ChannelType.INSTRUCTORS_POST_ALL_VIEW, CLASS1, True, False),
    (ChannelType.INSTRUCTORS_POST_ALL_VIEW, ECG_M, True, False),
    (ChannelType.INSTRUCTORS_POST_ALL_VIEW, JCG_M, True, False),
    (ChannelType.INSTRUCTORS_POST_ALL_VIEW, TRIAL, True, False),
    (ChannelType.ADMIN_ONLY_INSTRUCTORS_VIEW, ADMIN, True, True),
    (ChannelType.ADMIN_ONLY_INSTRUCTORS_VIEW, ECG_I, True, True),
    (ChannelType.ADMIN_ONLY_INSTRUCTORS_VIEW, JCG_I, True, True),
    (ChannelType.ADMIN_ONLY_INSTRUCTORS_VIEW, CLASS1, False, False),
    (ChannelType.ADMIN_ONLY_INSTRUCTORS_VIEW, ECG_M, False, False),
    (ChannelType.ADMIN_ONLY_INSTRUCTORS_VIEW, JCG_M, False, False),
    (ChannelType.ADMIN_ONLY_INSTRUCTORS_VIEW, TRIAL, False, False),
    (ChannelType.CLASS1_POST_CLASS1_VIEW, ADMIN, True, True),
    (ChannelType.CLASS1_POST_CLASS1_VIEW, ECG_I, True, True),
    (ChannelType.CLASS1_POST_CLASS1_VIEW, JCG_I, True, True),
    (ChannelType.CLASS1_POST_CLASS1_VIEW, CLASS1, True, True),
    (ChannelType.CLASS1_POST_CLASS1_VIEW, ECG_M, False, False),
    (ChannelType.CLASS1_POST_CLASS1_VIEW, JCG_M, False, False),
    (ChannelType.CLASS1_POST_CLASS1_VIEW, TRIAL, False, False),
]


@pytest.fixture(autouse=True)
def _reset_counts():
    channel_policy.reset_policy_misconfiguration_counts()
    yield
    channel_policy.reset_policy_misconfiguration_counts()


@pytest.mark.parametrize("channel_type,role,can_view,can_post", EXPECTED)
def test_decision_table(channel_type, role, can_view, can_post):
    assert evaluate(channel_type.value, role.value) == (can_view, can_post)


def test_table_covers_every_pair():
    covered = {(channel_type, role) for channel_type, role, _, _ in EXPECTED}
    assert covered == {(t, r) for t in ChannelType for r in Role}


@pytest.mark.parametrize("channel_type", list(ChannelType))
@pytest.mark.parametrize("role", list(Role))
def test_post_implies_view(channel_type, role):
    access = evaluate(channel_type.value, role.value)
    assert not access.can_post or access.can_view


@pytest.mark.parametrize("channel_type", list(ChannelType))
def test_trial_never_posts(channel_type):
    assert channel_policy.can_post(channel_type.value, Role.TRIAL.value) is False


@pytest.mark.parametrize("channel_type", list(ChannelType))
def test_admin_has_full_access(channel_type):
    assert evaluate(channel_type.value, Role.SERVER_ADMIN.value) == (True, True)


def test_accepts_enum_members():
    assert evaluate(ChannelType.CLASS1_POST_CLASS1_VIEW, Role.CLASS1_MEMBER) == (True, True)


@pytest.mark.parametrize("role", [None, "", "Guest", "server_admin"])
def test_unknown_role_is_denied(role):
    assert evaluate(ChannelType.ALL_POST_ALL_VIEW.value, role) == (False, False)


def test_unknown_channel_type_is_denied_and_reported():
    with pytest.warns(PolicyConfigurationWarning, match="legacy_board"):
        access = evaluate("legacy_board", Role.SERVER_ADMIN.value)

    assert access == (False, False)
    assert channel_policy.policy_misconfiguration_counts() == {"legacy_board": 1}


def test_unknown_channel_type_counts_accumulate():
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", PolicyConfigurationWarning)
        channel_policy.can_view("legacy_board", Role.ECG_MEMBER.value)
        channel_policy.can_post("legacy_board", Role.ECG_MEMBER.value)
        channel_policy.can_view(None, Role.ECG_MEMBER.value)

    counts = channel_policy.policy_misconfiguration_counts()
    assert counts["legacy_board"] == 2
    assert counts[None] == 1


def test_known_types_do_not_warn():
    with warnings.catch_warnings():
        warnings.simplefilter("error", PolicyConfigurationWarning)
        for channel_type in ChannelType:
            evaluate(channel_type.value, Role.TRIAL.value)
    assert channel_policy.policy_misconfiguration_counts() == {}


def test_unknown_channel_type_with_error_filter_still_denies():
    with warnings.catch_warnings():
        warnings.simplefilter("error", PolicyConfigurationWarning)
        access = evaluate("legacy_board", Role.ECG_MEMBER.value)

    assert access == (False, False)
    assert channel_policy.policy_misconfiguration_counts() == {"legacy_board": 1}
