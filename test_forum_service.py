"""Tests for posts, likes and comments."""

import pytest
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.config import settings
from app.core.exceptions import (
    ForbiddenException,
    InvalidInputException,
    NotFoundException,
    ValidationException,
)
from app.core.roles import ChannelType, Role
from app.crud import crud_like, crud_post
from app.models import Comment, Like, Post
from app.services import forum_service
from app.services.forum_service import SEARCH_LIMIT, ForumService

ADMIN = Role.SERVER_ADMIN.value


@pytest.fixture
def lobby(make_category, make_channel):
    return make_channel(make_category("General"), ChannelType.ALL_POST_ALL_VIEW, name="lobby")


@pytest.fixture
def member(make_user):
    return make_user(Role.ECG_MEMBER)


def _post(db, channel, author, content="hello"):
    return forum_service.create_post(
        db, channel_id=channel.id, author_id=author.id, content=content
    )


class TestCreatePost:
    def test_member_posts_in_open_channel(self, db, lobby, member):
        post = _post(db, lobby, member, content="  first post  ")

        assert post.content == "first post"
        assert post.author_name == member.username
        assert post.author_role == Role.ECG_MEMBER.value
        assert post.channel_name == "lobby"
        assert post.category_name == "General"
        assert (post.like_count, post.comment_count, post.user_liked) == (0, 0, False)

    def test_instructor_only_channel(self, db, make_category, make_channel, make_user):
        channel = make_channel(make_category("News"), ChannelType.INSTRUCTORS_POST_ALL_VIEW)
        student = make_user(Role.ECG_MEMBER)
        instructor = make_user(Role.ECG_INSTRUCTOR)

        with pytest.raises(ForbiddenException):
            _post(db, channel, student)
        assert crud_post.count_by_channel(db, channel_id=channel.id) == 0

        _post(db, channel, instructor)
        assert crud_post.count_by_channel(db, channel_id=channel.id) == 1

    def test_trial_cannot_post_anywhere(self, db, lobby, make_user):
        trial = make_user(Role.TRIAL)
        with pytest.raises(ForbiddenException):
            _post(db, lobby, trial)

    def test_empty_content(self, db, lobby, member):
        with pytest.raises(ValidationException):
            _post(db, lobby, member, content="   ")

    def test_missing_channel(self, db, member):
        with pytest.raises(NotFoundException):
            forum_service.create_post(db, channel_id=404, author_id=member.id, content="hi")

    def test_unknown_author(self, db, lobby):
        with pytest.raises(ForbiddenException):
            forum_service.create_post(db, channel_id=lobby.id, author_id=999, content="hi")


class TestListPosts:
    def test_newest_first(self, db, lobby, member):
        for n in range(3):
            _post(db, lobby, member, content=f"post {n}")

        result = forum_service.list_posts(db, channel_id=lobby.id, requester_id=member.id)

        assert [p.content for p in result.posts] == ["post 2", "post 1", "post 0"]
        assert result.total == 3
        assert result.has_more is False

    def test_pagination(self, db, lobby, member):
        for n in range(5):
            _post(db, lobby, member, content=f"post {n}")

        first = forum_service.list_posts(
            db, channel_id=lobby.id, requester_id=member.id, page=1, page_size=2
        )
        last = forum_service.list_posts(
            db, channel_id=lobby.id, requester_id=member.id, page=3, page_size=2
        )

        assert [p.content for p in first.posts] == ["post 4", "post 3"]
        assert first.has_more is True
        assert [p.content for p in last.posts] == ["post 0"]
        assert last.has_more is False

    def test_page_size_is_capped(self, db, lobby, member):
        result = forum_service.list_posts(
            db, channel_id=lobby.id, requester_id=member.id, page_size=10_000
        )
        assert result.page_size == settings.MAX_PAGE_SIZE

    def test_invalid_page(self, db, lobby, member):
        with pytest.raises(InvalidInputException):
            forum_service.list_posts(db, channel_id=lobby.id, requester_id=member.id, page=0)

    def test_hidden_channel(self, db, make_category, make_channel, member):
        staff_room = make_channel(make_category("Staff"), ChannelType.ADMIN_ONLY_INSTRUCTORS_VIEW)
        with pytest.raises(ForbiddenException):
            forum_service.list_posts(db, channel_id=staff_room.id, requester_id=member.id)

    def test_user_liked_is_per_requester(self, db, lobby, member, make_user):
        other = make_user(Role.JCG_MEMBER)
        post = _post(db, lobby, member)
        forum_service.toggle_like(db, post_id=post.id, user_id=other.id)

        mine = forum_service.list_posts(db, channel_id=lobby.id, requester_id=member.id)
        theirs = forum_service.list_posts(db, channel_id=lobby.id, requester_id=other.id)

        assert mine.posts[0].user_liked is False
        assert theirs.posts[0].user_liked is True
        assert mine.posts[0].like_count == theirs.posts[0].like_count == 1

    def test_user_posts_only_from_visible_channels(
        self, db, lobby, make_category, make_channel, make_user
    ):
        instructor = make_user(Role.ECG_INSTRUCTOR)
        staff_room = make_channel(make_category("Staff"), ChannelType.ADMIN_ONLY_INSTRUCTORS_VIEW)
        _post(db, lobby, instructor, content="public")
        _post(db, staff_room, instructor, content="staff only")
        reader = make_user(Role.ECG_MEMBER)

        seen_by_member = forum_service.list_user_posts(
            db, user_id=instructor.id, requester_id=reader.id
        )
        seen_by_self = forum_service.list_user_posts(
            db, user_id=instructor.id, requester_id=instructor.id
        )

        assert [p.content for p in seen_by_member.posts] == ["public"]
        assert seen_by_member.total == 1
        assert [p.content for p in seen_by_self.posts] == ["staff only", "public"]


class TestLikes:
    def test_toggle_twice_restores_state(self, db, lobby, member):
        post = _post(db, lobby, member)

        liked = forum_service.toggle_like(db, post_id=post.id, user_id=member.id)
        assert (liked.liked, liked.like_count) == (True, 1)

        unliked = forum_service.toggle_like(db, post_id=post.id, user_id=member.id)
        assert (unliked.liked, unliked.like_count) == (False, 0)
        assert crud_like.get_like(db, post_id=post.id, user_id=member.id) is None

    def test_at_most_one_like_per_user(self, db, lobby, member):
        post = _post(db, lobby, member)

        assert crud_like.add_like(db, post_id=post.id, user_id=member.id) is True
        assert crud_like.add_like(db, post_id=post.id, user_id=member.id) is False
        db.commit()

        rows = db.scalar(
            select(func.count(Like.id)).where(Like.post_id == post.id, Like.user_id == member.id)
        )
        assert rows == 1

    def test_like_missing_post(self, db, member):
        with pytest.raises(NotFoundException):
            forum_service.toggle_like(db, post_id=1234, user_id=member.id)

    def test_count_matches_likers(self, db, lobby, member, make_user):
        post = _post(db, lobby, member)
        likers = [make_user(Role.JCG_MEMBER) for _ in range(4)]
        for user in likers:
            forum_service.toggle_like(db, post_id=post.id, user_id=user.id)
        for user in likers[:1]:
            forum_service.toggle_like(db, post_id=post.id, user_id=user.id)

        assert forum_service.get_post(db, post_id=post.id, requester_id=member.id).like_count == 3

    def test_like_on_vanished_post_is_not_reported_as_liked(self, db, member):
        with pytest.raises(IntegrityError):
            crud_like.add_like(db, post_id=4321, user_id=member.id)
        db.rollback()
        assert db.scalar(select(func.count(Like.id))) == 0

    def test_toggle_like_race_with_post_delete(self, db, member, monkeypatch):
        # The post disappears after the existence check but before the insert
        monkeypatch.setattr(ForumService, "_get_post", lambda self, db, post_id: None)

        with pytest.raises(NotFoundException):
            forum_service.toggle_like(db, post_id=4321, user_id=member.id)
        assert db.scalar(select(func.count(Like.id))) == 0


class TestComments:
    def test_oldest_first_and_counted(self, db, lobby, member, make_user):
        other = make_user(Role.CLASS1_MEMBER)
        post = _post(db, lobby, member)
        forum_service.create_comment(db, post_id=post.id, author_id=member.id, content="first")
        forum_service.create_comment(db, post_id=post.id, author_id=other.id, content="second")

        comments = forum_service.list_comments(db, post_id=post.id, requester_id=member.id)

        assert [c.content for c in comments.comments] == ["first", "second"]
        assert comments.comments[1].author_name == other.username
        assert comments.total == 2
        assert forum_service.get_post(db, post_id=post.id, requester_id=member.id).comment_count == 2

    def test_count_after_deletes(self, db, lobby, member):
        post = _post(db, lobby, member)
        created = [
            forum_service.create_comment(db, post_id=post.id, author_id=member.id, content=f"c{n}")
            for n in range(5)
        ]
        for comment in created[:2]:
            forum_service.delete_comment(
                db, comment_id=comment.id, requester_id=member.id, requester_role=member.role
            )

        assert forum_service.get_post(db, post_id=post.id, requester_id=member.id).comment_count == 3
        assert forum_service.list_comments(db, post_id=post.id).total == 3

    def test_trial_cannot_comment(self, db, lobby, member, make_user):
        trial = make_user(Role.TRIAL)
        post = _post(db, lobby, member)
        with pytest.raises(ForbiddenException):
            forum_service.create_comment(db, post_id=post.id, author_id=trial.id, content="hi")

    def test_view_only_comment_gate(self, db, make_category, make_channel, make_user, monkeypatch):
        channel = make_channel(make_category("News"), ChannelType.INSTRUCTORS_POST_ALL_VIEW)
        instructor = make_user(Role.JCG_INSTRUCTOR)
        student = make_user(Role.JCG_MEMBER)
        post = _post(db, channel, instructor)

        with pytest.raises(ForbiddenException):
            forum_service.create_comment(db, post_id=post.id, author_id=student.id, content="q")

        monkeypatch.setattr(settings, "COMMENTS_REQUIRE_POST_PERMISSION", False)
        comment = forum_service.create_comment(
            db, post_id=post.id, author_id=student.id, content="question"
        )
        assert comment.author_role == Role.JCG_MEMBER.value

    def test_empty_comment(self, db, lobby, member):
        post = _post(db, lobby, member)
        with pytest.raises(ValidationException):
            forum_service.create_comment(db, post_id=post.id, author_id=member.id, content="")

    def test_delete_comment_authorization(self, db, lobby, member, make_user, admin):
        stranger = make_user(Role.ECG_MEMBER)
        post = _post(db, lobby, member)
        first = forum_service.create_comment(db, post_id=post.id, author_id=member.id, content="a")

        with pytest.raises(ForbiddenException):
            forum_service.delete_comment(
                db, comment_id=first.id, requester_id=stranger.id, requester_role=stranger.role
            )
        forum_service.delete_comment(
            db, comment_id=first.id, requester_id=admin.id, requester_role=admin.role
        )
        with pytest.raises(NotFoundException):
            forum_service.delete_comment(
                db, comment_id=first.id, requester_id=admin.id, requester_role=admin.role
            )


class TestDeletePost:
    def test_only_author_or_admin(self, db, lobby, make_user, admin):
        author = make_user(Role.ECG_MEMBER)
        stranger = make_user(Role.ECG_MEMBER)
        instructor = make_user(Role.ECG_INSTRUCTOR)
        first = _post(db, lobby, author)
        second = _post(db, lobby, author)

        for intruder in (stranger, instructor):
            with pytest.raises(ForbiddenException):
                forum_service.delete_post(
                    db, post_id=first.id, requester_id=intruder.id, requester_role=intruder.role
                )

        forum_service.delete_post(
            db, post_id=first.id, requester_id=author.id, requester_role=author.role
        )
        forum_service.delete_post(
            db, post_id=second.id, requester_id=admin.id, requester_role=ADMIN
        )
        assert crud_post.count_by_channel(db, channel_id=lobby.id) == 0

    def test_delete_removes_likes_and_comments(self, db, lobby, member, make_user):
        other = make_user(Role.JCG_MEMBER)
        post = _post(db, lobby, member)
        forum_service.toggle_like(db, post_id=post.id, user_id=other.id)
        forum_service.create_comment(db, post_id=post.id, author_id=other.id, content="nice")

        forum_service.delete_post(
            db, post_id=post.id, requester_id=member.id, requester_role=member.role
        )

        assert db.scalar(select(func.count(Post.id))) == 0
        assert db.scalar(select(func.count(Like.id))) == 0
        assert db.scalar(select(func.count(Comment.id))) == 0

    def test_missing_post(self, db, member):
        with pytest.raises(NotFoundException):
            forum_service.delete_post(
                db, post_id=99, requester_id=member.id, requester_role=member.role
            )


class TestSearch:
    @pytest.fixture
    def staff_room(self, make_category, make_channel):
        return make_channel(
            make_category("Staff"), ChannelType.ADMIN_ONLY_INSTRUCTORS_VIEW, name="grammar-staff"
        )

    def test_blank_query(self, db, member):
        with pytest.raises(ValidationException):
            forum_service.search(db, query="   ", requester_id=member.id)
        with pytest.raises(ValidationException):
            forum_service.search_posts(db, query=None, requester_id=member.id)

    def test_unknown_type(self, db, member):
        with pytest.raises(InvalidInputException):
            forum_service.search(db, query="grammar", requester_id=member.id, result_type="events")

    def test_hidden_channel_posts_never_match(self, db, lobby, staff_room, member, make_user):
        instructor = make_user(Role.ECG_INSTRUCTOR)
        _post(db, lobby, member, content="Grammar question about particles")
        _post(db, staff_room, instructor, content="grammar lesson plan")

        as_member = forum_service.search(db, query="GRAMMAR", requester_id=member.id)
        as_instructor = forum_service.search(db, query="grammar", requester_id=instructor.id)

        assert [p.content for p in as_member.posts] == ["Grammar question about particles"]
        assert [c.name for c in as_member.channels] == []
        assert len(as_instructor.posts) == 2
        assert [c.name for c in as_instructor.channels] == ["grammar-staff"]
        assert as_instructor.channels[0].category_name == "Staff"

    def test_posts_carry_counts(self, db, lobby, member, make_user):
        reader = make_user(Role.JCG_MEMBER)
        post = _post(db, lobby, member, content="kanji practice")
        forum_service.toggle_like(db, post_id=post.id, user_id=reader.id)

        found = forum_service.search(db, query="kanji", requester_id=reader.id, result_type="posts")

        assert (found.posts[0].like_count, found.posts[0].user_liked) == (1, True)
        assert found.posts[0].channel_name == "lobby"
        assert found.users == [] and found.channels == []

    def test_users_and_channels(self, db, lobby, make_user):
        searcher = make_user(Role.ECG_MEMBER, username="searcher")
        make_user(Role.ECG_MEMBER, username="lobbyist")
        make_user(Role.JCG_MEMBER, username="alobby")

        found = forum_service.search(db, query="lobby", requester_id=searcher.id)

        assert [u.username for u in found.users] == ["alobby", "lobbyist"]
        assert not hasattr(found.users[0], "email")
        assert [c.name for c in found.channels] == ["lobby"]

    def test_results_are_capped(self, db, lobby, member):
        for n in range(SEARCH_LIMIT + 5):
            _post(db, lobby, member, content=f"vocab {n}")

        found = forum_service.search(db, query="vocab", requester_id=member.id)

        assert len(found.posts) == SEARCH_LIMIT
        assert found.posts[0].content == f"vocab {SEARCH_LIMIT + 4}"

    def test_advanced_filters(self, db, lobby, make_category, make_channel, member, make_user):
        other_channel = make_channel(make_category("Other"), ChannelType.ALL_POST_ALL_VIEW, name="other")
        other_author = make_user(Role.JCG_MEMBER)
        _post(db, lobby, member, content="essay draft")
        _post(db, other_channel, member, content="essay final")
        _post(db, lobby, other_author, content="essay review")

        in_lobby = forum_service.search_posts(
            db, query="essay", requester_id=member.id, channel_id=lobby.id
        )
        by_member = forum_service.search_posts(
            db, query="essay", requester_id=member.id, user_id=member.id
        )
        long_ago = forum_service.search_posts(
            db,
            query="essay",
            requester_id=member.id,
            date_to=datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(days=365),
        )

        assert {p.content for p in in_lobby.posts} == {"essay draft", "essay review"}
        assert {p.content for p in by_member.posts} == {"essay draft", "essay final"}
        assert long_ago.posts == []

    def test_advanced_search_in_hidden_channel(self, db, staff_room, member):
        with pytest.raises(ForbiddenException):
            forum_service.search_posts(
                db, query="plan", requester_id=member.id, channel_id=staff_room.id
            )
