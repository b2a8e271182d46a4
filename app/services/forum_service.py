"""Post/comment/like aggregation for channels.

Like and comment counts are derived from the child tables on every read, so
they always agree with the stored relationships.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.core import channel_policy
from app.core.exceptions import (
    ForbiddenException,
    InvalidInputException,
    NotFoundException,
    ValidationException,
)
from app.core.roles import Role, is_admin, parse_role
from app.crud import crud_channel, crud_comment, crud_like, crud_post, crud_user
from app.models.channel import Channel
from app.models.post import Post
from app.schemas.category import ChannelResponse
from app.schemas.post import (
    CommentListResponse,
    CommentResponse,
    LikeResponse,
    PostListResponse,
    PostResponse,
)
from app.schemas.search import ChannelSearchResult, PostSearchResponse, SearchResponse
from app.schemas.user import UserSummaryResponse

logger = logging.getLogger(__name__)

SEARCH_TYPES = ("posts", "users", "channels")
SEARCH_LIMIT = 20
ADVANCED_SEARCH_LIMIT = 50


class ForumService:
    """
    Service for posts, comments and likes inside channels.

    Channel permissions come from :mod:`app.core.channel_policy`; deletions
    follow the author-or-administrator rule.
    """

    # ----- Helpers -----
    def _get_role(self, db: Session, user_id: int) -> str:
        """Look up the stored role of a user; unknown users are denied."""
        user = crud_user.get(db, user_id)
        if user is None or not user.is_active:
            raise ForbiddenException("Unknown or inactive user")
        return user.role

    def _get_channel(self, db: Session, channel_id: int) -> Channel:
        channel = crud_channel.get(db, channel_id)
        if channel is None:
            raise NotFoundException("Channel not found")
        return channel

    def _get_post(self, db: Session, post_id: int) -> Post:
        post = crud_post.get(db, post_id)
        if post is None:
            raise NotFoundException("Post not found")
        return post

    def _require_view(self, channel: Channel, role: str) -> None:
        if not channel_policy.can_view(channel.channel_type, role):
            logger.warning(f"[FORUM] View denied: channel_id={channel.id}, role={role!r}")
            raise ForbiddenException("You do not have permission to view this channel")

    def _require_post(self, channel: Channel, role: str) -> None:
        # Trial participants are refused before the table is even consulted
        if parse_role(role) is Role.TRIAL:
            logger.warning(f"[FORUM] Trial participant post denied: channel_id={channel.id}")
            raise ForbiddenException("Trial participants cannot post")
        if not channel_policy.can_post(channel.channel_type, role):
            logger.warning(f"[FORUM] Post denied: channel_id={channel.id}, role={role!r}")
            raise ForbiddenException("You do not have permission to post in this channel")

    def _require_owner_or_admin(self, owner_id: int, requester_id: int, requester_role: Optional[str], what: str) -> None:
        if owner_id != requester_id and not is_admin(requester_role):
            raise ForbiddenException(f"You do not have permission to delete this {what}")

    def _page_bounds(self, page: int, page_size: Optional[int]) -> tuple:
        if page < 1:
            raise InvalidInputException("page must be 1 or greater")
        size = page_size or settings.DEFAULT_PAGE_SIZE
        size = max(1, min(size, settings.MAX_PAGE_SIZE))
        return (page - 1) * size, size

    def _visible_channel_rows(self, db: Session, role: str) -> List[Tuple[Channel, int]]:
        return [
            (channel, post_count)
            for channel, post_count in crud_channel.get_by_category_with_post_count(db)
            if channel_policy.can_view(channel.channel_type, role)
        ]

    @staticmethod
    def _clean_content(content: Optional[str], what: str) -> str:
        cleaned = (content or "").strip()
        if not cleaned:
            raise ValidationException(f"Please enter {what} content")
        return cleaned

    @staticmethod
    def _clean_query(query: Optional[str]) -> str:
        term = (query or "").strip()
        if not term:
            raise ValidationException("A search query is required")
        return term

    # ----- Posts -----
    def list_posts(
        self,
        db: Session,
        *,
        channel_id: int,
        requester_id: int,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> PostListResponse:
        """
        List posts of a channel, newest first.

        Args:
            db: Database session
            channel_id: Channel to read
            requester_id: User reading; determines ``user_liked`` and the view check
            page: 1-based page number
            page_size: Posts per page (defaults to DEFAULT_PAGE_SIZE, capped at MAX_PAGE_SIZE)

        Returns:
            PostListResponse: Posts with like_count, comment_count and user_liked

        Raises:
            NotFoundException: channel does not exist
            ForbiddenException: requester cannot view the channel
        """
        channel = self._get_channel(db, channel_id)
        self._require_view(channel, self._get_role(db, requester_id))

        skip, size = self._page_bounds(page, page_size)
        rows = crud_post.get_channel_feed(
            db, channel_id=channel_id, requester_id=requester_id, skip=skip, limit=size
        )
        total = crud_post.count_by_channel(db, channel_id=channel_id)
        return PostListResponse(
            posts=[PostResponse(**row) for row in rows],
            page=page,
            page_size=size,
            total=total,
            has_more=(skip + len(rows) < total),
        )

    def get_post(self, db: Session, *, post_id: int, requester_id: int) -> PostResponse:
        post = self._get_post(db, post_id)
        self._require_view(post.channel, self._get_role(db, requester_id))
        row = crud_post.get_with_counts(db, post_id=post_id, requester_id=requester_id)
        return PostResponse(**row)

    def list_user_posts(
        self,
        db: Session,
        *,
        user_id: int,
        requester_id: int,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> PostListResponse:
        """List one author's posts across the channels the requester can view."""
        if crud_user.get(db, user_id) is None:
            raise NotFoundException("User not found")
        role = self._get_role(db, requester_id)
        visible_channel_ids = [channel.id for channel, _ in self._visible_channel_rows(db, role)]

        skip, size = self._page_bounds(page, page_size)
        rows = crud_post.get_user_feed(
            db,
            user_id=user_id,
            requester_id=requester_id,
            channel_ids=visible_channel_ids,
            skip=skip,
            limit=size,
        )
        total = crud_post.count_by_user(db, user_id=user_id, channel_ids=visible_channel_ids)
        return PostListResponse(
            posts=[PostResponse(**row) for row in rows],
            page=page,
            page_size=size,
            total=total,
            has_more=(skip + len(rows) < total),
        )

    def create_post(
        self,
        db: Session,
        *,
        channel_id: int,
        author_id: int,
        content: str,
        image_url: Optional[str] = None,
    ) -> PostResponse:
        """
        Create a post in a channel.

        Raises:
            ForbiddenException: author is a trial participant or fails can_post
            NotFoundException: channel does not exist
            ValidationException: content is empty after trimming
        """
        role = self._get_role(db, author_id)
        channel = self._get_channel(db, channel_id)
        self._require_post(channel, role)
        cleaned = self._clean_content(content, "post")

        post = crud_post.create_post(
            db,
            user_id=author_id,
            channel_id=channel_id,
            content=cleaned,
            image_url=image_url or None,
        )
        logger.info(f"[FORUM] Post created: id={post.id}, channel_id={channel_id}, user_id={author_id}")
        row = crud_post.get_with_counts(db, post_id=post.id, requester_id=author_id)
        return PostResponse(**row)

    def delete_post(
        self,
        db: Session,
        *,
        post_id: int,
        requester_id: int,
        requester_role: Optional[str],
    ) -> None:
        """Delete a post with its comments and likes (author or administrator only)."""
        post = self._get_post(db, post_id)
        self._require_owner_or_admin(post.user_id, requester_id, requester_role, "post")
        crud_post.delete(db, id=post_id)
        logger.info(f"[FORUM] Post deleted: id={post_id}, by user_id={requester_id}")

    # ----- Likes -----
    def toggle_like(self, db: Session, *, post_id: int, user_id: int) -> LikeResponse:
        """
        Like the post if the user has not liked it yet, otherwise remove the like.

        Two toggles in a row restore the original state and at most one like row
        ever exists per (user, post).
        """
        self._get_post(db, post_id)
        try:
            liked = crud_like.toggle_like(db, post_id=post_id, user_id=user_id)
        except IntegrityError:
            # The post was deleted between the lookup and the insert
            raise NotFoundException("Post not found")
        return LikeResponse(
            post_id=post_id,
            liked=liked,
            like_count=crud_like.count_by_post(db, post_id=post_id),
            message="Post liked" if liked else "Like removed",
        )

    # ----- Comments -----
    def list_comments(
        self,
        db: Session,
        *,
        post_id: int,
        requester_id: Optional[int] = None,
    ) -> CommentListResponse:
        """List comments of a post, oldest first."""
        post = self._get_post(db, post_id)
        if requester_id is not None:
            self._require_view(post.channel, self._get_role(db, requester_id))
        comments = crud_comment.get_by_post(db, post_id=post_id)
        return CommentListResponse(
            comments=[CommentResponse(**row) for row in comments],
            total=len(comments),
        )

    def create_comment(
        self,
        db: Session,
        *,
        post_id: int,
        author_id: int,
        content: str,
    ) -> CommentResponse:
        """
        Comment on a post.

        With COMMENTS_REQUIRE_POST_PERMISSION enabled the author must pass the
        same channel post check as for posts; otherwise viewing is enough.
        """
        role = self._get_role(db, author_id)
        post = self._get_post(db, post_id)
        if settings.COMMENTS_REQUIRE_POST_PERMISSION:
            self._require_post(post.channel, role)
        else:
            self._require_view(post.channel, role)
        cleaned = self._clean_content(content, "comment")

        comment = crud_comment.create_comment(
            db, post_id=post_id, user_id=author_id, content=cleaned
        )
        logger.info(f"[FORUM] Comment created: id={comment.id}, post_id={post_id}, user_id={author_id}")
        author = crud_user.get(db, author_id)
        return CommentResponse(
            id=comment.id,
            post_id=comment.post_id,
            user_id=comment.user_id,
            content=comment.content,
            created_at=comment.created_at,
            author_name=author.username,
            author_role=author.role,
        )

    def delete_comment(
        self,
        db: Session,
        *,
        comment_id: int,
        requester_id: int,
        requester_role: Optional[str],
    ) -> None:
        """Delete a comment (author or administrator only)."""
        comment = crud_comment.get(db, comment_id)
        if comment is None:
            raise NotFoundException("Comment not found")
        self._require_owner_or_admin(comment.user_id, requester_id, requester_role, "comment")
        crud_comment.delete(db, id=comment_id)
        logger.info(f"[FORUM] Comment deleted: id={comment_id}, by user_id={requester_id}")


    # ----- Search -----
    def search(
        self,
        db: Session,
        *,
        query: Optional[str],
        requester_id: int,
        result_type: Optional[str] = None,
    ) -> SearchResponse:
        """
        Search post content, usernames and channel names/descriptions.

        Posts and channels are limited to what the requester can view; each
        kind returns at most SEARCH_LIMIT matches.

        Args:
            db: Database session
            query: Text to look for (substring, case-insensitive)
            requester_id: User searching
            result_type: One of SEARCH_TYPES to search a single kind, or None for all

        Raises:
            ValidationException: query is blank
            InvalidInputException: result_type is not a known kind
        """
        term = self._clean_query(query)
        if result_type is not None and result_type not in SEARCH_TYPES:
            raise InvalidInputException(f"type must be one of: {', '.join(SEARCH_TYPES)}")

        role = self._get_role(db, requester_id)
        visible = self._visible_channel_rows(db, role)
        result = SearchResponse()

        if result_type in (None, "posts"):
            rows = crud_post.search_feed(
                db,
                term=term,
                requester_id=requester_id,
                channel_ids=[channel.id for channel, _ in visible],
                limit=SEARCH_LIMIT,
            )
            result.posts = [PostResponse(**row) for row in rows]

        if result_type in (None, "users"):
            users = crud_user.search_by_username(db, term=term, limit=SEARCH_LIMIT)
            result.users = [UserSummaryResponse.model_validate(user) for user in users]

        if result_type in (None, "channels"):
            needle = term.casefold()
            matches = sorted(
                (
                    (channel, post_count)
                    for channel, post_count in visible
                    if needle in channel.name.casefold()
                    or needle in (channel.description or "").casefold()
                ),
                key=lambda row: (row[0].name.casefold(), row[0].id),
            )[:SEARCH_LIMIT]
            result.channels = [
                ChannelSearchResult(
                    **ChannelResponse.from_row(channel, post_count).model_dump(),
                    category_name=channel.category.name,
                )
                for channel, post_count in matches
            ]

        logger.info(
            f"[FORUM] Search by user_id={requester_id}: posts={len(result.posts)}, "
            f"users={len(result.users)}, channels={len(result.channels)}"
        )
        return result

    def search_posts(
        self,
        db: Session,
        *,
        query: Optional[str],
        requester_id: int,
        channel_id: Optional[int] = None,
        user_id: Optional[int] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> PostSearchResponse:
        """Post search narrowed by channel, author and creation date range."""
        term = self._clean_query(query)
        role = self._get_role(db, requester_id)
        if channel_id is not None:
            self._require_view(self._get_channel(db, channel_id), role)
            channel_ids = [channel_id]
        else:
            channel_ids = [channel.id for channel, _ in self._visible_channel_rows(db, role)]

        rows = crud_post.search_feed(
            db,
            term=term,
            requester_id=requester_id,
            channel_ids=channel_ids,
            user_id=user_id,
            date_from=date_from,
            date_to=date_to,
            limit=ADVANCED_SEARCH_LIMIT,
        )
        return PostSearchResponse(posts=[PostResponse(**row) for row in rows])

# Singleton instance
forum_service = ForumService()
