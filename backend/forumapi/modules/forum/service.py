"""
Forum Service - Forum tree, topic and tracking queries.
"""

from typing import Any, Iterable

from loguru import logger
from sqlalchemy import func, literal, select
from sqlalchemy.ext.asyncio import AsyncSession

from forumapi.core.config import settings
from forumapi.core.exceptions import NotFound
from forumapi.models.forum import (
    Forum,
    ForumTrack,
    ForumWatch,
    Topic,
    TopicPosted,
    TopicTrack,
)
from forumapi.modules.auth.session import Principal
from forumapi.modules.forum.nodes import ForumNode, TopicSummary
from forumapi.modules.forum.tracking import annotate_forums
from forumapi.modules.forum.visibility import VisibilityContext, filter_visible

FORUM_NOT_FOUND = "The forum you selected does not exist."


class ForumService:
    """
    Service for reading the forum tree, topic lists and per-user tracking.

    Usage:
        forum = ForumService(db_session)
        forums = await forum.list_forums(ctx, parent_id=0)
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize forum service with database session."""
        self.db = db

    # ==================== Forums ====================

    async def get_forum(self, forum_id: int) -> Forum | None:
        """Get forum row by ID."""
        query = select(Forum).where(Forum.forum_id == forum_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_subtree(self, parent: Forum | None = None) -> list[ForumNode]:
        """
        Get every forum below a parent in nested-set order.

        Args:
            parent: Subtree root, None for the whole board

        Returns:
            Forum nodes ordered by left_id
        """
        query = select(Forum).order_by(Forum.left_id)
        if parent is not None:
            query = query.where(
                Forum.left_id > parent.left_id,
                Forum.left_id < parent.right_id,
            )
        result = await self.db.execute(query)
        return [ForumNode.from_row(row) for row in result.scalars().all()]

    async def get_children(self, forum_id: int) -> list[ForumNode]:
        """Get the direct children of a forum in nested-set order."""
        query = (
            select(Forum)
            .where(Forum.parent_id == forum_id)
            .order_by(Forum.left_id)
        )
        result = await self.db.execute(query)
        return [ForumNode.from_row(row) for row in result.scalars().all()]

    async def list_forums(
        self,
        ctx: VisibilityContext,
        parent_id: int = 0,
        track_lastread: bool | None = None,
    ) -> list[ForumNode]:
        """
        List the forums a caller may see.

        Args:
            ctx: Visibility context of the request
            parent_id: Subtree root, 0 for the whole board
            track_lastread: Override of the board's read tracking setting

        Returns:
            Visible forums with read state

        Raises:
            NotFound: parent_id does not exist
        """
        parent = None
        if parent_id:
            parent = await self.get_forum(parent_id)
            if parent is None:
                raise NotFound(FORUM_NOT_FOUND)

        rows = await self.get_subtree(parent)
        visible = filter_visible(rows, ctx, parent_id)
        logger.debug(
            f"Board listing under {parent_id}: {len(visible)} of {len(rows)} forums visible"
        )

        marks, watches = await self.get_forum_state(
            ctx.principal, [node.forum_id for node in visible], track_lastread
        )
        return annotate_forums(visible, marks, watches)

    async def get_forum_info(self, forum_id: int) -> dict[str, Any]:
        """Get topic, post and reply totals for a forum."""
        forum = await self.get_forum(forum_id)
        if forum is None:
            raise NotFound(FORUM_NOT_FOUND)

        result = await self.db.execute(
            select(func.coalesce(func.sum(Topic.topic_replies), 0)).where(
                Topic.forum_id == forum_id,
                Topic.topic_approved == True,
            )
        )

        return {
            "total_topics": forum.forum_topics,
            "total_posts": forum.forum_posts,
            "total_replies": int(result.scalar_one()),
        }

    # ==================== Tracking ====================

    async def get_forum_state(
        self,
        principal: Principal,
        forum_ids: Iterable[int],
        track_lastread: bool | None = None,
    ) -> tuple[dict[int, int] | None, dict[int, bool] | None]:
        """
        Get the caller's read marks and watches for forums.

        Returns:
            (marks, watches); either is None when it does not apply to the caller
        """
        if principal.is_anonymous:
            return None, None

        if track_lastread is None:
            track_lastread = settings.load_db_lastread

        forum_ids = list(forum_ids)
        marks = None
        if track_lastread:
            marks = await self._fetch_map(
                select(ForumTrack.forum_id, ForumTrack.mark_time).where(
                    ForumTrack.user_id == principal.user_id,
                    ForumTrack.forum_id.in_(forum_ids),
                ),
                forum_ids,
            )

        watches = await self._fetch_map(
            select(ForumWatch.forum_id, literal(True)).where(
                ForumWatch.user_id == principal.user_id,
                ForumWatch.forum_id.in_(forum_ids),
            ),
            forum_ids,
        )
        return marks, watches

    async def get_topic_state(
        self,
        principal: Principal,
        topic_ids: Iterable[int],
        track_lastread: bool | None = None,
        track_posted: bool | None = None,
    ) -> tuple[dict[int, int] | None, dict[int, bool] | None]:
        """
        Get the caller's read marks and "posted in" flags for topics.

        Returns:
            (marks, posted); both are None for anonymous callers. With posted
            tracking off, posted is empty so every topic reads as not posted in
        """
        if principal.is_anonymous:
            return None, None

        if track_lastread is None:
            track_lastread = settings.load_db_lastread
        if track_posted is None:
            track_posted = settings.load_db_track

        topic_ids = list(topic_ids)
        marks = None
        posted: dict[int, bool] = {}

        if track_lastread:
            marks = await self._fetch_map(
                select(TopicTrack.topic_id, TopicTrack.mark_time).where(
                    TopicTrack.user_id == principal.user_id,
                    TopicTrack.topic_id.in_(topic_ids),
                ),
                topic_ids,
            )

        if track_posted:
            posted = await self._fetch_map(
                select(TopicPosted.topic_id, TopicPosted.topic_posted).where(
                    TopicPosted.user_id == principal.user_id,
                    TopicPosted.topic_id.in_(topic_ids),
                ),
                topic_ids,
            )

        return marks, posted

    async def _fetch_map(self, query: Any, ids: list[int]) -> dict[int, Any]:
        """Run a two-column query into a dict, skipping it for empty id lists."""
        if not ids:
            return {}
        result = await self.db.execute(query)
        return {key: value for key, value in result.all()}

    # ==================== Topics ====================

    async def count_topics(self, forum_id: int, include_unapproved: bool = False) -> int:
        """Count topics in a forum."""
        query = select(func.count()).select_from(Topic).where(Topic.forum_id == forum_id)
        if not include_unapproved:
            query = query.where(Topic.topic_approved == True)
        result = await self.db.execute(query)
        return result.scalar_one()

    async def get_topics(
        self,
        forum_id: int,
        include_unapproved: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[TopicSummary]:
        """
        Get topics in a forum, most recently active first.

        Args:
            forum_id: Forum ID
            include_unapproved: Include topics waiting for moderation
            limit: Max results
            offset: Pagination offset

        Returns:
            List of topic summaries
        """
        query = (
            select(Topic)
            .where(Topic.forum_id == forum_id)
            .order_by(Topic.topic_last_post_time.desc(), Topic.topic_id.desc())
            .offset(offset)
        )

        if not include_unapproved:
            query = query.where(Topic.topic_approved == True)

        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return [TopicSummary.from_row(row) for row in result.scalars().all()]
