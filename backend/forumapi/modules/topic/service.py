"""
Topic Service - Topic details and post listings.
"""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from forumapi.core.exceptions import NotFound, Unauthorized
from forumapi.models.forum import Forum, Post, Topic
from forumapi.models.user import User
from forumapi.modules.forum.pagination import MAX_STORE_INT, positive_id, positive_int
from forumapi.modules.forum.visibility import VisibilityContext, permission_flags

TOPIC_NOT_FOUND = "The topic you selected does not exist."
NOT_AUTHORISED = "You are not authorised to read this topic."

VISIBLE = 1


class TopicService:
    """
    Service for reading topics and their posts.

    Usage:
        topics = TopicService(db_session)
        posts = await topics.get_posts(topic_id, ctx, sort="DESC", limit=10)
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize topic service with database session."""
        self.db = db

    async def get_topic(self, topic_id: Any) -> Topic:
        """
        Get topic by ID.

        Raises:
            NotFound: The ID is empty, invalid or unknown
        """
        topic_id = positive_id(topic_id)
        if topic_id is None:
            raise NotFound(TOPIC_NOT_FOUND)

        result = await self.db.execute(select(Topic).where(Topic.topic_id == topic_id))
        topic = result.scalar_one_or_none()
        if topic is None:
            raise NotFound(TOPIC_NOT_FOUND)
        return topic

    async def get_info(self, topic_id: Any) -> dict[str, Any]:
        """Get a topic's forum and reply count."""
        topic = await self.get_topic(topic_id)
        return {
            "forum_id": topic.forum_id,
            "total_replies": topic.topic_replies,
        }

    async def get_permissions(self, topic_id: Any, ctx: VisibilityContext) -> dict[str, bool]:
        """Get the caller's capabilities in the topic's forum."""
        topic = await self.get_topic(topic_id)
        return permission_flags(ctx, topic.forum_id)

    async def get_posts(
        self,
        topic_id: Any,
        ctx: VisibilityContext,
        sort: str | None = "ASC",
        limit: Any = None,
        older_than: Any = None,
        page: Any = None,
    ) -> dict[str, Any]:
        """
        List visible posts in a topic.

        Args:
            topic_id: Topic ID
            ctx: Visibility context of the request
            sort: ASC or DESC by post time, anything else means ASC
            limit: Max posts; missing or non-positive means all
            older_than: Only posts made after this unix time
            page: Page of ``limit`` posts, 1 when missing

        Returns:
            Topic header with post count and posts
        """
        topic = await self.get_topic(topic_id)
        if not ctx.can(ctx.read_capability, topic.forum_id):
            raise Unauthorized(NOT_AUTHORISED)

        descending = (sort or "").upper() == "DESC"
        limit = positive_int(limit)
        older_than = positive_int(older_than)

        filters = [Post.topic_id == topic.topic_id, Post.post_visibility == VISIBLE]
        if older_than is not None:
            filters.append(Post.post_time > min(older_than, MAX_STORE_INT))

        count_result = await self.db.execute(
            select(func.count()).select_from(Post).where(*filters)
        )
        posts_count = count_result.scalar_one()

        order = Post.post_time.desc() if descending else Post.post_time.asc()
        query = (
            select(Post, User.username)
            .outerjoin(User, User.user_id == Post.poster_id)
            .where(*filters)
            .order_by(order, Post.post_id.desc() if descending else Post.post_id.asc())
        )
        offset = 0
        if limit is not None:
            offset = ((positive_int(page) or 1) - 1) * limit
            query = query.limit(min(limit, MAX_STORE_INT)).offset(offset)

        rows = []
        if offset < posts_count:
            rows = (await self.db.execute(query)).all()

        forum_result = await self.db.execute(
            select(Forum.forum_name).where(Forum.forum_id == topic.forum_id)
        )

        results: dict[str, Any] = {
            "forum_id": topic.forum_id,
            "forum_name": forum_result.scalar_one_or_none(),
            "topic_id": topic.topic_id,
            "topic_title": topic.topic_title,
            "posts_count": posts_count,
        }

        if rows:
            results["posts"] = [
                {
                    "post_id": post.post_id,
                    "author_id": post.poster_id,
                    "author_username": username,
                    "timestamp": post.post_time,
                    "post_text": post.post_text,
                }
                for post, username in rows
            ]

        return results
