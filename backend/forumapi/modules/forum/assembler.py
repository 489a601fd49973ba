"""
Forum page assembly: visible subforums plus one page of topics.
"""

from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from forumapi.core.config import settings
from forumapi.core.exceptions import NotFound, Unauthorized
from forumapi.models.forum import ForumType
from forumapi.modules.auth.acl import Capability
from forumapi.modules.forum.nodes import ForumNode, TopicSummary
from forumapi.modules.forum.pagination import PaginationSpec, plan, positive_id
from forumapi.modules.forum.service import FORUM_NOT_FOUND, ForumService
from forumapi.modules.forum.tracking import annotate_forums, annotate_topics
from forumapi.modules.forum.visibility import VisibilityContext, filter_visible

NOT_AUTHORISED = "You are not authorised to read this forum."
LOGIN_REQUIRED = "The board requires you to be registered and logged in to view this forum."


@dataclass(frozen=True)
class TopicPage:
    """Assembled listing for one forum."""

    pagination: PaginationSpec
    subforums: list[ForumNode] = field(default_factory=list)
    topics: list[TopicSummary] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        """Wire shape; empty sections are left out rather than sent as []."""
        data: dict[str, Any] = {}
        if self.subforums:
            data["subforums"] = [node.as_dict() for node in self.subforums]
        if self.topics:
            data["topics"] = [topic.as_dict() for topic in self.topics]
        return data


class TopicPageAssembler:
    """
    Builds a forum page from the tree, the topic table and tracking data.

    Usage:
        assembler = TopicPageAssembler(ForumService(db_session))
        page = await assembler.assemble_page(forum_id, page, per_page, ctx)
    """

    def __init__(
        self,
        service: ForumService,
        topics_per_page: int | None = None,
        track_lastread: bool | None = None,
        track_posted: bool | None = None,
    ) -> None:
        self.service = service
        self.topics_per_page = topics_per_page or settings.topics_per_page
        self.track_lastread = (
            settings.load_db_lastread if track_lastread is None else track_lastread
        )
        self.track_posted = settings.load_db_track if track_posted is None else track_posted

    async def assemble_page(
        self,
        forum_id: Any,
        caller_page: Any,
        caller_page_size: Any,
        ctx: VisibilityContext,
    ) -> TopicPage:
        """
        Assemble one page of a forum listing.

        Args:
            forum_id: Forum to list; invalid values resolve to no forum
            caller_page: Requested page, 1 when missing or invalid
            caller_page_size: Requested page size, overrides every other setting
            ctx: Visibility context of the request

        Returns:
            Visible subforums and the requested slice of topics

        Raises:
            NotFound: The forum does not exist
            Unauthorized: The caller may not read the forum
        """
        forum_id = positive_id(forum_id)
        if forum_id is None:
            raise NotFound(FORUM_NOT_FOUND)

        row = await self.service.get_forum(forum_id)
        if row is None:
            raise NotFound(FORUM_NOT_FOUND)
        forum = ForumNode.from_row(row)

        self._check_access(forum, ctx)

        children = await self.service.get_children(forum_id)
        subforums = filter_visible(children, ctx, forum_id)

        forum_ids = [node.forum_id for node in subforums]
        marks, watches = await self.service.get_forum_state(
            ctx.principal, forum_ids + [forum_id], self.track_lastread
        )
        subforums = annotate_forums(subforums, marks, watches)

        include_unapproved = ctx.can(Capability.APPROVE, forum_id)
        total = await self.service.count_topics(forum_id, include_unapproved)
        pagination = plan(
            self.topics_per_page,
            forum.topics_per_page,
            caller_page_size,
            total,
            caller_page,
        )

        topics: list[TopicSummary] = []
        if not pagination.is_past_end:
            topics = await self.service.get_topics(
                forum_id,
                include_unapproved=include_unapproved,
                limit=pagination.limit,
                offset=pagination.offset,
            )
        topic_marks, posted = await self.service.get_topic_state(
            ctx.principal,
            [topic.topic_id for topic in topics],
            self.track_lastread,
            self.track_posted,
        )
        forum_mark = marks.get(forum_id) if marks is not None else None
        topics = annotate_topics(topics, topic_marks, posted, forum_mark)

        return TopicPage(pagination=pagination, subforums=subforums, topics=topics)

    def _check_access(self, forum: ForumNode, ctx: VisibilityContext) -> None:
        """Require list or read, and read alone for forums that link elsewhere."""
        allowed = ctx.can_any([ctx.list_capability, ctx.read_capability], forum.forum_id)
        if forum.forum_type == ForumType.LINK and forum.link:
            allowed = allowed and ctx.can(ctx.read_capability, forum.forum_id)

        if allowed:
            return

        logger.info(f"User {ctx.principal.user_id} denied access to forum {forum.forum_id}")
        if ctx.principal.is_anonymous:
            raise Unauthorized(LOGIN_REQUIRED)
        raise Unauthorized(NOT_AUTHORISED)
