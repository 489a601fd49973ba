"""
Forum API Endpoints.

Forum statistics, permissions and topic listings.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from forumapi.api.deps import get_db, get_visibility_context
from forumapi.core.exceptions import NotFound
from forumapi.modules.forum import ForumService, TopicPageAssembler, VisibilityContext
from forumapi.modules.forum.pagination import positive_id
from forumapi.modules.forum.service import FORUM_NOT_FOUND
from forumapi.modules.forum.visibility import permission_flags

router = APIRouter()


def _forum_id(value: str) -> int:
    forum_id = positive_id(value)
    if forum_id is None:
        raise NotFound(FORUM_NOT_FOUND)
    return forum_id


@router.get("/{forum_id}")
async def get_forum_info(
    forum_id: str,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get topic, post and reply totals for a forum."""
    forum = ForumService(db)
    return await forum.get_forum_info(_forum_id(forum_id))


@router.get("/{forum_id}/permissions")
async def get_forum_permissions(
    forum_id: str,
    ctx: VisibilityContext = Depends(get_visibility_context),
    db: AsyncSession = Depends(get_db),
) -> dict[str, bool]:
    """Get the caller's capabilities in a forum."""
    forum = ForumService(db)
    forum_id = _forum_id(forum_id)
    if await forum.get_forum(forum_id) is None:
        raise NotFound(FORUM_NOT_FOUND)
    return permission_flags(ctx, forum_id)


async def _topic_page(
    forum_id: str,
    page: str | None,
    per_page: str | None,
    response: Response,
    ctx: VisibilityContext,
    db: AsyncSession,
) -> dict[str, Any]:
    assembler = TopicPageAssembler(ForumService(db))
    result = await assembler.assemble_page(forum_id, page, per_page, ctx)

    pagination = result.pagination
    response.headers["X-Total-Count"] = str(pagination.total_items)
    response.headers["X-Total-Pages"] = str(pagination.total_pages)
    response.headers["X-Page"] = str(pagination.page)
    response.headers["X-Per-Page"] = str(pagination.effective_page_size)

    return result.as_dict()


@router.get("/{forum_id}/topics")
async def list_topics(
    forum_id: str,
    response: Response,
    page: str | None = Query(None, description="Page to show, defaults to 1"),
    per_page: str | None = Query(None, description="Topics per page"),
    ctx: VisibilityContext = Depends(get_visibility_context),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """List visible subforums and one page of topics."""
    return await _topic_page(forum_id, page, per_page, response, ctx, db)


@router.get("/{forum_id}/topics/{page}")
async def list_topics_page(
    forum_id: str,
    page: str,
    response: Response,
    per_page: str | None = Query(None, description="Topics per page"),
    ctx: VisibilityContext = Depends(get_visibility_context),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """List visible subforums and the given page of topics."""
    return await _topic_page(forum_id, page, per_page, response, ctx, db)
