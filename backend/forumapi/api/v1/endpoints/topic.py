"""
Topic API Endpoints.

Topic statistics, permissions and posts.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from forumapi.api.deps import get_db, get_visibility_context
from forumapi.modules.forum import VisibilityContext
from forumapi.modules.topic import TopicService

router = APIRouter()


@router.get("/{topic_id}")
async def get_topic_info(
    topic_id: str,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get a topic's forum and reply count."""
    topics = TopicService(db)
    return await topics.get_info(topic_id)


@router.get("/{topic_id}/permissions")
async def get_topic_permissions(
    topic_id: str,
    ctx: VisibilityContext = Depends(get_visibility_context),
    db: AsyncSession = Depends(get_db),
) -> dict[str, bool]:
    """Get the caller's capabilities in the topic's forum."""
    topics = TopicService(db)
    return await topics.get_permissions(topic_id, ctx)


@router.get("/{topic_id}/posts")
@router.get("/{topic_id}/posts/{page}")
async def list_posts(
    topic_id: str,
    page: str | None = None,
    sort: str = Query("ASC", description="ASC or DESC by post time"),
    limit: str | None = Query(None, description="Max posts to return"),
    older_than: str | None = Query(
        None, alias="olderThan", description="Only posts made after this unix time"
    ),
    ctx: VisibilityContext = Depends(get_visibility_context),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """List visible posts in a topic."""
    topics = TopicService(db)
    return await topics.get_posts(
        topic_id,
        ctx,
        sort=sort,
        limit=limit,
        older_than=older_than,
        page=page,
    )
