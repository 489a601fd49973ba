"""
Board API Endpoints.

Forum tree listings for the whole board or a branch of it.
"""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from forumapi.api.deps import get_db, get_visibility_context
from forumapi.modules.forum import ForumService, VisibilityContext
from forumapi.modules.forum.pagination import positive_id

router = APIRouter()


async def _list_forums(
    parent_id: int, ctx: VisibilityContext, db: AsyncSession
) -> list[dict[str, Any]]:
    forum = ForumService(db)
    forums = await forum.list_forums(ctx, parent_id=parent_id)
    return [node.as_dict() for node in forums]


@router.get("/forums")
async def list_board(
    ctx: VisibilityContext = Depends(get_visibility_context),
    db: AsyncSession = Depends(get_db),
) -> list[dict[str, Any]]:
    """List every forum the caller may see."""
    return await _list_forums(0, ctx, db)


@router.get("/forums/{parent_id}")
async def list_branch(
    parent_id: str,
    ctx: VisibilityContext = Depends(get_visibility_context),
    db: AsyncSession = Depends(get_db),
) -> list[dict[str, Any]]:
    """List visible forums below a parent; invalid IDs list the whole board."""
    return await _list_forums(positive_id(parent_id) or 0, ctx, db)
