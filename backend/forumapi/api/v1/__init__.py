"""
API Version 1 Router.

Combines all API endpoints under /api/v1 prefix.
"""

from fastapi import APIRouter

from forumapi.api.v1.endpoints import board, forum, topic, user

router = APIRouter()

# Include endpoint routers
router.include_router(board.router, prefix="/board", tags=["Board"])
router.include_router(forum.router, prefix="/forum", tags=["Forum"])
router.include_router(topic.router, prefix="/topic", tags=["Topic"])
router.include_router(user.router, prefix="/user", tags=["User"])
