"""
User Service - Profile lookup and username search.
"""

from typing import Any

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from forumapi.core.exceptions import NotFound, Unauthorized
from forumapi.models.user import User
from forumapi.modules.auth.session import Principal

LOGIN_REQUIRED = "Must be authorized"
USER_NOT_FOUND = "The requested user does not exist."


class UserService:
    """
    Service for reading user accounts on behalf of a signed-in caller.

    Usage:
        users = UserService(db_session)
        profile = await users.get_profile(principal)
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize user service with database session."""
        self.db = db

    @staticmethod
    def require_authenticated(principal: Principal) -> None:
        """Raise Unauthorized for anonymous callers."""
        if principal.is_anonymous:
            raise Unauthorized(LOGIN_REQUIRED)

    async def get_profile(self, principal: Principal) -> dict[str, Any]:
        """
        Get the caller's own profile.

        Raises:
            Unauthorized: The caller is anonymous
            NotFound: The caller's account no longer exists
        """
        self.require_authenticated(principal)

        result = await self.db.execute(select(User).where(User.user_id == principal.user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFound(USER_NOT_FOUND)

        return {
            "user_id": user.user_id,
            "username": user.username,
            "user_email": user.user_email,
            "user_birthday": user.user_birthday,
            "user_lang": user.user_lang,
            "user_timezone": user.user_timezone,
            "user_avatar": user.user_avatar,
            "user_avatar_type": user.user_avatar_type,
            "user_avatar_width": user.user_avatar_width,
            "user_avatar_height": user.user_avatar_height,
            "user_from": user.user_from,
        }

    async def search(self, principal: Principal, query: str | None) -> dict[str, Any]:
        """
        Find users whose name contains a search string, ignoring case.

        Args:
            principal: Caller; must be signed in
            query: Text to look for, empty matches everyone

        Returns:
            ``{"users": [...]}``, or ``{}`` when nothing matches
        """
        self.require_authenticated(principal)

        needle = (query or "").lower()
        result = await self.db.execute(
            select(User)
            .where(User.username_clean.contains(needle, autoescape=True))
            .order_by(User.username_clean)
        )
        users = result.scalars().all()
        logger.debug(f"User search by {principal.user_id} for {needle!r}: {len(users)} matches")

        if not users:
            return {}

        return {
            "users": [
                {
                    "user_id": user.user_id,
                    "username": user.username,
                    "user_email": user.user_email,
                    "user_avatar": user.user_avatar,
                    "user_avatar_type": user.user_avatar_type,
                    "user_avatar_width": user.user_avatar_width,
                    "user_avatar_height": user.user_avatar_height,
                }
                for user in users
            ]
        }
