"""
Caller identity resolution from API secrets.
"""

from dataclasses import dataclass

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from forumapi.core.config import settings
from forumapi.core.exceptions import Unauthorized
from forumapi.models.user import ApiSecret, User


@dataclass(frozen=True)
class Principal:
    """The user a request acts as."""

    user_id: int
    username: str | None = None

    @property
    def is_anonymous(self) -> bool:
        return self.user_id == settings.anonymous_user_id


def anonymous() -> Principal:
    """Principal used when no secret is supplied."""
    return Principal(user_id=settings.anonymous_user_id, username="Anonymous")


async def resolve_principal(db: AsyncSession, secret: str | None) -> Principal:
    """
    Resolve the caller from an API secret.

    Args:
        db: Database session
        secret: Secret code from the query string, if any

    Returns:
        Authenticated principal, or the anonymous principal without a secret

    Raises:
        Unauthorized: The secret is not registered
    """
    if not secret:
        return anonymous()

    query = (
        select(User.user_id, User.username)
        .join(ApiSecret, ApiSecret.user_id == User.user_id)
        .where(ApiSecret.secret == secret)
    )
    result = await db.execute(query)
    row = result.first()

    if row is None:
        logger.warning("Rejected request with unknown API secret")
        raise Unauthorized("Your secret code is not valid")

    return Principal(user_id=row.user_id, username=row.username)
