"""
Forum capability checks.

The listing code only depends on the ``AuthorizationOracle`` protocol.
``AclOracle`` is the default implementation: it prefetches every grant a
principal holds in one query, after which each check is a set lookup.
"""

from enum import Enum
from typing import Iterable, Protocol

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from forumapi.models.user import AclEntry
from forumapi.modules.auth.session import Principal


class Capability(str, Enum):
    """Named forum permissions."""

    LIST = "f_list"
    READ = "f_read"
    POST = "f_post"
    REPLY = "f_reply"
    APPROVE = "m_approve"


class AuthorizationOracle(Protocol):
    """Answers capability questions for a principal on a forum."""

    def has_capability(
        self, principal: Principal, capability: Capability, forum_id: int
    ) -> bool: ...

    def has_any_capability(
        self,
        principal: Principal,
        capabilities: Iterable[Capability],
        forum_id: int,
    ) -> bool: ...


class AclOracle:
    """
    Grant table for a single principal.

    Usage:
        oracle = await AclOracle.load(db, principal)
        oracle.has_capability(principal, Capability.LIST, forum_id)
    """

    def __init__(self, user_id: int, grants: Iterable[tuple[int, str]]) -> None:
        self.user_id = user_id
        self._grants = frozenset(grants)

    @classmethod
    async def load(cls, db: AsyncSession, principal: Principal) -> "AclOracle":
        """Prefetch all grants held by the principal."""
        result = await db.execute(
            select(AclEntry.forum_id, AclEntry.auth_option).where(
                AclEntry.user_id == principal.user_id
            )
        )
        grants = [(row.forum_id, row.auth_option) for row in result]
        logger.debug(f"Loaded {len(grants)} ACL grants for user {principal.user_id}")
        return cls(principal.user_id, grants)

    def has_capability(
        self, principal: Principal, capability: Capability, forum_id: int
    ) -> bool:
        if principal.user_id != self.user_id:
            return False
        option = Capability(capability).value
        return (forum_id, option) in self._grants or (0, option) in self._grants

    def has_any_capability(
        self,
        principal: Principal,
        capabilities: Iterable[Capability],
        forum_id: int,
    ) -> bool:
        return any(
            self.has_capability(principal, capability, forum_id)
            for capability in capabilities
        )
