"""Tests for secret resolution and the ACL oracle."""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import ALICE_ID, ALICE_SECRET, ANONYMOUS_ID, MODERATOR_ID
from forumapi.core.exceptions import Unauthorized
from forumapi.modules.auth import AclOracle, Capability, Principal, resolve_principal


async def test__resolve_principal__no_secret_is_anonymous(db_session: AsyncSession) -> None:
    principal = await resolve_principal(db_session, None)
    assert principal.user_id == ANONYMOUS_ID
    assert principal.is_anonymous


async def test__resolve_principal__known_secret(db_session: AsyncSession, board: None) -> None:
    principal = await resolve_principal(db_session, ALICE_SECRET)
    assert principal == Principal(user_id=ALICE_ID, username="alice")
    assert not principal.is_anonymous


async def test__resolve_principal__unknown_secret(db_session: AsyncSession, board: None) -> None:
    with pytest.raises(Unauthorized):
        await resolve_principal(db_session, "missing")


async def test__acl_oracle__forum_grants(db_session: AsyncSession, board: None) -> None:
    alice = Principal(user_id=ALICE_ID)
    oracle = await AclOracle.load(db_session, alice)

    assert oracle.has_capability(alice, Capability.POST, 3)
    assert not oracle.has_capability(alice, Capability.POST, 2)
    assert not oracle.has_capability(alice, Capability.LIST, 5)
    assert oracle.has_any_capability(alice, [Capability.APPROVE, Capability.READ], 2)
    assert not oracle.has_any_capability(alice, [Capability.APPROVE, Capability.POST], 2)


async def test__acl_oracle__board_wide_grants(db_session: AsyncSession, board: None) -> None:
    moderator = Principal(user_id=MODERATOR_ID)
    oracle = await AclOracle.load(db_session, moderator)

    assert oracle.has_capability(moderator, Capability.APPROVE, 6)
    assert oracle.has_capability(moderator, Capability.LIST, 12345)


async def test__acl_oracle__grants_belong_to_loaded_principal(
    db_session: AsyncSession, board: None,
) -> None:
    oracle = await AclOracle.load(db_session, Principal(user_id=MODERATOR_ID))
    assert not oracle.has_capability(Principal(user_id=ALICE_ID), Capability.LIST, 1)
