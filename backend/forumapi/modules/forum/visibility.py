"""
Permission-filtered traversal of the forum tree.

Rows arrive in ascending ``left_id`` order, so every descendant of a forum
follows it directly. When the caller may not list a forum, one marker holding
that forum's ``right_id`` hides the whole branch without checking any of its
descendants: a single pass, one capability check per visited forum.
"""

from dataclasses import dataclass
from typing import Iterable

from loguru import logger

from forumapi.modules.auth.acl import AuthorizationOracle, Capability
from forumapi.modules.auth.session import Principal
from forumapi.modules.forum.nodes import ForumNode


@dataclass(frozen=True)
class VisibilityContext:
    """Who is asking, who answers, and which capabilities gate listing."""

    principal: Principal
    oracle: AuthorizationOracle
    list_capability: Capability = Capability.LIST
    read_capability: Capability = Capability.READ

    def can(self, capability: Capability, forum_id: int) -> bool:
        return self.oracle.has_capability(self.principal, capability, forum_id)

    def can_any(self, capabilities: Iterable[Capability], forum_id: int) -> bool:
        return self.oracle.has_any_capability(self.principal, capabilities, forum_id)


def filter_visible(
    rows: Iterable[ForumNode],
    ctx: VisibilityContext,
    scope_parent_id: int = 0,
) -> list[ForumNode]:
    """
    Prune a forum subtree down to what the caller may see.

    Args:
        rows: Forums inside the scope, ordered by left_id ascending
        ctx: Visibility context of the request
        scope_parent_id: Forum whose subtree is listed, 0 for the whole board

    Returns:
        Visible forums, in input order
    """
    visible: list[ForumNode] = []
    skip_until_right_id: int | None = None

    for node in rows:
        if skip_until_right_id is not None:
            if node.left_id < skip_until_right_id:
                continue
            skip_until_right_id = None

        # The scope forum is never part of its own listing
        if node.forum_id == scope_parent_id:
            continue

        if node.is_empty_category:
            continue

        if not ctx.can(ctx.list_capability, node.forum_id):
            logger.debug(
                f"Pruning forum {node.forum_id} subtree "
                f"[{node.left_id}, {node.right_id}) for user {ctx.principal.user_id}"
            )
            skip_until_right_id = node.right_id
            continue

        visible.append(node)

    return visible


def permission_flags(ctx: VisibilityContext, forum_id: int) -> dict[str, bool]:
    """Summarize what the caller may do in a forum."""
    return {
        "can_see": ctx.can(Capability.LIST, forum_id),
        "can_read": ctx.can(Capability.READ, forum_id),
        "can_post": ctx.can(Capability.POST, forum_id),
        "can_reply": ctx.can(Capability.REPLY, forum_id),
    }
