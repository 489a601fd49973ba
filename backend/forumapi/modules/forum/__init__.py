"""
Forum Module - Permission-filtered forum tree and topic listings.

Features:
- Nested-set traversal with subtree pruning
- Per-user read and watch state
- Forum-aware topic pagination
"""

from forumapi.modules.forum.assembler import TopicPage, TopicPageAssembler
from forumapi.modules.forum.service import ForumService
from forumapi.modules.forum.visibility import VisibilityContext, filter_visible

__all__ = [
    "ForumService",
    "TopicPage",
    "TopicPageAssembler",
    "VisibilityContext",
    "filter_visible",
]
