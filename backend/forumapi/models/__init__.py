"""
ORM models. Importing this package registers every table on ``Base.metadata``.
"""

from forumapi.models.forum import (
    Forum,
    ForumTrack,
    ForumType,
    ForumWatch,
    Post,
    Topic,
    TopicPosted,
    TopicStatus,
    TopicTrack,
)
from forumapi.models.user import AclEntry, ApiSecret, User

__all__ = [
    "AclEntry",
    "ApiSecret",
    "Forum",
    "ForumTrack",
    "ForumType",
    "ForumWatch",
    "Post",
    "Topic",
    "TopicPosted",
    "TopicStatus",
    "TopicTrack",
    "User",
]
