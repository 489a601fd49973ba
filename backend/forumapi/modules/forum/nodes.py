"""
Request-scoped value objects built from forum and topic rows.
"""

from dataclasses import dataclass
from typing import Any

from forumapi.models.forum import Forum, ForumType, Topic, TopicStatus


@dataclass(frozen=True)
class ForumNode:
    """A forum row positioned in the nested set."""

    forum_id: int
    parent_id: int
    forum_type: ForumType
    left_id: int
    right_id: int
    name: str
    link: str = ""
    total_topics: int = 0
    total_posts: int = 0
    last_poster_id: int = 0
    last_poster_name: str = ""
    last_post_id: int = 0
    last_post_subject: str = ""
    last_post_time: int = 0
    topics_per_page: int | None = None

    # Filled in by the tracking merger
    unread: bool = True
    watched: bool | None = None

    @classmethod
    def from_row(cls, row: Forum) -> "ForumNode":
        return cls(
            forum_id=row.forum_id,
            parent_id=row.parent_id,
            forum_type=ForumType(row.forum_type),
            left_id=row.left_id,
            right_id=row.right_id,
            name=row.forum_name,
            link=row.forum_link or "",
            total_topics=row.forum_topics,
            total_posts=row.forum_posts,
            last_poster_id=row.forum_last_poster_id,
            last_poster_name=row.forum_last_poster_name,
            last_post_id=row.forum_last_post_id,
            last_post_subject=row.forum_last_post_subject,
            last_post_time=row.forum_last_post_time,
            topics_per_page=row.forum_topics_per_page or None,
        )

    @property
    def is_leaf(self) -> bool:
        return self.right_id == self.left_id + 1

    @property
    def is_empty_category(self) -> bool:
        return self.forum_type == ForumType.CATEGORY and self.is_leaf

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "forum_id": self.forum_id,
            "parent_id": self.parent_id,
            "forum_name": self.name,
            "unread": self.unread,
            "total_topics": self.total_topics,
            "total_posts": self.total_posts,
            "last_poster_id": self.last_poster_id,
            "last_poster_name": self.last_poster_name,
            "last_post_topic_id": self.last_post_id,
            "last_post_topic_name": self.last_post_subject,
            "last_post_time": self.last_post_time,
        }
        if self.watched is not None:
            data["watched"] = self.watched
        return data


@dataclass(frozen=True)
class TopicSummary:
    """One line of a forum's topic list."""

    topic_id: int
    forum_id: int
    title: str
    author: str
    created_at: int
    last_reply_author: str
    last_reply_id: int
    last_reply_at: int
    reply_count: int
    status: TopicStatus = TopicStatus.UNLOCKED

    # Filled in by the tracking merger
    unread: bool = True
    posted_by_caller: bool | None = None

    @classmethod
    def from_row(cls, row: Topic) -> "TopicSummary":
        return cls(
            topic_id=row.topic_id,
            forum_id=row.forum_id,
            title=row.topic_title,
            author=row.topic_first_poster_name,
            created_at=row.topic_time,
            last_reply_author=row.topic_last_poster_name,
            last_reply_id=row.topic_last_post_id,
            last_reply_at=row.topic_last_post_time,
            reply_count=row.topic_replies,
            status=TopicStatus(row.topic_status),
        )

    @property
    def last_activity(self) -> int:
        return max(self.created_at, self.last_reply_at)

    @property
    def status_name(self) -> str:
        if self.status == TopicStatus.LOCKED:
            return "locked"
        if self.status == TopicStatus.MOVED:
            return "shadow"
        return "normal"

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "topic_id": self.topic_id,
            "topic_title": self.title,
            "topic_author_username": self.author,
            "topic_time": self.created_at,
            "topic_last_reply_username": self.last_reply_author,
            "topic_last_reply_id": self.last_reply_id,
            "topic_last_reply_time": self.last_reply_at,
            "topic_num_replies": self.reply_count,
            "topic_unread": self.unread,
        }
        if self.posted_by_caller is not None:
            data["topic_posted"] = self.posted_by_caller
        data["topic_locked"] = self.status == TopicStatus.LOCKED
        data["topic_status"] = self.status_name
        return data
