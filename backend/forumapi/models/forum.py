"""
Forum content models.

Includes:
- Forums (nested-set tree of categories, post containers and links)
- Topics (threads)
- Posts (replies)
- Per-user read marks, watches and "posted in" flags

Timestamps are unix seconds, as stored by the board software.
"""

from enum import IntEnum

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from forumapi.core.database import Base


class ForumType(IntEnum):
    """Kind of forum row."""

    CATEGORY = 0
    POST = 1
    LINK = 2


class TopicStatus(IntEnum):
    """Topic lock/move state."""

    UNLOCKED = 0
    LOCKED = 1
    MOVED = 2


class Forum(Base):
    """Forum row with nested-set bounds."""

    __tablename__ = "forums"

    forum_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    parent_id: Mapped[int] = mapped_column(Integer, default=0, index=True)
    left_id: Mapped[int] = mapped_column(Integer, index=True)
    right_id: Mapped[int] = mapped_column(Integer)
    forum_type: Mapped[int] = mapped_column(Integer, default=ForumType.POST)
    forum_name: Mapped[str] = mapped_column(String(255))
    forum_link: Mapped[str] = mapped_column(String(255), default="")

    # Per-forum page size, 0 means "use the board default"
    forum_topics_per_page: Mapped[int] = mapped_column(Integer, default=0)

    # Stats (denormalized)
    forum_topics: Mapped[int] = mapped_column(Integer, default=0)
    forum_posts: Mapped[int] = mapped_column(Integer, default=0)

    # Last activity
    forum_last_post_id: Mapped[int] = mapped_column(Integer, default=0)
    forum_last_poster_id: Mapped[int] = mapped_column(Integer, default=0)
    forum_last_poster_name: Mapped[str] = mapped_column(String(255), default="")
    forum_last_post_subject: Mapped[str] = mapped_column(String(255), default="")
    forum_last_post_time: Mapped[int] = mapped_column(Integer, default=0)

    def __repr__(self) -> str:
        return f"<Forum {self.forum_id} {self.forum_name}>"


class Topic(Base):
    """Forum topic/thread."""

    __tablename__ = "topics"

    topic_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    forum_id: Mapped[int] = mapped_column(ForeignKey("forums.forum_id"), index=True)
    topic_title: Mapped[str] = mapped_column(String(255))
    topic_time: Mapped[int] = mapped_column(Integer, default=0)
    topic_first_poster_name: Mapped[str] = mapped_column(String(255), default="")

    # Status
    topic_status: Mapped[int] = mapped_column(Integer, default=TopicStatus.UNLOCKED)
    topic_approved: Mapped[bool] = mapped_column(Boolean, default=True)

    # Stats
    topic_replies: Mapped[int] = mapped_column(Integer, default=0)

    # Last activity
    topic_last_post_id: Mapped[int] = mapped_column(Integer, default=0)
    topic_last_poster_name: Mapped[str] = mapped_column(String(255), default="")
    topic_last_post_time: Mapped[int] = mapped_column(Integer, default=0)

    def __repr__(self) -> str:
        return f"<Topic {self.topic_id} {self.topic_title[:30]}>"


class Post(Base):
    """Forum post/reply."""

    __tablename__ = "posts"

    post_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    topic_id: Mapped[int] = mapped_column(ForeignKey("topics.topic_id"), index=True)
    forum_id: Mapped[int] = mapped_column(ForeignKey("forums.forum_id"))
    poster_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"))
    post_time: Mapped[int] = mapped_column(Integer, default=0)
    post_text: Mapped[str] = mapped_column(Text, default="")
    post_visibility: Mapped[int] = mapped_column(Integer, default=1)

    def __repr__(self) -> str:
        return f"<Post {self.post_id} in topic {self.topic_id}>"


class ForumTrack(Base):
    """Last time a user marked a forum read."""

    __tablename__ = "forums_track"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), primary_key=True)
    forum_id: Mapped[int] = mapped_column(ForeignKey("forums.forum_id"), primary_key=True)
    mark_time: Mapped[int] = mapped_column(Integer, default=0)


class ForumWatch(Base):
    """User subscription to a forum."""

    __tablename__ = "forums_watch"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), primary_key=True)
    forum_id: Mapped[int] = mapped_column(ForeignKey("forums.forum_id"), primary_key=True)
    notify_status: Mapped[int] = mapped_column(Integer, default=0)


class TopicTrack(Base):
    """Last time a user read a topic."""

    __tablename__ = "topics_track"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), primary_key=True)
    topic_id: Mapped[int] = mapped_column(ForeignKey("topics.topic_id"), primary_key=True)
    forum_id: Mapped[int] = mapped_column(Integer, default=0)
    mark_time: Mapped[int] = mapped_column(Integer, default=0)


class TopicPosted(Base):
    """Whether a user has posted in a topic."""

    __tablename__ = "topics_posted"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), primary_key=True)
    topic_id: Mapped[int] = mapped_column(ForeignKey("topics.topic_id"), primary_key=True)
    topic_posted: Mapped[bool] = mapped_column(Boolean, default=False)
