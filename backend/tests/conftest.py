"""
Shared fixtures: an in-memory board database and an API client bound to it.

Board layout (left/right bounds in brackets):

    1 General (category)        [1, 8]
      2 Announcements           [2, 3]
      3 Discussion              [4, 7]   2 topics per page
        4 Off-topic             [5, 6]
    5 Staff (category)          [9, 12]
      6 Staff Room              [10, 11]
    7 Empty (category)          [13, 14]
    8 Wiki (link)               [15, 16]
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from forumapi.core.database import Base, get_db
from forumapi.main import app
from forumapi.models import (
    AclEntry,
    ApiSecret,
    Forum,
    ForumTrack,
    ForumType,
    ForumWatch,
    Post,
    Topic,
    TopicPosted,
    TopicStatus,
    TopicTrack,
    User,
)

T0 = 1_700_000_000

ANONYMOUS_ID = 1
ALICE_ID = 2
MODERATOR_ID = 3
BOB_ID = 4

ALICE_SECRET = "alice-secret"
MODERATOR_SECRET = "mod-secret"
BOB_SECRET = "bob-secret"


def _forum(
    forum_id: int,
    parent_id: int,
    left_id: int,
    right_id: int,
    name: str,
    forum_type: ForumType = ForumType.POST,
    **extra,
) -> Forum:
    return Forum(
        forum_id=forum_id,
        parent_id=parent_id,
        left_id=left_id,
        right_id=right_id,
        forum_name=name,
        forum_type=forum_type,
        **extra,
    )


def _topic(
    topic_id: int,
    forum_id: int,
    title: str,
    created: int,
    last_post: int,
    replies: int = 0,
    **extra,
) -> Topic:
    return Topic(
        topic_id=topic_id,
        forum_id=forum_id,
        topic_title=title,
        topic_time=T0 + created,
        topic_first_poster_name="alice",
        topic_last_poster_name="moderator",
        topic_last_post_id=topic_id * 10,
        topic_last_post_time=T0 + last_post,
        topic_replies=replies,
        **extra,
    )


def _grants(user_id: int, forum_ids: list[int], *options: str) -> list[AclEntry]:
    return [
        AclEntry(user_id=user_id, forum_id=forum_id, auth_option=option)
        for forum_id in forum_ids
        for option in options
    ]


@pytest.fixture
async def db_engine():
    """Fresh in-memory database with all tables."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
async def board(db_session: AsyncSession) -> None:
    """Seed users, forums, topics, posts, grants and tracking rows."""
    db_session.add_all([
        User(user_id=ANONYMOUS_ID, username="Anonymous", user_type=2),
        User(user_id=ALICE_ID, username="alice", user_email="alice@example.com",
             user_from="Lisbon", user_timezone="Europe/Lisbon"),
        User(user_id=MODERATOR_ID, username="Moderator"),
        User(user_id=BOB_ID, username="bob"),
        ApiSecret(user_id=ALICE_ID, secret=ALICE_SECRET),
        ApiSecret(user_id=MODERATOR_ID, secret=MODERATOR_SECRET),
        ApiSecret(user_id=BOB_ID, secret=BOB_SECRET),
    ])

    db_session.add_all([
        _forum(1, 0, 1, 8, "General", ForumType.CATEGORY),
        _forum(2, 1, 2, 3, "Announcements", forum_last_post_time=T0 + 100),
        _forum(
            3, 1, 4, 7, "Discussion",
            forum_topics_per_page=2,
            forum_topics=5,
            forum_posts=12,
            forum_last_post_id=103,
            forum_last_poster_id=MODERATOR_ID,
            forum_last_poster_name="moderator",
            forum_last_post_subject="Welcome",
            forum_last_post_time=T0 + 500,
        ),
        _forum(4, 3, 5, 6, "Off-topic", forum_last_post_time=T0 + 60),
        _forum(5, 0, 9, 12, "Staff", ForumType.CATEGORY),
        _forum(6, 5, 10, 11, "Staff Room"),
        _forum(7, 0, 13, 14, "Empty", ForumType.CATEGORY),
        _forum(8, 0, 15, 16, "Wiki", ForumType.LINK, forum_link="https://wiki.example.com"),
    ])

    db_session.add_all([
        _topic(10, 3, "Welcome", created=10, last_post=500, replies=3),
        _topic(11, 3, "Rules", created=20, last_post=400, replies=2,
               topic_status=TopicStatus.LOCKED),
        _topic(12, 3, "Moved away", created=30, last_post=300,
               topic_status=TopicStatus.MOVED),
        _topic(13, 3, "Old thread", created=40, last_post=200, replies=1),
        _topic(14, 3, "Pending", created=50, last_post=450, topic_approved=False),
        _topic(20, 4, "Chit chat", created=60, last_post=60),
        _topic(30, 6, "Staff only", created=70, last_post=70),
    ])

    db_session.add_all([
        Post(post_id=100, topic_id=10, forum_id=3, poster_id=ALICE_ID,
             post_time=T0 + 10, post_text="First"),
        Post(post_id=101, topic_id=10, forum_id=3, poster_id=MODERATOR_ID,
             post_time=T0 + 100, post_text="Second"),
        Post(post_id=102, topic_id=10, forum_id=3, poster_id=ALICE_ID,
             post_time=T0 + 300, post_text="Third"),
        Post(post_id=103, topic_id=10, forum_id=3, poster_id=MODERATOR_ID,
             post_time=T0 + 500, post_text="Fourth"),
        Post(post_id=104, topic_id=10, forum_id=3, poster_id=BOB_ID,
             post_time=T0 + 600, post_text="Hidden", post_visibility=0),
    ])

    db_session.add_all(
        _grants(ANONYMOUS_ID, [1, 2, 3, 4, 7, 8], "f_list")
        + _grants(ANONYMOUS_ID, [2, 3, 4], "f_read")
        + _grants(ALICE_ID, [1, 2, 3, 4, 8], "f_list", "f_read")
        + _grants(ALICE_ID, [3], "f_post", "f_reply")
        + _grants(MODERATOR_ID, [0], "f_list", "f_read", "f_post", "f_reply", "m_approve")
    )

    db_session.add_all([
        ForumTrack(user_id=ALICE_ID, forum_id=2, mark_time=T0 + 200),
        ForumTrack(user_id=ALICE_ID, forum_id=3, mark_time=T0 + 350),
        ForumTrack(user_id=ALICE_ID, forum_id=4, mark_time=T0 + 10),
        ForumWatch(user_id=ALICE_ID, forum_id=3, notify_status=0),
        TopicTrack(user_id=ALICE_ID, topic_id=10, forum_id=3, mark_time=T0 + 500),
        TopicTrack(user_id=ALICE_ID, topic_id=11, forum_id=3, mark_time=T0 + 100),
        TopicPosted(user_id=ALICE_ID, topic_id=10, topic_posted=True),
    ])

    await db_session.commit()


@pytest.fixture
async def client(db_session: AsyncSession, board: None) -> AsyncGenerator[AsyncClient, None]:
    """API client whose requests use the seeded session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test/api/v1") as c:
        yield c
    app.dependency_overrides.clear()
