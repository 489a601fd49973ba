"""Tests for topic endpoints."""
import pytest
from httpx import AsyncClient

from conftest import ALICE_SECRET, MODERATOR_SECRET, T0


def post_ids(data: dict) -> list[int]:
    return [post["post_id"] for post in data.get("posts", [])]


class TestTopicInfo:

    async def test_info(self, client: AsyncClient) -> None:
        response = await client.get("/topic/10")
        assert response.status_code == 200
        assert response.json() == {"forum_id": 3, "total_replies": 3}

    @pytest.mark.parametrize("topic_id", ["999", "abc"])
    async def test_unknown_topic(self, client: AsyncClient, topic_id: str) -> None:
        response = await client.get(f"/topic/{topic_id}")
        assert response.status_code == 404
        assert response.json() == {"error": "The topic you selected does not exist."}


class TestTopicPermissions:

    async def test_evaluated_on_topic_forum(self, client: AsyncClient) -> None:
        anonymous = await client.get("/topic/10/permissions")
        alice = await client.get("/topic/10/permissions", params={"secret": ALICE_SECRET})

        assert anonymous.json()["can_post"] is False
        assert alice.json() == {
            "can_see": True,
            "can_read": True,
            "can_post": True,
            "can_reply": True,
        }

    async def test_unknown_topic(self, client: AsyncClient) -> None:
        response = await client.get("/topic/999/permissions")
        assert response.status_code == 404


class TestPostList:

    async def test_visible_posts_oldest_first(self, client: AsyncClient) -> None:
        response = await client.get("/topic/10/posts")
        assert response.status_code == 200

        data = response.json()
        assert data["forum_id"] == 3
        assert data["forum_name"] == "Discussion"
        assert data["topic_id"] == 10
        assert data["topic_title"] == "Welcome"
        assert data["posts_count"] == 4
        assert post_ids(data) == [100, 101, 102, 103]
        assert data["posts"][0] == {
            "post_id": 100,
            "author_id": 2,
            "author_username": "alice",
            "timestamp": T0 + 10,
            "post_text": "First",
        }

    async def test_descending(self, client: AsyncClient) -> None:
        response = await client.get("/topic/10/posts", params={"sort": "desc"})
        assert post_ids(response.json()) == [103, 102, 101, 100]

    async def test_unknown_sort_is_ascending(self, client: AsyncClient) -> None:
        response = await client.get("/topic/10/posts", params={"sort": "sideways"})
        assert post_ids(response.json()) == [100, 101, 102, 103]

    async def test_limit_keeps_full_count(self, client: AsyncClient) -> None:
        response = await client.get("/topic/10/posts", params={"limit": 2})
        data = response.json()
        assert post_ids(data) == [100, 101]
        assert data["posts_count"] == 4

    async def test_limit_with_page(self, client: AsyncClient) -> None:
        response = await client.get("/topic/10/posts/2", params={"limit": 2})
        assert post_ids(response.json()) == [102, 103]

    async def test_non_positive_limit_means_all(self, client: AsyncClient) -> None:
        response = await client.get("/topic/10/posts", params={"limit": 0})
        assert len(response.json()["posts"]) == 4

    async def test_time_filter(self, client: AsyncClient) -> None:
        response = await client.get("/topic/10/posts", params={"olderThan": T0 + 100})
        data = response.json()
        assert post_ids(data) == [102, 103]
        assert data["posts_count"] == 2

    async def test_requires_read_on_forum(self, client: AsyncClient) -> None:
        response = await client.get("/topic/30/posts")
        assert response.status_code == 401

    async def test_topic_without_posts_has_no_posts_key(self, client: AsyncClient) -> None:
        response = await client.get("/topic/30/posts", params={"secret": MODERATOR_SECRET})
        assert response.status_code == 200
        data = response.json()
        assert data["posts_count"] == 0
        assert "posts" not in data

    async def test_unknown_topic(self, client: AsyncClient) -> None:
        response = await client.get("/topic/999/posts")
        assert response.status_code == 404


class TestOversizedNumbers:
    """Numbers beyond the store's integer range never reach a query."""

    HUGE = "99999999999999999999"

    @pytest.mark.parametrize("path", ["/topic/{}", "/topic/{}/permissions", "/topic/{}/posts"])
    async def test_topic_id(self, client: AsyncClient, path: str) -> None:
        response = await client.get(path.format(self.HUGE))
        assert response.status_code == 404

    async def test_limit(self, client: AsyncClient) -> None:
        response = await client.get("/topic/10/posts", params={"limit": self.HUGE})
        assert response.status_code == 200
        assert post_ids(response.json()) == [100, 101, 102, 103]

    async def test_page(self, client: AsyncClient) -> None:
        response = await client.get(f"/topic/10/posts/{self.HUGE}", params={"limit": 2})
        assert response.status_code == 200
        data = response.json()
        assert "posts" not in data
        assert data["posts_count"] == 4

    async def test_time_filter(self, client: AsyncClient) -> None:
        response = await client.get("/topic/10/posts", params={"olderThan": self.HUGE})
        assert response.status_code == 200
        assert response.json()["posts_count"] == 0
