"""
Per-user read and subscription state for forums and topics.

A missing mapping means tracking does not apply. Missing read marks (anonymous
caller or read tracking disabled) count as unread. Missing watch/posted
mappings (anonymous caller) leave the field unset so it is left out of the
response.
"""

from dataclasses import replace
from typing import Iterable, Mapping

from forumapi.modules.forum.nodes import ForumNode, TopicSummary


def annotate_forums(
    nodes: Iterable[ForumNode],
    tracking_rows: Mapping[int, int] | None,
    watch_rows: Mapping[int, bool] | None,
) -> list[ForumNode]:
    """
    Set ``unread`` and ``watched`` on forum nodes.

    Having a mark is not enough to read a forum: a mark older than the forum's
    last post still leaves it unread.

    Args:
        nodes: Forums to annotate
        tracking_rows: forum_id -> mark_time for the caller
        watch_rows: forum_id -> watching flag for the caller
    """
    annotated = []
    for node in nodes:
        mark_time = tracking_rows.get(node.forum_id) if tracking_rows is not None else None
        unread = mark_time is None or mark_time < node.last_post_time
        watched = None if watch_rows is None else bool(watch_rows.get(node.forum_id, False))
        annotated.append(replace(node, unread=unread, watched=watched))
    return annotated


def annotate_topics(
    topics: Iterable[TopicSummary],
    tracking_rows: Mapping[int, int] | None,
    posted_rows: Mapping[int, bool] | None,
    forum_mark_time: int | None = None,
) -> list[TopicSummary]:
    """
    Set ``unread`` and ``posted_by_caller`` on topic summaries.

    A topic is read once the caller's mark on it, or on its forum, is at least
    as recent as its last activity.
    """
    annotated = []
    for topic in topics:
        marks = [forum_mark_time]
        if tracking_rows is not None:
            marks.append(tracking_rows.get(topic.topic_id))
        known = [mark for mark in marks if mark is not None]
        mark_time = max(known) if known else None

        unread = mark_time is None or mark_time < topic.last_activity
        posted = None if posted_rows is None else bool(posted_rows.get(topic.topic_id, False))
        annotated.append(replace(topic, unread=unread, posted_by_caller=posted))
    return annotated
