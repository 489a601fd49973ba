"""
Topic Module - Topic details and posts.
"""

from forumapi.modules.topic.service import TopicService

__all__ = ["TopicService"]
