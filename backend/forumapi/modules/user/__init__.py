"""
User Module - Profiles and user search.
"""

from forumapi.modules.user.service import UserService

__all__ = ["UserService"]
