"""
User, API credential and permission models.
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from forumapi.core.database import Base


class User(Base):
    """Board user account."""

    __tablename__ = "users"

    user_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    # Lowercased username used for searching
    username_clean: Mapped[str] = mapped_column(
        String(255),
        index=True,
        default=lambda ctx: ctx.get_current_parameters()["username"].lower(),
    )
    user_type: Mapped[int] = mapped_column(Integer, default=0)

    # Profile
    user_email: Mapped[str] = mapped_column(String(100), default="")
    user_birthday: Mapped[str] = mapped_column(String(10), default="")
    user_lang: Mapped[str] = mapped_column(String(30), default="en")
    user_timezone: Mapped[str] = mapped_column(String(100), default="UTC")
    user_from: Mapped[str] = mapped_column(String(100), default="")

    # Avatar reference, returned as stored
    user_avatar: Mapped[str] = mapped_column(String(255), default="")
    user_avatar_type: Mapped[str] = mapped_column(String(255), default="")
    user_avatar_width: Mapped[int] = mapped_column(Integer, default=0)
    user_avatar_height: Mapped[int] = mapped_column(Integer, default=0)

    def __repr__(self) -> str:
        return f"<User {self.username}>"


class ApiSecret(Base):
    """Secret code an API client presents to act as a user."""

    __tablename__ = "api_secrets"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), primary_key=True)
    secret: Mapped[str] = mapped_column(String(255), primary_key=True, index=True)


class AclEntry(Base):
    """
    Capability granted to a user.

    forum_id 0 grants the capability on every forum.
    """

    __tablename__ = "acl_entries"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), primary_key=True)
    forum_id: Mapped[int] = mapped_column(Integer, primary_key=True, default=0)
    auth_option: Mapped[str] = mapped_column(String(50), primary_key=True)
