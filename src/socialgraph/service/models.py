"""
Entity models for users, posts, profiles, member types and subscriptions.
"""

from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import Boolean, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from socialgraph.service.db import Base


class MemberTypeId(str, Enum):
    """Closed set of membership tiers."""

    basic = "basic"
    business = "business"


class MemberType(Base):
    """Membership tier reference data."""

    __tablename__ = "member_types"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    discount: Mapped[float] = mapped_column(Float, nullable=False)
    posts_limit_per_month: Mapped[int] = mapped_column(Integer, nullable=False)


class User(Base):
    """A user account."""

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    balance: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name!r})>"


class Post(Base):
    """A post authored by a user."""

    __tablename__ = "posts"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )


class Profile(Base):
    """A user's profile. At most one per user."""

    __tablename__ = "profiles"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    is_male: Mapped[bool] = mapped_column(Boolean, nullable=False)
    year_of_birth: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    member_type_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("member_types.id", ondelete="RESTRICT"), nullable=False, index=True
    )


class SubscribersOnAuthors(Base):
    """Subscription edge: ``subscriber_id`` follows ``author_id``."""

    __tablename__ = "subscribers_on_authors"

    subscriber_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    author_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True
    )


MEMBER_TYPE_SEED: tuple[dict, ...] = (
    {"id": MemberTypeId.basic.value, "discount": 2.3, "posts_limit_per_month": 20},
    {"id": MemberTypeId.business.value, "discount": 7.7, "posts_limit_per_month": 100},
)


__all__ = [
    "MemberTypeId",
    "MemberType",
    "User",
    "Post",
    "Profile",
    "SubscribersOnAuthors",
    "MEMBER_TYPE_SEED",
]
