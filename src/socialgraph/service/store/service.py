"""
Entity store backed by SQLAlchemy.

One store object per entity, all sharing the request's ``AsyncSession``.
Writes commit immediately; a failed commit is rolled back before the
error propagates so the session stays usable for the rest of the request.
"""

from collections.abc import Iterable
from typing import Any, Generic, TypeVar
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from socialgraph.service.db import Base
from socialgraph.service.models import MemberType, Post, Profile, SubscribersOnAuthors, User

from .exceptions import ConstraintViolationError, NotFoundError

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class EntityStore(Generic[ModelT]):
    """CRUD operations for one entity keyed by ``id``."""

    model: type[ModelT]
    entity: str

    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_many(self, **filters: Iterable[Any]) -> list[ModelT]:
        """Return rows, restricted to ``column IN values`` for each keyword filter.

        Example:
            await store.posts.find_many(author_id=[user_a, user_b])
        """
        stmt = select(self.model)
        for column, values in filters.items():
            stmt = stmt.where(getattr(self.model, column).in_(list(values)))
        result = await self._session.execute(stmt)
        return list(result.scalars())

    async def find_unique(self, key: Any) -> ModelT | None:
        """Return the row with primary key ``key`` or None."""
        stmt = select(self.model).where(self.model.id == key)  # type: ignore[attr-defined]
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get(self, key: Any) -> ModelT:
        """Return the row with primary key ``key``.

        Raises:
            NotFoundError: if no such row exists
        """
        row = await self.find_unique(key)
        if row is None:
            raise NotFoundError(self.entity, key)
        return row

    async def create(self, data: dict[str, Any]) -> ModelT:
        """Insert a row built from ``data``."""
        await self._check_references(data)
        row = self.model(**data)
        self._session.add(row)
        await self._commit("create")
        logger.info("store.created", entity=self.entity, key=str(row.id))  # type: ignore[attr-defined]
        return row

    async def update(self, key: Any, data: dict[str, Any]) -> ModelT:
        """Apply ``data`` to the row with primary key ``key``."""
        row = await self.get(key)
        for column, value in data.items():
            setattr(row, column, value)
        await self._commit("update")
        logger.info("store.updated", entity=self.entity, key=str(key), fields=sorted(data))
        return row

    async def delete(self, key: Any) -> ModelT:
        """Delete the row with primary key ``key`` and return it."""
        row = await self.get(key)
        await self._session.delete(row)
        await self._commit("delete")
        logger.info("store.deleted", entity=self.entity, key=str(key))
        return row

    async def _check_references(self, data: dict[str, Any]) -> None:
        """Verify rows referenced by ``data`` before inserting. No-op by default."""

    async def _exists(self, model: type[Base], key: Any) -> bool:
        stmt = select(model.id).where(model.id == key)  # type: ignore[attr-defined]
        return (await self._session.execute(stmt)).first() is not None

    async def _commit(self, operation: str) -> None:
        try:
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            logger.warning(
                "store.constraint_violation",
                entity=self.entity,
                operation=operation,
                error=str(exc.orig),
            )
            raise ConstraintViolationError(
                f"{self.entity} {operation} violates a constraint"
            ) from exc


class UserStore(EntityStore[User]):
    model = User
    entity = "User"


class PostStore(EntityStore[Post]):
    model = Post
    entity = "Post"

    async def _check_references(self, data: dict[str, Any]) -> None:
        if not await self._exists(User, data["author_id"]):
            raise ConstraintViolationError(f"Author does not exist: {data['author_id']}")


class ProfileStore(EntityStore[Profile]):
    model = Profile
    entity = "Profile"

    async def _check_references(self, data: dict[str, Any]) -> None:
        user_id = data["user_id"]
        if not await self._exists(User, user_id):
            raise ConstraintViolationError(f"User does not exist: {user_id}")
        if not await self._exists(MemberType, data["member_type_id"]):
            raise ConstraintViolationError(f"Member type does not exist: {data['member_type_id']}")
        if await self.find_many(user_id=[user_id]):
            raise ConstraintViolationError(f"User already has a profile: {user_id}")


class MemberTypeStore(EntityStore[MemberType]):
    model = MemberType
    entity = "MemberType"


class SubscriptionStore:
    """Subscription edges keyed by ``(subscriber_id, author_id)``."""

    entity = "Subscription"

    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_many(
        self,
        *,
        subscriber_ids: Iterable[UUID] | None = None,
        author_ids: Iterable[UUID] | None = None,
    ) -> list[SubscribersOnAuthors]:
        stmt = select(SubscribersOnAuthors)
        if subscriber_ids is not None:
            stmt = stmt.where(SubscribersOnAuthors.subscriber_id.in_(list(subscriber_ids)))
        if author_ids is not None:
            stmt = stmt.where(SubscribersOnAuthors.author_id.in_(list(author_ids)))
        result = await self._session.execute(stmt)
        return list(result.scalars())

    async def find_authors(self, subscriber_ids: Iterable[UUID]) -> list[tuple[UUID, User]]:
        """Return ``(subscriber_id, author)`` pairs for the given subscribers, in one query."""
        stmt = (
            select(SubscribersOnAuthors.subscriber_id, User)
            .join(User, User.id == SubscribersOnAuthors.author_id)
            .where(SubscribersOnAuthors.subscriber_id.in_(list(subscriber_ids)))
        )
        result = await self._session.execute(stmt)
        return [(subscriber_id, author) for subscriber_id, author in result.all()]

    async def find_subscribers(self, author_ids: Iterable[UUID]) -> list[tuple[UUID, User]]:
        """Return ``(author_id, subscriber)`` pairs for the given authors, in one query."""
        stmt = (
            select(SubscribersOnAuthors.author_id, User)
            .join(User, User.id == SubscribersOnAuthors.subscriber_id)
            .where(SubscribersOnAuthors.author_id.in_(list(author_ids)))
        )
        result = await self._session.execute(stmt)
        return [(author_id, subscriber) for author_id, subscriber in result.all()]

    async def find_unique(self, subscriber_id: UUID, author_id: UUID) -> SubscribersOnAuthors | None:
        stmt = select(SubscribersOnAuthors).where(
            SubscribersOnAuthors.subscriber_id == subscriber_id,
            SubscribersOnAuthors.author_id == author_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, subscriber_id: UUID, author_id: UUID) -> SubscribersOnAuthors:
        """Subscribe ``subscriber_id`` to ``author_id``.

        Raises:
            NotFoundError: if either user does not exist
            ConstraintViolationError: if the pair already exists
        """
        for user_id in (subscriber_id, author_id):
            found = await self._session.execute(select(User.id).where(User.id == user_id))
            if found.first() is None:
                raise NotFoundError("User", user_id)

        if await self.find_unique(subscriber_id, author_id) is not None:
            raise ConstraintViolationError(
                f"User {subscriber_id} is already subscribed to {author_id}"
            )

        edge = SubscribersOnAuthors(subscriber_id=subscriber_id, author_id=author_id)
        self._session.add(edge)
        try:
            await self._session.commit()
        except IntegrityError as exc:
            await self._session.rollback()
            raise ConstraintViolationError(
                f"User {subscriber_id} is already subscribed to {author_id}"
            ) from exc

        logger.info("store.subscribed", subscriber_id=str(subscriber_id), author_id=str(author_id))
        return edge

    async def delete(self, subscriber_id: UUID, author_id: UUID) -> SubscribersOnAuthors:
        """Remove the subscription edge.

        Raises:
            NotFoundError: if the pair does not exist
        """
        edge = await self.find_unique(subscriber_id, author_id)
        if edge is None:
            raise NotFoundError(self.entity, f"{subscriber_id} -> {author_id}")
        await self._session.delete(edge)
        await self._session.commit()
        logger.info(
            "store.unsubscribed", subscriber_id=str(subscriber_id), author_id=str(author_id)
        )
        return edge


class SocialStore:
    """All entity stores for one database session."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserStore(session)
        self.posts = PostStore(session)
        self.profiles = ProfileStore(session)
        self.member_types = MemberTypeStore(session)
        self.subscriptions = SubscriptionStore(session)
