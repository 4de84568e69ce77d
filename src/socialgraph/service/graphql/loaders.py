"""GraphQL DataLoader collection for relation traversals.

Each loader turns the single-key ``load`` calls issued while one resolution
pass runs into one grouped store query. Strawberry's ``DataLoader`` queues
keys until the event loop's next tick, dispatches a single batch, and
memoizes the resulting futures for the lifetime of the loader.

Loaders are created per request by :class:`GraphQLLoaders` and are not
thread-safe or shareable between requests.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Hashable, Iterable, Sequence
from typing import Any, TypeVar
from uuid import UUID

import structlog
from strawberry.dataloader import DataLoader

from socialgraph.service.models import MemberType, Post, Profile, User
from socialgraph.service.store import SocialStore

logger = structlog.get_logger(__name__)

RowT = TypeVar("RowT")


def group_by(
    keys: Sequence[Hashable], rows: Iterable[RowT], key_of: Callable[[RowT], Hashable]
) -> list[list[RowT]]:
    """Fan ``rows`` out to ``keys``: one list per key, empty when nothing matched."""
    grouped: dict[Hashable, list[RowT]] = defaultdict(list)
    for row in rows:
        grouped[key_of(row)].append(row)
    return [grouped.get(key, []) for key in keys]


def index_by(
    keys: Sequence[Hashable], rows: Iterable[RowT], key_of: Callable[[RowT], Hashable]
) -> list[RowT | None]:
    """Fan ``rows`` out to ``keys``: one row per key, None when nothing matched."""
    indexed = {key_of(row): row for row in rows}
    return [indexed.get(key) for key in keys]


class GraphQLLoaders:
    """Per-request loaders shared through the GraphQL context.

    Attributes:
        store: Entity store bound to the request's database session.
        user_by_id: Users by id. A cache seed: the root ``users`` query and
            the subscription loaders prime it with rows they fetched. No
            schema field loads through it, since root lookups hit the store
            directly; code resolving a user by id inside a request can use it
            without a second query for rows already fetched.
        posts_by_author: Posts grouped by author id.
        profile_by_user: Profile by owning user id.
        member_type_by_id: Member type by id.
        subscriptions_out: Authors a user is subscribed to, by subscriber id.
        subscriptions_in: Subscribers of a user, by author id.
    """

    def __init__(self, store: SocialStore) -> None:
        self.store = store
        self.user_by_id: DataLoader[UUID, User | None] = DataLoader(load_fn=self._load_users)
        self.posts_by_author: DataLoader[UUID, list[Post]] = DataLoader(load_fn=self._load_posts)
        self.profile_by_user: DataLoader[UUID, Profile | None] = DataLoader(
            load_fn=self._load_profiles
        )
        self.member_type_by_id: DataLoader[str, MemberType | None] = DataLoader(
            load_fn=self._load_member_types
        )
        self.subscriptions_out: DataLoader[UUID, list[User]] = DataLoader(
            load_fn=self._load_subscribed_authors
        )
        self.subscriptions_in: DataLoader[UUID, list[User]] = DataLoader(
            load_fn=self._load_subscribers
        )

    def prime_users(self, users: Iterable[User]) -> None:
        """Seed ``user_by_id`` with rows that were already fetched."""
        self.user_by_id.prime_many({user.id: user for user in users})

    # Writes made in a request must be visible to the reads that follow it,
    # so mutations drop the cached keys they touched.

    def forget_posts(self, author_id: UUID) -> None:
        _forget(self.posts_by_author, author_id)

    def forget_profile(self, user_id: UUID) -> None:
        _forget(self.profile_by_user, user_id)

    def forget_subscription(self, subscriber_id: UUID, author_id: UUID) -> None:
        _forget(self.subscriptions_out, subscriber_id)
        _forget(self.subscriptions_in, author_id)

    def forget_user(self, user_id: UUID) -> None:
        """Drop everything cached for a deleted user.

        Other users' subscription lists may still name the user, so both
        subscription caches are dropped entirely.
        """
        _forget(self.user_by_id, user_id)
        _forget(self.posts_by_author, user_id)
        _forget(self.profile_by_user, user_id)
        self.subscriptions_out.clear_all()
        self.subscriptions_in.clear_all()

    async def _load_users(self, keys: list[UUID]) -> list[User | None]:
        _log_batch("user_by_id", keys)
        rows = await self.store.users.find_many(id=keys)
        return index_by(keys, rows, lambda user: user.id)

    async def _load_posts(self, keys: list[UUID]) -> list[list[Post]]:
        _log_batch("posts_by_author", keys)
        rows = await self.store.posts.find_many(author_id=keys)
        return group_by(keys, rows, lambda post: post.author_id)

    async def _load_profiles(self, keys: list[UUID]) -> list[Profile | None]:
        _log_batch("profile_by_user", keys)
        rows = await self.store.profiles.find_many(user_id=keys)
        return index_by(keys, rows, lambda profile: profile.user_id)

    async def _load_member_types(self, keys: list[str]) -> list[MemberType | None]:
        _log_batch("member_type_by_id", keys)
        rows = await self.store.member_types.find_many(id=keys)
        return index_by(keys, rows, lambda member_type: member_type.id)

    async def _load_subscribed_authors(self, keys: list[UUID]) -> list[list[User]]:
        _log_batch("subscriptions_out", keys)
        pairs = await self.store.subscriptions.find_authors(keys)
        self.prime_users(author for _, author in pairs)
        return [
            [author for _, author in group]
            for group in group_by(keys, pairs, lambda pair: pair[0])
        ]

    async def _load_subscribers(self, keys: list[UUID]) -> list[list[User]]:
        _log_batch("subscriptions_in", keys)
        pairs = await self.store.subscriptions.find_subscribers(keys)
        self.prime_users(subscriber for _, subscriber in pairs)
        return [
            [subscriber for _, subscriber in group]
            for group in group_by(keys, pairs, lambda pair: pair[0])
        ]


def _log_batch(loader: str, keys: Sequence[Any]) -> None:
    logger.debug("graphql.loader.batch", loader=loader, keys=len(keys))


def _forget(loader: DataLoader[Any, Any], key: Hashable) -> None:
    # DataLoader.clear raises KeyError for keys that were never loaded
    if loader.cache_map.get(key) is not None:
        loader.clear(key)
