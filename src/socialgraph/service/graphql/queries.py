"""Query root.

Root fields read from the store directly; there is nothing to batch at the
root. The ``users`` list primes ``user_by_id`` with the rows it fetched.
"""

from uuid import UUID

import strawberry
from strawberry.types import Info

from .types import MemberType, MemberTypeId, Post, Profile, User


@strawberry.type
class Query:
    @strawberry.field
    async def users(self, info: Info) -> list[User]:
        rows = await info.context.store.users.find_many()
        info.context.loaders.prime_users(rows)
        return [User.from_model(row) for row in rows]

    @strawberry.field
    async def posts(self, info: Info) -> list[Post]:
        rows = await info.context.store.posts.find_many()
        return [Post.from_model(row) for row in rows]

    @strawberry.field
    async def profiles(self, info: Info) -> list[Profile]:
        rows = await info.context.store.profiles.find_many()
        return [Profile.from_model(row) for row in rows]

    @strawberry.field
    async def member_types(self, info: Info) -> list[MemberType]:
        rows = await info.context.store.member_types.find_many()
        return [MemberType.from_model(row) for row in rows]

    @strawberry.field
    async def user(self, info: Info, id: UUID) -> User | None:
        row = await info.context.store.users.find_unique(id)
        return User.from_model(row) if row else None

    @strawberry.field
    async def member_type(self, info: Info, id: MemberTypeId) -> MemberType | None:
        row = await info.context.store.member_types.find_unique(id.value)
        return MemberType.from_model(row) if row else None

    @strawberry.field
    async def post(self, info: Info, id: UUID) -> Post | None:
        row = await info.context.store.posts.find_unique(id)
        return Post.from_model(row) if row else None

    @strawberry.field
    async def profile(self, info: Info, id: UUID) -> Profile | None:
        row = await info.context.store.profiles.find_unique(id)
        return Profile.from_model(row) if row else None
