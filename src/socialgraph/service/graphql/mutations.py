"""Mutation root.

Store errors are not caught here: they surface as field errors with the
mutation field's path, and the field itself resolves to null.

Each write drops the loader keys it affects, so later fields of the same
request read what the store now holds.
"""

from uuid import UUID

import strawberry
from strawberry.types import Info

from .inputs import (
    ChangePostInput,
    ChangeProfileInput,
    ChangeUserInput,
    CreatePostInput,
    CreateProfileInput,
    CreateUserInput,
    supplied_fields,
)
from .types import Post, Profile, User


def parse_uuid(value: str, field: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"{field} must be a UUID, got {value!r}") from exc


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_user(self, info: Info, dto: CreateUserInput) -> User | None:
        row = await info.context.store.users.create({"name": dto.name, "balance": dto.balance})
        return User.from_model(row)

    @strawberry.mutation
    async def create_post(self, info: Info, dto: CreatePostInput) -> Post | None:
        row = await info.context.store.posts.create(
            {
                "author_id": parse_uuid(dto.author_id, "authorId"),
                "title": dto.title,
                "content": dto.content,
            }
        )
        info.context.loaders.forget_posts(row.author_id)
        return Post.from_model(row)

    @strawberry.mutation
    async def create_profile(self, info: Info, dto: CreateProfileInput) -> Profile | None:
        row = await info.context.store.profiles.create(
            {
                "user_id": parse_uuid(dto.user_id, "userId"),
                "is_male": dto.is_male,
                "member_type_id": dto.member_type_id.value,
                "year_of_birth": dto.year_of_birth,
            }
        )
        info.context.loaders.forget_profile(row.user_id)
        return Profile.from_model(row)

    @strawberry.mutation
    async def change_user(self, info: Info, id: UUID, dto: ChangeUserInput) -> User | None:
        row = await info.context.store.users.update(id, supplied_fields(dto))
        return User.from_model(row)

    @strawberry.mutation
    async def change_post(self, info: Info, id: UUID, dto: ChangePostInput) -> Post | None:
        row = await info.context.store.posts.update(id, supplied_fields(dto))
        return Post.from_model(row)

    @strawberry.mutation
    async def change_profile(
        self, info: Info, id: UUID, dto: ChangeProfileInput
    ) -> Profile | None:
        row = await info.context.store.profiles.update(id, supplied_fields(dto))
        return Profile.from_model(row)

    @strawberry.mutation
    async def delete_user(self, info: Info, id: UUID) -> bool | None:
        await info.context.store.users.delete(id)
        info.context.loaders.forget_user(id)
        return True

    @strawberry.mutation
    async def delete_post(self, info: Info, id: UUID) -> bool | None:
        row = await info.context.store.posts.delete(id)
        info.context.loaders.forget_posts(row.author_id)
        return True

    @strawberry.mutation
    async def delete_profile(self, info: Info, id: UUID) -> bool | None:
        row = await info.context.store.profiles.delete(id)
        info.context.loaders.forget_profile(row.user_id)
        return True

    @strawberry.mutation
    async def subscribe_to(self, info: Info, user_id: UUID, author_id: UUID) -> User | None:
        await info.context.store.subscriptions.create(user_id, author_id)
        info.context.loaders.forget_subscription(user_id, author_id)
        row = await info.context.store.users.get(user_id)
        return User.from_model(row)

    @strawberry.mutation
    async def unsubscribe_from(self, info: Info, user_id: UUID, author_id: UUID) -> bool | None:
        await info.context.store.subscriptions.delete(user_id, author_id)
        info.context.loaders.forget_subscription(user_id, author_id)
        return True
