"""GraphQL object types.

Scalar fields are copied from the ORM row. Relation fields resolve through
the request's loaders so that sibling objects in a list share one query.
Foreign keys are carried as private fields and are not part of the schema.
"""

from uuid import UUID

import strawberry
from strawberry.types import Info

from socialgraph.service import models

MemberTypeId = strawberry.enum(
    models.MemberTypeId, name="MemberTypeId", description="Membership tier identifier"
)


@strawberry.type
class MemberType:
    id: MemberTypeId
    discount: float
    posts_limit_per_month: int

    @classmethod
    def from_model(cls, row: models.MemberType) -> "MemberType":
        return cls(
            id=MemberTypeId(row.id),
            discount=row.discount,
            posts_limit_per_month=row.posts_limit_per_month,
        )


@strawberry.type
class Post:
    id: UUID
    title: str
    content: str
    author_id: strawberry.Private[UUID]

    @classmethod
    def from_model(cls, row: models.Post) -> "Post":
        return cls(id=row.id, title=row.title, content=row.content, author_id=row.author_id)


@strawberry.type
class Profile:
    id: UUID
    is_male: bool
    year_of_birth: int
    user_id: strawberry.Private[UUID]
    member_type_id: strawberry.Private[MemberTypeId]

    @strawberry.field
    async def member_type(self, info: Info) -> MemberType | None:
        row = await info.context.loaders.member_type_by_id.load(self.member_type_id.value)
        return MemberType.from_model(row) if row else None

    @classmethod
    def from_model(cls, row: models.Profile) -> "Profile":
        return cls(
            id=row.id,
            is_male=row.is_male,
            year_of_birth=row.year_of_birth,
            user_id=row.user_id,
            member_type_id=MemberTypeId(row.member_type_id),
        )


@strawberry.type
class User:
    id: UUID
    name: str
    balance: float

    @strawberry.field
    async def profile(self, info: Info) -> Profile | None:
        row = await info.context.loaders.profile_by_user.load(self.id)
        return Profile.from_model(row) if row else None

    @strawberry.field
    async def posts(self, info: Info) -> list[Post]:
        rows = await info.context.loaders.posts_by_author.load(self.id)
        return [Post.from_model(row) for row in rows]

    @strawberry.field(description="Authors this user is subscribed to.")
    async def user_subscribed_to(self, info: Info) -> list["User"]:
        rows = await info.context.loaders.subscriptions_out.load(self.id)
        return [User.from_model(row) for row in rows]

    @strawberry.field(description="Users subscribed to this user.")
    async def subscribed_to_user(self, info: Info) -> list["User"]:
        rows = await info.context.loaders.subscriptions_in.load(self.id)
        return [User.from_model(row) for row in rows]

    @classmethod
    def from_model(cls, row: models.User) -> "User":
        return cls(id=row.id, name=row.name, balance=row.balance)
