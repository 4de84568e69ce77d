"""GraphQL input types for mutations."""

from typing import Any

import strawberry

from .types import MemberTypeId


@strawberry.input
class CreateUserInput:
    name: str
    balance: float = 0


@strawberry.input
class CreatePostInput:
    author_id: str
    content: str
    title: str


@strawberry.input
class CreateProfileInput:
    user_id: str
    is_male: bool
    member_type_id: MemberTypeId
    year_of_birth: int


@strawberry.input
class ChangeUserInput:
    name: str | None = strawberry.UNSET


@strawberry.input
class ChangePostInput:
    title: str | None = strawberry.UNSET


@strawberry.input
class ChangeProfileInput:
    is_male: bool | None = strawberry.UNSET


def supplied_fields(dto: object) -> dict[str, Any]:
    """Fields of a change input that carry a value. Omitted and null fields are left alone."""
    return {
        name: value
        for name, value in vars(dto).items()
        if value is not strawberry.UNSET and value is not None
    }
