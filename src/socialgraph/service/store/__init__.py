"""
Entity store for the GraphQL layer.

Usage Examples:

    from socialgraph.service.store import SocialStore

    store = SocialStore(session)
    posts = await store.posts.find_many(author_id=[user_id])
    await store.subscriptions.create(subscriber_id, author_id)
"""

from .exceptions import ConstraintViolationError, NotFoundError, StoreError
from .service import (
    EntityStore,
    MemberTypeStore,
    PostStore,
    ProfileStore,
    SocialStore,
    SubscriptionStore,
    UserStore,
)

__all__ = [
    "StoreError",
    "NotFoundError",
    "ConstraintViolationError",
    "EntityStore",
    "UserStore",
    "PostStore",
    "ProfileStore",
    "MemberTypeStore",
    "SubscriptionStore",
    "SocialStore",
]
