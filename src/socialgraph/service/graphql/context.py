"""GraphQL context: carries the request's session, store and loaders into resolvers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import BaseContext

from socialgraph.service.db import get_async_session
from socialgraph.service.store import SocialStore

from .loaders import GraphQLLoaders


class GraphQLContext(BaseContext):
    """Context passed to every GraphQL resolver. One instance per request."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__()
        self.session = session
        self.store = SocialStore(session)
        self.loaders = GraphQLLoaders(self.store)


async def get_graphql_context(
    session: AsyncSession = Depends(get_async_session),
) -> GraphQLContext:
    """FastAPI dependency building a fresh context, and fresh loaders, per request."""
    return GraphQLContext(session)
