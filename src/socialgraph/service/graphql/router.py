"""Mount the GraphQL endpoint on a FastAPI application."""

import strawberry
import structlog
from fastapi import FastAPI
from strawberry.fastapi import GraphQLRouter

from socialgraph.service.settings import settings

from .context import get_graphql_context
from .schema import schema as default_schema

logger = structlog.get_logger(__name__)


def create_graphql_router(schema: strawberry.Schema | None = None) -> GraphQLRouter:
    """Create the GraphQL router with a per-request context getter."""
    return GraphQLRouter(
        schema or default_schema,
        context_getter=get_graphql_context,
        graphql_ide="graphiql" if settings.graphql.graphiql else None,
    )


def mount_graphql(
    app: FastAPI, path: str | None = None, schema: strawberry.Schema | None = None
) -> bool:
    """Mount the GraphQL endpoint on ``app`` at ``path``."""
    path = path or settings.graphql.path
    app.include_router(create_graphql_router(schema), prefix=path)
    logger.info("graphql.mounted", path=path)
    return True
