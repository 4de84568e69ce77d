"""GraphQL schema assembly."""

from typing import Any

import strawberry
import structlog
from graphql import GraphQLError
from strawberry.types import ExecutionContext

from socialgraph.service.settings import settings
from socialgraph.service.store import StoreError

from .gate import depth_limiter
from .mutations import Mutation
from .queries import Query

logger = structlog.get_logger(__name__)


class SocialGraphSchema(strawberry.Schema):
    """Strawberry schema that reports GraphQL errors through structlog."""

    def process_errors(
        self, errors: list[GraphQLError], execution_context: ExecutionContext | None = None
    ) -> None:
        for error in errors:
            original = error.original_error
            context: dict[str, Any] = {"message": error.message, "path": error.path}
            if original is None:
                logger.info("graphql.request.rejected", **context)
            elif isinstance(original, (StoreError, ValueError)):
                logger.info("graphql.resolver.failed", error_type=type(original).__name__, **context)
            else:
                logger.error("graphql.resolver.error", exc_info=original, **context)


def create_schema(max_query_depth: int | None = None) -> SocialGraphSchema:
    """Build the schema with the depth gate installed."""
    if max_query_depth is None:
        max_query_depth = settings.graphql.max_query_depth
    return SocialGraphSchema(
        query=Query,
        mutation=Mutation,
        extensions=[lambda: depth_limiter(max_query_depth)],
    )


schema = create_schema()
