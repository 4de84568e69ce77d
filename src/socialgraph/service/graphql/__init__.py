"""GraphQL API for users, posts, profiles and member types.

Provides:
- Schema types, queries and mutations
- Per-request DataLoaders for relation fields
- The query gate (parse, validate, depth limit)
- FastAPI router mounting
"""

from .context import GraphQLContext, get_graphql_context
from .gate import MAX_QUERY_DEPTH, depth_limiter, validate_query
from .loaders import GraphQLLoaders
from .router import create_graphql_router, mount_graphql
from .schema import SocialGraphSchema, create_schema, schema

__all__ = [
    "GraphQLContext",
    "get_graphql_context",
    "MAX_QUERY_DEPTH",
    "depth_limiter",
    "validate_query",
    "GraphQLLoaders",
    "create_graphql_router",
    "mount_graphql",
    "SocialGraphSchema",
    "create_schema",
    "schema",
]
