"""Query gate: parse, validate and depth-check a query before execution.

The depth rule follows the usual GraphQL convention: root fields sit at
depth 0 and every nested selection set adds one. Fragments are followed,
introspection fields are ignored.
"""

from __future__ import annotations

import strawberry
from graphql import GraphQLError, GraphQLSchema, parse, specified_rules, validate
from strawberry.extensions import QueryDepthLimiter

MAX_QUERY_DEPTH = 5


def depth_limiter(max_depth: int = MAX_QUERY_DEPTH) -> QueryDepthLimiter:
    """Schema extension rejecting operations nested deeper than ``max_depth``."""
    return QueryDepthLimiter(max_depth=max_depth)


def graphql_core_schema(schema: strawberry.Schema | GraphQLSchema) -> GraphQLSchema:
    """Return the graphql-core schema a Strawberry schema was compiled to."""
    if isinstance(schema, GraphQLSchema):
        return schema
    # Strawberry keeps the compiled schema on a private attribute only
    return schema._schema


def validate_query(
    schema: strawberry.Schema | GraphQLSchema, query: str, *, max_depth: int = MAX_QUERY_DEPTH
) -> list[GraphQLError]:
    """Run the full gate on ``query`` without executing it.

    Returns:
        Syntax, schema and depth errors. Empty when the query may execute.
    """
    try:
        document = parse(query)
    except GraphQLError as error:
        return [error]

    rules = [*specified_rules, *depth_limiter(max_depth).validation_rules]
    return list(validate(graphql_core_schema(schema), document, rules))
