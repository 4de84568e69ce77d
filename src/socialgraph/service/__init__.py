"""
Socialgraph service - GraphQL API over users, posts, profiles and member types.

This package provides:
- An entity store over SQLAlchemy (users, posts, profiles, member types, subscriptions)
- A Strawberry GraphQL schema with per-request batched loaders
- A depth-limited query gate
- A FastAPI application and a click CLI
"""

__version__ = "1.0.0"


def get_version() -> str:
    """Get service version."""
    return __version__
