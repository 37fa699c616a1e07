"""
Common utilities shared across routers.
"""

from .actor import get_actor_id, require_actor_id

__all__ = [
    "get_actor_id",
    "require_actor_id",
]
