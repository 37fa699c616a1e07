"""
Centralized constants for the backend application.
Avoids magic strings and repeated constants.

Usage:
    from shared.config.constants import CascadeOperation, RoutePrefix

    if result.operation == CascadeOperation.SOFT_DELETE:
        ...
"""

from enum import Enum
from typing import Final


# =============================================================================
# Cascade operations
# =============================================================================


class CascadeOperation(str, Enum):
    """Terminal actions the dependency engine can apply to a visited node."""

    COUNT = "count"
    HARD_DELETE = "delete"
    SOFT_DELETE = "soft_delete"


# =============================================================================
# Route groups
# =============================================================================


class RoutePrefix:
    """URL prefixes of the two controller groups."""

    ADMIN: Final[str] = "/admin"
    DEVICE: Final[str] = "/device/api/v1"


# Header carrying the acting user's id for added_by / updated_by.
ACTOR_HEADER: Final[str] = "X-User-Id"


# =============================================================================
# Audit fields
# =============================================================================


class AuditFields:
    """Columns managed by the server, never accepted from request bodies."""

    ADDED_BY: Final[str] = "added_by"
    UPDATED_BY: Final[str] = "updated_by"
    IS_DELETED: Final[str] = "is_deleted"

    PROTECTED: Final[frozenset[str]] = frozenset(
        {"id", "added_by", "updated_by", "created_at", "updated_at"}
    )


# =============================================================================
# Validation limits
# =============================================================================


class Limits:
    """Validation limits."""

    MAX_NAME_LENGTH: Final[int] = 200
    MAX_TEXT_LENGTH: Final[int] = 5000
    MAX_CODE_LENGTH: Final[int] = 50
    MAX_URL_LENGTH: Final[int] = 2048

    # Bulk operations
    MAX_BULK_ITEMS: Final[int] = 500
