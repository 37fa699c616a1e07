"""
Acting user resolution.

Authentication is handled in front of this service; requests carry the
acting user's id in the X-User-Id header and it is only used to fill the
added_by / updated_by audit columns.
"""

from typing import Optional

from fastapi import Depends, Header

from shared.config.constants import ACTOR_HEADER
from shared.utils.exceptions import ValidationError


def get_actor_id(
    actor_id: Optional[int] = Header(default=None, alias=ACTOR_HEADER),
) -> Optional[int]:
    """Acting user id, or None when the header is absent."""
    return actor_id


def require_actor_id(actor_id: Optional[int] = Depends(get_actor_id)) -> int:
    """Dependency for mutating endpoints: the actor header is mandatory."""
    if actor_id is None:
        raise ValidationError(f"Missing {ACTOR_HEADER} header")
    return actor_id
