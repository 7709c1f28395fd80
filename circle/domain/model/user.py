"""User projection.

Users are registered by the identity collaborator; the engine only reads the
profile attributes it needs to render relationship lists.
"""

from circle.domain.model.common import DomainModel
from circle.domain.value import UserId


class UserSummary(DomainModel):
    """Public profile attributes of a User node."""

    id: UserId
    first_name: str = ""
    last_name: str = ""
    profile_picture: str | None = None  # Opaque media path
