"""Repository interfaces for the relationship engine.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from circle.domain.repository.friendship import FriendshipRepository
from circle.domain.repository.group import GroupRepository
from circle.domain.repository.join_request import JoinRequestRepository
from circle.domain.repository.suggestion import SuggestionRepository

__all__ = [
    "FriendshipRepository",
    "GroupRepository",
    "JoinRequestRepository",
    "SuggestionRepository",
]
