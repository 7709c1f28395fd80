"""FalkorDB repository implementations."""

from circle.persistence.repository.friendship import FalkorFriendshipRepository
from circle.persistence.repository.group import FalkorGroupRepository
from circle.persistence.repository.join_request import FalkorJoinRequestRepository
from circle.persistence.repository.suggestion import FalkorSuggestionRepository

__all__ = [
    "FalkorFriendshipRepository",
    "FalkorGroupRepository",
    "FalkorJoinRequestRepository",
    "FalkorSuggestionRepository",
]
