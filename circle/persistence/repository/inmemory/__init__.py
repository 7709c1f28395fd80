"""In-memory repository implementations for testing."""

from .friendship import InMemoryFriendshipRepository
from .graph import InMemoryGraph
from .group import InMemoryGroupRepository
from .join_request import InMemoryJoinRequestRepository
from .suggestion import InMemorySuggestionRepository

__all__ = [
    "InMemoryGraph",
    "InMemoryFriendshipRepository",
    "InMemoryGroupRepository",
    "InMemoryJoinRequestRepository",
    "InMemorySuggestionRepository",
]
