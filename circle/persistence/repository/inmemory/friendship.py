"""In-memory friendship repository for testing."""

from datetime import datetime

from circle.domain.model import AsymmetricFriendship, FriendRequest, UserSummary
from circle.domain.repository import FriendshipRepository
from circle.domain.value import UserId

from .graph import InMemoryGraph


class InMemoryFriendshipRepository(FriendshipRepository):
    """In-memory implementation of FriendshipRepository for testing."""

    def __init__(self, graph: InMemoryGraph) -> None:
        self._graph = graph

    async def user_exists(self, user_id: UserId) -> bool:
        """Check whether a user exists."""
        return user_id in self._graph.users

    async def has_request(self, sender_id: UserId, recipient_id: UserId) -> bool:
        """Check for a request sender -> recipient."""
        return (sender_id, recipient_id) in self._graph.requested

    async def are_friends(self, user_id: UserId, other_id: UserId) -> bool:
        """Check for a friendship edge user -> other."""
        return (user_id, other_id) in self._graph.friends

    async def is_linked(self, user_id: UserId, other_id: UserId) -> bool:
        """Check for a request or friendship in either direction."""
        pairs = [(user_id, other_id), (other_id, user_id)]
        return any(
            pair in self._graph.requested or pair in self._graph.friends
            for pair in pairs
        )

    async def create_request(
        self, sender_id: UserId, recipient_id: UserId, created_at: datetime
    ) -> bool:
        """Create a request unless the pair is already linked."""
        if sender_id not in self._graph.users or recipient_id not in self._graph.users:
            return False
        if await self.is_linked(sender_id, recipient_id):
            return False
        self._graph.requested[(sender_id, recipient_id)] = created_at
        return True

    async def accept_request(
        self, sender_id: UserId, recipient_id: UserId, since: datetime
    ) -> bool:
        """Consume the request and create both friendship edges."""
        if self._graph.requested.pop((sender_id, recipient_id), None) is None:
            return False
        self._graph.friends.setdefault((sender_id, recipient_id), since)
        self._graph.friends.setdefault((recipient_id, sender_id), since)
        return True

    async def delete_request(self, sender_id: UserId, recipient_id: UserId) -> bool:
        """Delete a request sender -> recipient."""
        return self._graph.requested.pop((sender_id, recipient_id), None) is not None

    async def delete_friendship(self, user_id: UserId, friend_id: UserId) -> bool:
        """Delete both friendship edges."""
        forward = self._graph.friends.pop((user_id, friend_id), None)
        backward = self._graph.friends.pop((friend_id, user_id), None)
        return forward is not None or backward is not None

    async def find_friends(self, user_id: UserId) -> list[UserSummary]:
        """Find a user's friends ordered by name."""
        friends = [self._graph.users[uid] for uid in self._graph.friend_ids(user_id)]
        return sorted(friends, key=lambda u: (u.first_name, u.last_name, str(u.id)))

    async def count_friends(self, user_id: UserId) -> int:
        """Count a user's friends."""
        return len(self._graph.friend_ids(user_id))

    async def find_incoming_requests(self, user_id: UserId) -> list[FriendRequest]:
        """Find pending requests sent to the user, newest first."""
        requests = [
            FriendRequest(user=self._graph.users[sender], created_at=created_at)
            for (sender, recipient), created_at in self._graph.requested.items()
            if recipient == user_id
        ]
        return sorted(requests, key=lambda r: r.created_at, reverse=True)

    async def find_outgoing_requests(self, user_id: UserId) -> list[FriendRequest]:
        """Find pending requests sent by the user, newest first."""
        requests = [
            FriendRequest(user=self._graph.users[recipient], created_at=created_at)
            for (sender, recipient), created_at in self._graph.requested.items()
            if sender == user_id
        ]
        return sorted(requests, key=lambda r: r.created_at, reverse=True)

    async def find_asymmetric_friendships(self) -> list[AsymmetricFriendship]:
        """Find friendship edges without a reverse edge."""
        return [
            AsymmetricFriendship(user_id=user, friend_id=friend)
            for (user, friend) in self._graph.friends
            if (friend, user) not in self._graph.friends
        ]
