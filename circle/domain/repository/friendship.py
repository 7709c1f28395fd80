"""Friendship repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from circle.domain.model import AsymmetricFriendship, FriendRequest, UserSummary
from circle.domain.value import UserId


class FriendshipRepository(ABC):
    """Repository for REQUESTED and FRIENDS_WITH edges between users.

    A pending request and a friendship are two mutually exclusive edge
    types, so every state question is an existence check.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def user_exists(self, user_id: UserId) -> bool:
        """Check whether a User node exists.

        Args:
            user_id: The user's ID

        Returns:
            True if the user exists
        """
        pass

    @abstractmethod
    async def has_request(self, sender_id: UserId, recipient_id: UserId) -> bool:
        """Check for a REQUESTED edge sender -> recipient.

        Args:
            sender_id: User who sent the request
            recipient_id: User who received it

        Returns:
            True if the directed edge exists
        """
        pass

    @abstractmethod
    async def are_friends(self, user_id: UserId, other_id: UserId) -> bool:
        """Check for a FRIENDS_WITH edge user -> other.

        Args:
            user_id: First user
            other_id: Second user

        Returns:
            True if the users are friends
        """
        pass

    @abstractmethod
    async def is_linked(self, user_id: UserId, other_id: UserId) -> bool:
        """Check for any REQUESTED or FRIENDS_WITH edge, in either direction.

        Args:
            user_id: First user
            other_id: Second user

        Returns:
            True if a request or a friendship links the pair
        """
        pass

    @abstractmethod
    async def create_request(
        self, sender_id: UserId, recipient_id: UserId, created_at: datetime
    ) -> bool:
        """Create a REQUESTED edge if the pair is still unlinked.

        The existence re-check and the creation happen in one atomic write.

        Args:
            sender_id: Requesting user
            recipient_id: Requested user
            created_at: Request timestamp

        Returns:
            True if the edge was created, False if a request or friendship
            appeared in the meantime (or a user is missing)
        """
        pass

    @abstractmethod
    async def accept_request(
        self, sender_id: UserId, recipient_id: UserId, since: datetime
    ) -> bool:
        """Consume a REQUESTED edge and create both FRIENDS_WITH edges.

        Args:
            sender_id: User who sent the request
            recipient_id: User accepting it
            since: Friendship timestamp

        Returns:
            True if the request existed and was converted, False otherwise
        """
        pass

    @abstractmethod
    async def delete_request(self, sender_id: UserId, recipient_id: UserId) -> bool:
        """Delete a REQUESTED edge sender -> recipient.

        Returns:
            True if an edge was deleted
        """
        pass

    @abstractmethod
    async def delete_friendship(self, user_id: UserId, friend_id: UserId) -> bool:
        """Delete both FRIENDS_WITH edges between two users.

        Returns:
            True if any edge was deleted
        """
        pass

    @abstractmethod
    async def find_friends(self, user_id: UserId) -> list[UserSummary]:
        """Find a user's friends ordered by first name, last name, id."""
        pass

    @abstractmethod
    async def count_friends(self, user_id: UserId) -> int:
        """Count a user's friends."""
        pass

    @abstractmethod
    async def find_incoming_requests(self, user_id: UserId) -> list[FriendRequest]:
        """Find pending requests sent to the user, newest first."""
        pass

    @abstractmethod
    async def find_outgoing_requests(self, user_id: UserId) -> list[FriendRequest]:
        """Find pending requests sent by the user, newest first."""
        pass

    @abstractmethod
    async def find_asymmetric_friendships(self) -> list[AsymmetricFriendship]:
        """Find FRIENDS_WITH edges that lack their reverse edge."""
        pass
