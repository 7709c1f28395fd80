"""JoinRequest repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from circle.domain.model import JoinRequest, Membership
from circle.domain.value import GroupId, JoinRequestId, UserId


class JoinRequestRepository(ABC):
    """Repository for JoinRequest nodes and their SUBMITTED / FOR_GROUP edges."""

    @abstractmethod
    async def find_by_id(self, request_id: JoinRequestId) -> JoinRequest | None:
        """Find a join request by ID.

        Args:
            request_id: The request's unique identifier

        Returns:
            The request if it still exists, None otherwise
        """
        pass

    @abstractmethod
    async def find_pending(
        self, user_id: UserId, group_id: GroupId
    ) -> JoinRequest | None:
        """Find the pending request of a user for a group."""
        pass

    @abstractmethod
    async def create(self, request: JoinRequest) -> JoinRequest | None:
        """Create a request unless one already exists for the (user, group) pair.

        The duplicate check and the creation happen in one atomic write.

        Returns:
            The created request, None if a request already existed or the
            user or group is missing
        """
        pass

    @abstractmethod
    async def approve(
        self, request_id: JoinRequestId, joined_at: datetime
    ) -> Membership | None:
        """Delete the request and admit its submitter, atomically.

        The MEMBER_OF edge is merged and member_count incremented only when
        the edge was created.

        Returns:
            The resulting membership, None if the request no longer exists
        """
        pass

    @abstractmethod
    async def delete(self, request_id: JoinRequestId) -> bool:
        """Delete a request.

        Returns:
            True if a request was deleted
        """
        pass

    @abstractmethod
    async def find_by_user(self, user_id: UserId) -> list[JoinRequest]:
        """Find the requests a user has submitted, newest first."""
        pass

    @abstractmethod
    async def find_by_group(self, group_id: GroupId) -> list[JoinRequest]:
        """Find the pending requests for a group, oldest first."""
        pass

    @abstractmethod
    async def find_for_admin(self, admin_id: UserId) -> list[JoinRequest]:
        """Find pending requests for every group the user administers, oldest first."""
        pass
