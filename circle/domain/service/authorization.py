"""Authorization guard."""

import logfire

from circle.domain.error import UnauthorizedError
from circle.domain.repository import FriendshipRepository, GroupRepository
from circle.domain.value import GroupId, UserId

from .base import Service


class AuthorizationGuard(Service):
    """Stateless relationship checks consulted before role-gated writes.

    Each predicate is a single edge existence check. A write that matches
    zero rows is never treated as the authorization check itself.
    """

    def __init__(
        self,
        group_repository: GroupRepository,
        friendship_repository: FriendshipRepository,
    ) -> None:
        """Initialize authorization guard.

        Args:
            group_repository: Group repository (MEMBER_OF / ADMIN_OF edges)
            friendship_repository: Friendship repository (FRIENDS_WITH edges)
        """
        self.group_repository = group_repository
        self.friendship_repository = friendship_repository

    async def is_admin(self, user_id: UserId, group_id: GroupId) -> bool:
        """Check whether the user holds ADMIN_OF on the group."""
        return await self.group_repository.is_admin(user_id, group_id)

    async def is_member(self, user_id: UserId, group_id: GroupId) -> bool:
        """Check whether the user holds MEMBER_OF on the group."""
        return await self.group_repository.is_member(user_id, group_id)

    async def is_friend(self, user_id: UserId, other_id: UserId) -> bool:
        """Check whether the two users are friends."""
        return await self.friendship_repository.are_friends(user_id, other_id)

    async def require_admin(
        self, user_id: UserId, group_id: GroupId, action: str
    ) -> None:
        """Ensure the user administers the group.

        Args:
            user_id: Acting user
            group_id: Target group
            action: Short description of the attempted action, for the error

        Raises:
            UnauthorizedError: If the user holds no ADMIN_OF edge
        """
        if not await self.is_admin(user_id, group_id):
            logfire.warn(
                "Admin check failed",
                user_id=str(user_id),
                group_id=str(group_id),
                action=action,
            )
            raise UnauthorizedError(str(user_id), action, str(group_id))
