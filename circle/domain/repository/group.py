"""Group repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from circle.domain.model import (
    Group,
    GroupMember,
    GroupSnapshot,
    MemberCountDrift,
    Membership,
    UserGroup,
)
from circle.domain.value import GroupId, UserId


class GroupRepository(ABC):
    """Repository for Group nodes and the MEMBER_OF / ADMIN_OF edges.

    Every write that adds or removes a MEMBER_OF edge adjusts the group's
    member_count in the same atomic query.
    """

    @abstractmethod
    async def find_by_id(self, group_id: GroupId) -> Group | None:
        """Find a group by ID.

        Args:
            group_id: The group's unique identifier

        Returns:
            The group if found, None otherwise
        """
        pass

    @abstractmethod
    async def name_exists(
        self, name: str, exclude_group_id: GroupId | None = None
    ) -> bool:
        """Check whether a group name is taken (case-insensitive).

        Args:
            name: Candidate group name
            exclude_group_id: Group to ignore, used when renaming

        Returns:
            True if another group already uses the name
        """
        pass

    @abstractmethod
    async def create(self, group: Group) -> Group | None:
        """Create a group together with its founder's memberships.

        Creates the Group node, MEMBER_OF(role=admin) and ADMIN_OF from the
        creator (group.created_by) in one atomic write. The group's
        member_count must be 1.

        Args:
            group: The group to create

        Returns:
            The created group, None if the creator does not exist
        """
        pass

    @abstractmethod
    async def update(self, group_id: GroupId, changes: dict[str, Any]) -> Group | None:
        """Apply a partial update to a group's mutable attributes.

        Args:
            group_id: Group to update
            changes: Attribute name -> new value

        Returns:
            The updated group, None if it does not exist
        """
        pass

    @abstractmethod
    async def is_admin(self, user_id: UserId, group_id: GroupId) -> bool:
        """Check for an ADMIN_OF edge."""
        pass

    @abstractmethod
    async def is_member(self, user_id: UserId, group_id: GroupId) -> bool:
        """Check for a MEMBER_OF edge."""
        pass

    @abstractmethod
    async def count_admins(self, group_id: GroupId) -> int:
        """Count the users holding ADMIN_OF on a group."""
        pass

    @abstractmethod
    async def find_membership(
        self, user_id: UserId, group_id: GroupId
    ) -> Membership | None:
        """Find the MEMBER_OF edge of a user in a group."""
        pass

    @abstractmethod
    async def add_member(
        self, user_id: UserId, group_id: GroupId, joined_at: datetime
    ) -> Membership | None:
        """Add a member with role=member, idempotently.

        The edge is merged; member_count is incremented only when the edge
        was actually created.

        Returns:
            The membership, None if the user or group does not exist
        """
        pass

    @abstractmethod
    async def remove_member(self, user_id: UserId, group_id: GroupId) -> Group | None:
        """Delete a user's MEMBER_OF (and ADMIN_OF) edge and decrement the count.

        Returns:
            The updated group, None if no membership edge matched
        """
        pass

    @abstractmethod
    async def promote_member(
        self, user_id: UserId, group_id: GroupId, since: datetime
    ) -> bool:
        """Give a member the admin role and an ADMIN_OF edge.

        Returns:
            True if the member was found and promoted
        """
        pass

    @abstractmethod
    async def find_members(self, group_id: GroupId) -> list[GroupMember]:
        """Find a group's members ordered by join time."""
        pass

    @abstractmethod
    async def find_admin_ids(self, group_id: GroupId) -> list[UserId]:
        """Find the IDs of a group's admins."""
        pass

    @abstractmethod
    async def find_groups_for_user(self, user_id: UserId) -> list[UserGroup]:
        """Find the groups a user belongs to, most recently joined first."""
        pass

    @abstractmethod
    async def search(self, query: str) -> list[Group]:
        """Find active groups whose name, description or category contains the query.

        Matching is case-insensitive. Results are ordered by member_count
        descending, then name.
        """
        pass

    @abstractmethod
    async def load_snapshot(
        self, group_id: GroupId, viewer_id: UserId
    ) -> GroupSnapshot | None:
        """Read a group, its members and the viewer-relative flags at once.

        Must run as a single read so that the flags and counts are
        consistent with each other.

        Returns:
            The snapshot, None if the group does not exist
        """
        pass

    @abstractmethod
    async def find_member_count_drift(self) -> tuple[int, list[MemberCountDrift]]:
        """Compare every cached member_count with its MEMBER_OF edge count.

        Returns:
            Number of groups checked and the groups that drifted
        """
        pass
