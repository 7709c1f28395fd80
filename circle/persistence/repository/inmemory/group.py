"""In-memory group repository for testing."""

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
from circle.domain.repository import GroupRepository
from circle.domain.value import GroupId, MembershipRole, UserId
from circle.persistence.schema import MUTABLE_GROUP_FIELDS

from .graph import InMemoryGraph


class InMemoryGroupRepository(GroupRepository):
    """In-memory implementation of GroupRepository for testing."""

    def __init__(self, graph: InMemoryGraph) -> None:
        self._graph = graph

    async def find_by_id(self, group_id: GroupId) -> Group | None:
        """Find a group by ID."""
        return self._graph.groups.get(group_id)

    async def name_exists(
        self, name: str, exclude_group_id: GroupId | None = None
    ) -> bool:
        """Check whether a group name is taken (case-insensitive)."""
        lowered = name.lower()
        return any(
            group.name.lower() == lowered
            for group in self._graph.groups.values()
            if group.id != exclude_group_id
        )

    async def create(self, group: Group) -> Group | None:
        """Create the group with its founder as admin member."""
        creator = group.created_by
        if creator not in self._graph.users:
            return None
        self._graph.groups[group.id] = group
        self._graph.memberships[(creator, group.id)] = Membership(
            user_id=creator,
            group_id=group.id,
            role=MembershipRole.ADMIN,
            joined_at=group.created_at,
        )
        self._graph.admins[(creator, group.id)] = group.created_at
        return group

    async def update(self, group_id: GroupId, changes: dict[str, Any]) -> Group | None:
        """Apply whitelisted attribute changes to a group."""
        group = self._graph.groups.get(group_id)
        if group is None:
            return None
        allowed = {k: v for k, v in changes.items() if k in MUTABLE_GROUP_FIELDS}
        updated = Group.model_validate({**group.model_dump(), **allowed})
        self._graph.groups[group_id] = updated
        return updated

    async def is_admin(self, user_id: UserId, group_id: GroupId) -> bool:
        """Check for an admin edge."""
        return (user_id, group_id) in self._graph.admins

    async def is_member(self, user_id: UserId, group_id: GroupId) -> bool:
        """Check for a member edge."""
        return (user_id, group_id) in self._graph.memberships

    async def count_admins(self, group_id: GroupId) -> int:
        """Count a group's admins."""
        return sum(1 for (_, group) in self._graph.admins if group == group_id)

    async def find_membership(
        self, user_id: UserId, group_id: GroupId
    ) -> Membership | None:
        """Find the membership of a user in a group."""
        return self._graph.memberships.get((user_id, group_id))

    async def add_member(
        self, user_id: UserId, group_id: GroupId, joined_at: datetime
    ) -> Membership | None:
        """Add a member idempotently, counting only new memberships.

        Consumes any pending join request of the user for the group.
        """
        if user_id not in self._graph.users or group_id not in self._graph.groups:
            return None
        for request_id, request in list(self._graph.join_requests.items()):
            if (request.user_id, request.group_id) == (user_id, group_id):
                del self._graph.join_requests[request_id]
        existing = self._graph.memberships.get((user_id, group_id))
        if existing is not None:
            return existing
        membership = Membership(
            user_id=user_id,
            group_id=group_id,
            role=MembershipRole.MEMBER,
            joined_at=joined_at,
        )
        self._graph.memberships[(user_id, group_id)] = membership
        self._graph.adjust_member_count(group_id, 1)
        return membership

    async def remove_member(self, user_id: UserId, group_id: GroupId) -> Group | None:
        """Remove the member's edges and decrement the count.

        Refuses (returns None) when the user is the last admin and other
        members remain.
        """
        key = (user_id, group_id)
        if key not in self._graph.memberships:
            return None
        if key in self._graph.admins and self._graph.groups[group_id].member_count > 1:
            if await self.count_admins(group_id) <= 1:
                return None
        del self._graph.memberships[key]
        self._graph.admins.pop(key, None)
        return self._graph.adjust_member_count(group_id, -1)

    async def promote_member(
        self, user_id: UserId, group_id: GroupId, since: datetime
    ) -> bool:
        """Give a member the admin role."""
        membership = self._graph.memberships.get((user_id, group_id))
        if membership is None:
            return False
        self._graph.memberships[(user_id, group_id)] = membership.model_copy(
            update={"role": MembershipRole.ADMIN}
        )
        self._graph.admins.setdefault((user_id, group_id), since)
        return True

    async def find_members(self, group_id: GroupId) -> list[GroupMember]:
        """Find a group's members ordered by join time."""
        members = [
            GroupMember(
                user=self._graph.users[user],
                role=membership.role,
                joined_at=membership.joined_at,
            )
            for (user, group), membership in self._graph.memberships.items()
            if group == group_id
        ]
        return sorted(members, key=lambda m: (m.joined_at, str(m.user.id)))

    async def find_admin_ids(self, group_id: GroupId) -> list[UserId]:
        """Find the IDs of a group's admins."""
        admins = [
            (since, user)
            for (user, group), since in self._graph.admins.items()
            if group == group_id
        ]
        return [user for _, user in sorted(admins, key=lambda a: (a[0], str(a[1])))]

    async def find_groups_for_user(self, user_id: UserId) -> list[UserGroup]:
        """Find a user's groups, most recently joined first."""
        groups = [
            UserGroup(
                group=self._graph.groups[group],
                role=membership.role,
                joined_at=membership.joined_at,
            )
            for (user, group), membership in self._graph.memberships.items()
            if user == user_id
        ]
        return sorted(groups, key=lambda g: g.joined_at, reverse=True)

    async def search(self, query: str) -> list[Group]:
        """Case-insensitive substring search over active groups."""
        lowered = query.lower()
        matches = [
            group
            for group in self._graph.groups.values()
            if group.is_active
            and any(
                lowered in field.lower()
                for field in (group.name, group.description, group.category)
            )
        ]
        return sorted(matches, key=lambda g: (-g.member_count, g.name))

    async def load_snapshot(
        self, group_id: GroupId, viewer_id: UserId
    ) -> GroupSnapshot | None:
        """Read the group with the viewer's flags."""
        group = self._graph.groups.get(group_id)
        if group is None:
            return None
        members = await self.find_members(group_id)
        member_ids = self._graph.member_ids(group_id)
        has_requested = any(
            request.user_id == viewer_id and request.group_id == group_id
            for request in self._graph.join_requests.values()
        )
        return GroupSnapshot(
            group=group,
            members=members,
            is_admin=(viewer_id, group_id) in self._graph.admins,
            is_member=viewer_id in member_ids,
            has_requested=has_requested,
            friend_count=len(self._graph.friend_ids(viewer_id) & member_ids),
        )

    async def find_member_count_drift(self) -> tuple[int, list[MemberCountDrift]]:
        """Compare each cached member_count with the real membership count."""
        drift = []
        for group in self._graph.groups.values():
            actual = len(self._graph.member_ids(group.id))
            if group.member_count != actual:
                drift.append(
                    MemberCountDrift(
                        group_id=group.id, cached=group.member_count, actual=actual
                    )
                )
        return len(self._graph.groups), drift
