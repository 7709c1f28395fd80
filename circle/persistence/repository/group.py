"""FalkorDB implementation of Group repository."""

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
from circle.domain.value import GroupId, UserId
from circle.persistence.graph import GraphStore
from circle.persistence.mappers import (
    changes_to_params,
    group_to_params,
    props_to_group,
    row_to_group_member,
    row_to_membership,
    row_to_user_group,
    to_group_id,
    to_timestamp,
    to_user_id,
)
from circle.persistence.schema import MUTABLE_GROUP_FIELDS


class FalkorGroupRepository(GroupRepository):
    """FalkorDB implementation of GroupRepository."""

    def __init__(self, store: GraphStore) -> None:
        """Initialize repository with the graph store.

        Args:
            store: Shared graph store (connection pool)
        """
        self.store = store

    async def find_by_id(self, group_id: GroupId) -> Group | None:
        """Find a group by ID."""
        rows = await self.store.read(
            "MATCH (g:Group {id: $id}) RETURN g",
            {"id": str(group_id)},
        )
        return props_to_group(rows[0][0]) if rows else None

    async def name_exists(
        self, name: str, exclude_group_id: GroupId | None = None
    ) -> bool:
        """Check whether a group name is taken (case-insensitive)."""
        count = await self.store.scalar(
            "MATCH (g:Group) "
            "WHERE toLower(g.name) = toLower($name) AND g.id <> $exclude "
            "RETURN count(g)",
            {
                "name": name,
                "exclude": str(exclude_group_id) if exclude_group_id else "",
            },
        )
        return bool(count)

    async def create(self, group: Group) -> Group | None:
        """Create the group node with its founder's MEMBER_OF and ADMIN_OF edges."""
        params = group_to_params(group)
        params["creator"] = str(group.created_by)
        rows = await self.store.query(
            "MATCH (u:User {id: $creator}) "
            "CREATE (g:Group {id: $id, name: $name, description: $description, "
            "category: $category, rules: $rules, cover_image: $cover_image, "
            "privacy: $privacy, member_count: $member_count, "
            "created_by: $created_by, created_at: $created_at, "
            "is_active: $is_active}) "
            "CREATE (u)-[:MEMBER_OF {role: 'admin', joined_at: $created_at}]->(g) "
            "CREATE (u)-[:ADMIN_OF {since: $created_at}]->(g) "
            "RETURN g",
            params,
        )
        return props_to_group(rows[0][0]) if rows else None

    async def update(self, group_id: GroupId, changes: dict[str, Any]) -> Group | None:
        """Apply whitelisted attribute changes to a group."""
        params = changes_to_params(
            {k: v for k, v in changes.items() if k in MUTABLE_GROUP_FIELDS}
        )
        if not params:
            return await self.find_by_id(group_id)

        assignments = ", ".join(f"g.{key} = ${key}" for key in sorted(params))
        params["group_id"] = str(group_id)
        rows = await self.store.query(
            f"MATCH (g:Group {{id: $group_id}}) SET {assignments} RETURN g",
            params,
        )
        return props_to_group(rows[0][0]) if rows else None

    async def is_admin(self, user_id: UserId, group_id: GroupId) -> bool:
        """Check for an ADMIN_OF edge."""
        count = await self.store.scalar(
            "MATCH (:User {id: $user})-[a:ADMIN_OF]->(:Group {id: $group}) "
            "RETURN count(a)",
            {"user": str(user_id), "group": str(group_id)},
        )
        return bool(count)

    async def is_member(self, user_id: UserId, group_id: GroupId) -> bool:
        """Check for a MEMBER_OF edge."""
        count = await self.store.scalar(
            "MATCH (:User {id: $user})-[m:MEMBER_OF]->(:Group {id: $group}) "
            "RETURN count(m)",
            {"user": str(user_id), "group": str(group_id)},
        )
        return bool(count)

    async def count_admins(self, group_id: GroupId) -> int:
        """Count the users holding ADMIN_OF on a group."""
        count = await self.store.scalar(
            "MATCH (:User)-[a:ADMIN_OF]->(:Group {id: $group}) RETURN count(a)",
            {"group": str(group_id)},
        )
        return int(count or 0)

    async def find_membership(
        self, user_id: UserId, group_id: GroupId
    ) -> Membership | None:
        """Find the MEMBER_OF edge of a user in a group."""
        rows = await self.store.read(
            "MATCH (u:User {id: $user})-[m:MEMBER_OF]->(g:Group {id: $group}) "
            "RETURN u.id, g.id, m.role, m.joined_at",
            {"user": str(user_id), "group": str(group_id)},
        )
        return row_to_membership(*rows[0]) if rows else None

    async def add_member(
        self, user_id: UserId, group_id: GroupId, joined_at: datetime
    ) -> Membership | None:
        """Merge a member edge, incrementing member_count only on creation.

        Any pending join request of the user for the group is consumed in
        the same write.
        """
        rows = await self.store.query(
            "MATCH (u:User {id: $user}), (g:Group {id: $group}) "
            "MERGE (u)-[m:MEMBER_OF]->(g) "
            "ON CREATE SET m.role = 'member', m.joined_at = $ts, "
            "g.member_count = g.member_count + 1 "
            "WITH u, g, m "
            "OPTIONAL MATCH (u)-[:SUBMITTED]->(r:JoinRequest)-[:FOR_GROUP]->(g) "
            "DETACH DELETE r "
            "RETURN u.id, g.id, m.role, m.joined_at",
            {
                "user": str(user_id),
                "group": str(group_id),
                "ts": to_timestamp(joined_at),
            },
        )
        return row_to_membership(*rows[0]) if rows else None

    async def remove_member(self, user_id: UserId, group_id: GroupId) -> Group | None:
        """Delete the member's edges and decrement member_count in one write.

        The write matches nothing when the user is the last admin and other
        members remain, so a group never loses its final admin.
        """
        rows = await self.store.query(
            "MATCH (u:User {id: $user})-[m:MEMBER_OF]->(g:Group {id: $group}) "
            "OPTIONAL MATCH (u)-[a:ADMIN_OF]->(g) "
            "OPTIONAL MATCH (:User)-[other:ADMIN_OF]->(g) "
            "WITH m, a, g, count(other) AS admins "
            "WHERE a IS NULL OR admins > 1 OR g.member_count = 1 "
            "DELETE m, a "
            "SET g.member_count = g.member_count - 1 "
            "RETURN g",
            {"user": str(user_id), "group": str(group_id)},
        )
        return props_to_group(rows[0][0]) if rows else None

    async def promote_member(
        self, user_id: UserId, group_id: GroupId, since: datetime
    ) -> bool:
        """Set role=admin on the member edge and merge an ADMIN_OF edge."""
        rows = await self.store.query(
            "MATCH (u:User {id: $user})-[m:MEMBER_OF]->(g:Group {id: $group}) "
            "SET m.role = 'admin' "
            "MERGE (u)-[a:ADMIN_OF]->(g) ON CREATE SET a.since = $ts "
            "RETURN count(*)",
            {"user": str(user_id), "group": str(group_id), "ts": to_timestamp(since)},
        )
        return bool(rows and rows[0][0])

    async def find_members(self, group_id: GroupId) -> list[GroupMember]:
        """Find a group's members ordered by join time."""
        rows = await self.store.read(
            "MATCH (u:User)-[m:MEMBER_OF]->(:Group {id: $group}) "
            "RETURN u, m "
            "ORDER BY m.joined_at, u.id",
            {"group": str(group_id)},
        )
        return [row_to_group_member(row[0], row[1]) for row in rows]

    async def find_admin_ids(self, group_id: GroupId) -> list[UserId]:
        """Find the IDs of a group's admins."""
        rows = await self.store.read(
            "MATCH (u:User)-[a:ADMIN_OF]->(:Group {id: $group}) "
            "RETURN u.id ORDER BY a.since, u.id",
            {"group": str(group_id)},
        )
        return [to_user_id(row[0]) for row in rows]

    async def find_groups_for_user(self, user_id: UserId) -> list[UserGroup]:
        """Find the groups a user belongs to, most recently joined first."""
        rows = await self.store.read(
            "MATCH (:User {id: $user})-[m:MEMBER_OF]->(g:Group) "
            "RETURN g, m.role, m.joined_at "
            "ORDER BY m.joined_at DESC, g.id",
            {"user": str(user_id)},
        )
        return [row_to_user_group(*row) for row in rows]

    async def search(self, query: str) -> list[Group]:
        """Case-insensitive substring search over active groups."""
        rows = await self.store.read(
            "MATCH (g:Group) "
            "WHERE g.is_active = true AND ("
            "toLower(g.name) CONTAINS $q OR "
            "toLower(g.description) CONTAINS $q OR "
            "toLower(g.category) CONTAINS $q) "
            "RETURN g "
            "ORDER BY g.member_count DESC, g.name",
            {"q": query.lower()},
        )
        return [props_to_group(row[0]) for row in rows]

    async def load_snapshot(
        self, group_id: GroupId, viewer_id: UserId
    ) -> GroupSnapshot | None:
        """Read the group, its members and the viewer's flags in one query."""
        rows = await self.store.read(
            "MATCH (g:Group {id: $group}) "
            "OPTIONAL MATCH (u:User)-[m:MEMBER_OF]->(g) "
            "WITH g, collect([u, m]) AS members "
            "OPTIONAL MATCH (:User {id: $viewer})-[a:ADMIN_OF]->(g) "
            "WITH g, members, count(a) > 0 AS is_admin "
            "OPTIONAL MATCH (:User {id: $viewer})-[:SUBMITTED]->"
            "(r:JoinRequest)-[:FOR_GROUP]->(g) "
            "WITH g, members, is_admin, count(r) > 0 AS has_requested "
            "OPTIONAL MATCH (:User {id: $viewer})-[:FRIENDS_WITH]->"
            "(f:User)-[:MEMBER_OF]->(g) "
            "RETURN g, members, is_admin, has_requested, count(DISTINCT f)",
            {"group": str(group_id), "viewer": str(viewer_id)},
        )
        if not rows:
            return None

        group_props, member_pairs, is_admin, has_requested, friend_count = rows[0]
        # OPTIONAL MATCH yields a [null, null] pair for a group without members
        members = [
            row_to_group_member(user, edge)
            for user, edge in member_pairs
            if user is not None
        ]
        members.sort(key=lambda member: (member.joined_at, str(member.user.id)))
        viewer = str(viewer_id)
        return GroupSnapshot(
            group=props_to_group(group_props),
            members=members,
            is_admin=bool(is_admin),
            is_member=any(str(member.user.id) == viewer for member in members),
            has_requested=bool(has_requested),
            friend_count=int(friend_count or 0),
        )

    async def find_member_count_drift(self) -> tuple[int, list[MemberCountDrift]]:
        """Compare each cached member_count with its MEMBER_OF edge count."""
        rows = await self.store.read(
            "MATCH (g:Group) "
            "OPTIONAL MATCH (:User)-[m:MEMBER_OF]->(g) "
            "RETURN g.id, g.member_count, count(m) "
            "ORDER BY g.id"
        )
        drift = [
            MemberCountDrift(
                group_id=to_group_id(group_id),
                cached=int(cached or 0),
                actual=int(actual),
            )
            for group_id, cached, actual in rows
            if int(cached or 0) != int(actual)
        ]
        return len(rows), drift
