"""FalkorDB implementation of JoinRequest repository."""

from datetime import datetime

from circle.domain.model import JoinRequest, Membership
from circle.domain.repository import JoinRequestRepository
from circle.domain.value import GroupId, JoinRequestId, UserId
from circle.persistence.graph import GraphStore
from circle.persistence.mappers import (
    row_to_join_request,
    row_to_membership,
    to_timestamp,
)

# Every read returns the request node, its submitter and the target group
_RETURN_REQUEST = "RETURN r, u, g.id, g.name"


class FalkorJoinRequestRepository(JoinRequestRepository):
    """FalkorDB implementation of JoinRequestRepository."""

    def __init__(self, store: GraphStore) -> None:
        """Initialize repository with the graph store.

        Args:
            store: Shared graph store (connection pool)
        """
        self.store = store

    async def find_by_id(self, request_id: JoinRequestId) -> JoinRequest | None:
        """Find a join request by ID."""
        rows = await self.store.read(
            "MATCH (u:User)-[:SUBMITTED]->(r:JoinRequest {id: $id})"
            "-[:FOR_GROUP]->(g:Group) " + _RETURN_REQUEST,
            {"id": str(request_id)},
        )
        return row_to_join_request(*rows[0]) if rows else None

    async def find_pending(
        self, user_id: UserId, group_id: GroupId
    ) -> JoinRequest | None:
        """Find the pending request of a user for a group."""
        rows = await self.store.read(
            "MATCH (u:User {id: $user})-[:SUBMITTED]->(r:JoinRequest)"
            "-[:FOR_GROUP]->(g:Group {id: $group}) " + _RETURN_REQUEST,
            {"user": str(user_id), "group": str(group_id)},
        )
        return row_to_join_request(*rows[0]) if rows else None

    async def create(self, request: JoinRequest) -> JoinRequest | None:
        """Create the request node and its edges unless one already exists."""
        rows = await self.store.query(
            "MATCH (u:User {id: $user}), (g:Group {id: $group}) "
            "WHERE NOT (u)-[:SUBMITTED]->(:JoinRequest)-[:FOR_GROUP]->(g) "
            "CREATE (u)-[:SUBMITTED]->(r:JoinRequest "
            "{id: $id, status: $status, created_at: $ts})-[:FOR_GROUP]->(g) "
            + _RETURN_REQUEST,
            {
                "user": str(request.user_id),
                "group": str(request.group_id),
                "id": str(request.id),
                "status": request.status.value,
                "ts": to_timestamp(request.created_at),
            },
        )
        return row_to_join_request(*rows[0]) if rows else None

    async def approve(
        self, request_id: JoinRequestId, joined_at: datetime
    ) -> Membership | None:
        """Delete the request and merge the submitter's MEMBER_OF edge."""
        rows = await self.store.query(
            "MATCH (u:User)-[:SUBMITTED]->(r:JoinRequest {id: $id})"
            "-[:FOR_GROUP]->(g:Group) "
            "DETACH DELETE r "
            "WITH u, g "
            "MERGE (u)-[m:MEMBER_OF]->(g) "
            "ON CREATE SET m.role = 'member', m.joined_at = $ts, "
            "g.member_count = g.member_count + 1 "
            "RETURN u.id, g.id, m.role, m.joined_at",
            {"id": str(request_id), "ts": to_timestamp(joined_at)},
        )
        return row_to_membership(*rows[0]) if rows else None

    async def delete(self, request_id: JoinRequestId) -> bool:
        """Delete a request node and its edges."""
        rows = await self.store.query(
            "MATCH (r:JoinRequest {id: $id}) DETACH DELETE r RETURN count(*)",
            {"id": str(request_id)},
        )
        return bool(rows and rows[0][0])

    async def find_by_user(self, user_id: UserId) -> list[JoinRequest]:
        """Find the requests a user has submitted, newest first."""
        rows = await self.store.read(
            "MATCH (u:User {id: $user})-[:SUBMITTED]->(r:JoinRequest)"
            "-[:FOR_GROUP]->(g:Group) " + _RETURN_REQUEST + " "
            "ORDER BY r.created_at DESC, r.id",
            {"user": str(user_id)},
        )
        return [row_to_join_request(*row) for row in rows]

    async def find_by_group(self, group_id: GroupId) -> list[JoinRequest]:
        """Find the pending requests for a group, oldest first."""
        rows = await self.store.read(
            "MATCH (u:User)-[:SUBMITTED]->(r:JoinRequest)"
            "-[:FOR_GROUP]->(g:Group {id: $group}) " + _RETURN_REQUEST + " "
            "ORDER BY r.created_at, r.id",
            {"group": str(group_id)},
        )
        return [row_to_join_request(*row) for row in rows]

    async def find_for_admin(self, admin_id: UserId) -> list[JoinRequest]:
        """Find pending requests for every group the user administers."""
        rows = await self.store.read(
            "MATCH (:User {id: $admin})-[:ADMIN_OF]->(g:Group) "
            "MATCH (u:User)-[:SUBMITTED]->(r:JoinRequest)-[:FOR_GROUP]->(g) "
            + _RETURN_REQUEST + " "
            "ORDER BY r.created_at, r.id",
            {"admin": str(admin_id)},
        )
        return [row_to_join_request(*row) for row in rows]
