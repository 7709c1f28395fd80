"""FalkorDB implementation of Friendship repository."""

from datetime import datetime

from circle.domain.model import AsymmetricFriendship, FriendRequest, UserSummary
from circle.domain.repository import FriendshipRepository
from circle.domain.value import UserId
from circle.persistence.graph import GraphStore
from circle.persistence.mappers import (
    props_to_user,
    row_to_friend_request,
    to_timestamp,
    to_user_id,
)


class FalkorFriendshipRepository(FriendshipRepository):
    """FalkorDB implementation of FriendshipRepository."""

    def __init__(self, store: GraphStore) -> None:
        """Initialize repository with the graph store.

        Args:
            store: Shared graph store (connection pool)
        """
        self.store = store

    async def user_exists(self, user_id: UserId) -> bool:
        """Check whether a User node exists."""
        count = await self.store.scalar(
            "MATCH (u:User {id: $id}) RETURN count(u)",
            {"id": str(user_id)},
        )
        return bool(count)

    async def has_request(self, sender_id: UserId, recipient_id: UserId) -> bool:
        """Check for a REQUESTED edge sender -> recipient."""
        count = await self.store.scalar(
            "MATCH (:User {id: $sender})-[r:REQUESTED]->(:User {id: $recipient}) "
            "RETURN count(r)",
            {"sender": str(sender_id), "recipient": str(recipient_id)},
        )
        return bool(count)

    async def are_friends(self, user_id: UserId, other_id: UserId) -> bool:
        """Check for a FRIENDS_WITH edge user -> other."""
        count = await self.store.scalar(
            "MATCH (:User {id: $user})-[f:FRIENDS_WITH]->(:User {id: $other}) "
            "RETURN count(f)",
            {"user": str(user_id), "other": str(other_id)},
        )
        return bool(count)

    async def is_linked(self, user_id: UserId, other_id: UserId) -> bool:
        """Check for a request or friendship in either direction."""
        count = await self.store.scalar(
            "MATCH (:User {id: $user})-[r:REQUESTED|FRIENDS_WITH]-(:User {id: $other}) "
            "RETURN count(r)",
            {"user": str(user_id), "other": str(other_id)},
        )
        return bool(count)

    async def create_request(
        self, sender_id: UserId, recipient_id: UserId, created_at: datetime
    ) -> bool:
        """Create a REQUESTED edge unless the pair is already linked."""
        rows = await self.store.query(
            "MATCH (a:User {id: $sender}), (b:User {id: $recipient}) "
            "WHERE NOT (a)-[:REQUESTED|FRIENDS_WITH]-(b) "
            "CREATE (a)-[:REQUESTED {created_at: $ts}]->(b) "
            "RETURN count(*)",
            {
                "sender": str(sender_id),
                "recipient": str(recipient_id),
                "ts": to_timestamp(created_at),
            },
        )
        return bool(rows and rows[0][0])

    async def accept_request(
        self, sender_id: UserId, recipient_id: UserId, since: datetime
    ) -> bool:
        """Consume the request and create both friendship edges in one write."""
        rows = await self.store.query(
            "MATCH (s:User {id: $sender})-[r:REQUESTED]->(t:User {id: $recipient}) "
            "DELETE r "
            "WITH s, t "
            "MERGE (s)-[f1:FRIENDS_WITH]->(t) ON CREATE SET f1.since = $ts "
            "MERGE (t)-[f2:FRIENDS_WITH]->(s) ON CREATE SET f2.since = $ts "
            "RETURN count(*)",
            {
                "sender": str(sender_id),
                "recipient": str(recipient_id),
                "ts": to_timestamp(since),
            },
        )
        return bool(rows and rows[0][0])

    async def delete_request(self, sender_id: UserId, recipient_id: UserId) -> bool:
        """Delete a REQUESTED edge sender -> recipient."""
        rows = await self.store.query(
            "MATCH (:User {id: $sender})-[r:REQUESTED]->(:User {id: $recipient}) "
            "DELETE r "
            "RETURN count(*)",
            {"sender": str(sender_id), "recipient": str(recipient_id)},
        )
        return bool(rows and rows[0][0])

    async def delete_friendship(self, user_id: UserId, friend_id: UserId) -> bool:
        """Delete both FRIENDS_WITH edges in one write."""
        rows = await self.store.query(
            "MATCH (:User {id: $user})-[f:FRIENDS_WITH]-(:User {id: $friend}) "
            "DELETE f "
            "RETURN count(*)",
            {"user": str(user_id), "friend": str(friend_id)},
        )
        return bool(rows and rows[0][0])

    async def find_friends(self, user_id: UserId) -> list[UserSummary]:
        """Find a user's friends ordered by name."""
        rows = await self.store.read(
            "MATCH (:User {id: $id})-[:FRIENDS_WITH]->(f:User) "
            "RETURN f "
            "ORDER BY f.first_name, f.last_name, f.id",
            {"id": str(user_id)},
        )
        return [props_to_user(row[0]) for row in rows]

    async def count_friends(self, user_id: UserId) -> int:
        """Count a user's friends."""
        count = await self.store.scalar(
            "MATCH (:User {id: $id})-[:FRIENDS_WITH]->(f:User) RETURN count(f)",
            {"id": str(user_id)},
        )
        return int(count or 0)

    async def find_incoming_requests(self, user_id: UserId) -> list[FriendRequest]:
        """Find pending requests sent to the user."""
        rows = await self.store.read(
            "MATCH (s:User)-[r:REQUESTED]->(:User {id: $id}) "
            "RETURN s, r.created_at "
            "ORDER BY r.created_at DESC",
            {"id": str(user_id)},
        )
        return [row_to_friend_request(row[0], row[1]) for row in rows]

    async def find_outgoing_requests(self, user_id: UserId) -> list[FriendRequest]:
        """Find pending requests sent by the user."""
        rows = await self.store.read(
            "MATCH (:User {id: $id})-[r:REQUESTED]->(t:User) "
            "RETURN t, r.created_at "
            "ORDER BY r.created_at DESC",
            {"id": str(user_id)},
        )
        return [row_to_friend_request(row[0], row[1]) for row in rows]

    async def find_asymmetric_friendships(self) -> list[AsymmetricFriendship]:
        """Find FRIENDS_WITH edges without a reverse edge."""
        rows = await self.store.read(
            "MATCH (a:User)-[:FRIENDS_WITH]->(b:User) "
            "WHERE NOT (b)-[:FRIENDS_WITH]->(a) "
            "RETURN a.id, b.id"
        )
        return [
            AsymmetricFriendship(
                user_id=to_user_id(row[0]), friend_id=to_user_id(row[1])
            )
            for row in rows
        ]
