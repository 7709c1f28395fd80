"""FalkorDB implementation of the suggestion read queries."""

from collections.abc import Collection

from circle.domain.model import FriendSuggestion, Group, GroupSuggestion, UserSummary
from circle.domain.repository import SuggestionRepository
from circle.domain.value import GroupId, UserId
from circle.persistence.graph import GraphStore
from circle.persistence.mappers import props_to_group, props_to_user


class FalkorSuggestionRepository(SuggestionRepository):
    """FalkorDB implementation of SuggestionRepository.

    All queries are read-only and run against a single snapshot each.
    """

    def __init__(self, store: GraphStore) -> None:
        """Initialize repository with the graph store.

        Args:
            store: Shared graph store (connection pool)
        """
        self.store = store

    async def find_friend_of_friend_candidates(
        self, user_id: UserId, limit: int
    ) -> list[FriendSuggestion]:
        """Rank friends of friends by mutual friend count."""
        rows = await self.store.read(
            "MATCH (me:User {id: $user})-[:FRIENDS_WITH]->(f:User)"
            "-[:FRIENDS_WITH]->(c:User) "
            "WHERE c <> me AND NOT (me)-[:FRIENDS_WITH]->(c) "
            "AND NOT (me)-[:REQUESTED]-(c) "
            "WITH c, count(DISTINCT f) AS mutual "
            "RETURN c, mutual "
            "ORDER BY mutual DESC, c.id "
            "LIMIT $limit",
            {"user": str(user_id), "limit": limit},
        )
        return [
            FriendSuggestion(user=props_to_user(props), mutual_count=int(mutual))
            for props, mutual in rows
        ]

    async def find_random_users(
        self, user_id: UserId, exclude: Collection[UserId], limit: int
    ) -> list[UserSummary]:
        """Sample users unrelated to the viewer."""
        rows = await self.store.read(
            "MATCH (me:User {id: $user}), (c:User) "
            "WHERE c <> me AND NOT (me)-[:FRIENDS_WITH]->(c) "
            "AND NOT c.id IN $exclude "
            "RETURN c "
            "ORDER BY rand() "
            "LIMIT $limit",
            {
                "user": str(user_id),
                "exclude": [str(uid) for uid in exclude],
                "limit": limit,
            },
        )
        return [props_to_user(row[0]) for row in rows]

    async def find_groups_with_friends(
        self, user_id: UserId, limit: int
    ) -> list[GroupSuggestion]:
        """Rank active groups by how many of the viewer's friends are members."""
        rows = await self.store.read(
            "MATCH (me:User {id: $user})-[:FRIENDS_WITH]->(f:User)"
            "-[:MEMBER_OF]->(g:Group) "
            "WHERE g.is_active = true AND NOT (me)-[:MEMBER_OF]->(g) "
            "WITH g, count(DISTINCT f) AS friends "
            "RETURN g, friends "
            "ORDER BY friends DESC, g.id "
            "LIMIT $limit",
            {"user": str(user_id), "limit": limit},
        )
        return [
            GroupSuggestion(group=props_to_group(props), friend_count=int(friends))
            for props, friends in rows
        ]

    async def find_random_groups(
        self, user_id: UserId, exclude: Collection[GroupId], limit: int
    ) -> list[Group]:
        """Sample active groups the viewer is not in."""
        rows = await self.store.read(
            "MATCH (me:User {id: $user}), (g:Group) "
            "WHERE g.is_active = true AND NOT (me)-[:MEMBER_OF]->(g) "
            "AND NOT g.id IN $exclude "
            "RETURN g "
            "ORDER BY rand() "
            "LIMIT $limit",
            {
                "user": str(user_id),
                "exclude": [str(gid) for gid in exclude],
                "limit": limit,
            },
        )
        return [props_to_group(row[0]) for row in rows]
