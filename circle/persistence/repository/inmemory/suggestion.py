"""In-memory suggestion queries for testing."""

import random
from collections import Counter
from collections.abc import Collection

from circle.domain.model import FriendSuggestion, Group, GroupSuggestion, UserSummary
from circle.domain.repository import SuggestionRepository
from circle.domain.value import GroupId, UserId

from .graph import InMemoryGraph


class InMemorySuggestionRepository(SuggestionRepository):
    """In-memory implementation of SuggestionRepository for testing."""

    def __init__(self, graph: InMemoryGraph) -> None:
        self._graph = graph

    async def find_friend_of_friend_candidates(
        self, user_id: UserId, limit: int
    ) -> list[FriendSuggestion]:
        """Rank friends of friends by mutual friend count.

        Users with a pending request to or from the viewer are left out.
        """
        friends = self._graph.friend_ids(user_id)
        pending = {
            recipient if sender == user_id else sender
            for sender, recipient in self._graph.requested
            if user_id in (sender, recipient)
        }
        skip = friends | pending | {user_id}
        mutual: Counter[UserId] = Counter()
        for friend in friends:
            for candidate in self._graph.friend_ids(friend):
                if candidate not in skip:
                    mutual[candidate] += 1
        ranked = sorted(mutual.items(), key=lambda item: (-item[1], str(item[0])))
        return [
            FriendSuggestion(user=self._graph.users[candidate], mutual_count=count)
            for candidate, count in ranked[:limit]
        ]

    async def find_random_users(
        self, user_id: UserId, exclude: Collection[UserId], limit: int
    ) -> list[UserSummary]:
        """Sample users unrelated to the viewer."""
        skip = self._graph.friend_ids(user_id) | set(exclude) | {user_id}
        pool = [user for uid, user in self._graph.users.items() if uid not in skip]
        return random.sample(pool, min(limit, len(pool)))

    async def find_groups_with_friends(
        self, user_id: UserId, limit: int
    ) -> list[GroupSuggestion]:
        """Rank active groups by how many of the viewer's friends are members."""
        friends = self._graph.friend_ids(user_id)
        counts: Counter[GroupId] = Counter()
        for (member, group_id) in self._graph.memberships:
            if member not in friends:
                continue
            if (user_id, group_id) in self._graph.memberships:
                continue
            if not self._graph.groups[group_id].is_active:
                continue
            counts[group_id] += 1
        ranked = sorted(counts.items(), key=lambda item: (-item[1], str(item[0])))
        return [
            GroupSuggestion(group=self._graph.groups[group_id], friend_count=count)
            for group_id, count in ranked[:limit]
        ]

    async def find_random_groups(
        self, user_id: UserId, exclude: Collection[GroupId], limit: int
    ) -> list[Group]:
        """Sample active groups the viewer is not in."""
        skip = set(exclude)
        pool = [
            group
            for group in self._graph.groups.values()
            if group.is_active
            and group.id not in skip
            and (user_id, group.id) not in self._graph.memberships
        ]
        return random.sample(pool, min(limit, len(pool)))
