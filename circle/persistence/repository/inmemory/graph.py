"""Shared in-memory graph state for testing.

The in-memory repositories are views over one InMemoryGraph, the same way
the FalkorDB repositories share one graph. No repository method yields to
the event loop, so each call is atomic under asyncio just like a single
Cypher query.
"""

from datetime import datetime
from uuid import uuid4

from circle.domain.model import Group, JoinRequest, Membership, PostSummary, UserSummary
from circle.domain.value import GroupId, JoinRequestId, UserId


class InMemoryGraph:
    """Nodes and edges of the relationship graph.

    Edges are keyed by their endpoints:
    - requested: (sender, recipient) -> created_at
    - friends: (user, friend) -> since, one entry per direction
    - memberships: (user, group) -> Membership
    - admins: (user, group) -> since
    """

    def __init__(self) -> None:
        self.users: dict[UserId, UserSummary] = {}
        self.groups: dict[GroupId, Group] = {}
        self.requested: dict[tuple[UserId, UserId], datetime] = {}
        self.friends: dict[tuple[UserId, UserId], datetime] = {}
        self.memberships: dict[tuple[UserId, GroupId], Membership] = {}
        self.admins: dict[tuple[UserId, GroupId], datetime] = {}
        self.join_requests: dict[JoinRequestId, JoinRequest] = {}
        self.posts: list[PostSummary] = []

    def add_user(
        self,
        first_name: str = "",
        last_name: str = "",
        user_id: UserId | None = None,
    ) -> UserSummary:
        """Register a User node, as the identity collaborator would."""
        user = UserSummary(
            id=user_id or UserId(uuid4()),
            first_name=first_name,
            last_name=last_name,
        )
        self.users[user.id] = user
        return user

    def friend_ids(self, user_id: UserId) -> set[UserId]:
        """Users the given user has an outgoing FRIENDS_WITH edge to."""
        return {friend for (user, friend) in self.friends if user == user_id}

    def member_ids(self, group_id: GroupId) -> set[UserId]:
        """Users with a MEMBER_OF edge to the group."""
        return {user for (user, group) in self.memberships if group == group_id}

    def adjust_member_count(self, group_id: GroupId, delta: int) -> Group:
        """Replace the stored group with its member_count shifted by delta."""
        group = self.groups[group_id]
        updated = group.model_copy(update={"member_count": group.member_count + delta})
        self.groups[group_id] = updated
        return updated
