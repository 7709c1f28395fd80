"""Unit tests for SuggestionEngine."""

from datetime import datetime

import pytest

from circle.domain.error import ValidationError
from circle.domain.model import Membership
from circle.domain.service import SuggestionEngine
from circle.persistence.repository.inmemory import InMemoryGraph
from tests.conftest import make_group
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no graph database needed
unit_env = create_env_fixture()


def befriend(graph: InMemoryGraph, user, other) -> None:
    """Create both directions of a friendship directly in the graph."""
    now = datetime.now()
    graph.friends[(user.id, other.id)] = now
    graph.friends[(other.id, user.id)] = now


def join(graph: InMemoryGraph, user, group) -> None:
    """Add a membership directly, keeping member_count in step."""
    graph.memberships[(user.id, group.id)] = Membership(
        user_id=user.id, group_id=group.id, joined_at=datetime.now()
    )
    graph.adjust_member_count(group.id, 1)


def add_group(graph: InMemoryGraph, owner, name: str, **overrides):
    group = make_group(owner.id, name=name, member_count=0, **overrides)
    graph.groups[group.id] = group
    join(graph, owner, group)
    return graph.groups[group.id]


class TestSuggestFriends:
    """Tests for suggest_friends method."""

    @pytest.mark.asyncio
    async def test_friends_of_friends_ranked_by_mutual_count(self, unit_env):
        """Candidates sharing more friends come first."""
        graph = await unit_env.get(InMemoryGraph)
        engine = await unit_env.get(SuggestionEngine)
        viewer = graph.add_user("Viewer")
        f1, f2 = graph.add_user("F1"), graph.add_user("F2")
        popular = graph.add_user("Popular")
        casual = graph.add_user("Casual")
        for friend in (f1, f2):
            befriend(graph, viewer, friend)
            befriend(graph, friend, popular)
        befriend(graph, f1, casual)

        suggestions = await engine.suggest_friends(viewer.id, limit=2)

        assert [(s.user.id, s.mutual_count) for s in suggestions] == [
            (popular.id, 2),
            (casual.id, 1),
        ]

    @pytest.mark.asyncio
    async def test_random_fill_tops_up_to_limit(self, unit_env):
        """Without friends of friends the list is filled with strangers."""
        graph = await unit_env.get(InMemoryGraph)
        engine = await unit_env.get(SuggestionEngine)
        viewer = graph.add_user("Viewer")
        friend = graph.add_user("Friend")
        befriend(graph, viewer, friend)
        strangers = {graph.add_user(f"Stranger {i}").id for i in range(5)}

        suggestions = await engine.suggest_friends(viewer.id, limit=3)

        assert len(suggestions) == 3
        assert {s.user.id for s in suggestions} <= strangers
        assert all(s.mutual_count == 0 for s in suggestions)

    @pytest.mark.asyncio
    async def test_returns_every_eligible_user_when_limit_exceeds_them(
        self, unit_env
    ):
        """A small graph yields all users except the viewer, without repeats."""
        graph = await unit_env.get(InMemoryGraph)
        engine = await unit_env.get(SuggestionEngine)
        viewer = graph.add_user("Viewer")
        others = [graph.add_user(f"User {i}") for i in range(4)]

        suggestions = await engine.suggest_friends(viewer.id, limit=10)

        ids = [s.user.id for s in suggestions]
        assert sorted(ids, key=str) == sorted((u.id for u in others), key=str)

    @pytest.mark.asyncio
    async def test_ranked_candidates_precede_random_fill(self, unit_env):
        """The ranked prefix is never interleaved with random users."""
        graph = await unit_env.get(InMemoryGraph)
        engine = await unit_env.get(SuggestionEngine)
        viewer = graph.add_user("Viewer")
        friend = graph.add_user("Friend")
        candidate = graph.add_user("Candidate")
        befriend(graph, viewer, friend)
        befriend(graph, friend, candidate)
        for i in range(3):
            graph.add_user(f"Stranger {i}")

        suggestions = await engine.suggest_friends(viewer.id, limit=4)

        assert suggestions[0].user.id == candidate.id
        assert suggestions[0].mutual_count == 1
        rest = {s.user.id for s in suggestions[1:]}
        assert candidate.id not in rest
        assert friend.id not in rest
        assert viewer.id not in rest

    @pytest.mark.asyncio
    async def test_default_limit_comes_from_settings(self, unit_env):
        """Omitting the limit uses the configured default."""
        graph = await unit_env.get(InMemoryGraph)
        engine = await unit_env.get(SuggestionEngine)
        viewer = graph.add_user("Viewer")
        for i in range(15):
            graph.add_user(f"User {i}")

        suggestions = await engine.suggest_friends(viewer.id)

        assert len(suggestions) == 10

    @pytest.mark.asyncio
    async def test_large_limit_is_honoured(self, unit_env):
        """A limit above the old page size still fills the whole list."""
        graph = await unit_env.get(InMemoryGraph)
        engine = await unit_env.get(SuggestionEngine)
        viewer = graph.add_user("Viewer")
        for i in range(80):
            graph.add_user(f"User {i}")

        suggestions = await engine.suggest_friends(viewer.id, limit=60)

        assert len(suggestions) == 60
        assert len({s.user.id for s in suggestions}) == 60

    @pytest.mark.asyncio
    async def test_limit_above_maximum_raises_validation(self, unit_env):
        """Limits beyond the configured maximum are rejected, not truncated."""
        graph = await unit_env.get(InMemoryGraph)
        engine = await unit_env.get(SuggestionEngine)
        viewer = graph.add_user("Viewer")
        too_many = engine.suggestion_settings.max_limit + 1

        with pytest.raises(ValidationError):
            await engine.suggest_friends(viewer.id, limit=too_many)
        with pytest.raises(ValidationError):
            await engine.suggest_groups(viewer.id, limit=too_many)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("outgoing", [True, False])
    async def test_pending_request_excludes_friend_of_friend(
        self, unit_env, outgoing
    ):
        """Someone already asked (either way) is not ranked as a suggestion."""
        graph = await unit_env.get(InMemoryGraph)
        engine = await unit_env.get(SuggestionEngine)
        viewer = graph.add_user("Viewer")
        friend = graph.add_user("Friend")
        asked = graph.add_user("Asked")
        other = graph.add_user("Other")
        befriend(graph, viewer, friend)
        befriend(graph, friend, asked)
        befriend(graph, friend, other)
        pair = (viewer.id, asked.id) if outgoing else (asked.id, viewer.id)
        graph.requested[pair] = datetime.now()

        suggestions = await engine.suggest_friends(viewer.id, limit=1)

        assert [(s.user.id, s.mutual_count) for s in suggestions] == [(other.id, 1)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -3])
    async def test_non_positive_limit_raises_validation(self, unit_env, limit):
        """A limit below 1 is rejected."""
        graph = await unit_env.get(InMemoryGraph)
        engine = await unit_env.get(SuggestionEngine)
        viewer = graph.add_user("Viewer")

        with pytest.raises(ValidationError):
            await engine.suggest_friends(viewer.id, limit=limit)


class TestSuggestGroups:
    """Tests for suggest_groups method."""

    @pytest.mark.asyncio
    async def test_groups_ranked_by_friend_members(self, unit_env):
        """Groups holding more of the viewer's friends come first."""
        graph = await unit_env.get(InMemoryGraph)
        engine = await unit_env.get(SuggestionEngine)
        viewer = graph.add_user("Viewer")
        f1, f2 = graph.add_user("F1"), graph.add_user("F2")
        befriend(graph, viewer, f1)
        befriend(graph, viewer, f2)
        big = add_group(graph, f1, "Big Group")
        join(graph, f2, big)
        small = add_group(graph, f2, "Small Group")

        suggestions = await engine.suggest_groups(viewer.id, limit=2)

        assert [(s.group.id, s.friend_count) for s in suggestions] == [
            (big.id, 2),
            (small.id, 1),
        ]
        assert suggestions[0].member_count == 2

    @pytest.mark.asyncio
    async def test_excludes_joined_and_inactive_groups(self, unit_env):
        """Groups the viewer is in, or that are inactive, are never suggested."""
        graph = await unit_env.get(InMemoryGraph)
        engine = await unit_env.get(SuggestionEngine)
        viewer = graph.add_user("Viewer")
        owner = graph.add_user("Owner")
        joined = add_group(graph, owner, "Joined Group")
        join(graph, viewer, joined)
        add_group(graph, owner, "Closed Group", is_active=False)
        open_group = add_group(graph, owner, "Open Group")

        suggestions = await engine.suggest_groups(viewer.id, limit=5)

        assert [s.group.id for s in suggestions] == [open_group.id]
        assert suggestions[0].friend_count == 0

    @pytest.mark.asyncio
    async def test_random_fill_skips_ranked_groups(self, unit_env):
        """Random fill never repeats a ranked group."""
        graph = await unit_env.get(InMemoryGraph)
        engine = await unit_env.get(SuggestionEngine)
        viewer = graph.add_user("Viewer")
        friend = graph.add_user("Friend")
        befriend(graph, viewer, friend)
        ranked = add_group(graph, friend, "Friends Group")
        stranger = graph.add_user("Stranger")
        for i in range(1, 4):
            add_group(graph, stranger, f"Group {i}")

        suggestions = await engine.suggest_groups(viewer.id, limit=4)

        ids = [s.group.id for s in suggestions]
        assert ids[0] == ranked.id
        assert len(ids) == len(set(ids)) == 4
