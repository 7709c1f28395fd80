"""End-to-end relationship scenarios across all services.

Runs against the in-memory graph; every service shares one graph per
test, so the scenarios exercise the same cross-service state a deployment
would.
"""

import pytest

from circle.adapter.notifications import RecordingEventPublisher
from circle.domain.error import RequestNotFoundError
from circle.domain.service import (
    ConsistencyAuditor,
    FriendshipService,
    GroupMembershipService,
    SuggestionEngine,
)
from circle.domain.value import EventType, GroupPrivacy
from circle.persistence.repository.inmemory import InMemoryGraph
from tests.conftest import make_group_create
from tests.harness import create_env_fixture

scenario_env = create_env_fixture()


@pytest.mark.asyncio
async def test_friendship_round_trip(scenario_env):
    """Request, accept, list on both sides, unfriend."""
    graph = await scenario_env.get(InMemoryGraph)
    friendships = await scenario_env.get(FriendshipService)
    recorder = await scenario_env.get(RecordingEventPublisher)
    alice, bob = graph.add_user("Alice"), graph.add_user("Bob")

    await friendships.send_request(alice.id, bob.id)
    pending = await friendships.list_requests(bob.id)
    assert [r.user.id for r in pending.incoming] == [alice.id]

    await friendships.accept_request(bob.id, alice.id)

    assert [u.id for u in await friendships.list_friends(alice.id)] == [bob.id]
    assert [u.id for u in await friendships.list_friends(bob.id)] == [alice.id]
    assert [e.event_type for e in recorder.events] == [
        EventType.FRIEND_REQUEST_SENT,
        EventType.FRIEND_REQUEST_ACCEPTED,
    ]

    await friendships.remove_friend(alice.id, bob.id)

    assert await friendships.count_friends(alice.id) == 0
    assert await friendships.count_friends(bob.id) == 0


@pytest.mark.asyncio
async def test_public_group_auto_join(scenario_env):
    """Joining a public group admits the user and updates the count."""
    graph = await scenario_env.get(InMemoryGraph)
    groups = await scenario_env.get(GroupMembershipService)
    founder, joiner = graph.add_user("Founder"), graph.add_user("Joiner")

    group = await groups.create_group(founder.id, make_group_create())
    outcome = await groups.submit_join_request(joiner.id, group.id)

    assert outcome.auto_joined is True
    details = await groups.get_group_details(group.id, joiner.id)
    assert details.member_count == 2
    assert details.is_member is True
    assert details.is_admin is False


@pytest.mark.asyncio
async def test_private_group_review_cycle(scenario_env):
    """Submit, approve, then a second review finds nothing to act on."""
    graph = await scenario_env.get(InMemoryGraph)
    groups = await scenario_env.get(GroupMembershipService)
    admin, applicant = graph.add_user("Admin"), graph.add_user("Applicant")
    group = await groups.create_group(
        admin.id, make_group_create(privacy=GroupPrivacy.PRIVATE)
    )

    outcome = await groups.submit_join_request(applicant.id, group.id)
    received = await groups.list_received_join_requests(admin.id)
    assert [r.id for r in received] == [outcome.request_id]

    await groups.review_join_request(admin.id, outcome.request_id, "approved")

    details = await groups.get_group_details(group.id, applicant.id)
    assert details.is_member is True
    assert details.has_requested is False
    assert details.member_count == 2

    with pytest.raises(RequestNotFoundError):
        await groups.review_join_request(admin.id, outcome.request_id, "approved")


@pytest.mark.asyncio
async def test_member_count_tracks_every_transition(scenario_env):
    """Joins, leaves and removals keep the cached count exact."""
    graph = await scenario_env.get(InMemoryGraph)
    groups = await scenario_env.get(GroupMembershipService)
    auditor = await scenario_env.get(ConsistencyAuditor)
    admin = graph.add_user("Admin")
    users = [graph.add_user(f"User {i}") for i in range(4)]
    group = await groups.create_group(admin.id, make_group_create())

    for user in users:
        await groups.submit_join_request(user.id, group.id)
    await groups.leave_group(users[0].id, group.id)
    updated = await groups.remove_member(admin.id, group.id, users[1].id)

    assert updated.member_count == 3
    report = await auditor.assert_consistent()
    assert report.is_clean


@pytest.mark.asyncio
async def test_suggestions_follow_the_graph(scenario_env):
    """Friends of friends and their groups are suggested first."""
    graph = await scenario_env.get(InMemoryGraph)
    friendships = await scenario_env.get(FriendshipService)
    groups = await scenario_env.get(GroupMembershipService)
    engine = await scenario_env.get(SuggestionEngine)
    me, friend, fof = (graph.add_user(n) for n in ("Me", "Friend", "Fof"))
    for a, b in ((me, friend), (friend, fof)):
        await friendships.send_request(a.id, b.id)
        await friendships.accept_request(b.id, a.id)
    group = await groups.create_group(friend.id, make_group_create())

    people = await engine.suggest_friends(me.id, limit=5)
    suggested_groups = await engine.suggest_groups(me.id, limit=5)

    assert [(s.user.id, s.mutual_count) for s in people] == [(fof.id, 1)]
    assert [(s.group.id, s.friend_count) for s in suggested_groups] == [(group.id, 1)]
