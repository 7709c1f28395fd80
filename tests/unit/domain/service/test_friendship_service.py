"""Unit tests for FriendshipService."""

from datetime import datetime
from uuid import uuid4

import pytest

from circle.adapter.notifications import RecordingEventPublisher
from circle.domain.error import (
    AlreadyRequestedOrFriendsError,
    NotFriendsError,
    RequestNotFoundError,
    SelfRequestError,
    UserNotFoundError,
)
from circle.domain.service import FriendshipService
from circle.domain.value import EventType, TargetType, UserId
from circle.persistence.repository.inmemory import (
    InMemoryFriendshipRepository,
    InMemoryGraph,
)
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no graph database needed
unit_env = create_env_fixture()


class InterleavedFriendshipRepository(InMemoryFriendshipRepository):
    """Runs a competing write just before each request is stored."""

    def __init__(self, graph: InMemoryGraph, before_write) -> None:
        super().__init__(graph)
        self.before_write = before_write

    async def create_request(self, sender_id, recipient_id, created_at):
        self.before_write()
        return await super().create_request(sender_id, recipient_id, created_at)


class TestSendRequest:
    """Tests for send_request method."""

    @pytest.mark.asyncio
    async def test_send_request_creates_pending_request(self, unit_env):
        """Sending a request should create one REQUESTED edge sender -> recipient."""
        # Arrange
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")

        # Act
        await service.send_request(alice.id, bob.id)

        # Assert
        assert (alice.id, bob.id) in graph.requested
        assert (bob.id, alice.id) not in graph.requested
        assert not graph.friends

    @pytest.mark.asyncio
    async def test_send_request_emits_event_to_recipient(self, unit_env):
        """The recipient should be notified about the request."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        recorder = await unit_env.get(RecordingEventPublisher)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")

        await service.send_request(alice.id, bob.id)

        assert len(recorder.events) == 1
        event = recorder.events[0]
        assert event.event_type == EventType.FRIEND_REQUEST_SENT
        assert event.actor_id == alice.id
        assert event.recipient_id == bob.id
        assert event.target_type == TargetType.USER

    @pytest.mark.asyncio
    async def test_send_request_to_self_raises_error(self, unit_env):
        """A user cannot befriend themselves."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")

        with pytest.raises(SelfRequestError):
            await service.send_request(alice.id, alice.id)

        assert not graph.requested

    @pytest.mark.asyncio
    async def test_send_request_to_unknown_user_raises_error(self, unit_env):
        """Requests to users that do not exist should fail with NotFound."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")

        with pytest.raises(UserNotFoundError):
            await service.send_request(alice.id, UserId(uuid4()))

    @pytest.mark.asyncio
    async def test_duplicate_request_raises_conflict(self, unit_env):
        """Sending the same request twice should fail with a conflict."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")
        await service.send_request(alice.id, bob.id)

        with pytest.raises(AlreadyRequestedOrFriendsError):
            await service.send_request(alice.id, bob.id)

        assert len(graph.requested) == 1

    @pytest.mark.asyncio
    async def test_reverse_request_raises_conflict(self, unit_env):
        """A pending request in the other direction also blocks a new one."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")
        await service.send_request(alice.id, bob.id)

        with pytest.raises(AlreadyRequestedOrFriendsError):
            await service.send_request(bob.id, alice.id)

    @pytest.mark.asyncio
    async def test_request_between_friends_raises_conflict(self, unit_env):
        """Friends cannot send each other requests."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")
        await service.send_request(alice.id, bob.id)
        await service.accept_request(bob.id, alice.id)

        with pytest.raises(AlreadyRequestedOrFriendsError) as exc_info:
            await service.send_request(bob.id, alice.id)

        assert exc_info.value.kind == "conflict"

    @pytest.mark.asyncio
    async def test_request_crossing_in_flight_raises_conflict(self):
        """A reverse request stored after the check makes the write refuse."""
        graph = InMemoryGraph()
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")
        repository = InterleavedFriendshipRepository(
            graph,
            lambda: graph.requested.setdefault((bob.id, alice.id), datetime.now()),
        )
        recorder = RecordingEventPublisher()
        service = FriendshipService(
            friendship_repository=repository, event_publisher=recorder
        )

        with pytest.raises(AlreadyRequestedOrFriendsError):
            await service.send_request(alice.id, bob.id)

        assert list(graph.requested) == [(bob.id, alice.id)]
        assert recorder.events == []


class TestAcceptRequest:
    """Tests for accept_request method."""

    @pytest.mark.asyncio
    async def test_accept_creates_symmetric_friendship(self, unit_env):
        """Accepting should create both FRIENDS_WITH edges and consume the request."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")
        await service.send_request(alice.id, bob.id)

        await service.accept_request(bob.id, alice.id)

        assert (alice.id, bob.id) in graph.friends
        assert (bob.id, alice.id) in graph.friends
        assert not graph.requested

    @pytest.mark.asyncio
    async def test_accept_notifies_sender(self, unit_env):
        """The original sender should be told the request was accepted."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        recorder = await unit_env.get(RecordingEventPublisher)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")
        await service.send_request(alice.id, bob.id)

        await service.accept_request(bob.id, alice.id)

        accepted = recorder.events[-1]
        assert accepted.event_type == EventType.FRIEND_REQUEST_ACCEPTED
        assert accepted.actor_id == bob.id
        assert accepted.recipient_id == alice.id

    @pytest.mark.asyncio
    async def test_accept_without_request_raises_not_found(self, unit_env):
        """Accepting a request that was never sent should fail."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")

        with pytest.raises(RequestNotFoundError):
            await service.accept_request(bob.id, alice.id)

        assert not graph.friends

    @pytest.mark.asyncio
    async def test_accept_by_sender_raises_not_found(self, unit_env):
        """Only the recipient can accept; the edge direction matters."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")
        await service.send_request(alice.id, bob.id)

        with pytest.raises(RequestNotFoundError):
            await service.accept_request(alice.id, bob.id)

        assert (alice.id, bob.id) in graph.requested

    @pytest.mark.asyncio
    async def test_second_accept_raises_not_found(self, unit_env):
        """A double accept must not double-apply."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")
        await service.send_request(alice.id, bob.id)
        await service.accept_request(bob.id, alice.id)

        with pytest.raises(RequestNotFoundError):
            await service.accept_request(bob.id, alice.id)

        assert len(graph.friends) == 2


class TestRejectAndCancel:
    """Tests for reject_request and cancel_request methods."""

    @pytest.mark.asyncio
    async def test_reject_deletes_request(self, unit_env):
        """Rejecting should delete the request without creating a friendship."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")
        await service.send_request(alice.id, bob.id)

        await service.reject_request(bob.id, alice.id)

        assert not graph.requested
        assert not graph.friends

    @pytest.mark.asyncio
    async def test_cancel_deletes_request(self, unit_env):
        """The sender can withdraw their own request."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")
        await service.send_request(alice.id, bob.id)

        await service.cancel_request(alice.id, bob.id)

        assert not graph.requested

    @pytest.mark.asyncio
    async def test_reject_and_cancel_emit_no_events(self, unit_env):
        """Only sending and accepting notify anyone."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        recorder = await unit_env.get(RecordingEventPublisher)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")
        carol = graph.add_user("Carol")
        await service.send_request(alice.id, bob.id)
        await service.send_request(alice.id, carol.id)

        await service.reject_request(bob.id, alice.id)
        await service.cancel_request(alice.id, carol.id)

        assert [e.event_type for e in recorder.events] == [
            EventType.FRIEND_REQUEST_SENT,
            EventType.FRIEND_REQUEST_SENT,
        ]

    @pytest.mark.asyncio
    async def test_reject_missing_request_raises_not_found(self, unit_env):
        """Rejecting nothing should fail with NotFound."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")

        with pytest.raises(RequestNotFoundError):
            await service.reject_request(bob.id, alice.id)

    @pytest.mark.asyncio
    async def test_cancel_missing_request_raises_not_found(self, unit_env):
        """Cancelling nothing should fail with NotFound."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")

        with pytest.raises(RequestNotFoundError):
            await service.cancel_request(alice.id, bob.id)


class TestRemoveFriend:
    """Tests for remove_friend method."""

    @pytest.mark.asyncio
    async def test_remove_friend_deletes_both_directions(self, unit_env):
        """Removing a friend should leave no edge in either direction."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")
        await service.send_request(alice.id, bob.id)
        await service.accept_request(bob.id, alice.id)

        await service.remove_friend(bob.id, alice.id)

        assert not graph.friends

    @pytest.mark.asyncio
    async def test_remove_non_friend_raises_not_friends(self, unit_env):
        """Removing someone who is not a friend should fail."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")

        with pytest.raises(NotFriendsError) as exc_info:
            await service.remove_friend(alice.id, bob.id)

        assert exc_info.value.code == "not_friends"
        assert exc_info.value.kind == "not_found"


class TestListing:
    """Tests for list_friends, list_requests and count_friends."""

    @pytest.mark.asyncio
    async def test_list_friends_ordered_by_name(self, unit_env):
        """Friends should come back ordered by first and last name."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        me = graph.add_user("Me")
        zoe = graph.add_user("Zoe", "Adams")
        ann_b = graph.add_user("Ann", "Brown")
        ann_a = graph.add_user("Ann", "Abbot")
        for friend in (zoe, ann_b, ann_a):
            await service.send_request(friend.id, me.id)
            await service.accept_request(me.id, friend.id)

        friends = await service.list_friends(me.id)

        assert [f.id for f in friends] == [ann_a.id, ann_b.id, zoe.id]
        assert await service.count_friends(me.id) == 3

    @pytest.mark.asyncio
    async def test_list_friends_empty(self, unit_env):
        """A user without friends gets an empty list."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        me = graph.add_user("Me")

        assert await service.list_friends(me.id) == []
        assert await service.count_friends(me.id) == 0

    @pytest.mark.asyncio
    async def test_list_requests_splits_incoming_and_outgoing(self, unit_env):
        """Pending requests are reported from the user's point of view."""
        graph = await unit_env.get(InMemoryGraph)
        service = await unit_env.get(FriendshipService)
        me = graph.add_user("Me")
        fan = graph.add_user("Fan")
        idol = graph.add_user("Idol")
        await service.send_request(fan.id, me.id)
        await service.send_request(me.id, idol.id)

        pending = await service.list_requests(me.id)

        assert [r.user.id for r in pending.incoming] == [fan.id]
        assert [r.user.id for r in pending.outgoing] == [idol.id]
