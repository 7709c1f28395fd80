"""Friendship domain service."""

from datetime import datetime

import logfire

from circle.domain.error import (
    AlreadyRequestedOrFriendsError,
    NotFriendsError,
    RequestNotFoundError,
    SelfRequestError,
    UserNotFoundError,
)
from circle.domain.model import DomainEvent, PendingFriendRequests, UserSummary
from circle.domain.repository import FriendshipRepository
from circle.domain.value import EventType, TargetType, UserId

from .base import Service
from .events import EventPublisher


class FriendshipService(Service):
    """Domain service for the friend request lifecycle.

    A pair of users is linked by at most one of: a REQUESTED edge in one
    direction, or a FRIENDS_WITH edge in both directions.
    """

    def __init__(
        self,
        friendship_repository: FriendshipRepository,
        event_publisher: EventPublisher,
    ) -> None:
        """Initialize friendship service.

        Args:
            friendship_repository: Friendship repository
            event_publisher: Notification port
        """
        self.friendship_repository = friendship_repository
        self.event_publisher = event_publisher

    async def send_request(self, from_id: UserId, to_id: UserId) -> None:
        """Send a friend request.

        Args:
            from_id: Sender
            to_id: Recipient

        Raises:
            SelfRequestError: If sender and recipient are the same user
            UserNotFoundError: If either user does not exist
            AlreadyRequestedOrFriendsError: If a request or friendship
                already links the pair in either direction
        """
        with logfire.span(
            "friendship_service.send_request",
            from_id=str(from_id),
            to_id=str(to_id),
        ):
            if from_id == to_id:
                raise SelfRequestError(str(from_id))

            for user_id in (from_id, to_id):
                if not await self.friendship_repository.user_exists(user_id):
                    logfire.warn(
                        "Friend request for unknown user", user_id=str(user_id)
                    )
                    raise UserNotFoundError(str(user_id))

            if await self.friendship_repository.is_linked(from_id, to_id):
                logfire.warn(
                    "Duplicate friend request",
                    from_id=str(from_id),
                    to_id=str(to_id),
                )
                raise AlreadyRequestedOrFriendsError(str(from_id), str(to_id))

            # The write re-checks the pair, so a concurrent request loses here
            created = await self.friendship_repository.create_request(
                from_id, to_id, datetime.now()
            )
            if not created:
                logfire.warn(
                    "Friend request lost race",
                    from_id=str(from_id),
                    to_id=str(to_id),
                )
                raise AlreadyRequestedOrFriendsError(str(from_id), str(to_id))

            logfire.info("Friend request sent", from_id=str(from_id), to_id=str(to_id))

            await self.event_publisher.publish(
                DomainEvent(
                    event_type=EventType.FRIEND_REQUEST_SENT,
                    actor_id=from_id,
                    recipient_id=to_id,
                    target_type=TargetType.USER,
                    target_id=from_id,
                )
            )

    async def accept_request(self, recipient_id: UserId, sender_id: UserId) -> None:
        """Accept a pending friend request.

        The request is consumed and both FRIENDS_WITH edges are created in
        one atomic write.

        Args:
            recipient_id: User accepting the request
            sender_id: User who sent it

        Raises:
            RequestNotFoundError: If no request sender -> recipient exists
        """
        with logfire.span(
            "friendship_service.accept_request",
            recipient_id=str(recipient_id),
            sender_id=str(sender_id),
        ):
            accepted = await self.friendship_repository.accept_request(
                sender_id, recipient_id, datetime.now()
            )
            if not accepted:
                logfire.warn(
                    "Friend request not found",
                    sender_id=str(sender_id),
                    recipient_id=str(recipient_id),
                )
                raise RequestNotFoundError(f"{sender_id} -> {recipient_id}")

            logfire.info(
                "Friend request accepted",
                sender_id=str(sender_id),
                recipient_id=str(recipient_id),
            )

            await self.event_publisher.publish(
                DomainEvent(
                    event_type=EventType.FRIEND_REQUEST_ACCEPTED,
                    actor_id=recipient_id,
                    recipient_id=sender_id,
                    target_type=TargetType.USER,
                    target_id=recipient_id,
                )
            )

    async def reject_request(self, recipient_id: UserId, sender_id: UserId) -> None:
        """Reject a friend request received from another user.

        Raises:
            RequestNotFoundError: If no request sender -> recipient exists
        """
        with logfire.span(
            "friendship_service.reject_request",
            recipient_id=str(recipient_id),
            sender_id=str(sender_id),
        ):
            await self._resolve_request(sender_id, recipient_id, "rejected")

    async def cancel_request(self, sender_id: UserId, recipient_id: UserId) -> None:
        """Withdraw a friend request the user sent.

        Raises:
            RequestNotFoundError: If no request sender -> recipient exists
        """
        with logfire.span(
            "friendship_service.cancel_request",
            sender_id=str(sender_id),
            recipient_id=str(recipient_id),
        ):
            await self._resolve_request(sender_id, recipient_id, "cancelled")

    async def _resolve_request(
        self, sender_id: UserId, recipient_id: UserId, resolution: str
    ) -> None:
        # Rejection and cancellation delete the same edge; only the log differs
        deleted = await self.friendship_repository.delete_request(
            sender_id, recipient_id
        )
        if not deleted:
            logfire.warn(
                "Friend request not found",
                sender_id=str(sender_id),
                recipient_id=str(recipient_id),
                resolution=resolution,
            )
            raise RequestNotFoundError(f"{sender_id} -> {recipient_id}")

        logfire.info(
            "Friend request resolved",
            sender_id=str(sender_id),
            recipient_id=str(recipient_id),
            resolution=resolution,
        )

    async def remove_friend(self, user_id: UserId, friend_id: UserId) -> None:
        """Remove a friendship in both directions.

        Raises:
            NotFriendsError: If the users are not friends
        """
        with logfire.span(
            "friendship_service.remove_friend",
            user_id=str(user_id),
            friend_id=str(friend_id),
        ):
            removed = await self.friendship_repository.delete_friendship(
                user_id, friend_id
            )
            if not removed:
                logfire.warn(
                    "Friendship not found",
                    user_id=str(user_id),
                    friend_id=str(friend_id),
                )
                raise NotFriendsError(str(user_id), str(friend_id))

            logfire.info(
                "Friendship removed", user_id=str(user_id), friend_id=str(friend_id)
            )

    async def list_friends(self, user_id: UserId) -> list[UserSummary]:
        """List a user's friends ordered by name."""
        with logfire.span("friendship_service.list_friends", user_id=str(user_id)):
            return await self.friendship_repository.find_friends(user_id)

    async def list_requests(self, user_id: UserId) -> PendingFriendRequests:
        """List the user's pending incoming and outgoing requests, newest first."""
        with logfire.span("friendship_service.list_requests", user_id=str(user_id)):
            incoming = await self.friendship_repository.find_incoming_requests(user_id)
            outgoing = await self.friendship_repository.find_outgoing_requests(user_id)
            return PendingFriendRequests(incoming=incoming, outgoing=outgoing)

    async def count_friends(self, user_id: UserId) -> int:
        """Count a user's friends."""
        with logfire.span("friendship_service.count_friends", user_id=str(user_id)):
            return await self.friendship_repository.count_friends(user_id)
