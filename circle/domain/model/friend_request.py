"""Friend request projections."""

from datetime import datetime

from circle.domain.model.common import DomainModel
from circle.domain.model.user import UserSummary


class FriendRequest(DomainModel):
    """A pending REQUESTED edge seen from one side.

    `user` is the counterpart: the sender for incoming requests and the
    recipient for outgoing ones.
    """

    user: UserSummary
    created_at: datetime


class PendingFriendRequests(DomainModel):
    """Both directions of a user's pending friend requests."""

    incoming: list[FriendRequest] = []
    outgoing: list[FriendRequest] = []
