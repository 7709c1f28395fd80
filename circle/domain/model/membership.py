"""Membership projections and join outcomes."""

from datetime import datetime

from circle.domain.model.common import DomainModel
from circle.domain.model.group import Group
from circle.domain.model.user import UserSummary
from circle.domain.value import (
    GroupId,
    JoinRequestId,
    MembershipRole,
    ReviewDecision,
    UserId,
)


class Membership(DomainModel):
    """A MEMBER_OF edge from a user to a group."""

    user_id: UserId
    group_id: GroupId
    role: MembershipRole = MembershipRole.MEMBER
    joined_at: datetime


class GroupMember(DomainModel):
    """Member listing entry: the user's profile plus their role."""

    user: UserSummary
    role: MembershipRole
    joined_at: datetime


class UserGroup(DomainModel):
    """A group the user belongs to, with the user's role in it."""

    group: Group
    role: MembershipRole
    joined_at: datetime


class JoinOutcome(DomainModel):
    """Result of submitting a join request.

    Public groups admit the user at once (auto_joined, membership set);
    private groups leave a pending request behind (request_id set).
    """

    auto_joined: bool
    group_id: GroupId
    request_id: JoinRequestId | None = None
    membership: Membership | None = None


class ReviewOutcome(DomainModel):
    """Result of an admin reviewing a join request."""

    decision: ReviewDecision
    group_id: GroupId
    user_id: UserId
    membership: Membership | None = None
