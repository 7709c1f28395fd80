"""Domain model entities for the relationship engine."""

from circle.domain.model.consistency import (
    AsymmetricFriendship,
    ConsistencyReport,
    MemberCountDrift,
)
from circle.domain.model.event import DomainEvent
from circle.domain.model.friend_request import FriendRequest, PendingFriendRequests
from circle.domain.model.group import Group, GroupCreate, GroupUpdate
from circle.domain.model.group_details import GroupDetails, GroupSnapshot
from circle.domain.model.join_request import JoinRequest
from circle.domain.model.membership import (
    GroupMember,
    JoinOutcome,
    Membership,
    ReviewOutcome,
    UserGroup,
)
from circle.domain.model.post import PostSummary
from circle.domain.model.suggestion import FriendSuggestion, GroupSuggestion
from circle.domain.model.user import UserSummary

__all__ = [
    "AsymmetricFriendship",
    "ConsistencyReport",
    "DomainEvent",
    "FriendRequest",
    "FriendSuggestion",
    "Group",
    "GroupCreate",
    "GroupDetails",
    "GroupMember",
    "GroupSnapshot",
    "GroupSuggestion",
    "GroupUpdate",
    "JoinOutcome",
    "JoinRequest",
    "MemberCountDrift",
    "Membership",
    "PendingFriendRequests",
    "PostSummary",
    "ReviewOutcome",
    "UserGroup",
    "UserSummary",
]
