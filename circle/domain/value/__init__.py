"""Domain value objects for the relationship engine."""

from circle.domain.value.identifiers import (
    GroupId,
    JoinRequestId,
    PostId,
    UserId,
)
from circle.domain.value.types import (
    EventType,
    GroupName,
    GroupPrivacy,
    JoinRequestStatus,
    MembershipRole,
    ReviewDecision,
    TargetType,
)

__all__ = [
    # Identifiers
    "UserId",
    "GroupId",
    "JoinRequestId",
    "PostId",
    # Types
    "EventType",
    "GroupName",
    "GroupPrivacy",
    "JoinRequestStatus",
    "MembershipRole",
    "ReviewDecision",
    "TargetType",
]
