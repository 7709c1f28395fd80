"""Domain value objects for the relationship engine.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from enum import Enum

from pydantic import field_validator

from circle.domain.value.common import RootValueObject

GROUP_NAME_MIN_LENGTH = 3
GROUP_NAME_MAX_LENGTH = 50
GROUP_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9\s-]+$")


class MembershipRole(str, Enum):
    """Role carried on a MEMBER_OF edge."""

    MEMBER = "member"
    ADMIN = "admin"


class GroupPrivacy(str, Enum):
    """Group visibility.

    Public groups admit joiners directly; private groups go through a
    reviewed join request.
    """

    PUBLIC = "public"
    PRIVATE = "private"


class JoinRequestStatus(str, Enum):
    """Status of a join request.

    Only pending requests are ever stored: a request node is deleted as soon
    as it is approved, rejected or cancelled.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReviewDecision(str, Enum):
    """Decision an admin can take on a pending join request."""

    APPROVED = "approved"
    REJECTED = "rejected"


class EventType(str, Enum):
    """Domain events handed to the notification collaborator."""

    FRIEND_REQUEST_SENT = "friend_request_sent"
    FRIEND_REQUEST_ACCEPTED = "friend_request_accepted"
    JOIN_REQUEST_SUBMITTED = "join_request_submitted"
    JOIN_REQUEST_APPROVED = "join_request_approved"
    JOIN_REQUEST_REJECTED = "join_request_rejected"
    MEMBER_REMOVED = "member_removed"


class TargetType(str, Enum):
    """Kind of entity a domain event refers to."""

    USER = "user"
    GROUP = "group"


class GroupName(RootValueObject[str]):
    """Display name of a group.

    Trimmed, 3-50 characters, letters, digits, spaces and hyphens only.
    Examples: 'Bird Watchers', 'rust-learners'
    """

    @field_validator("root")
    @classmethod
    def validate_group_name(cls, v: str) -> str:
        """Validate group name format."""
        v = v.strip()
        if not v:
            raise ValueError("Group name is required")
        if len(v) < GROUP_NAME_MIN_LENGTH:
            raise ValueError(
                f"Group name must be at least {GROUP_NAME_MIN_LENGTH} characters"
            )
        if len(v) > GROUP_NAME_MAX_LENGTH:
            raise ValueError(
                f"Group name must not exceed {GROUP_NAME_MAX_LENGTH} characters"
            )
        if not GROUP_NAME_PATTERN.match(v):
            raise ValueError("Only letters, numbers, spaces, and hyphens allowed")
        return v
