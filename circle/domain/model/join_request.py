"""JoinRequest entity.

A join request is transient: it exists only between submission and
resolution and is deleted (not archived) when approved, rejected or
cancelled.
"""

from datetime import datetime

from pydantic import Field

from circle.domain.model.common import DomainModel
from circle.domain.model.user import UserSummary
from circle.domain.value import GroupId, JoinRequestId, JoinRequestStatus, UserId


class JoinRequest(DomainModel):
    """Pending request of a user to enter a private group.

    Business rules:
    - At most one request per (user, group) pair
    - Only group admins may approve or reject it
    - Only the submitter may cancel it
    """

    id: JoinRequestId
    user_id: UserId
    group_id: GroupId
    status: JoinRequestStatus = JoinRequestStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.now)
    requester: UserSummary | None = None
    group_name: str | None = None
