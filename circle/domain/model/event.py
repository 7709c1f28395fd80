"""Domain events handed to the notification collaborator."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from circle.domain.model.common import DomainModel
from circle.domain.value import EventType, TargetType, UserId


class DomainEvent(DomainModel):
    """Something a user should be told about.

    The engine only describes what happened; rendering and delivery belong
    to the notification subsystem.
    """

    event_type: EventType
    actor_id: UserId
    recipient_id: UserId
    target_type: TargetType
    target_id: UUID
    occurred_at: datetime = Field(default_factory=datetime.now)
