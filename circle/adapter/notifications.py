"""Notification publishers."""

import logfire

from circle.domain.model import DomainEvent
from circle.domain.service import EventPublisher


class LogfireEventPublisher(EventPublisher):
    """Emits each domain event as a structured Logfire record.

    The notification subsystem consumes these records; rendering and
    delivery happen there.
    """

    async def publish(self, event: DomainEvent) -> None:
        """Publish a domain event as a log record."""
        logfire.info(
            "domain_event {event_type}",
            event_type=event.event_type.value,
            actor_id=str(event.actor_id),
            recipient_id=str(event.recipient_id),
            target_type=event.target_type.value,
            target_id=str(event.target_id),
            occurred_at=event.occurred_at.isoformat(),
        )


class RecordingEventPublisher(EventPublisher):
    """Keeps published events in memory for tests."""

    def __init__(self) -> None:
        self.events: list[DomainEvent] = []

    async def publish(self, event: DomainEvent) -> None:
        """Record a domain event."""
        self.events.append(event)
