"""Notification port."""

from abc import ABC, abstractmethod

from circle.domain.model import DomainEvent


class EventPublisher(ABC):
    """Hands domain events to the notification subsystem.

    The engine never formats or delivers notifications itself. Events are
    published only after the write they describe has been applied.
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """Publish a domain event.

        Args:
            event: The event to hand over
        """
        pass
