"""Notification infrastructure providers."""

from dishka import Scope, provide

from circle.adapter.notifications import LogfireEventPublisher
from circle.domain.service import EventPublisher
from circle.util.di.base import ProviderBase


class NotificationProvider(ProviderBase):
    """Notification component base."""

    __mock_component__ = "notifications"


class ProdNotificationProvider(NotificationProvider):
    """Production notification provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_event_publisher(self) -> EventPublisher:
        """Provide event publisher."""
        return LogfireEventPublisher()
