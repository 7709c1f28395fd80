"""Mock notification providers for testing."""

from dishka import Scope, provide

from circle.adapter.notifications import RecordingEventPublisher
from circle.domain.service import EventPublisher
from circle.util.di.infrastructure.notifications import NotificationProvider


class MockNotificationProvider(NotificationProvider):
    """Mock notification provider recording events in memory."""

    __is_mock__ = True

    @provide(scope=Scope.REQUEST)
    def get_recorder(self) -> RecordingEventPublisher:
        """Provide the event recorder tests inspect."""
        return RecordingEventPublisher()

    @provide(scope=Scope.REQUEST)
    def get_event_publisher(self, recorder: RecordingEventPublisher) -> EventPublisher:
        """Provide the recorder as the event publisher."""
        return recorder
