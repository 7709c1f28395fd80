"""Mock providers for testing."""

from .content import MockContentProvider
from .notifications import MockNotificationProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockContentProvider",
    "MockNotificationProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
