"""Infrastructure providers."""

# Import bases
from .content import ContentProvider
from .notifications import NotificationProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .content import ProdContentProvider  # noqa: F401
from .notifications import ProdNotificationProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "ContentProvider",
    "NotificationProvider",
    "PersistenceProvider",
    "ProdContentProvider",
    "ProdNotificationProvider",
    "ProdPersistenceProvider",
]
