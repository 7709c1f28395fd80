"""Graph database connection management.

Provides the GraphStore factory used by the persistence provider.
"""

from circle.config import Settings
from circle.persistence.graph import GraphStore


def create_graph_store(settings: Settings) -> GraphStore:
    """Create a graph store from settings.

    The store is not connected yet; call ``initialize()`` before use.

    Args:
        settings: Application settings with graph connection details

    Returns:
        Configured graph store
    """
    config = settings.graph
    password = config.password.get_secret_value() if config.password else None

    return GraphStore(
        host=config.host,
        port=config.port,
        password=password,
        graph_name=config.graph_name,
        max_connections=config.max_connections,
    )
