"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class GraphStoreError(AdapterError):
    """The graph database rejected a query or could not be reached."""

    pass
