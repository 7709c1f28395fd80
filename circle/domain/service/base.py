"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services own the relationship rules of the graph: they validate,
    authorize and then issue one atomic repository write per operation.
    """

    pass
