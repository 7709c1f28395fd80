"""Test container: mocked infrastructure unless a component is unmocked."""

from typing import Type

from dishka import AsyncContainer, make_async_container

from circle.util.di import PROVIDERS, Component, ProviderBase, get_provider


def _mockable() -> list[Type[ProviderBase]]:
    """Component bases that ship both a production and a mock provider."""
    return [base for base in PROVIDERS if base.__subclasses__()]


def _select(base: Type[ProviderBase], unmock: set[Component]) -> Type[ProviderBase]:
    """Pick the provider class for one entry of PROVIDERS."""
    if not base.__subclasses__():
        return get_provider(base)
    return get_provider(base, use_mock=base.__mock_component__ not in unmock)


def build_test_container(unmock: set[Component] | None = None) -> AsyncContainer:
    """Build the container used by the test harness.

    Persistence, notifications and content are mocked by default: the
    repositories share one InMemoryGraph per request scope, events go to a
    RecordingEventPublisher and posts come from a StaticPostReader.

    Args:
        unmock: Components wired to their production providers instead.
            Unmocked persistence needs a reachable FalkorDB (GRAPH__HOST).

    Returns:
        Configured container

    Raises:
        ValueError: If a component is unknown or its dependencies stay mocked

    Examples:
        build_test_container()                       # in-memory graph
        build_test_container(unmock={"persistence"}) # FalkorDB, recorded events
        build_test_container(unmock={"persistence", "content"})
    """
    unmock = set(unmock or ())
    _validate_unmock(unmock)
    return make_async_container(*(_select(base, unmock)() for base in PROVIDERS))


def _validate_unmock(unmock: set[Component]) -> None:
    """Reject unknown components and unmocked components with mocked dependencies.

    Raises:
        ValueError: On the first problem found
    """
    bases = _mockable()
    known = {base.__mock_component__ for base in bases}

    unknown = unmock - known
    if unknown:
        raise ValueError(f"Unknown components: {unknown}")

    for base in bases:
        if base.__mock_component__ not in unmock:
            continue
        missing = set(getattr(base, "__depends_on__", set())) - unmock
        if missing:
            raise ValueError(
                f"Component '{base.__mock_component__}' requires {missing} "
                "to be unmocked"
            )
