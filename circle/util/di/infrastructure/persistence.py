"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

import logfire
from dishka import Scope, provide

from circle.config import Settings
from circle.domain.repository import (
    FriendshipRepository,
    GroupRepository,
    JoinRequestRepository,
    SuggestionRepository,
)
from circle.persistence.database import create_graph_store
from circle.persistence.graph import GraphStore
from circle.persistence.repository import (
    FalkorFriendshipRepository,
    FalkorGroupRepository,
    FalkorJoinRequestRepository,
    FalkorSuggestionRepository,
)
from circle.util.di.base import ProviderBase
from circle.util.observability import instrument_redis


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using FalkorDB."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_graph_store(self, settings: Settings) -> AsyncIterator[GraphStore]:
        """Provide the graph store for the application lifetime.

        The store owns the connection pool; it is closed when the container
        is closed.
        """
        # Instrument redis for observability
        instrument_redis()
        store = create_graph_store(settings)
        await store.initialize()
        logfire.info("Graph store opened", graph=settings.graph.graph_name)
        try:
            yield store
        finally:
            await store.close()
            logfire.info("Graph store closed", graph=settings.graph.graph_name)

    @provide(scope=Scope.REQUEST)
    def get_friendship_repository(self, store: GraphStore) -> FriendshipRepository:
        """Provide Friendship repository."""
        return FalkorFriendshipRepository(store)

    @provide(scope=Scope.REQUEST)
    def get_group_repository(self, store: GraphStore) -> GroupRepository:
        """Provide Group repository."""
        return FalkorGroupRepository(store)

    @provide(scope=Scope.REQUEST)
    def get_join_request_repository(self, store: GraphStore) -> JoinRequestRepository:
        """Provide JoinRequest repository."""
        return FalkorJoinRequestRepository(store)

    @provide(scope=Scope.REQUEST)
    def get_suggestion_repository(self, store: GraphStore) -> SuggestionRepository:
        """Provide Suggestion repository."""
        return FalkorSuggestionRepository(store)
