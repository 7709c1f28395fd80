"""Domain layer DI providers."""

from dishka import Scope, provide

from circle.config import GroupSettings, SuggestionSettings
from circle.domain.repository import (
    FriendshipRepository,
    GroupRepository,
    JoinRequestRepository,
    SuggestionRepository,
)
from circle.domain.service import (
    AuthorizationGuard,
    ConsistencyAuditor,
    EventPublisher,
    FriendshipService,
    GroupMembershipService,
    PostReader,
    SuggestionEngine,
)
from circle.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with the repository
    lifecycle. The graph store they reach through the repositories is
    APP-scoped; each query borrows its own pooled connection.
    """

    scope = Scope.REQUEST

    @provide
    def get_authorization_guard(
        self,
        group_repository: GroupRepository,
        friendship_repository: FriendshipRepository,
    ) -> AuthorizationGuard:
        """Provide authorization guard."""
        return AuthorizationGuard(
            group_repository=group_repository,
            friendship_repository=friendship_repository,
        )

    @provide
    def get_friendship_service(
        self,
        friendship_repository: FriendshipRepository,
        event_publisher: EventPublisher,
    ) -> FriendshipService:
        """Provide friendship domain service."""
        return FriendshipService(
            friendship_repository=friendship_repository,
            event_publisher=event_publisher,
        )

    @provide
    def get_group_membership_service(
        self,
        group_repository: GroupRepository,
        join_request_repository: JoinRequestRepository,
        authorization_guard: AuthorizationGuard,
        event_publisher: EventPublisher,
        post_reader: PostReader,
        group_settings: GroupSettings,
    ) -> GroupMembershipService:
        """Provide group membership domain service."""
        return GroupMembershipService(
            group_repository=group_repository,
            join_request_repository=join_request_repository,
            authorization_guard=authorization_guard,
            event_publisher=event_publisher,
            post_reader=post_reader,
            group_settings=group_settings,
        )

    @provide
    def get_suggestion_engine(
        self,
        suggestion_repository: SuggestionRepository,
        suggestion_settings: SuggestionSettings,
    ) -> SuggestionEngine:
        """Provide suggestion engine."""
        return SuggestionEngine(
            suggestion_repository=suggestion_repository,
            suggestion_settings=suggestion_settings,
        )

    @provide
    def get_consistency_auditor(
        self,
        group_repository: GroupRepository,
        friendship_repository: FriendshipRepository,
    ) -> ConsistencyAuditor:
        """Provide consistency auditor."""
        return ConsistencyAuditor(
            group_repository=group_repository,
            friendship_repository=friendship_repository,
        )
