"""Friend and group suggestions."""

import logfire

from circle.config import SuggestionSettings
from circle.domain.error import ValidationError
from circle.domain.model import FriendSuggestion, GroupSuggestion
from circle.domain.repository import SuggestionRepository
from circle.domain.value import UserId

from .base import Service


class SuggestionEngine(Service):
    """Read-only ranking over the friendship and membership graph.

    Both suggestion lists are built in two tiers: socially ranked
    candidates first, then uniformly random fill so the list reaches the
    requested size whenever enough eligible candidates exist.
    """

    def __init__(
        self,
        suggestion_repository: SuggestionRepository,
        suggestion_settings: SuggestionSettings,
    ) -> None:
        """Initialize suggestion engine.

        Args:
            suggestion_repository: Suggestion read queries
            suggestion_settings: Default and maximum list sizes
        """
        self.suggestion_repository = suggestion_repository
        self.suggestion_settings = suggestion_settings

    def _resolve_limit(self, limit: int | None) -> int:
        if limit is None:
            return self.suggestion_settings.default_limit
        if limit < 1:
            raise ValidationError(f"Suggestion limit must be positive, got {limit}")
        if limit > self.suggestion_settings.max_limit:
            raise ValidationError(
                f"Suggestion limit must be at most "
                f"{self.suggestion_settings.max_limit}, got {limit}"
            )
        return limit

    async def suggest_friends(
        self, user_id: UserId, limit: int | None = None
    ) -> list[FriendSuggestion]:
        """Suggest people the user may know.

        Friends of friends come first, ordered by mutual friend count; the
        rest is random users who are neither the viewer nor their friends,
        each with a mutual count of 0.

        Args:
            user_id: Viewer
            limit: Maximum number of suggestions (default from settings)

        Returns:
            Up to ``limit`` suggestions

        Raises:
            ValidationError: If limit is less than 1 or above the maximum
        """
        limit = self._resolve_limit(limit)
        with logfire.span(
            "suggestion_engine.suggest_friends", user_id=str(user_id), limit=limit
        ):
            ranked = await self.suggestion_repository.find_friend_of_friend_candidates(
                user_id, limit
            )

            suggestions = list(ranked)
            remaining = limit - len(suggestions)
            if remaining > 0:
                exclude = [s.user.id for s in suggestions]
                fill = await self.suggestion_repository.find_random_users(
                    user_id, exclude, remaining
                )
                suggestions.extend(FriendSuggestion(user=user) for user in fill)

            logfire.info(
                "Friend suggestions computed",
                user_id=str(user_id),
                ranked=len(ranked),
                total=len(suggestions),
            )
            return suggestions

    async def suggest_groups(
        self, user_id: UserId, limit: int | None = None
    ) -> list[GroupSuggestion]:
        """Suggest groups the user may want to join.

        Active groups with the most of the user's friends come first; the
        rest is random active groups the user is not in.

        Args:
            user_id: Viewer
            limit: Maximum number of suggestions (default from settings)

        Returns:
            Up to ``limit`` suggestions, each carrying the group's member_count

        Raises:
            ValidationError: If limit is less than 1 or above the maximum
        """
        limit = self._resolve_limit(limit)
        with logfire.span(
            "suggestion_engine.suggest_groups", user_id=str(user_id), limit=limit
        ):
            ranked = await self.suggestion_repository.find_groups_with_friends(
                user_id, limit
            )

            suggestions = list(ranked)
            remaining = limit - len(suggestions)
            if remaining > 0:
                exclude = [s.group.id for s in suggestions]
                fill = await self.suggestion_repository.find_random_groups(
                    user_id, exclude, remaining
                )
                suggestions.extend(GroupSuggestion(group=group) for group in fill)

            logfire.info(
                "Group suggestions computed",
                user_id=str(user_id),
                ranked=len(ranked),
                total=len(suggestions),
            )
            return suggestions
