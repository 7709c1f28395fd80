"""Suggestion read repository interface."""

from abc import ABC, abstractmethod
from collections.abc import Collection

from circle.domain.model import FriendSuggestion, Group, GroupSuggestion, UserSummary
from circle.domain.value import GroupId, UserId


class SuggestionRepository(ABC):
    """Read-only queries backing friend and group suggestions."""

    @abstractmethod
    async def find_friend_of_friend_candidates(
        self, user_id: UserId, limit: int
    ) -> list[FriendSuggestion]:
        """Find friends of friends who are not already friends with the user.

        Args:
            user_id: Viewer
            limit: Maximum number of candidates

        Returns:
            Candidates ordered by mutual friend count descending, then id
        """
        pass

    @abstractmethod
    async def find_random_users(
        self, user_id: UserId, exclude: Collection[UserId], limit: int
    ) -> list[UserSummary]:
        """Pick random users who are neither the viewer nor their friends.

        Args:
            user_id: Viewer
            exclude: Users already suggested
            limit: Maximum number of users

        Returns:
            Uniformly sampled users
        """
        pass

    @abstractmethod
    async def find_groups_with_friends(
        self, user_id: UserId, limit: int
    ) -> list[GroupSuggestion]:
        """Find active groups the user's friends belong to and the user does not.

        Returns:
            Groups ordered by number of friends in the group descending, then id
        """
        pass

    @abstractmethod
    async def find_random_groups(
        self, user_id: UserId, exclude: Collection[GroupId], limit: int
    ) -> list[Group]:
        """Pick random active groups the user is not a member of.

        Args:
            user_id: Viewer
            exclude: Groups already suggested
            limit: Maximum number of groups
        """
        pass
