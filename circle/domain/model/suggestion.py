"""Suggestion entries produced by the SuggestionEngine."""

from circle.domain.model.common import DomainModel
from circle.domain.model.group import Group
from circle.domain.model.user import UserSummary


class FriendSuggestion(DomainModel):
    """Suggested user with the number of friends shared with the viewer.

    Random fill entries carry mutual_count 0.
    """

    user: UserSummary
    mutual_count: int = 0


class GroupSuggestion(DomainModel):
    """Suggested group with the number of the viewer's friends in it."""

    group: Group
    friend_count: int = 0

    @property
    def member_count(self) -> int:
        return self.group.member_count
