"""Results of the invariant audit."""

from circle.domain.model.common import DomainModel
from circle.domain.value import GroupId, UserId


class MemberCountDrift(DomainModel):
    """A group whose cached member_count disagrees with its MEMBER_OF edges."""

    group_id: GroupId
    cached: int
    actual: int


class AsymmetricFriendship(DomainModel):
    """A FRIENDS_WITH edge without its reverse edge."""

    user_id: UserId
    friend_id: UserId


class ConsistencyReport(DomainModel):
    """Outcome of a full audit."""

    groups_checked: int = 0
    member_count_drift: list[MemberCountDrift] = []
    asymmetric_friendships: list[AsymmetricFriendship] = []

    @property
    def is_clean(self) -> bool:
        return not self.member_count_drift and not self.asymmetric_friendships
