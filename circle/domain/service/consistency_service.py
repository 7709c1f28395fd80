"""Reconciliation read over the denormalized and paired graph state."""

import logfire

from circle.domain.error import ConsistencyError
from circle.domain.model import (
    AsymmetricFriendship,
    ConsistencyReport,
    MemberCountDrift,
)
from circle.domain.repository import FriendshipRepository, GroupRepository

from .base import Service


class ConsistencyAuditor(Service):
    """Checks the invariants that writes maintain by construction.

    - every group's cached member_count equals its MEMBER_OF edge count
    - every FRIENDS_WITH edge has its reverse edge

    Violations are logged with full context and never auto-corrected.
    """

    def __init__(
        self,
        group_repository: GroupRepository,
        friendship_repository: FriendshipRepository,
    ) -> None:
        """Initialize consistency auditor.

        Args:
            group_repository: Group repository
            friendship_repository: Friendship repository
        """
        self.group_repository = group_repository
        self.friendship_repository = friendship_repository

    async def audit_member_counts(self) -> tuple[int, list[MemberCountDrift]]:
        """Find groups whose cached member_count has drifted.

        Returns:
            Number of groups checked and the drifted groups
        """
        with logfire.span("consistency_auditor.audit_member_counts"):
            checked, drift = await self.group_repository.find_member_count_drift()
            for entry in drift:
                logfire.error(
                    "member_count drift",
                    group_id=str(entry.group_id),
                    cached=entry.cached,
                    actual=entry.actual,
                )
            return checked, drift

    async def audit_friendship_symmetry(self) -> list[AsymmetricFriendship]:
        """Find FRIENDS_WITH edges that lack their reverse edge."""
        with logfire.span("consistency_auditor.audit_friendship_symmetry"):
            asymmetric = await self.friendship_repository.find_asymmetric_friendships()
            for entry in asymmetric:
                logfire.error(
                    "Asymmetric friendship",
                    user_id=str(entry.user_id),
                    friend_id=str(entry.friend_id),
                )
            return asymmetric

    async def audit(self) -> ConsistencyReport:
        """Run every check and summarise the result."""
        with logfire.span("consistency_auditor.audit"):
            checked, drift = await self.audit_member_counts()
            asymmetric = await self.audit_friendship_symmetry()
            report = ConsistencyReport(
                groups_checked=checked,
                member_count_drift=drift,
                asymmetric_friendships=asymmetric,
            )
            logfire.info(
                "Consistency audit finished",
                groups_checked=checked,
                drifted_groups=len(drift),
                asymmetric_friendships=len(asymmetric),
            )
            return report

    async def assert_consistent(self) -> ConsistencyReport:
        """Run the audit and fail loudly on any violation.

        Raises:
            ConsistencyError: If any invariant does not hold
        """
        report = await self.audit()
        if not report.is_clean:
            raise ConsistencyError(
                f"Graph invariants violated: {len(report.member_count_drift)} "
                f"drifted groups, {len(report.asymmetric_friendships)} "
                "asymmetric friendships"
            )
        return report
