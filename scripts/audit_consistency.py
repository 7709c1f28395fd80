#!/usr/bin/env python3
"""Audit the graph's denormalized and paired state with Logfire error tracking.

Exits non-zero when any group's member_count has drifted from its MEMBER_OF
edge count or any friendship edge lacks its reverse. Nothing is corrected.
"""

import asyncio
import sys

import logfire

from circle.config import Settings
from circle.domain.service import ConsistencyAuditor
from circle.util.di.container import create_container
from circle.util.logging import setup_logging
from circle.util.observability import configure_logfire


async def run_audit() -> bool:
    """Run the audit inside a request scope and report whether it was clean."""
    container = create_container()
    try:
        async with container() as request_container:
            auditor = await request_container.get(ConsistencyAuditor)
            report = await auditor.audit()
    finally:
        await container.close()

    for drift in report.member_count_drift:
        print(
            f"member_count drift: group={drift.group_id} "
            f"cached={drift.cached} actual={drift.actual}"
        )
    for edge in report.asymmetric_friendships:
        print(f"asymmetric friendship: {edge.user_id} -> {edge.friend_id}")
    print(
        f"checked {report.groups_checked} groups: "
        f"{len(report.member_count_drift)} drifted, "
        f"{len(report.asymmetric_friendships)} asymmetric friendships"
    )
    return report.is_clean


def main() -> int:
    """Run the consistency audit and log any errors to Logfire."""
    settings = Settings()

    setup_logging(settings)
    configure_logfire(settings)

    try:
        logfire.info("Starting consistency audit")
        clean = asyncio.run(run_audit())
        return 0 if clean else 1

    except Exception as e:
        logfire.error(
            "Consistency audit failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
