"""Test configuration and fixtures."""

from datetime import datetime
from uuid import uuid4

import pytest

from circle.domain.model import Group, GroupCreate, PostSummary
from circle.domain.value import GroupId, GroupPrivacy, PostId, UserId


@pytest.fixture(autouse=True)
def test_environment(monkeypatch):
    """Run every test with test settings, whatever the developer's .env says."""
    monkeypatch.setenv("ENVIRONMENT", "test")


def make_group_create(
    name: str = "Bird Watchers",
    privacy: GroupPrivacy = GroupPrivacy.PUBLIC,
    **overrides,
) -> GroupCreate:
    """Helper to build valid group attributes for tests."""
    attrs = {
        "name": name,
        "description": "People who watch birds",
        "category": "Outdoors",
        "privacy": privacy,
    }
    attrs.update(overrides)
    return GroupCreate(**attrs)


def make_group(
    created_by: UserId,
    name: str = "Bird Watchers",
    member_count: int = 1,
    **overrides,
) -> Group:
    """Helper to build a Group entity directly (bypassing the service)."""
    attrs = {
        "id": GroupId(uuid4()),
        "name": name,
        "description": "People who watch birds",
        "category": "Outdoors",
        "member_count": member_count,
        "created_by": created_by,
        "created_at": datetime.now(),
    }
    attrs.update(overrides)
    return Group(**attrs)


def make_post(group_id: GroupId, author_id: UserId, content: str = "Hello") -> PostSummary:
    """Helper to build a post owned by the content collaborator."""
    return PostSummary(
        id=PostId(uuid4()),
        group_id=group_id,
        author_id=author_id,
        content=content,
        created_at=datetime.now(),
    )
