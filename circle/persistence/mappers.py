"""Mappers for converting between graph records and domain models.

Graph records arrive as normalized property dicts (see graph.normalize_value).
Identifiers are stored as strings and timestamps as epoch seconds.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from circle.domain.model import (
    FriendRequest,
    Group,
    GroupMember,
    JoinRequest,
    Membership,
    PostSummary,
    UserGroup,
    UserSummary,
)
from circle.domain.model.group import DEFAULT_COVER_IMAGE
from circle.domain.value import (
    GroupId,
    GroupPrivacy,
    JoinRequestId,
    JoinRequestStatus,
    MembershipRole,
    PostId,
    UserId,
)


def to_timestamp(value: datetime) -> float:
    """Convert a datetime to the epoch seconds stored in the graph."""
    return value.timestamp()


def from_timestamp(value: float | int | None) -> datetime:
    """Convert stored epoch seconds back to a datetime."""
    if value is None:
        return datetime.fromtimestamp(0)
    return datetime.fromtimestamp(value)


def _uuid(value: Any) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def to_user_id(value: Any) -> UserId:
    """Convert a stored user id to a UserId."""
    return UserId(_uuid(value))


def to_group_id(value: Any) -> GroupId:
    """Convert a stored group id to a GroupId."""
    return GroupId(_uuid(value))


def props_to_user(props: dict[str, Any]) -> UserSummary:
    """Convert User node properties to a UserSummary.

    Args:
        props: Node properties

    Returns:
        UserSummary domain model
    """
    return UserSummary(
        id=UserId(_uuid(props["id"])),
        first_name=props.get("first_name") or "",
        last_name=props.get("last_name") or "",
        profile_picture=props.get("profile_picture"),
    )


def props_to_group(props: dict[str, Any]) -> Group:
    """Convert Group node properties to a Group.

    Args:
        props: Node properties

    Returns:
        Group domain model
    """
    return Group(
        id=GroupId(_uuid(props["id"])),
        name=props["name"],
        description=props.get("description") or "",
        category=props.get("category") or "",
        rules=props.get("rules"),
        cover_image=props.get("cover_image") or DEFAULT_COVER_IMAGE,
        privacy=GroupPrivacy(props.get("privacy") or GroupPrivacy.PUBLIC.value),
        member_count=int(props.get("member_count") or 0),
        created_by=UserId(_uuid(props["created_by"])),
        created_at=from_timestamp(props.get("created_at")),
        is_active=bool(props.get("is_active", True)),
    )


def group_to_params(group: Group) -> dict[str, Any]:
    """Convert a Group to query parameters for node creation.

    Args:
        group: Group domain model

    Returns:
        Dict of graph property values
    """
    return {
        "id": str(group.id),
        "name": group.name,
        "description": group.description,
        "category": group.category,
        "rules": group.rules,
        "cover_image": group.cover_image,
        "privacy": group.privacy.value,
        "member_count": group.member_count,
        "created_by": str(group.created_by),
        "created_at": to_timestamp(group.created_at),
        "is_active": group.is_active,
    }


def changes_to_params(changes: dict[str, Any]) -> dict[str, Any]:
    """Convert a group patch to graph property values."""
    params = {}
    for key, value in changes.items():
        if isinstance(value, GroupPrivacy):
            value = value.value
        params[key] = value
    return params


def row_to_membership(
    user_id: Any, group_id: Any, role: str, joined_at: float | None
) -> Membership:
    """Build a Membership from the pieces of a MEMBER_OF edge."""
    return Membership(
        user_id=UserId(_uuid(user_id)),
        group_id=GroupId(_uuid(group_id)),
        role=MembershipRole(role),
        joined_at=from_timestamp(joined_at),
    )


def row_to_group_member(
    user_props: dict[str, Any], edge_props: dict[str, Any]
) -> GroupMember:
    """Build a member listing entry from a User node and its MEMBER_OF edge."""
    return GroupMember(
        user=props_to_user(user_props),
        role=MembershipRole(edge_props.get("role") or MembershipRole.MEMBER.value),
        joined_at=from_timestamp(edge_props.get("joined_at")),
    )


def row_to_user_group(
    group_props: dict[str, Any], role: str, joined_at: float | None
) -> UserGroup:
    """Build a UserGroup from a Group node and the user's MEMBER_OF edge."""
    return UserGroup(
        group=props_to_group(group_props),
        role=MembershipRole(role),
        joined_at=from_timestamp(joined_at),
    )


def row_to_join_request(
    request_props: dict[str, Any],
    user_props: dict[str, Any],
    group_id: Any,
    group_name: str | None,
) -> JoinRequest:
    """Build a JoinRequest from its node, its submitter and its target group."""
    requester = props_to_user(user_props)
    return JoinRequest(
        id=JoinRequestId(_uuid(request_props["id"])),
        user_id=requester.id,
        group_id=GroupId(_uuid(group_id)),
        status=JoinRequestStatus(
            request_props.get("status") or JoinRequestStatus.PENDING.value
        ),
        created_at=from_timestamp(request_props.get("created_at")),
        requester=requester,
        group_name=group_name,
    )


def row_to_friend_request(
    user_props: dict[str, Any], created_at: float | None
) -> FriendRequest:
    """Build a FriendRequest from the counterpart User node and the edge time."""
    return FriendRequest(
        user=props_to_user(user_props),
        created_at=from_timestamp(created_at),
    )


def props_to_post(props: dict[str, Any], group_id: Any) -> PostSummary:
    """Convert Post node properties to a PostSummary."""
    return PostSummary(
        id=PostId(_uuid(props["id"])),
        group_id=GroupId(_uuid(group_id)),
        author_id=UserId(_uuid(props["author_id"])),
        content=props.get("content") or "",
        image=props.get("image"),
        created_at=from_timestamp(props.get("created_at")),
    )
