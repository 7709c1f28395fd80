"""Viewer-relative group aggregate."""

from circle.domain.model.common import DomainModel
from circle.domain.model.group import Group
from circle.domain.model.membership import GroupMember
from circle.domain.model.post import PostSummary


class GroupDetails(DomainModel):
    """Group page as seen by one viewer.

    The flags, the member list and both counts are read in a single graph
    query so they describe the same snapshot.
    """

    group: Group
    members: list[GroupMember] = []
    posts: list[PostSummary] = []
    is_admin: bool = False
    is_member: bool = False
    has_requested: bool = False
    member_count: int = 0
    friend_count: int = 0


class GroupSnapshot(DomainModel):
    """Everything GroupDetails needs from the graph, minus the posts."""

    group: Group
    members: list[GroupMember] = []
    is_admin: bool = False
    is_member: bool = False
    has_requested: bool = False
    friend_count: int = 0
