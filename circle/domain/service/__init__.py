"""Domain services."""

from .authorization import AuthorizationGuard
from .base import Service
from .consistency_service import ConsistencyAuditor
from .content import PostReader
from .events import EventPublisher
from .friendship_service import FriendshipService
from .group_membership_service import GroupMembershipService
from .suggestion_engine import SuggestionEngine

__all__ = [
    "AuthorizationGuard",
    "ConsistencyAuditor",
    "EventPublisher",
    "FriendshipService",
    "GroupMembershipService",
    "PostReader",
    "Service",
    "SuggestionEngine",
]
