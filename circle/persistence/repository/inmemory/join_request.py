"""In-memory join request repository for testing."""

from datetime import datetime

from circle.domain.model import JoinRequest, Membership
from circle.domain.repository import JoinRequestRepository
from circle.domain.value import GroupId, JoinRequestId, MembershipRole, UserId

from .graph import InMemoryGraph


class InMemoryJoinRequestRepository(JoinRequestRepository):
    """In-memory implementation of JoinRequestRepository for testing."""

    def __init__(self, graph: InMemoryGraph) -> None:
        self._graph = graph

    def _hydrate(self, request: JoinRequest) -> JoinRequest:
        group = self._graph.groups.get(request.group_id)
        return request.model_copy(
            update={
                "requester": self._graph.users.get(request.user_id),
                "group_name": group.name if group else None,
            }
        )

    async def find_by_id(self, request_id: JoinRequestId) -> JoinRequest | None:
        """Find a join request by ID."""
        request = self._graph.join_requests.get(request_id)
        return self._hydrate(request) if request else None

    async def find_pending(
        self, user_id: UserId, group_id: GroupId
    ) -> JoinRequest | None:
        """Find the pending request of a user for a group."""
        for request in self._graph.join_requests.values():
            if request.user_id == user_id and request.group_id == group_id:
                return self._hydrate(request)
        return None

    async def create(self, request: JoinRequest) -> JoinRequest | None:
        """Store a request unless one already exists for the pair."""
        if (
            request.user_id not in self._graph.users
            or request.group_id not in self._graph.groups
        ):
            return None
        if await self.find_pending(request.user_id, request.group_id):
            return None
        self._graph.join_requests[request.id] = request
        return self._hydrate(request)

    async def approve(
        self, request_id: JoinRequestId, joined_at: datetime
    ) -> Membership | None:
        """Delete the request and admit its submitter."""
        request = self._graph.join_requests.pop(request_id, None)
        if request is None:
            return None
        key = (request.user_id, request.group_id)
        existing = self._graph.memberships.get(key)
        if existing is not None:
            return existing
        membership = Membership(
            user_id=request.user_id,
            group_id=request.group_id,
            role=MembershipRole.MEMBER,
            joined_at=joined_at,
        )
        self._graph.memberships[key] = membership
        self._graph.adjust_member_count(request.group_id, 1)
        return membership

    async def delete(self, request_id: JoinRequestId) -> bool:
        """Delete a request."""
        return self._graph.join_requests.pop(request_id, None) is not None

    async def find_by_user(self, user_id: UserId) -> list[JoinRequest]:
        """Find the requests a user has submitted, newest first."""
        requests = [
            self._hydrate(r)
            for r in self._graph.join_requests.values()
            if r.user_id == user_id
        ]
        return sorted(requests, key=lambda r: r.created_at, reverse=True)

    async def find_by_group(self, group_id: GroupId) -> list[JoinRequest]:
        """Find the pending requests for a group, oldest first."""
        requests = [
            self._hydrate(r)
            for r in self._graph.join_requests.values()
            if r.group_id == group_id
        ]
        return sorted(requests, key=lambda r: r.created_at)

    async def find_for_admin(self, admin_id: UserId) -> list[JoinRequest]:
        """Find pending requests for the groups the user administers."""
        administered = {
            group for (user, group) in self._graph.admins if user == admin_id
        }
        requests = [
            self._hydrate(r)
            for r in self._graph.join_requests.values()
            if r.group_id in administered
        ]
        return sorted(requests, key=lambda r: r.created_at)
