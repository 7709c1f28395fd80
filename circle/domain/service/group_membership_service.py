"""Group membership domain service."""

from datetime import datetime
from uuid import uuid4

import logfire
from pydantic import ValidationError as PydanticValidationError

from circle.config import GroupSettings
from circle.domain.error import (
    AlreadyMemberError,
    DuplicateGroupNameError,
    DuplicateJoinRequestError,
    GroupNotFoundError,
    InvalidDecisionError,
    InvalidGroupAttributesError,
    MemberNotFoundError,
    NotAMemberError,
    NotOwnerError,
    RequestNotFoundError,
    SoleAdminError,
    UserNotFoundError,
    ValidationError,
)
from circle.domain.model import (
    DomainEvent,
    Group,
    GroupCreate,
    GroupDetails,
    GroupMember,
    GroupUpdate,
    JoinOutcome,
    JoinRequest,
    Membership,
    ReviewOutcome,
    UserGroup,
)
from circle.domain.repository import GroupRepository, JoinRequestRepository
from circle.domain.value import (
    EventType,
    GroupId,
    GroupName,
    JoinRequestId,
    ReviewDecision,
    TargetType,
    UserId,
)

from .authorization import AuthorizationGuard
from .base import Service
from .content import PostReader
from .events import EventPublisher

# Decision spelling used by older clients
_DECISION_ALIASES = {"accepted": ReviewDecision.APPROVED}

# Attributes that may be changed but never blanked
_REQUIRED_TEXT_FIELDS = (("description", "Description"), ("category", "Category"))


def parse_decision(decision: str | ReviewDecision) -> ReviewDecision:
    """Parse a review decision.

    Raises:
        InvalidDecisionError: If the value is not approved or rejected
    """
    if isinstance(decision, ReviewDecision):
        return decision
    normalized = str(decision).strip().lower()
    if normalized in _DECISION_ALIASES:
        return _DECISION_ALIASES[normalized]
    try:
        return ReviewDecision(normalized)
    except ValueError:
        raise InvalidDecisionError(str(decision))


def validate_group_name(name: str) -> tuple[str | None, list[str]]:
    """Validate a group name.

    Returns:
        The trimmed name (None when invalid) and the validation messages
    """
    try:
        return GroupName(name).root, []
    except PydanticValidationError as e:
        return None, [
            str(err["msg"]).removeprefix("Value error, ") for err in e.errors()
        ]


def _require_text(value: str | None, label: str, errors: list[str]) -> str:
    text = (value or "").strip()
    if not text:
        errors.append(f"{label} is required")
    return text


class GroupMembershipService(Service):
    """Domain service for groups, roles and the join request lifecycle.

    Per (user, group) pair the state moves NONE -> PENDING -> MEMBER for
    private groups and NONE -> MEMBER for public ones; rejection,
    cancellation, leaving and removal all return the pair to NONE.

    Policy: the last admin of a group may not leave or be removed while
    other members remain. Adminship is handed over with promote_member.
    """

    def __init__(
        self,
        group_repository: GroupRepository,
        join_request_repository: JoinRequestRepository,
        authorization_guard: AuthorizationGuard,
        event_publisher: EventPublisher,
        post_reader: PostReader,
        group_settings: GroupSettings,
    ) -> None:
        """Initialize group membership service.

        Args:
            group_repository: Group repository
            join_request_repository: Join request repository
            authorization_guard: Role checks run before every gated write
            event_publisher: Notification port
            post_reader: Content port used by get_group_details
            group_settings: Group configuration
        """
        self.group_repository = group_repository
        self.join_request_repository = join_request_repository
        self.authorization_guard = authorization_guard
        self.event_publisher = event_publisher
        self.post_reader = post_reader
        self.group_settings = group_settings

    async def _get_group(self, group_id: GroupId) -> Group:
        group = await self.group_repository.find_by_id(group_id)
        if not group:
            logfire.warn("Group not found", group_id=str(group_id))
            raise GroupNotFoundError(str(group_id))
        return group

    async def _check_name_available(
        self, name: str, exclude_group_id: GroupId | None = None
    ) -> None:
        if await self.group_repository.name_exists(name, exclude_group_id):
            logfire.warn("Duplicate group name", name=name)
            raise DuplicateGroupNameError(name)

    async def _check_sole_admin(self, user_id: UserId, group: Group) -> None:
        """Refuse to strip a group of its last admin while members remain."""
        if not await self.authorization_guard.is_admin(user_id, group.id):
            return
        if await self.group_repository.count_admins(group.id) > 1:
            return
        if group.member_count > 1:
            logfire.warn(
                "Sole admin cannot leave",
                user_id=str(user_id),
                group_id=str(group.id),
                member_count=group.member_count,
            )
            raise SoleAdminError(str(user_id), str(group.id))

    async def _resolve_refused_removal(
        self, user_id: UserId, group_id: GroupId
    ) -> Group:
        """Explain a removal write that matched nothing.

        The write refuses to drop the last admin, so a surviving membership
        means a concurrent leave took the other admin first.
        """
        if await self.authorization_guard.is_member(user_id, group_id):
            logfire.warn(
                "Sole admin removal refused by write",
                user_id=str(user_id),
                group_id=str(group_id),
            )
            raise SoleAdminError(str(user_id), str(group_id))
        logfire.info(
            "Membership already removed",
            user_id=str(user_id),
            group_id=str(group_id),
        )
        return await self._get_group(group_id)

    async def create_group(self, creator_id: UserId, attrs: GroupCreate) -> Group:
        """Create a group with its creator as first admin and member.

        Args:
            creator_id: Founding user
            attrs: Group attributes

        Returns:
            The created group (member_count 1)

        Raises:
            InvalidGroupAttributesError: If required fields are missing or
                the name breaks the naming rules
            DuplicateGroupNameError: If the name is already taken
            UserNotFoundError: If the creator does not exist
        """
        with logfire.span(
            "group_membership_service.create_group",
            creator_id=str(creator_id),
            name=attrs.name,
        ):
            name, errors = validate_group_name(attrs.name)
            description = _require_text(attrs.description, "Description", errors)
            category = _require_text(attrs.category, "Category", errors)
            if errors or name is None:
                logfire.warn("Invalid group attributes", errors=errors)
                raise InvalidGroupAttributesError(errors)

            await self._check_name_available(name)

            now = datetime.now()
            group = Group(
                id=GroupId(uuid4()),
                name=name,
                description=description,
                category=category,
                rules=attrs.rules,
                cover_image=(
                    attrs.cover_image or self.group_settings.default_cover_image
                ),
                privacy=attrs.privacy,
                member_count=1,
                created_by=creator_id,
                created_at=now,
                is_active=True,
            )

            created = await self.group_repository.create(group)
            if not created:
                logfire.warn("Group creator not found", creator_id=str(creator_id))
                raise UserNotFoundError(str(creator_id))

            logfire.info(
                "Group created",
                group_id=str(created.id),
                creator_id=str(creator_id),
                privacy=created.privacy.value,
            )
            return created

    async def submit_join_request(
        self, user_id: UserId, group_id: GroupId
    ) -> JoinOutcome:
        """Ask to join a group.

        Public groups admit the user immediately; private groups get a
        pending join request and every admin is notified.

        Args:
            user_id: Requesting user
            group_id: Target group

        Returns:
            JoinOutcome describing whether the user was auto-joined

        Raises:
            GroupNotFoundError: If the group does not exist or is inactive
            AlreadyMemberError: If the user is already a member
            DuplicateJoinRequestError: If a request is already pending
            UserNotFoundError: If the user does not exist
        """
        with logfire.span(
            "group_membership_service.submit_join_request",
            user_id=str(user_id),
            group_id=str(group_id),
        ):
            group = await self._get_group(group_id)
            if not group.is_active:
                logfire.warn("Join request for inactive group", group_id=str(group_id))
                raise GroupNotFoundError(str(group_id))

            if await self.authorization_guard.is_member(user_id, group_id):
                raise AlreadyMemberError(str(user_id), str(group_id))

            if group.is_public:
                membership = await self.group_repository.add_member(
                    user_id, group_id, datetime.now()
                )
                if not membership:
                    raise UserNotFoundError(str(user_id))
                logfire.info(
                    "User auto-joined public group",
                    user_id=str(user_id),
                    group_id=str(group_id),
                )
                return JoinOutcome(
                    auto_joined=True, group_id=group_id, membership=membership
                )

            if await self.join_request_repository.find_pending(user_id, group_id):
                logfire.warn(
                    "Duplicate join request",
                    user_id=str(user_id),
                    group_id=str(group_id),
                )
                raise DuplicateJoinRequestError(str(user_id), str(group_id))

            request = await self.join_request_repository.create(
                JoinRequest(
                    id=JoinRequestId(uuid4()),
                    user_id=user_id,
                    group_id=group_id,
                    created_at=datetime.now(),
                )
            )
            if not request:
                # The write refuses a second request; tell the races apart
                if await self.join_request_repository.find_pending(user_id, group_id):
                    raise DuplicateJoinRequestError(str(user_id), str(group_id))
                raise UserNotFoundError(str(user_id))

            logfire.info(
                "Join request submitted",
                request_id=str(request.id),
                user_id=str(user_id),
                group_id=str(group_id),
            )

            for admin_id in await self.group_repository.find_admin_ids(group_id):
                await self.event_publisher.publish(
                    DomainEvent(
                        event_type=EventType.JOIN_REQUEST_SUBMITTED,
                        actor_id=user_id,
                        recipient_id=admin_id,
                        target_type=TargetType.GROUP,
                        target_id=group_id,
                    )
                )

            return JoinOutcome(
                auto_joined=False, group_id=group_id, request_id=request.id
            )

    async def review_join_request(
        self,
        reviewer_id: UserId,
        request_id: JoinRequestId,
        decision: str | ReviewDecision,
    ) -> ReviewOutcome:
        """Approve or reject a pending join request.

        Args:
            reviewer_id: Admin reviewing the request
            request_id: Request to resolve
            decision: 'approved' or 'rejected'

        Returns:
            ReviewOutcome with the resulting membership on approval

        Raises:
            InvalidDecisionError: If the decision is not recognised
            RequestNotFoundError: If the request no longer exists
            UnauthorizedError: If the reviewer does not administer the group
        """
        with logfire.span(
            "group_membership_service.review_join_request",
            reviewer_id=str(reviewer_id),
            request_id=str(request_id),
            decision=str(decision),
        ):
            parsed = parse_decision(decision)

            request = await self.join_request_repository.find_by_id(request_id)
            if not request:
                logfire.warn("Join request not found", request_id=str(request_id))
                raise RequestNotFoundError(str(request_id))

            await self.authorization_guard.require_admin(
                reviewer_id, request.group_id, "review join requests"
            )

            membership: Membership | None = None
            if parsed == ReviewDecision.APPROVED:
                membership = await self.join_request_repository.approve(
                    request_id, datetime.now()
                )
                resolved = membership is not None
                event_type = EventType.JOIN_REQUEST_APPROVED
            else:
                resolved = await self.join_request_repository.delete(request_id)
                event_type = EventType.JOIN_REQUEST_REJECTED

            if not resolved:
                # Another reviewer resolved the request first
                logfire.warn(
                    "Join request already resolved", request_id=str(request_id)
                )
                raise RequestNotFoundError(str(request_id))

            logfire.info(
                "Join request reviewed",
                request_id=str(request_id),
                group_id=str(request.group_id),
                user_id=str(request.user_id),
                decision=parsed.value,
            )

            await self.event_publisher.publish(
                DomainEvent(
                    event_type=event_type,
                    actor_id=reviewer_id,
                    recipient_id=request.user_id,
                    target_type=TargetType.GROUP,
                    target_id=request.group_id,
                )
            )

            return ReviewOutcome(
                decision=parsed,
                group_id=request.group_id,
                user_id=request.user_id,
                membership=membership,
            )

    async def cancel_join_request(
        self, user_id: UserId, request_id: JoinRequestId
    ) -> None:
        """Withdraw a join request the user submitted.

        Raises:
            RequestNotFoundError: If the request does not exist
            NotOwnerError: If the user did not submit the request
        """
        with logfire.span(
            "group_membership_service.cancel_join_request",
            user_id=str(user_id),
            request_id=str(request_id),
        ):
            request = await self.join_request_repository.find_by_id(request_id)
            if not request:
                raise RequestNotFoundError(str(request_id))

            if request.user_id != user_id:
                logfire.warn(
                    "Join request cancel by non-owner",
                    user_id=str(user_id),
                    request_id=str(request_id),
                )
                raise NotOwnerError(str(user_id), str(request_id))

            if not await self.join_request_repository.delete(request_id):
                raise RequestNotFoundError(str(request_id))

            logfire.info(
                "Join request cancelled",
                user_id=str(user_id),
                request_id=str(request_id),
            )

    async def leave_group(self, user_id: UserId, group_id: GroupId) -> Group:
        """Leave a group.

        Args:
            user_id: Leaving member
            group_id: Group to leave

        Returns:
            The group with its updated member_count

        Raises:
            GroupNotFoundError: If the group does not exist
            NotAMemberError: If the user is not a member
            SoleAdminError: If the user is the last admin and others remain
        """
        with logfire.span(
            "group_membership_service.leave_group",
            user_id=str(user_id),
            group_id=str(group_id),
        ):
            group = await self._get_group(group_id)

            if not await self.authorization_guard.is_member(user_id, group_id):
                raise NotAMemberError(str(user_id), str(group_id))

            await self._check_sole_admin(user_id, group)

            updated = await self.group_repository.remove_member(user_id, group_id)
            if not updated:
                return await self._resolve_refused_removal(user_id, group_id)

            logfire.info(
                "User left group",
                user_id=str(user_id),
                group_id=str(group_id),
                member_count=updated.member_count,
            )
            return updated

    async def remove_member(
        self, admin_id: UserId, group_id: GroupId, member_id: UserId
    ) -> Group:
        """Remove a member from a group.

        Args:
            admin_id: Acting admin
            group_id: Group
            member_id: Member to remove

        Returns:
            The group with its updated member_count

        Raises:
            GroupNotFoundError: If the group does not exist
            UnauthorizedError: If the actor does not administer the group
            MemberNotFoundError: If the target is not a member
            SoleAdminError: If the target is the last admin and others remain
        """
        with logfire.span(
            "group_membership_service.remove_member",
            admin_id=str(admin_id),
            group_id=str(group_id),
            member_id=str(member_id),
        ):
            group = await self._get_group(group_id)

            await self.authorization_guard.require_admin(
                admin_id, group_id, "remove members"
            )

            if not await self.authorization_guard.is_member(member_id, group_id):
                raise MemberNotFoundError(str(member_id), str(group_id))

            await self._check_sole_admin(member_id, group)

            updated = await self.group_repository.remove_member(member_id, group_id)
            if not updated:
                return await self._resolve_refused_removal(member_id, group_id)

            logfire.info(
                "Member removed",
                admin_id=str(admin_id),
                member_id=str(member_id),
                group_id=str(group_id),
            )

            await self.event_publisher.publish(
                DomainEvent(
                    event_type=EventType.MEMBER_REMOVED,
                    actor_id=admin_id,
                    recipient_id=member_id,
                    target_type=TargetType.GROUP,
                    target_id=group_id,
                )
            )
            return updated

    async def promote_member(
        self, admin_id: UserId, group_id: GroupId, member_id: UserId
    ) -> Membership:
        """Make a member an admin of the group.

        Raises:
            GroupNotFoundError: If the group does not exist
            UnauthorizedError: If the actor does not administer the group
            MemberNotFoundError: If the target is not a member
        """
        with logfire.span(
            "group_membership_service.promote_member",
            admin_id=str(admin_id),
            group_id=str(group_id),
            member_id=str(member_id),
        ):
            await self._get_group(group_id)

            await self.authorization_guard.require_admin(
                admin_id, group_id, "promote members"
            )

            promoted = await self.group_repository.promote_member(
                member_id, group_id, datetime.now()
            )
            membership = await self.group_repository.find_membership(
                member_id, group_id
            )
            if not promoted or not membership:
                raise MemberNotFoundError(str(member_id), str(group_id))

            logfire.info(
                "Member promoted to admin",
                admin_id=str(admin_id),
                member_id=str(member_id),
                group_id=str(group_id),
            )
            return membership

    async def update_group(
        self, admin_id: UserId, group_id: GroupId, patch: GroupUpdate
    ) -> Group:
        """Apply a partial update to a group.

        Raises:
            GroupNotFoundError: If the group does not exist
            UnauthorizedError: If the actor does not administer the group
            ValidationError: If the patch is empty
            InvalidGroupAttributesError: If a changed attribute is invalid
            DuplicateGroupNameError: If the new name is taken
        """
        with logfire.span(
            "group_membership_service.update_group",
            admin_id=str(admin_id),
            group_id=str(group_id),
        ):
            await self._get_group(group_id)

            await self.authorization_guard.require_admin(
                admin_id, group_id, "update the group"
            )

            changes = patch.changes()
            if not changes:
                raise ValidationError("No group attributes to update")

            errors: list[str] = []
            if "name" in changes:
                name, name_errors = validate_group_name(changes["name"])
                errors.extend(name_errors)
                changes["name"] = name
            for field, label in _REQUIRED_TEXT_FIELDS:
                if field in changes:
                    changes[field] = _require_text(changes[field], label, errors)
            if errors:
                logfire.warn("Invalid group attributes", errors=errors)
                raise InvalidGroupAttributesError(errors)

            if "name" in changes:
                await self._check_name_available(changes["name"], group_id)

            updated = await self.group_repository.update(group_id, changes)
            if not updated:
                raise GroupNotFoundError(str(group_id))

            logfire.info(
                "Group updated",
                group_id=str(group_id),
                fields=sorted(changes),
            )
            return updated

    async def get_group_details(
        self, group_id: GroupId, viewer_id: UserId
    ) -> GroupDetails:
        """Read a group page as seen by one viewer.

        Flags, members and counts come from a single graph read; posts come
        from the content collaborator.

        Raises:
            GroupNotFoundError: If the group does not exist
        """
        with logfire.span(
            "group_membership_service.get_group_details",
            group_id=str(group_id),
            viewer_id=str(viewer_id),
        ):
            snapshot = await self.group_repository.load_snapshot(group_id, viewer_id)
            if not snapshot:
                raise GroupNotFoundError(str(group_id))

            posts = await self.post_reader.find_by_group(group_id)

            return GroupDetails(
                group=snapshot.group,
                members=snapshot.members,
                posts=posts,
                is_admin=snapshot.is_admin,
                is_member=snapshot.is_member,
                has_requested=snapshot.has_requested,
                member_count=snapshot.group.member_count,
                friend_count=snapshot.friend_count,
            )

    async def list_members(self, group_id: GroupId) -> list[GroupMember]:
        """List a group's members ordered by join time."""
        with logfire.span(
            "group_membership_service.list_members", group_id=str(group_id)
        ):
            await self._get_group(group_id)
            return await self.group_repository.find_members(group_id)

    async def list_user_groups(self, user_id: UserId) -> list[UserGroup]:
        """List the groups a user belongs to, with the user's role."""
        with logfire.span(
            "group_membership_service.list_user_groups", user_id=str(user_id)
        ):
            return await self.group_repository.find_groups_for_user(user_id)

    async def list_sent_join_requests(self, user_id: UserId) -> list[JoinRequest]:
        """List the pending join requests the user submitted."""
        with logfire.span(
            "group_membership_service.list_sent_join_requests", user_id=str(user_id)
        ):
            return await self.join_request_repository.find_by_user(user_id)

    async def list_received_join_requests(
        self, admin_id: UserId
    ) -> list[JoinRequest]:
        """List pending join requests for every group the user administers."""
        with logfire.span(
            "group_membership_service.list_received_join_requests",
            admin_id=str(admin_id),
        ):
            return await self.join_request_repository.find_for_admin(admin_id)

    async def list_pending_requests(
        self, admin_id: UserId, group_id: GroupId
    ) -> list[JoinRequest]:
        """List a group's pending join requests (admins only).

        Raises:
            GroupNotFoundError: If the group does not exist
            UnauthorizedError: If the actor does not administer the group
        """
        with logfire.span(
            "group_membership_service.list_pending_requests",
            admin_id=str(admin_id),
            group_id=str(group_id),
        ):
            await self._get_group(group_id)
            await self.authorization_guard.require_admin(
                admin_id, group_id, "view join requests"
            )
            return await self.join_request_repository.find_by_group(group_id)

    async def search_groups(self, query: str) -> list[Group]:
        """Search active groups by name, description or category.

        Raises:
            ValidationError: If the trimmed query is too short
        """
        with logfire.span("group_membership_service.search_groups", query=query):
            trimmed = query.strip()
            if len(trimmed) < self.group_settings.search_min_length:
                raise ValidationError(
                    "Search query must be at least "
                    f"{self.group_settings.search_min_length} characters"
                )
            return await self.group_repository.search(trimmed)
