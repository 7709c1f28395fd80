"""Domain layer errors.

Every error carries a stable machine-readable ``code`` and the ``kind`` it
belongs to (validation, conflict, not_found, unauthorized, consistency), so
callers can render "already pending" differently from "nothing to act on".
"""


class DomainError(Exception):
    """Base domain error."""

    code = "domain_error"
    kind = "domain"


# Validation ---------------------------------------------------------------


class ValidationError(DomainError):
    """Domain validation error."""

    code = "validation_error"
    kind = "validation"


class SelfRequestError(ValidationError):
    """Raised when a user sends a friend request to themselves."""

    code = "self_request"

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} cannot send a friend request to themselves")


class InvalidDecisionError(ValidationError):
    """Raised when a join request review carries an unknown decision."""

    code = "invalid_decision"

    def __init__(self, decision: str):
        self.decision = decision
        super().__init__(
            f"Invalid decision {decision!r}: expected 'approved' or 'rejected'"
        )


class InvalidGroupAttributesError(ValidationError):
    """Raised when group attributes fail validation."""

    code = "invalid_group_attributes"

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Group validation failed: " + "; ".join(errors))


# Conflict -----------------------------------------------------------------


class ConflictError(DomainError):
    """The requested state change collides with existing state."""

    code = "conflict"
    kind = "conflict"


class AlreadyRequestedOrFriendsError(ConflictError):
    """Raised when a request or friendship already links two users."""

    code = "already_requested_or_friends"

    def __init__(self, user_id: str, other_id: str):
        self.user_id = user_id
        self.other_id = other_id
        super().__init__(
            f"A friend request or friendship already exists between "
            f"{user_id} and {other_id}"
        )


class DuplicateJoinRequestError(ConflictError):
    """Raised when a pending join request already exists for the pair."""

    code = "duplicate_join_request"

    def __init__(self, user_id: str, group_id: str):
        self.user_id = user_id
        self.group_id = group_id
        super().__init__(
            f"User {user_id} already has a pending request for group {group_id}"
        )


class AlreadyMemberError(ConflictError):
    """Raised when a member tries to join a group again."""

    code = "already_member"

    def __init__(self, user_id: str, group_id: str):
        self.user_id = user_id
        self.group_id = group_id
        super().__init__(f"User {user_id} is already a member of group {group_id}")


class DuplicateGroupNameError(ConflictError):
    """Raised when a group name is already taken."""

    code = "duplicate_group_name"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"A group named {name!r} already exists")


class SoleAdminError(ConflictError):
    """Raised when the last admin would leave members behind without an admin."""

    code = "sole_admin"

    def __init__(self, user_id: str, group_id: str):
        self.user_id = user_id
        self.group_id = group_id
        super().__init__(
            f"User {user_id} is the only admin of group {group_id}; "
            "promote another member first"
        )


# Not found ----------------------------------------------------------------


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    code = "not_found"
    kind = "not_found"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class UserNotFoundError(NotFoundError):
    code = "user_not_found"

    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class GroupNotFoundError(NotFoundError):
    code = "group_not_found"

    def __init__(self, group_id: str):
        super().__init__("Group", group_id)


class RequestNotFoundError(NotFoundError):
    """No pending friend or join request matched."""

    code = "request_not_found"

    def __init__(self, identifier: str):
        super().__init__("Request", identifier)


class NotFriendsError(NotFoundError):
    code = "not_friends"

    def __init__(self, user_id: str, friend_id: str):
        super().__init__("Friendship", f"{user_id} <-> {friend_id}")


class NotAMemberError(NotFoundError):
    """Raised when a non-member tries to leave a group."""

    code = "not_a_member"

    def __init__(self, user_id: str, group_id: str):
        super().__init__("Membership", f"{user_id} in {group_id}")


class MemberNotFoundError(NotFoundError):
    """Raised when an admin targets a user who is not a member."""

    code = "member_not_found"

    def __init__(self, user_id: str, group_id: str):
        super().__init__("Member", f"{user_id} in {group_id}")


# Authorization ------------------------------------------------------------


class NotAuthorizedError(DomainError):
    """Actor lacks the relationship the operation requires."""

    code = "not_authorized"
    kind = "unauthorized"


class UnauthorizedError(NotAuthorizedError):
    """Raised when a user without ADMIN_OF attempts an admin operation."""

    code = "unauthorized"

    def __init__(self, user_id: str, action: str, group_id: str):
        self.user_id = user_id
        self.action = action
        self.group_id = group_id
        super().__init__(
            f"User {user_id} is not authorized to {action} in group {group_id}"
        )


class NotOwnerError(NotAuthorizedError):
    """Raised when a user acts on a join request they did not submit."""

    code = "not_owner"

    def __init__(self, user_id: str, request_id: str):
        self.user_id = user_id
        self.request_id = request_id
        super().__init__(f"User {user_id} did not submit join request {request_id}")


# Consistency --------------------------------------------------------------


class ConsistencyError(DomainError):
    """A stored invariant does not hold.

    Never raised in normal operation. Surfaced to callers as a generic
    internal error; the message is for operators only.
    """

    code = "internal_error"
    kind = "consistency"
