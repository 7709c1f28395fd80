"""Group entity and its write payloads."""

from datetime import datetime

from pydantic import Field

from circle.domain.model.common import DomainModel
from circle.domain.value import GroupId, GroupPrivacy, UserId

DEFAULT_COVER_IMAGE = "/uploads/groups/group.jpg"


class Group(DomainModel):
    """Group entity.

    Business rules:
    - Created by exactly one user, who is its first admin and member
    - member_count always equals the number of incoming MEMBER_OF edges
    - Groups are never deleted; admins may deactivate them
    """

    id: GroupId
    name: str
    description: str
    category: str
    rules: str | None = None
    cover_image: str = DEFAULT_COVER_IMAGE
    privacy: GroupPrivacy = GroupPrivacy.PUBLIC
    member_count: int = 0
    created_by: UserId
    created_at: datetime = Field(default_factory=datetime.now)
    is_active: bool = True

    @property
    def is_public(self) -> bool:
        return self.privacy == GroupPrivacy.PUBLIC


class GroupCreate(DomainModel):
    """Attributes supplied when creating a group."""

    name: str
    description: str
    category: str
    rules: str | None = None
    cover_image: str | None = None
    privacy: GroupPrivacy = GroupPrivacy.PUBLIC


class GroupUpdate(DomainModel):
    """Partial update of the mutable group attributes.

    Fields left as None are not touched.
    """

    name: str | None = None
    description: str | None = None
    category: str | None = None
    rules: str | None = None
    cover_image: str | None = None
    privacy: GroupPrivacy | None = None
    is_active: bool | None = None

    def changes(self) -> dict:
        """Return only the attributes that were set."""
        return self.model_dump(exclude_none=True, mode="json")
