"""Post projection supplied by the content collaborator."""

from datetime import datetime

from circle.domain.model.common import DomainModel
from circle.domain.value import GroupId, PostId, UserId


class PostSummary(DomainModel):
    """A post published in a group. The engine never writes posts."""

    id: PostId
    group_id: GroupId
    author_id: UserId
    content: str = ""
    image: str | None = None
    created_at: datetime
