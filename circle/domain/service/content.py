"""Content port: read access to posts owned by the content collaborator."""

from abc import ABC, abstractmethod

from circle.domain.model import PostSummary
from circle.domain.value import GroupId


class PostReader(ABC):
    """Read-only access to the posts of a group."""

    @abstractmethod
    async def find_by_group(self, group_id: GroupId) -> list[PostSummary]:
        """Find a group's posts, newest first.

        Args:
            group_id: Group whose posts to fetch

        Returns:
            List of posts (empty if none)
        """
        pass
