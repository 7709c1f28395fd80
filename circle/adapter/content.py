"""Post readers for the content collaborator."""

from circle.domain.model import PostSummary
from circle.domain.service import PostReader
from circle.domain.value import GroupId
from circle.persistence.graph import GraphStore
from circle.persistence.mappers import props_to_post


class GraphPostReader(PostReader):
    """Reads group posts that the content collaborator stores in the graph."""

    def __init__(self, store: GraphStore) -> None:
        """Initialize reader with the graph store.

        Args:
            store: Shared graph store
        """
        self.store = store

    async def find_by_group(self, group_id: GroupId) -> list[PostSummary]:
        """Find a group's posts, newest first."""
        rows = await self.store.read(
            "MATCH (p:Post)-[:POSTED_IN]->(g:Group {id: $group}) "
            "RETURN p, g.id "
            "ORDER BY p.created_at DESC",
            {"group": str(group_id)},
        )
        return [props_to_post(props, gid) for props, gid in rows]


class StaticPostReader(PostReader):
    """Serves a fixed list of posts, for tests."""

    def __init__(self, posts: list[PostSummary] | None = None) -> None:
        self.posts: list[PostSummary] = list(posts or [])

    async def find_by_group(self, group_id: GroupId) -> list[PostSummary]:
        """Find a group's posts, newest first."""
        posts = [post for post in self.posts if post.group_id == group_id]
        return sorted(posts, key=lambda p: p.created_at, reverse=True)
