"""Content infrastructure providers."""

from dishka import Scope, provide

from circle.adapter.content import GraphPostReader
from circle.domain.service import PostReader
from circle.persistence.graph import GraphStore
from circle.util.di.base import ProviderBase


class ContentProvider(ProviderBase):
    """Content component base."""

    __mock_component__ = "content"

    # The production reader queries the graph store
    __depends_on__ = {"persistence"}


class ProdContentProvider(ContentProvider):
    """Production content provider reading posts from the graph."""

    __is_mock__ = False

    @provide(scope=Scope.REQUEST)
    def get_post_reader(self, store: GraphStore) -> PostReader:
        """Provide post reader."""
        return GraphPostReader(store)
