"""Strongly typed identifiers for graph entities.

Node ids are UUIDs in the domain and plain strings in the graph; the
persistence mappers convert at the boundary.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
GroupId = NewType("GroupId", UUID)
JoinRequestId = NewType("JoinRequestId", UUID)
PostId = NewType("PostId", UUID)
