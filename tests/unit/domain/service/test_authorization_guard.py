"""Unit tests for AuthorizationGuard."""

from datetime import datetime

import pytest

from circle.domain.error import UnauthorizedError
from circle.domain.service import AuthorizationGuard, GroupMembershipService
from circle.persistence.repository.inmemory import InMemoryGraph
from tests.conftest import make_group_create
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no graph database needed
unit_env = create_env_fixture()


class TestAuthorizationGuard:
    """Tests for the relationship predicates."""

    @pytest.mark.asyncio
    async def test_admin_and_member_predicates(self, unit_env):
        """The founder is admin and member; a joiner is only a member."""
        graph = await unit_env.get(InMemoryGraph)
        groups = await unit_env.get(GroupMembershipService)
        guard = await unit_env.get(AuthorizationGuard)
        admin = graph.add_user("Admin")
        member = graph.add_user("Member")
        stranger = graph.add_user("Stranger")
        group = await groups.create_group(admin.id, make_group_create())
        await groups.submit_join_request(member.id, group.id)

        assert await guard.is_admin(admin.id, group.id) is True
        assert await guard.is_member(admin.id, group.id) is True
        assert await guard.is_admin(member.id, group.id) is False
        assert await guard.is_member(member.id, group.id) is True
        assert await guard.is_member(stranger.id, group.id) is False

    @pytest.mark.asyncio
    async def test_is_friend(self, unit_env):
        """Friendship is checked in both directions."""
        graph = await unit_env.get(InMemoryGraph)
        guard = await unit_env.get(AuthorizationGuard)
        alice = graph.add_user("Alice")
        bob = graph.add_user("Bob")
        carol = graph.add_user("Carol")
        now = datetime.now()
        graph.friends[(alice.id, bob.id)] = now
        graph.friends[(bob.id, alice.id)] = now

        assert await guard.is_friend(alice.id, bob.id) is True
        assert await guard.is_friend(bob.id, alice.id) is True
        assert await guard.is_friend(alice.id, carol.id) is False

    @pytest.mark.asyncio
    async def test_require_admin_passes_for_admin(self, unit_env):
        """Admins pass the gate silently."""
        graph = await unit_env.get(InMemoryGraph)
        groups = await unit_env.get(GroupMembershipService)
        guard = await unit_env.get(AuthorizationGuard)
        admin = graph.add_user("Admin")
        group = await groups.create_group(admin.id, make_group_create())

        await guard.require_admin(admin.id, group.id, "remove members")

    @pytest.mark.asyncio
    async def test_require_admin_rejects_member(self, unit_env):
        """Membership alone does not grant admin rights."""
        graph = await unit_env.get(InMemoryGraph)
        groups = await unit_env.get(GroupMembershipService)
        guard = await unit_env.get(AuthorizationGuard)
        admin = graph.add_user("Admin")
        member = graph.add_user("Member")
        group = await groups.create_group(admin.id, make_group_create())
        await groups.submit_join_request(member.id, group.id)

        with pytest.raises(UnauthorizedError) as exc_info:
            await guard.require_admin(member.id, group.id, "remove members")

        assert exc_info.value.action == "remove members"
        assert exc_info.value.kind == "unauthorized"
