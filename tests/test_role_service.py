import pytest

from cabinshare.core.exceptions import NotFoundException
from cabinshare.models.role import SystemRole, HouseRole
from cabinshare.models.user_roles import UserRoles, HouseRoleGrant
from cabinshare.repositories.user_roles_repository import UserRolesRepository
from cabinshare.services.role_service import LegacyHouse, RoleService, SYSTEM_GRANTER


@pytest.fixture
def role_service(db_session, role_cache):
    return RoleService(db_session, UserRolesRepository(db_session, role_cache))


def roles_of(db_session, user_id):
    return UserRolesRepository(db_session).get_role_record(user_id)


class TestGrantHouseRole:
    def test_grant_creates_record(self, db_session, role_service):
        grant = role_service.grant_house_role(
            "u1", "house-1", HouseRole.MEMBER, granted_by="owner-1", email="u1@example.com"
        )

        assert grant.role == HouseRole.MEMBER.value
        assert grant.granted_by == "owner-1"
        record = db_session.query(UserRoles).filter_by(user_id="u1").one()
        assert record.email == "u1@example.com"
        assert record.system_role == SystemRole.REGULAR_USER.value

    def test_grants_to_different_houses_are_kept(self, db_session, role_service):
        """A grant for one house never rewrites the user's other houses"""
        role_service.grant_house_role("u1", "house-1", HouseRole.OWNER, granted_by="system")
        role_service.grant_house_role("u1", "house-2", HouseRole.VIEWER, granted_by="owner-2")

        assert roles_of(db_session, "u1").house_roles == {
            "house-1": HouseRole.OWNER,
            "house-2": HouseRole.VIEWER,
        }

    def test_regrant_replaces_previous_role(self, db_session, role_service):
        role_service.grant_house_role("u1", "house-1", HouseRole.VIEWER, granted_by="owner-1")
        role_service.grant_house_role("u1", "house-1", HouseRole.ADMIN, granted_by="owner-2")

        grants = db_session.query(HouseRoleGrant).filter_by(user_id="u1").all()
        assert len(grants) == 1
        assert grants[0].role == HouseRole.ADMIN.value
        assert grants[0].granted_by == "owner-2"

    def test_grant_keeps_system_role(self, db_session, role_service):
        role_service.set_system_role("u1", SystemRole.SUPPORT_ADMIN)

        role_service.grant_house_role("u1", "house-1", HouseRole.MEMBER, granted_by="owner-1")

        assert roles_of(db_session, "u1").system_role == SystemRole.SUPPORT_ADMIN

    def test_existing_email_not_overwritten(self, db_session, role_service):
        role_service.grant_house_role(
            "u1", "house-1", HouseRole.MEMBER, granted_by="system", email="first@example.com"
        )
        role_service.grant_house_role(
            "u1", "house-2", HouseRole.MEMBER, granted_by="system", email="second@example.com"
        )

        record = db_session.query(UserRoles).filter_by(user_id="u1").one()
        assert record.email == "first@example.com"


class TestRevokeHouseRole:
    def test_revoke_removes_only_that_house(self, db_session, role_service):
        role_service.grant_house_role("u1", "house-1", HouseRole.MEMBER, granted_by="system")
        role_service.grant_house_role("u1", "house-2", HouseRole.ADMIN, granted_by="system")

        role_service.revoke_house_role("u1", "house-1")

        assert roles_of(db_session, "u1").house_roles == {"house-2": HouseRole.ADMIN}

    def test_revoke_unknown_grant_raises(self, role_service):
        with pytest.raises(NotFoundException):
            role_service.revoke_house_role("u1", "house-1")

    def test_revoke_last_grant_keeps_record(self, db_session, role_service):
        role_service.grant_house_role("u1", "house-1", HouseRole.MEMBER, granted_by="system")

        role_service.revoke_house_role("u1", "house-1")

        assert db_session.query(UserRoles).filter_by(user_id="u1").count() == 1
        assert dict(roles_of(db_session, "u1").house_roles) == {}


class TestSetSystemRole:
    def test_promote_new_user(self, db_session, role_service):
        record = role_service.set_system_role("u1", SystemRole.SUPER_ADMIN, "root@example.com")

        assert record.system_role == SystemRole.SUPER_ADMIN.value
        assert record.email == "root@example.com"

    def test_system_role_change_keeps_house_grants(self, db_session, role_service):
        role_service.grant_house_role("u1", "house-1", HouseRole.OWNER, granted_by="system")

        role_service.set_system_role("u1", SystemRole.SUPER_ADMIN)
        role_service.set_system_role("u1", SystemRole.REGULAR_USER)

        role_data = roles_of(db_session, "u1")
        assert role_data.system_role == SystemRole.REGULAR_USER
        assert role_data.house_roles == {"house-1": HouseRole.OWNER}


class TestBackfill:
    def test_manager_becomes_owner_and_others_members(self, db_session, role_service):
        houses = [
            LegacyHouse(id="h1", manager_id="alice", owner_ids=["alice", "bob", "carol"]),
            LegacyHouse(id="h2", manager_id="bob", owner_ids=["alice"]),
        ]

        counts = role_service.backfill_from_houses(houses)

        assert counts == {"owners": 2, "members": 3}
        assert roles_of(db_session, "alice").house_roles == {
            "h1": HouseRole.OWNER,
            "h2": HouseRole.MEMBER,
        }
        assert roles_of(db_session, "bob").house_roles == {
            "h1": HouseRole.MEMBER,
            "h2": HouseRole.OWNER,
        }
        assert roles_of(db_session, "carol").house_roles == {"h1": HouseRole.MEMBER}

    def test_granted_by_recorded(self, role_service):
        role_service.backfill_from_houses(
            [LegacyHouse(id="h1", manager_id="alice", owner_ids=["bob"])]
        )

        assert role_service.get_grant("alice", "h1").granted_by == SYSTEM_GRANTER
        assert role_service.get_grant("bob", "h1").granted_by == "alice"

    def test_house_without_manager(self, role_service):
        counts = role_service.backfill_from_houses([LegacyHouse(id="h1", owner_ids=["bob"])])

        assert counts == {"owners": 0, "members": 1}
        assert role_service.get_grant("bob", "h1").granted_by == SYSTEM_GRANTER

    def test_backfill_is_repeatable(self, db_session, role_service):
        houses = [LegacyHouse(id="h1", manager_id="alice", owner_ids=["bob"])]

        role_service.backfill_from_houses(houses)
        role_service.backfill_from_houses(houses)

        assert db_session.query(HouseRoleGrant).count() == 2
