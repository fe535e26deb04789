from cabinshare.models.role import SystemRole, HouseRole
from tests.conftest import headers_for


def test_super_admin_promotes_user(client, super_admin):
    response = client.put(
        "/api/admin/users/u1/system-role",
        json={"system_role": "support_admin", "email": "u1@example.com"},
        headers=headers_for(super_admin),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == "u1"
    assert data["system_role"] == "support_admin"
    assert data["email"] == "u1@example.com"

    permissions = client.get("/api/me/permissions", headers=headers_for("u1")).json()
    assert permissions["can_view_all_houses"] is True
    assert permissions["can_access_super_admin"] is False


def test_promotion_keeps_house_grants(client, super_admin, house_members):
    client.put(
        "/api/admin/users/member-1/system-role",
        json={"system_role": "super_admin"},
        headers=headers_for(super_admin),
    )

    roles = client.get("/api/me/roles", headers=headers_for("member-1")).json()
    assert roles["system_role"] == "super_admin"
    assert roles["house_roles"][house_members.id]["role"] == HouseRole.MEMBER.value


def test_demoted_super_admin_loses_access_immediately(client, super_admin, db_session):
    from cabinshare.repositories.role_grant_repository import RoleGrantRepository

    RoleGrantRepository(db_session).set_system_role("root-2", SystemRole.SUPER_ADMIN)
    # Warm the cache for root-2
    assert client.get("/api/me/permissions", headers=headers_for("root-2")).json()[
        "can_access_super_admin"
    ]

    client.put(
        "/api/admin/users/root-2/system-role",
        json={"system_role": "regular_user"},
        headers=headers_for(super_admin),
    )

    permissions = client.get("/api/me/permissions", headers=headers_for("root-2")).json()
    assert permissions["can_access_super_admin"] is False


def test_house_owner_cannot_set_system_roles(client, house_members):
    response = client.put(
        "/api/admin/users/owner-1/system-role",
        json={"system_role": "super_admin"},
        headers=headers_for("owner-1"),
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "Super admin access required"


def test_support_admin_cannot_set_system_roles(client, support_admin):
    response = client.put(
        "/api/admin/users/u1/system-role",
        json={"system_role": "support_admin"},
        headers=headers_for(support_admin),
    )

    assert response.status_code == 403


def test_unknown_system_role_rejected(client, super_admin):
    response = client.put(
        "/api/admin/users/u1/system-role",
        json={"system_role": "god"},
        headers=headers_for(super_admin),
    )

    assert response.status_code == 422
