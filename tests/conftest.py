import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-cabinshare")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from cabinshare.core.cache import TTLCache
from cabinshare.database import get_db
from cabinshare.dependencies import get_role_cache
from cabinshare.models.base import Base
from cabinshare.config import settings
# Import all model classes to ensure they're registered with SQLAlchemy
from cabinshare.models.house import House
from cabinshare.models.role import SystemRole, HouseRole
from cabinshare.models.user_roles import UserRoles, HouseRoleGrant
from cabinshare.repositories.role_grant_repository import RoleGrantRepository
# Import FastAPI app AFTER model imports
from cabinshare.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def role_cache():
    """Fresh role cache per test"""
    return TTLCache(ttl_seconds=60)


@pytest.fixture(scope="function")
def client(db_session, role_cache):
    """FastAPI test client with test database and isolated role cache"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_role_cache] = lambda: role_cache
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(
    user_id: str = "test-user-123", expired: bool = False, email: str | None = None
) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        expired: If True, create expired token
        email: Optional 'email' claim

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "exp": exp, "iat": datetime.now(UTC)}
    if email:
        payload["email"] = email

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


def headers_for(user_id: str) -> dict:
    """Authorization headers for a given user id"""
    return {"Authorization": f"Bearer {create_test_token(user_id=user_id)}"}


@pytest.fixture
def mock_jwt_token():
    """Generate valid JWT token"""
    return create_test_token()


@pytest.fixture
def auth_headers(mock_jwt_token):
    """Authorization headers for authenticated requests"""
    return {"Authorization": f"Bearer {mock_jwt_token}"}


@pytest.fixture
def house(db_session):
    """A house with finances visible to members"""
    house = House(id="house-1", name="Lakeside Cabin", hide_finances=False)
    db_session.add(house)
    db_session.commit()
    db_session.refresh(house)
    return house


@pytest.fixture
def other_house(db_session):
    """A second, unrelated house"""
    house = House(id="house-2", name="Mountain Hut", hide_finances=False)
    db_session.add(house)
    db_session.commit()
    db_session.refresh(house)
    return house


@pytest.fixture
def grant(db_session):
    """Write a house grant straight to the store: grant(user_id, house_id, role)"""
    repo = RoleGrantRepository(db_session)

    def _grant(user_id: str, house_id: str, role: HouseRole, granted_by: str = "system"):
        return repo.upsert_grant(user_id, house_id, role, granted_by)

    return _grant


@pytest.fixture
def house_members(house, grant):
    """house-1 with one user per house role"""
    grant("owner-1", house.id, HouseRole.OWNER)
    grant("admin-1", house.id, HouseRole.ADMIN, granted_by="owner-1")
    grant("member-1", house.id, HouseRole.MEMBER, granted_by="owner-1")
    grant("viewer-1", house.id, HouseRole.VIEWER, granted_by="owner-1")
    return house


@pytest.fixture
def super_admin(db_session):
    """A super admin without any house grants"""
    RoleGrantRepository(db_session).set_system_role("root-1", SystemRole.SUPER_ADMIN)
    return "root-1"


@pytest.fixture
def support_admin(db_session):
    """A support admin without any house grants"""
    RoleGrantRepository(db_session).set_system_role("support-1", SystemRole.SUPPORT_ADMIN)
    return "support-1"
