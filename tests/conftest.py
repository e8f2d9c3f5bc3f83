"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Must be set before any application module reads settings
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dashboard_api.main import app
from dashboard_api.models import Base, Department, Organization, Visitor
from shared.config.constants import Roles
from shared.infrastructure.db import get_db
from shared.security.auth import sign_jwt
from shared.utils.context import UserContext


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

BASE_TIME = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


@dataclass(frozen=True)
class SeedData:
    """IDs of the seeded rows. Two organizations, three departments, four visitors."""

    org1: int = 1
    org2: int = 2
    org1_reception: int = 11
    org1_engineering: int = 12
    org2_reception: int = 21
    ana: int = 101  # org1 / reception
    bruno: int = 102  # org1 / engineering
    carla: int = 103  # org1 / reception
    dana: int = 201  # org2 / reception


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def seed(db_session) -> SeedData:
    """
    Seed two tenants.

    Visitors are created one minute apart (ana first, dana last) so the
    default created_at/desc ordering is deterministic.
    """
    ids = SeedData()

    db_session.add_all([
        Organization(id=ids.org1, name="Acme Corp", slug="acme"),
        Organization(id=ids.org2, name="Globex", slug="globex"),
    ])
    db_session.add_all([
        Department(id=ids.org1_reception, organization_id=ids.org1, name="Reception"),
        Department(id=ids.org1_engineering, organization_id=ids.org1, name="Engineering"),
        Department(id=ids.org2_reception, organization_id=ids.org2, name="Reception"),
    ])
    visitors = [
        (ids.ana, ids.org1, ids.org1_reception, "Ana", "Lopez", "ana@initech.com", "Initech"),
        (ids.bruno, ids.org1, ids.org1_engineering, "Bruno", "Diaz", "bruno@initech.com", "Initech"),
        (ids.carla, ids.org1, ids.org1_reception, "Carla", "Ruiz", "carla@umbrella.com", "Umbrella"),
        (ids.dana, ids.org2, ids.org2_reception, "Dana", "Scully", "dana@initech.com", "Initech"),
    ]
    for minute, (vid, org, dept, first, last, email, company) in enumerate(visitors):
        db_session.add(Visitor(
            id=vid,
            organization_id=org,
            department_id=dept,
            first_name=first,
            last_name=last,
            email=email,
            company=company,
            created_at=BASE_TIME + timedelta(minutes=minute),
        ))
    db_session.commit()
    # Start every test with an empty identity map
    db_session.expunge_all()
    return ids


# =============================================================================
# Callers
# =============================================================================


@pytest.fixture
def super_admin() -> UserContext:
    return UserContext(sub="1", username="root", role=Roles.SUPER_ADMIN)


@pytest.fixture
def admin_org1() -> UserContext:
    return UserContext(sub="10", username="admin.acme", role=Roles.ADMIN, organization_id=1)


@pytest.fixture
def admin_org2() -> UserContext:
    return UserContext(sub="20", username="admin.globex", role=Roles.ADMIN, organization_id=2)


@pytest.fixture
def lead_org1_reception() -> UserContext:
    return UserContext(
        sub="11",
        username="lead.reception",
        role=Roles.DEPARTMENT_LEAD,
        organization_id=1,
        department_ids=frozenset({11}),
    )


def auth_header(user: UserContext) -> dict[str, str]:
    """Bearer header carrying the user's claims."""
    claims = {
        "sub": user.sub,
        "username": user.username,
        "role": user.role,
        "organization_id": user.organization_id,
    }
    if user.department_ids is not None:
        claims["department_ids"] = sorted(user.department_ids)
    return {"Authorization": f"Bearer {sign_jwt(claims)}"}


@pytest.fixture
def headers_for():
    """Fixture form of auth_header, so tests never import conftest."""
    return auth_header
