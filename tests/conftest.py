"""Shared fixtures: in-memory database, API client and sample data."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tavrezsi.core.database import Base, get_db
from tavrezsi.main import app
from tavrezsi.models import Meter, MeterType, Property, PropertyTenant, User, UserRole
from tavrezsi.services.access import AccessScope
from tavrezsi.services.auth import create_access_token, get_password_hash
from tavrezsi.services.notifier import Notifier, get_notifier

DEFAULT_PASSWORD = "password123"


class RecordingNotifier(Notifier):
    """Notifier that keeps sent messages in memory and can simulate failures."""

    def __init__(self):
        self.sent: list[dict] = []
        self.failing_kinds: set = set()

    def send(self, kind, recipient_email, recipient_name, link=None, property_name=None):
        if kind in self.failing_kinds:
            return False
        self.sent.append(
            {
                "kind": kind,
                "email": recipient_email,
                "name": recipient_name,
                "link": link,
                "property_name": property_name,
            }
        )
        return True

    def last_token(self) -> str:
        """Extract the token from the most recent link."""
        return self.sent[-1]["link"].split("token=", 1)[1]


@pytest.fixture
def test_db():
    """Create an in-memory test database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def notifier():
    """Recording notifier injected into the app."""
    return RecordingNotifier()


@pytest.fixture
def client(test_db, notifier):
    """Create a test client with database and notifier overrides."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, username: str, role: UserRole, is_active: bool = True) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        name=username.title(),
        role=role,
        hashed_password=get_password_hash(DEFAULT_PASSWORD),
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_property(db, owner: User, name: str) -> Property:
    db_property = Property(name=name, address=f"{name} utca 1.", owner_id=owner.id)
    db.add(db_property)
    db.commit()
    db.refresh(db_property)
    return db_property


def make_meter(db, db_property: Property, identifier: str, meter_type=MeterType.WATER) -> Meter:
    meter = Meter(
        identifier=identifier,
        name=f"Meter {identifier}",
        type=meter_type,
        unit="m3",
        property_id=db_property.id,
    )
    db.add(meter)
    db.commit()
    db.refresh(meter)
    return meter


def make_tenancy(db, tenant: User, db_property: Property, is_active: bool = True) -> PropertyTenant:
    tenancy = PropertyTenant(property_id=db_property.id, tenant_id=tenant.id, is_active=is_active)
    db.add(tenancy)
    db.commit()
    db.refresh(tenancy)
    return tenancy


def auth_headers(user: User) -> dict[str, str]:
    """Bearer header for ``user``."""
    token = create_access_token(data={"sub": user.username})
    return {"Authorization": f"Bearer {token}"}


def scope_of(user: User) -> AccessScope:
    return AccessScope.for_user(user)


@pytest.fixture
def admin(test_db):
    return make_user(test_db, "admin", UserRole.ADMIN)


@pytest.fixture
def owner(test_db):
    return make_user(test_db, "owner", UserRole.OWNER)


@pytest.fixture
def other_owner(test_db):
    return make_user(test_db, "otherowner", UserRole.OWNER)


@pytest.fixture
def tenant(test_db):
    return make_user(test_db, "tenant", UserRole.TENANT)


@pytest.fixture
def property_a(test_db, owner):
    """Property owned by ``owner``."""
    return make_property(test_db, owner, "Alma")


@pytest.fixture
def property_b(test_db, other_owner):
    """Property owned by ``other_owner``."""
    return make_property(test_db, other_owner, "Barack")


@pytest.fixture
def meter_a(test_db, property_a):
    return make_meter(test_db, property_a, "WM-A")


@pytest.fixture
def meter_b(test_db, property_b):
    return make_meter(test_db, property_b, "WM-B")


@pytest.fixture
def tenancy_a(test_db, tenant, property_a):
    """Active tenancy of ``tenant`` on ``property_a``."""
    return make_tenancy(test_db, tenant, property_a)
