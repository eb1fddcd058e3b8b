import os

# Must be set before the application modules read their configuration
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

from datetime import date, time, timedelta  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from brokerconnect.auth import Identity  # noqa: E402
from brokerconnect.database import Base, get_db  # noqa: E402
from brokerconnect.main import app  # noqa: E402
from brokerconnect.models import Booking, BrokerProfile, Property, User  # noqa: E402
from brokerconnect.security_utils import create_access_token, hash_password  # noqa: E402

PASSWORD = "secret123"


class RecordingPublisher:
    """Collects published events instead of delivering them"""

    def __init__(self):
        self.events = []

    def publish(self, event):
        self.events.append(event)

    def of_type(self, event_type):
        return [e for e in self.events if isinstance(e, event_type)]


class FailingPublisher:
    def publish(self, event):
        raise RuntimeError("subscriber is down")


def future_date(days=7):
    return date.today() + timedelta(days=days)


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


def identity(user):
    return Identity(id=user.id, role=user.role)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def password_hash():
    return hash_password(PASSWORD)


@pytest.fixture
def make_user(db, password_hash):
    counter = {"n": 0}

    def _make_user(role="client", name=None, verified=True, **kwargs):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"{role.title()} {n}",
            email=kwargs.pop("email", f"{role}{n}@example.com"),
            phone=kwargs.pop("phone", f"07000000{n:02d}"),
            password_hash=password_hash,
            role=role,
            is_verified=verified,
        )
        if role == "broker":
            user.broker_profile = BrokerProfile(
                license_number=kwargs.pop("license_number", f"LIC-{n}"),
                verification_status="verified" if verified else "pending",
            )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_property(db):
    def _make_property(broker, title="Kololo Apartment", **kwargs):
        values = {
            "category": "rental",
            "price": Decimal("1500000"),
            "currency": "UGX",
            "district": "Kampala",
            "area": "Kololo",
            "rooms": 3,
            "status": "available",
        }
        values.update(kwargs)
        prop = Property(title=title, broker_id=broker.id, **values)
        db.add(prop)
        db.commit()
        db.refresh(prop)
        return prop

    return _make_property


@pytest.fixture
def make_booking(db):
    def _make_booking(client_user, prop, status="pending", **kwargs):
        booking = Booking(
            client_id=client_user.id,
            broker_id=prop.broker_id,
            property_id=prop.id,
            visit_date=kwargs.pop("visit_date", future_date()),
            visit_time=kwargs.pop("visit_time", time(14, 30)),
            client_name=client_user.name,
            client_phone=client_user.phone,
            status=status,
            **kwargs,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make_booking


@pytest.fixture
def broker(make_user):
    return make_user("broker", name="Brenda Broker")


@pytest.fixture
def client_user(make_user):
    return make_user("client", name="Carl Client")


@pytest.fixture
def admin(make_user):
    return make_user("admin", name="Ada Admin")


@pytest.fixture
def listing(make_property, broker):
    return make_property(broker)
