import os

# przed importem settings/database
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "INFO")

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import flowershop.data.models  # noqa: F401
from flowershop.api.deps import get_redis
from flowershop.celery_worker import celery_app
from flowershop.data.database import Base, get_db
from flowershop.data.seed import seed_catalog
from flowershop.main import app
from flowershop.repos.cart_repo import CartRepo
from flowershop.repos.guest_cart_repo import GuestCartRepo
from flowershop.services.cart_service import CartSession

celery_app.conf.update(task_always_eager=True, result_backend="cache+memory://")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def redis_client():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def catalog(db):
    seed_catalog(db)
    return db


@pytest.fixture
def cart_repo(db):
    return CartRepo(db)


@pytest.fixture
def guest_repo(redis_client):
    return GuestCartRepo(redis_client)


@pytest.fixture
def make_cart(cart_repo, guest_repo):
    def _make(guest_id="guest-1", strict=False):
        return CartSession(cart_repo, guest_repo, guest_id=guest_id, strict=strict)

    return _make


@pytest.fixture
def client(db, redis_client):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = lambda: redis_client
    yield TestClient(app)
    app.dependency_overrides.clear()


class RecordingNotifications:
    def __init__(self):
        self.orders = []
        self.resets = []

    def send_order_notification(self, user_id, order_number):
        self.orders.append((user_id, order_number))

    def send_password_reset(self, email, token):
        self.resets.append((email, token))


@pytest.fixture
def notifications():
    return RecordingNotifications()
