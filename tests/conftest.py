"""Pytest configuration: a file-backed SQLite record store and in-process fakes for Redis and Celery."""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import patch

import pytest

from ecobazaar.data.database import Base, make_engine
from ecobazaar.data.sql_store import SqlRecordStore
from ecobazaar.domain.checkout import CheckoutState
from ecobazaar.domain.errors import StoreError
from ecobazaar.domain.schemas import Profile, Role, SessionContext
from ecobazaar.repos.profile_repo import ProfileRepo

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


class MemoryLedger:
    """Checkout ledger kept in a dict, same contract as RedisCheckoutLedger."""

    def __init__(self):
        self.plans = {}
        self.locks = {}

    def claim(self, key):
        if key in self.locks:
            return None
        token = uuid.uuid4().hex
        self.locks[key] = token
        return token

    def release(self, key, token):
        if self.locks.get(key) == token:
            del self.locks[key]
            return True
        return False

    def load(self, key):
        plan = self.plans.get(key)
        return plan.model_copy(deep=True) if plan else None

    def save(self, plan):
        self.plans[plan.key] = plan.model_copy(deep=True)

    def discard(self, key):
        self.plans.pop(key, None)

    def stalled(self, older_than):
        return [k for k, p in self.plans.items() if p.state != CheckoutState.DONE]


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, user_id, order_id, points_earned):
        self.sent.append((user_id, order_id, points_earned))


@pytest.fixture
def store(tmp_path):
    """Fresh database per test; a file so parallel reads get their own connection."""
    engine = make_engine(f"sqlite:///{tmp_path / 'ecobazaar.db'}")
    Base.metadata.create_all(bind=engine)
    yield SqlRecordStore(engine)
    engine.dispose()


@pytest.fixture
def ledger():
    return MemoryLedger()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_profile(store):
    def _make(user_id=None, role=None, carbon_points=0, name="Test User"):
        user_id = user_id or str(uuid.uuid4())
        store.insert(
            "profiles",
            [{"id": user_id, "name": name, "role": role.value if role else None, "carbon_points": carbon_points}],
        )
        return ProfileRepo(store).get_profile(user_id)

    return _make


@pytest.fixture
def make_product(store):
    """Products get increasing created_at, so the last one made is first in the catalog."""
    counter = {"n": 0}

    def _make(name="Product", price="10.00", carbon=1.0, eco=False, category="Kitchen", stock=10, seller_id=None):
        counter["n"] += 1
        row = store.insert(
            "products",
            [
                {
                    "name": name,
                    "price": Decimal(price),
                    "carbon_footprint": carbon,
                    "eco_rating": 3,
                    "category": category,
                    "stock": stock,
                    "is_eco_friendly": eco,
                    "seller_id": seller_id,
                    "created_at": T0 + timedelta(minutes=counter["n"]),
                }
            ],
        )[0]
        return row["id"]

    return _make


@pytest.fixture
def put_in_cart(store):
    counter = {"n": 0}

    def _put(user_id, product_id, quantity=1):
        counter["n"] += 1
        return store.insert(
            "cart_items",
            [
                {
                    "user_id": user_id,
                    "product_id": product_id,
                    "quantity": quantity,
                    "added_at": T0 + timedelta(minutes=counter["n"]),
                }
            ],
        )[0]["id"]

    return _put


def session_for(profile: Profile | None, user_id: str | None = None) -> SessionContext:
    if profile is None:
        return SessionContext(user_id=user_id)
    return SessionContext(user_id=profile.id, profile=profile)


def fail_on(store, method, table, after=0):
    """
    Patch ``store.<method>`` so calls against ``table`` raise StoreError once
    ``after`` of them went through; other tables are untouched.
    """
    original = getattr(store, method)
    seen = {"n": 0}

    def _call(name, *args, **kwargs):
        if name == table:
            seen["n"] += 1
            if seen["n"] > after:
                raise StoreError(f"{method} on {table} failed")
        return original(name, *args, **kwargs)

    return patch.object(store, method, side_effect=_call)


@pytest.fixture
def shopper(make_profile):
    return make_profile(role=Role.USER)
