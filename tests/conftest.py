"""
Pytest configuration and shared fixtures for the salon booking tests.
"""

import os

# must be set before salonbook.config is imported
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("SEED_CATEGORIES", "false")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import create_engine  # noqa: E402

from salonbook import appointments, catalog  # noqa: E402
from salonbook.db import create_db_and_tables, new_session  # noqa: E402
from salonbook.deps import get_store  # noqa: E402
from salonbook.models import Salon, Service, ServiceCategory, User  # noqa: E402
from salonbook.schemas import make_caller  # noqa: E402
from salonbook.store import MemoryStore, SqlStore  # noqa: E402


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Every core test runs against both store implementations."""
    if request.param == "memory":
        yield MemoryStore()
        return

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    with new_session(engine) as session:
        yield SqlStore(session)
    engine.dispose()


def _user(store, username, role):
    return store.insert(User, {
        "username": username,
        "password_hash": "not-a-real-hash",
        "full_name": username.title(),
        "phone": "0500000000",
        "role": role,
    })


@pytest.fixture
def customer(store):
    return _user(store, "layla", "customer")


@pytest.fixture
def other_customer(store):
    return _user(store, "noura", "customer")


@pytest.fixture
def owner(store):
    return _user(store, "huda", "salon_owner")


@pytest.fixture
def other_owner(store):
    return _user(store, "reem", "salon_owner")


@pytest.fixture
def admin(store):
    return _user(store, "admin", "admin")


@pytest.fixture
def customer_caller(customer):
    return make_caller(customer.id, customer.role)


@pytest.fixture
def other_customer_caller(other_customer):
    return make_caller(other_customer.id, other_customer.role)


@pytest.fixture
def owner_caller(owner):
    return make_caller(owner.id, owner.role)


@pytest.fixture
def other_owner_caller(other_owner):
    return make_caller(other_owner.id, other_owner.role)


@pytest.fixture
def admin_caller(admin):
    return make_caller(admin.id, admin.role)


def salon_data(**overrides):
    data = {
        "name": "Lamsat Salon",
        "address": "King Fahd Road",
        "city": "Riyadh",
        "district": "Olaya",
        "phone": "0110000000",
        "is_female_only": True,
    }
    data.update(overrides)
    return data


@pytest.fixture
def salon(store, owner):
    return store.insert(Salon, {**salon_data(), "owner_id": owner.id})


@pytest.fixture
def other_salon(store, other_owner):
    return store.insert(Salon, {**salon_data(name="Other Salon"), "owner_id": other_owner.id})


@pytest.fixture
def category(store):
    catalog.seed_service_categories(store)
    return store.list(ServiceCategory)[0]


@pytest.fixture
def services(store, salon, category):
    """Two services: 100 riyal / 30 min and 50 riyal / 20 min."""
    cut = store.insert(Service, {
        "salon_id": salon.id, "category_id": category.id,
        "name": "Haircut", "price": 100, "duration_minutes": 30,
    })
    henna = store.insert(Service, {
        "salon_id": salon.id, "category_id": category.id,
        "name": "Henna", "price": 50, "duration_minutes": 20,
    })
    return [cut, henna]


@pytest.fixture
def other_service(store, other_salon, category):
    return store.insert(Service, {
        "salon_id": other_salon.id, "category_id": category.id,
        "name": "Makeup", "price": 200, "duration_minutes": 60,
    })


def booking_draft(salon_id, total_price=150, total_duration=50, **overrides):
    draft = {
        "salon_id": salon_id,
        "appointment_date": "2026-11-02T16:00:00",
        "total_price": total_price,
        "total_duration": total_duration,
        "payment_method": "mada",
    }
    draft.update(overrides)
    return draft


def service_lines(services):
    return [
        {"service_id": s.id, "price": s.price, "duration_minutes": s.duration_minutes}
        for s in services
    ]


@pytest.fixture
def appointment(store, salon, services, customer_caller):
    return appointments.create_appointment(
        store, booking_draft(salon.id), service_lines(services), customer_caller
    )


# --- API ----------------------------------------------------------------------

@pytest.fixture
def api_store():
    store = MemoryStore()
    catalog.seed_service_categories(store)
    return store


@pytest.fixture
def client(api_store):
    from salonbook.main import app

    app.dependency_overrides[get_store] = lambda: api_store
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_and_login(client, username, role="customer", password="password123"):
    """Register a user through the API and return bearer headers for it."""
    response = client.post("/api/auth/register", json={
        "username": username,
        "password": password,
        "confirm_password": password,
        "full_name": username.title(),
        "phone": "0500000000",
        "role": role,
    })
    assert response.status_code == 201, response.text

    response = client.post(
        "/api/auth/login",
        data={"username": username, "password": password},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
