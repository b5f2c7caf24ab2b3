"""
Pytest fixtures for the transaction dashboard tests.

Provides a known transaction payload, temporary SQLite stores, and FastAPI
TestClients wired to them.  The seed fetch is never performed over the
network: tests patch ``api.routes.seed.fetch_json``.

SAMPLE_TRANSACTIONS, month by month (UTC):
    March    ids 1-5  (2021 and 2022), prices 15.99 / 168 / 64 / 999.99 / 599
    November id 6
    January  id 7
    February ids 8-9  (id 9 is 2022-03-01 02:00 +05:30, i.e. Feb 28 in UTC)
"""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient  # noqa: E402

from api.app import create_app  # noqa: E402
from api.database import TransactionStore  # noqa: E402
from api.models import TransactionIn  # noqa: E402

SAMPLE_TRANSACTIONS: list[dict] = [
    {"id": 101, "title": "Mens Casual Slim Fit", "description": "The color could be slightly different",
     "price": 15.99, "dateOfSale": "2022-03-05T10:00:00+00:00", "category": "men's clothing",
     "sold": True, "image": "https://example.com/1.jpg"},
    {"id": 102, "title": "Solid Gold Petite Micropave", "description": "Satisfaction Guaranteed",
     "price": 168, "dateOfSale": "2021-03-12T10:00:00+00:00", "category": "jewelery",
     "sold": False, "image": "https://example.com/2.jpg"},
    {"id": 103, "title": "WD 2TB Elements Portable", "description": "USB 3.0 and USB 2.0 compatibility",
     "price": 64, "dateOfSale": "2022-03-27T10:00:00+00:00", "category": "electronics",
     "sold": True, "image": "https://example.com/3.jpg"},
    {"id": 104, "title": "Samsung 49-Inch Monitor", "description": "49 INCH SUPER ULTRAWIDE",
     "price": 999.99, "dateOfSale": "2021-03-18T10:00:00+00:00", "category": "electronics",
     "sold": False, "image": "https://example.com/4.jpg"},
    {"id": 105, "title": "Acer SB220Q Monitor", "description": "21.5 inches Full HD widescreen",
     "price": 599, "dateOfSale": "2022-03-08T10:00:00+00:00", "category": "electronics",
     "sold": True, "image": "https://example.com/5.jpg"},
    {"id": 106, "title": "Fjallraven Backpack", "description": "Your perfect pack for everyday use",
     "price": 329.85, "dateOfSale": "2021-11-27T20:29:54+05:30", "category": "men's clothing",
     "sold": False, "image": "https://example.com/6.jpg"},
    {"id": 107, "title": "Rain Jacket Women", "description": "Lightweight perfect for trip",
     "price": 39.99, "dateOfSale": "2022-01-15T10:00:00+00:00", "category": "women's clothing",
     "sold": True, "image": "https://example.com/7.jpg"},
    {"id": 108, "title": "Opna Short Sleeve", "description": "100% Polyester",
     "price": 7.95, "dateOfSale": "2021-02-10T10:00:00+00:00", "category": "women's clothing",
     "sold": True, "image": "https://example.com/8.jpg"},
    {"id": 109, "title": "Pierced Owl Rose Gold", "description": "Rose Gold Plated",
     "price": 10.99, "dateOfSale": "2022-03-01T02:00:00+05:30", "category": "jewelery",
     "sold": False, "image": "https://example.com/9.jpg"},
]

# The two-record scenario: one sold item under 100, one unsold item in 101-200.
SCENARIO_TRANSACTIONS: list[dict] = [
    {"title": "A", "price": 50, "dateOfSale": "2021-03-05", "category": "x", "sold": True},
    {"title": "B", "price": 150, "dateOfSale": "2021-03-10", "category": "y", "sold": False},
]


def insert_payload(db_path: Path, payload: list[dict]) -> int:
    """Insert a seed-shaped payload straight into the store at db_path."""
    store = TransactionStore(db_path)
    store.open()
    try:
        return store.insert_many([TransactionIn.model_validate(d).to_row() for d in payload])
    finally:
        store.close()


def seed_via_api(client: TestClient, payload: list[dict]):
    """Call /api/initialize-database with the seed fetch returning payload."""
    with patch("api.routes.seed.fetch_json", return_value=payload):
        return client.get("/api/initialize-database")


@pytest.fixture(scope="module")
def client(tmp_path_factory):
    """TestClient over a store holding SAMPLE_TRANSACTIONS."""
    db_path = tmp_path_factory.mktemp("sample") / "transactions.sqlite"
    insert_payload(db_path, SAMPLE_TRANSACTIONS)
    app = create_app(db_path=db_path)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture()
def empty_client(tmp_path):
    """TestClient over a fresh, empty store."""
    app = create_app(db_path=tmp_path / "transactions.sqlite")
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture()
def scenario_client(empty_client):
    """TestClient seeded through the API with SCENARIO_TRANSACTIONS."""
    resp = seed_via_api(empty_client, SCENARIO_TRANSACTIONS)
    assert resp.status_code == 200
    return empty_client


@pytest.fixture()
def sample_transactions() -> list[dict]:
    return [dict(t) for t in SAMPLE_TRANSACTIONS]


@pytest.fixture()
def seed_payload():
    """Return seed_via_api so tests can seed a client with their own payload."""
    return seed_via_api
