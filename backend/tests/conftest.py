"""Test configuration and fixtures for the backend test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from fastapi.testclient import TestClient

from hearth_backend.api import create_api
from hearth_backend.catalog import CatalogService
from hearth_backend.database import (
    DocumentTransaction,
    InMemoryDocumentBackend,
    TransactionRunner,
    get_document_backend,
)
from hearth_backend.game_logic import (
    Player,
    WorkshopConfiguration,
    get_default_workshop_configuration,
)
from hearth_backend.settings import get_settings
from hearth_backend.shared import ManualClock, SlotKind

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

USER_ID = "0123456789ABCDEF"

ITEM_RECORDS: list[dict[str, Any]] = [
    {"id": "log", "stacks": True},
    {"id": "planks", "stacks": True},
    {"id": "stick", "stacks": True},
    {"id": "pickaxe", "stacks": False},
    {"id": "gem", "stacks": False},
    {"id": "iron_ore", "stacks": True},
    {"id": "iron_ingot", "stacks": True},
    {"id": "coal", "stacks": True, "burnRate": {"burnTime": 10, "heatPerSecond": 2}},
    {"id": "kindling", "stacks": True, "burnRate": {"burnTime": 15, "heatPerSecond": 1}},
    {"id": "charcoal", "stacks": True, "burnRate": {"burnTime": 4, "heatPerSecond": 3}},
    {
        "id": "lava_bucket",
        "stacks": False,
        "burnRate": {"burnTime": 100, "heatPerSecond": 1},
        "fuelReturnItems": [{"itemId": "bucket", "count": 1}],
    },
]

CRAFTING_RECORDS: list[dict[str, Any]] = [
    {
        "id": "planks",
        "displayCategory": "Construction",
        "input": [{"itemIds": ["log"], "count": 1}],
        "output": {"itemId": "planks", "count": 4},
        "duration": 10,
    },
    {
        "id": "pickaxe",
        "input": [
            {"itemIds": ["planks", "log"], "count": 3},
            {"itemIds": ["stick"], "count": 2},
        ],
        "output": {"itemId": "pickaxe", "count": 1},
        "duration": 30,
    },
    {
        "id": "polished_gem",
        "input": [{"itemIds": ["gem"], "count": 1}],
        "output": {"itemId": "gem", "count": 1},
        "duration": 20,
    },
    {
        "id": "cake",
        "input": [{"itemIds": ["log"], "count": 1}],
        "output": {"itemId": "planks", "count": 1},
        "returnItems": [{"itemId": "bucket", "count": 1}],
        "duration": 5,
    },
]

SMELTING_RECORDS: list[dict[str, Any]] = [
    {"id": "iron_ingot", "input": "iron_ore", "output": "iron_ingot", "heatRequired": 10},
]

JOURNAL_RECORDS: list[dict[str, Any]] = [
    {"name": "log", "item": {"referenceId": "log", "parentCollection": "Blocks"}},
]

PRODUCT_RECORDS: list[dict[str, Any]] = [
    {"id": "mini_figure", "type": "Figure"},
]


def make_catalog() -> CatalogService:
    return CatalogService.from_records(
        items=ITEM_RECORDS,
        crafting=CRAFTING_RECORDS,
        smelting=SMELTING_RECORDS,
        journal=JOURNAL_RECORDS,
        products=PRODUCT_RECORDS,
    )


@pytest.fixture(autouse=True)
def _mock_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Ensure settings are loaded with predictable values during tests."""
    monkeypatch.setenv("AUTH_SECRET_KEY", "test-secret-key")
    monkeypatch.setenv("DOCUMENT_STORE", "memory")
    monkeypatch.setenv("TRANSACTION_RETRY_BACKOFF_SECONDS", "0")
    get_settings.cache_clear()
    get_default_workshop_configuration.cache_clear()
    yield
    get_settings.cache_clear()
    get_default_workshop_configuration.cache_clear()


@pytest.fixture
def catalog() -> CatalogService:
    return make_catalog()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(start_ms=0)


@pytest.fixture
def configuration() -> WorkshopConfiguration:
    return WorkshopConfiguration(
        unlock_prices={SlotKind.CRAFTING: {2: 10}, SlotKind.SMELTING: {1: 5, 2: 10}},
    )


@pytest.fixture
def backend() -> InMemoryDocumentBackend:
    return InMemoryDocumentBackend()


@pytest.fixture
def transaction(backend: InMemoryDocumentBackend) -> DocumentTransaction:
    return DocumentTransaction(backend)


@pytest.fixture
def player(
    transaction: DocumentTransaction,
    catalog: CatalogService,
    clock: ManualClock,
    configuration: WorkshopConfiguration,
) -> Player:
    return Player(
        USER_ID, transaction, catalog=catalog, clock=clock, configuration=configuration
    )


@pytest.fixture
def seed(
    backend: InMemoryDocumentBackend, catalog: CatalogService, clock: ManualClock
) -> Callable[[Callable[[Player], None]], None]:
    """Commit changes to the signed-in player's document before a request."""

    def apply(change: Callable[[Player], None]) -> None:
        def callback(transaction: DocumentTransaction) -> bool:
            change(Player(USER_ID, transaction, catalog=catalog, clock=clock))
            return True

        TransactionRunner(backend).run(callback)

    return apply


@pytest.fixture
def client(
    catalog: CatalogService, clock: ManualClock, backend: InMemoryDocumentBackend
) -> Iterator[TestClient]:
    app = create_api(catalog=catalog, clock=clock)
    app.dependency_overrides[get_document_backend] = lambda: backend
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client: TestClient) -> dict[str, str]:
    """Sign in once and return the bearer header for the new session."""
    response = client.post(
        "/api/v1.1/signin",
        json={"sessionTicket": f"{USER_ID}-ticket"},
        headers={"Session-Id": "session-1"},
    )
    assert response.status_code == 200
    token = response.json()["result"]["authenticationToken"]
    return {"Authorization": f"Bearer {token}"}
