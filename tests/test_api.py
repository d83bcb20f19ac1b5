from collections.abc import Generator
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from ledger_categorizer.app import app
from ledger_categorizer.core.errors import InvalidResponse
from ledger_categorizer.manager import CategorizerService
from ledger_categorizer.models import Category, Transaction
from ledger_categorizer.services.categorization import CategorizationPipeline
from ledger_categorizer.storage.json_store import JsonLedgerStore

client = TestClient(app)

HEADERS = {"X-User-Id": "user-1"}


def _install(store: JsonLedgerStore, service: CategorizerService) -> None:
    app.state.store = store
    app.state.service = service
    app.state.pipeline = CategorizationPipeline(service=service, store=store)


@pytest.fixture
def store(tmp_path) -> JsonLedgerStore:
    store = JsonLedgerStore(data_path=str(tmp_path / "ledger.json"))
    store.seed_categories("user-1", [
        Category(id="catX", name="Boodschappen", type="expense", keywords="albert heijn, ah"),
        Category(id="catY", name="Salaris", type="income", keywords="salaris"),
    ])
    store.save_transactions("user-1", [
        Transaction(id="t0", description="AH to Go", amount=Decimal("12.50"), type="expense", date=date(2024, 3, 2)),
        Transaction(id="t1", description="Mystery", amount=Decimal("9.99"), type="expense", date=date(2024, 3, 5)),
        Transaction(id="t2", description="Werkgever", amount=Decimal("2500"), type="expense", date=date(2024, 3, 25)),
    ])
    return store


@pytest.fixture
def mock_llm(store) -> Generator[MagicMock, None, None]:
    llm = MagicMock()
    _install(store, CategorizerService(llm=llm))
    yield llm
    for name in ("store", "service", "pipeline"):
        if hasattr(app.state, name):
            delattr(app.state, name)


def test_ai_categorize(mock_llm: MagicMock, store: JsonLedgerStore) -> None:
    mock_llm.categorize.return_value = {"0": "catX", "2": "catY"}

    response = client.post("/api/ai/categorize", json={"month": 3, "year": 2024}, headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["updated"] == 2
    assert data["total"] == 3
    assert store.get_transaction("user-1", "t2").value.type == "income"


def test_ai_categorize_invalid_response(mock_llm: MagicMock) -> None:
    mock_llm.categorize.side_effect = InvalidResponse("AI service returned an invalid response")

    response = client.post("/api/ai/categorize", json={"month": 3, "year": 2024}, headers=HEADERS)

    assert response.status_code == 502
    assert response.json()["updated"] == 0


def test_ai_categorize_without_credential(store: JsonLedgerStore, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("AIML_API_KEY", raising=False)
    _install(store, CategorizerService())

    response = client.post("/api/ai/recategorize", json={"month": 3, "year": 2024}, headers=HEADERS)

    assert response.status_code == 400
    assert response.json() == {"error": "AIML_API_KEY is not configured", "updated": 0}


def test_requires_user_header(mock_llm: MagicMock) -> None:
    response = client.post("/api/ai/categorize", json={"month": 3, "year": 2024})
    assert response.status_code == 401
    mock_llm.categorize.assert_not_called()


def test_invalid_month_rejected(mock_llm: MagicMock) -> None:
    response = client.post("/api/ai/categorize", json={"month": 13, "year": 2024}, headers=HEADERS)
    assert response.status_code == 422


def test_keyword_endpoints(mock_llm: MagicMock) -> None:
    response = client.post(
        "/api/categorize",
        json={"description": "AH ALBERT HEIJN BETALING", "type": "expense"},
        headers=HEADERS,
    )
    assert response.json() == {"category_id": "catX"}

    response = client.post("/api/transactions/auto-categorize", json={"month": 3, "year": 2024}, headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["updated"] == 1


def test_transaction_ownership(mock_llm: MagicMock) -> None:
    assert client.get("/api/transactions/t0", headers=HEADERS).status_code == 200
    assert client.get("/api/transactions/t0", headers={"X-User-Id": "other"}).status_code == 403
    assert client.get("/api/transactions/nope", headers=HEADERS).status_code == 404


def test_categories_and_seed(mock_llm: MagicMock) -> None:
    response = client.post("/api/categories/seed", headers={"X-User-Id": "fresh"})
    assert response.json() == {"message": "Categories created", "count": 15}

    response = client.post(
        "/api/categories",
        json={"name": "Huisdieren", "type": "expense", "keywords": ["dierenarts", "pets place"]},
        headers={"X-User-Id": "fresh"},
    )
    assert response.status_code == 201
    assert response.json()["keywords"] == "dierenarts, pets place"

    response = client.get("/api/categories", headers={"X-User-Id": "fresh"})
    assert len(response.json()) == 16


def test_bank_sync(mock_llm: MagicMock) -> None:
    mock_llm.categorize.return_value = {}

    response = client.post(
        "/api/bank/sync",
        json={"transactions": [
            {"description": "Salaris april", "amount": "3000.00", "date": "2024-04-25"},
            {"description": "AH to Go", "amount": "-12.50", "date": "2024-03-02"},
        ]},
        headers=HEADERS,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["imported"] == 1
    assert data["skipped"] == 1
    assert data["keyword_categorized"] == 1


def test_last_representable_month(mock_llm: MagicMock) -> None:
    response = client.post("/api/transactions/auto-categorize", json={"month": 12, "year": 9999}, headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["total"] == 0

    response = client.post("/api/transactions/auto-categorize", json={"month": 1, "year": 10000}, headers=HEADERS)
    assert response.status_code == 422


def test_update_category(mock_llm: MagicMock, store: JsonLedgerStore) -> None:
    response = client.put("/api/categories/catX", json={"keywords": ["jumbo", "lidl"]}, headers=HEADERS)

    assert response.status_code == 200
    assert response.json() == {"id": "catX", "name": "Boodschappen", "type": "expense", "keywords": "jumbo, lidl"}
    assert store.get_category("user-1", "catX").value.keywords == "jumbo, lidl"


def test_update_category_ownership(mock_llm: MagicMock) -> None:
    response = client.put("/api/categories/catX", json={"name": "Mine"}, headers={"X-User-Id": "other"})
    assert response.status_code == 403
    assert client.put("/api/categories/nope", json={"name": "X"}, headers=HEADERS).status_code == 404


def test_delete_category(mock_llm: MagicMock, store: JsonLedgerStore) -> None:
    t0 = store.get_transaction("user-1", "t0").value
    store.save_transactions("user-1", [t0.model_copy(update={"category_id": "catX"})])

    assert client.delete("/api/categories/catX", headers={"X-User-Id": "other"}).status_code == 403
    response = client.delete("/api/categories/catX", headers=HEADERS)

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert [c.id for c in store.list_categories("user-1")] == ["catY"]
    assert store.get_transaction("user-1", "t0").value.category_id is None
    assert client.delete("/api/categories/catX", headers=HEADERS).status_code == 404
