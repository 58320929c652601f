"""Tests for the Flask HTTP front-end."""

import io

import pytest

from spendlite.config import Settings
from spendlite_api.app import create_app

HEADER = "id,type,category,amount,date,note"


@pytest.fixture
def client(tmp_path):
    app = create_app(tmp_path / "data", settings=Settings())
    app.config.update(TESTING=True)
    return app.test_client()


def _create(client, **overrides):
    payload = {"type": "expense", "category": "Food", "amount": "10", "date": "2024-01-05"}
    payload.update(overrides)
    response = client.post("/transactions", json=payload)
    assert response.status_code == 201
    return response.get_json()


def test_crud_cycle(client):
    created = _create(client, note="lunch")
    assert created["amount"] == "10.00"

    fetched = client.get(f"/transactions/{created['id']}")
    assert fetched.get_json() == created

    updated = client.put(f"/transactions/{created['id']}", json={"amount": "12.5"})
    assert updated.status_code == 200
    assert updated.get_json()["amount"] == "12.50"

    deleted = client.delete(f"/transactions/{created['id']}")
    assert deleted.status_code == 204
    assert client.get(f"/transactions/{created['id']}").status_code == 404


def test_validation_errors_are_400(client):
    response = client.post("/transactions", json={"type": "expense", "category": "", "amount": "5"})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Validation error"

    response = client.post("/transactions", data="amount=5")
    assert response.status_code == 400

    response = client.get("/transactions?start=yesterday")
    assert response.status_code == 400


def test_list_filters_sorts_and_summarises(client):
    _create(client, type="income", category="Salary", amount="3500", date="2024-01-01")
    _create(client, category="Rent", amount="1200", date="2024-01-02")
    _create(client, category="Groceries", amount="180.45", date="2024-01-05", note="Weekly shop")

    body = client.get("/transactions").get_json()
    assert [item["category"] for item in body["items"]] == ["Groceries", "Rent", "Salary"]
    assert body["summary"] == {"income_total": "3500.00", "expense_total": "1380.45", "balance": "2119.55"}

    body = client.get("/transactions?type=expense&search=weekly").get_json()
    assert [item["category"] for item in body["items"]] == ["Groceries"]

    monthly = client.get("/series/monthly").get_json()
    assert monthly["items"] == [{"year_month": "2024-01", "income": "3500.00", "expense": "1380.45"}]

    categories = client.get("/series/categories").get_json()
    assert [item["category"] for item in categories["items"]] == ["Rent", "Groceries"]

    assert client.get("/summary?type=income").get_json()["balance"] == "3500.00"
    assert client.get("/categories").get_json()["items"] == ["Groceries", "Rent", "Salary"]


def test_export_and_import(client):
    _create(client, category="Coffee, Tea", amount="4.5")
    exported = client.get("/export")
    assert exported.status_code == 200
    assert exported.mimetype == "text/csv"
    assert 'filename="spendlite.csv"' in exported.headers["Content-Disposition"]
    text = exported.get_data(as_text=True)
    assert text.startswith(HEADER)
    assert '"Coffee, Tea"' in text

    csv_text = f"{HEADER}\nn1,income,Gift,20,2024-02-01,\n"
    imported = client.post("/import", data=csv_text, content_type="text/csv")
    assert imported.get_json() == {"imported": 1}

    upload = client.post(
        "/import",
        data={"file": (io.BytesIO(csv_text.encode("utf-8")), "spendlite.csv")},
        content_type="multipart/form-data",
    )
    assert upload.get_json() == {"imported": 1}
    assert len(client.get("/transactions").get_json()["items"]) == 2


def test_import_with_missing_columns_is_rejected(client):
    response = client.post("/import", data="id,type,category,date\n", content_type="text/csv")
    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "Import failed"
    assert body["missing"] == ["amount"]


def test_sample(client):
    response = client.post("/sample")
    assert response.status_code == 201
    assert len(response.get_json()["items"]) == 7


def test_unparseable_csv_is_rejected(client):
    oversized = "id,type,category,amount,date,note\n" + '1,expense,Food,5,2024-01-01,"' + "x" * 200_000 + '"\n'
    response = client.post("/import", data=oversized, content_type="text/csv")
    assert response.status_code == 400
    assert client.get("/transactions").get_json()["items"] == []
