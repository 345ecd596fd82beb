# tests/test_routes.py
from datetime import date, timedelta
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from routes import get_expense_store

NEW_EXPENSE = {"title": "Bus Pass", "amount": 750, "category": "Travel", "date": "2025-12-19"}


def test_list_expenses_returns_seed_data_in_insertion_order(client):
    response = client.get("/api/expenses")

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 20
    assert [e["id"] for e in body] == list(range(1, 21))
    assert body[0] == {"id": 1, "title": "Grocery Shopping", "amount": 2500.0, "category": "Food", "date": "2025-12-18"}


def test_create_then_get(client):
    created = client.post("/api/expenses", json=NEW_EXPENSE)

    assert created.status_code == 201
    assert created.json()["id"] == 21
    fetched = client.get("/api/expenses/21")
    assert fetched.status_code == 200
    assert fetched.json() == {"id": 21, **NEW_EXPENSE, "amount": 750.0}


def test_get_missing_expense_is_404(client):
    assert client.get("/api/expenses/999").status_code == 404


def test_create_trims_title(client):
    response = client.post("/api/expenses", json={**NEW_EXPENSE, "title": "  Bus Pass  "})

    assert response.json()["title"] == "Bus Pass"


@pytest.mark.parametrize(
    "overrides, field, message",
    [
        ({"title": "ab"}, "title", "Title must be at least 3 characters"),
        ({"title": "   "}, "title", "Title is required"),
        ({"amount": 0}, "amount", "Amount must be greater than 0"),
        ({"amount": -5}, "amount", "Amount must be greater than 0"),
        ({"amount": 1e27}, "amount", "Amount must not exceed 1,000,000,000"),
        ({"category": "Gifts"}, "category", None),
        ({"date": (date.today() + timedelta(days=1)).isoformat()}, "date", "Date cannot be in the future"),
    ],
)
def test_invalid_form_is_rejected_with_inline_message(client, overrides, field, message):
    response = client.post("/api/expenses", json={**NEW_EXPENSE, **overrides})

    assert response.status_code == 422
    body = response.json()
    assert body["detail"] == "Validation failed"
    assert field in body["errors"]
    if message:
        assert body["errors"][field] == message
    assert len(client.get("/api/expenses").json()) == 20


def test_missing_fields_are_reported(client):
    response = client.post("/api/expenses", json={"title": "Bus Pass"})

    assert response.status_code == 422
    assert set(response.json()["errors"]) == {"amount", "category", "date"}


def test_update_expense(client):
    response = client.put("/api/expenses/3", json=NEW_EXPENSE)

    assert response.status_code == 200
    assert response.json()["id"] == 3
    assert client.get("/api/expenses/3").json()["title"] == "Bus Pass"
    assert len(client.get("/api/expenses").json()) == 20


def test_update_missing_expense_is_404_and_changes_nothing(client):
    before = client.get("/api/expenses").json()

    assert client.put("/api/expenses/999", json=NEW_EXPENSE).status_code == 404
    assert client.get("/api/expenses").json() == before


def test_delete_expense_then_again(client):
    first = client.delete("/api/expenses/1")
    second = client.delete("/api/expenses/1")

    assert first.status_code == 200
    assert first.json() == {"status": "success", "deleted_id": 1}
    assert second.status_code == 404
    assert len(client.get("/api/expenses").json()) == 19


def test_clear_keeps_id_sequence(client):
    response = client.post("/api/expenses/clear")

    assert response.json() == {"status": "success", "deleted_count": 20}
    assert client.get("/api/expenses").json() == []
    assert client.post("/api/expenses", json=NEW_EXPENSE).json()["id"] == 21


def test_categories(client):
    assert client.get("/api/categories").json() == ["Food", "Travel", "Rent", "Shopping", "Other"]


def test_table_reflects_mutations(client):
    assert client.get("/api/table").json()["total_display"] == "₹93299.00"

    client.post("/api/expenses", json=NEW_EXPENSE)
    table = client.get("/api/table").json()

    assert table["count"] == 21
    assert table["total"] == 94049.0
    assert table["rows"][-1]["date"] == "Dec 19, 2025"


def test_chart_follows_mode_and_mutations(client):
    chart = client.get("/api/chart").json()
    assert chart["mode"] == "category"
    assert chart["data"]["kind"] == "flat"

    switched = client.put("/api/chart/mode", json={"mode": "month"}).json()
    assert switched["show_legend"] is True
    assert [g["name"] for g in switched["data"]["points"]] == ["Oct 2025", "Nov 2025", "Dec 2025"]

    client.post("/api/expenses", json={**NEW_EXPENSE, "date": "2025-09-30"})
    chart = client.get("/api/chart").json()
    assert chart["mode"] == "month"
    assert chart["data"]["points"][0] == {
        "name": "Sep 2025",
        "series": [
            {"name": "Food", "value": 0.0},
            {"name": "Travel", "value": 750.0},
            {"name": "Rent", "value": 0.0},
            {"name": "Shopping", "value": 0.0},
            {"name": "Other", "value": 0.0},
        ],
    }


def test_chart_mode_rejects_unknown_mode(client):
    assert client.put("/api/chart/mode", json={"mode": "week"}).status_code == 422


def test_aggregation_endpoint(client):
    yearly = client.get("/api/aggregations/year").json()

    assert yearly["kind"] == "grouped"
    assert yearly["points"][0]["name"] == "2025"
    assert [p["name"] for p in yearly["points"][0]["series"]] == ["Food", "Travel", "Rent", "Shopping", "Other"]

    daily = client.get("/api/aggregations/day").json()
    assert daily["kind"] == "flat"
    assert daily["points"][0] == {"name": "Oct 1, 2025", "value": 15000.0}
    assert client.get("/api/aggregations/week").status_code == 422


def test_store_dependency_without_state_is_503():
    request = SimpleNamespace(state=SimpleNamespace())

    with pytest.raises(HTTPException) as excinfo:
        get_expense_store(request)
    assert excinfo.value.status_code == 503


def test_index_page_is_served(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "Expense Tracker" in response.text
