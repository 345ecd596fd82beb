# tests/conftest.py
import os
from datetime import date
from typing import Callable, List

import pytest

# Must be set before main is imported; load_dotenv does not override them
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_DEMO_DATA"] = "true"

from models.expense import ExpenseCandidate, ExpenseRecord  # noqa: E402
from services.expense_store import ExpenseStore  # noqa: E402
from utils.seed_data import demo_expenses  # noqa: E402


def make_candidate(
    title: str = "Lunch",
    amount: float = 100,
    category: str = "Food",
    day: date = date(2025, 1, 5),
) -> ExpenseCandidate:
    return ExpenseCandidate(title=title, amount=amount, category=category, date=day)


def make_record(record_id: int, category: str, amount: float, day: date, title: str = "Expense") -> ExpenseRecord:
    return ExpenseRecord(id=record_id, title=title, amount=amount, category=category, date=day)


@pytest.fixture
def store() -> ExpenseStore:
    """Empty store."""
    return ExpenseStore()


@pytest.fixture
def seeded_store() -> ExpenseStore:
    return ExpenseStore(demo_expenses())


@pytest.fixture
def recorder() -> Callable:
    """Observer that keeps every snapshot it receives."""
    class Recorder:
        def __init__(self):
            self.snapshots: List[tuple] = []

        def __call__(self, snapshot):
            self.snapshots.append(snapshot)

    return Recorder()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from main import app

    # Entering the context runs the lifespan, so every test gets a fresh store
    with TestClient(app) as test_client:
        yield test_client
