"""API Routes for expenses, the expense table and the expense chart"""
from fastapi import APIRouter, HTTPException, Depends, Request, status
from typing import List, Annotated
from models.chart import ChartSeries, GroupingMode
from models.expense import CATEGORIES, ExpenseForm, ExpenseRecord
from services import aggregation
from services.expense_store import ExpenseStore
from services.views import ChartSnapshot, ChartView, TableSnapshot, TableView
import logging

from pydantic import BaseModel


class ModeInput(BaseModel):
    mode: GroupingMode


router = APIRouter()
logger = logging.getLogger(__name__)

# --- Dependency Functions ---
def get_expense_store(request: Request) -> ExpenseStore:
    """Dependency to get the expense store from the request state."""
    store = getattr(request.state, "expense_store", None)
    if store is None:
        logger.error("Expense store not found in application state. Was the lifespan started?")
        raise HTTPException(status_code=503, detail="Expense store not available.")
    return store


def get_table_view(request: Request) -> TableView:
    view = getattr(request.state, "table_view", None)
    if view is None:
        raise HTTPException(status_code=503, detail="Expense table not available.")
    return view


def get_chart_view(request: Request) -> ChartView:
    view = getattr(request.state, "chart_view", None)
    if view is None:
        raise HTTPException(status_code=503, detail="Expense chart not available.")
    return view


ExpenseStoreDep = Annotated[ExpenseStore, Depends(get_expense_store)]
TableViewDep = Annotated[TableView, Depends(get_table_view)]
ChartViewDep = Annotated[ChartView, Depends(get_chart_view)]

# --- Expense Routes ---

@router.get("/expenses", response_model=List[ExpenseRecord], summary="Get All Expenses", description="Retrieves all expense records in the order they were added.")
def get_expenses(store: ExpenseStoreDep) -> List[ExpenseRecord]:
    logger.info("GET /expenses endpoint called.")
    return list(store.list())


@router.get("/expenses/{expense_id}", response_model=ExpenseRecord, summary="Get Expense")
def get_expense(expense_id: int, store: ExpenseStoreDep) -> ExpenseRecord:
    expense = store.get(expense_id)
    if expense is None:
        raise HTTPException(status_code=404, detail=f"Expense {expense_id} not found.")
    return expense


@router.post("/expenses", response_model=ExpenseRecord, status_code=status.HTTP_201_CREATED, summary="Add Expense")
def create_expense(form: ExpenseForm, store: ExpenseStoreDep) -> ExpenseRecord:
    logger.info(f"POST /expenses endpoint called with title: {form.title[:50]}")
    return store.create(form.to_candidate())


@router.put("/expenses/{expense_id}", response_model=ExpenseRecord, summary="Update Expense", description="Replaces every field of an expense except its id.")
def update_expense(expense_id: int, form: ExpenseForm, store: ExpenseStoreDep) -> ExpenseRecord:
    logger.info(f"PUT /expenses/{expense_id} endpoint called.")
    candidate = form.to_candidate()
    if not store.update(expense_id, candidate):
        raise HTTPException(status_code=404, detail=f"Expense {expense_id} not found.")
    return ExpenseRecord.from_candidate(expense_id, candidate)


@router.delete("/expenses/{expense_id}", summary="Delete Expense")
def delete_expense(expense_id: int, store: ExpenseStoreDep):
    logger.info(f"DELETE /expenses/{expense_id} endpoint called.")
    if not store.delete(expense_id):
        raise HTTPException(status_code=404, detail=f"Expense {expense_id} not found.")
    return {"status": "success", "deleted_id": expense_id}


@router.post("/expenses/clear", summary="Delete All Expenses", description="Removes every expense from the store. Ids are not reused afterwards.")
def clear_expenses(store: ExpenseStoreDep):
    logger.warning("POST /expenses/clear endpoint called. This will clear the store.")
    deleted_count = store.clear()
    return {"status": "success", "deleted_count": deleted_count}


@router.get("/categories", response_model=List[str], summary="List Categories")
def get_categories() -> List[str]:
    return list(CATEGORIES)

# --- Table & Chart Routes ---

@router.get("/table", response_model=TableSnapshot, summary="Expense Table", description="Rows formatted for display plus the total of all expenses.")
def get_table(view: TableViewDep) -> TableSnapshot:
    return view.snapshot()


@router.get("/chart", response_model=ChartSnapshot, summary="Expense Chart", description="Chart data for the currently selected grouping mode.")
def get_chart(view: ChartViewDep) -> ChartSnapshot:
    return view.snapshot()


@router.put("/chart/mode", response_model=ChartSnapshot, summary="Change Chart Grouping")
def change_chart_mode(mode_input: ModeInput, view: ChartViewDep) -> ChartSnapshot:
    view.change_mode(mode_input.mode)
    return view.snapshot()


@router.get("/aggregations/{mode}", response_model=ChartSeries, summary="Aggregate Expenses", description="Aggregates the current expenses by category, day, month or year.")
def get_aggregation(mode: GroupingMode, store: ExpenseStoreDep) -> ChartSeries:
    return aggregation.aggregate(store.list(), mode)
