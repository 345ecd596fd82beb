"""Pydantic models for Expense data"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date
from typing import Literal, Tuple, get_args

Category = Literal['Food', 'Travel', 'Rent', 'Shopping', 'Other']

# Canonical display/color order used by the table, the form and every chart
CATEGORIES: Tuple[str, ...] = get_args(Category)

# Largest amount the form accepts
MAX_AMOUNT = 1_000_000_000


class ExpenseCandidate(BaseModel):
    """
    An expense without its identifier, as handed to the store on create/update.
    """
    title: str = Field(..., min_length=3)
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    category: Category
    date: date

    model_config = ConfigDict(frozen=True)


class ExpenseRecord(ExpenseCandidate):
    """
    Represents a single stored expense. Instances are immutable; the store
    replaces a record on update instead of mutating it.
    """
    id: int

    @classmethod
    def from_candidate(cls, record_id: int, candidate: ExpenseCandidate) -> "ExpenseRecord":
        return cls(id=record_id, **candidate.model_dump())

    def to_candidate(self) -> ExpenseCandidate:
        return ExpenseCandidate(**self.model_dump(exclude={'id'}))


class ExpenseForm(BaseModel):
    """
    Body of the add/edit form. Mirrors the form validators: required fields,
    title of at least 3 characters, positive amount up to MAX_AMOUNT, date not in the future.
    """
    title: str
    amount: float = Field(..., allow_inf_nan=False)
    category: Category
    date: date

    @field_validator('title')
    @classmethod
    def title_min_length(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        if len(value) < 3:
            raise ValueError("Title must be at least 3 characters")
        return value

    @field_validator('amount')
    @classmethod
    def amount_in_range(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Amount must be greater than 0")
        if value > MAX_AMOUNT:
            raise ValueError(f"Amount must not exceed {MAX_AMOUNT:,}")
        return value

    @field_validator('date')
    @classmethod
    def date_not_in_future(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("Date cannot be in the future")
        return value

    def to_candidate(self) -> ExpenseCandidate:
        return ExpenseCandidate(**self.model_dump())
