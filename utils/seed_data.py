"""Demonstration expenses loaded into the store at start-up."""
from datetime import date
from typing import List

from models.expense import ExpenseCandidate

DEMO_EXPENSES = [
    # December 2025
    ('Grocery Shopping', 2500, 'Food', date(2025, 12, 18)),
    ('Restaurant Dinner', 1200, 'Food', date(2025, 12, 17)),
    ('Monthly Rent', 15000, 'Rent', date(2025, 12, 1)),
    ('Electricity Bill', 800, 'Rent', date(2025, 12, 15)),
    ('New Shoes', 3500, 'Shopping', date(2025, 12, 16)),
    ('Online Shopping', 2200, 'Shopping', date(2025, 12, 10)),
    ('Taxi Fare', 450, 'Travel', date(2025, 12, 18)),
    ('Fuel', 3000, 'Travel', date(2025, 12, 12)),
    ('Coffee Shop', 350, 'Food', date(2025, 12, 14)),
    ('Movie Tickets', 600, 'Other', date(2025, 12, 13)),
    # November 2025
    ('Thanksgiving Dinner', 4500, 'Food', date(2025, 11, 28)),
    ('Flight Tickets', 8500, 'Travel', date(2025, 11, 25)),
    ('Hotel Stay', 6000, 'Travel', date(2025, 11, 26)),
    ('November Rent', 15000, 'Rent', date(2025, 11, 1)),
    ('Winter Clothes', 5500, 'Shopping', date(2025, 11, 20)),
    ('Grocery', 3200, 'Food', date(2025, 11, 15)),
    ('Internet Bill', 999, 'Rent', date(2025, 11, 10)),
    ('Gym Membership', 1500, 'Other', date(2025, 11, 5)),
    # October 2025
    ('Birthday Party', 3500, 'Other', date(2025, 10, 22)),
    ('October Rent', 15000, 'Rent', date(2025, 10, 1)),
]


def demo_expenses() -> List[ExpenseCandidate]:
    return [
        ExpenseCandidate(title=title, amount=amount, category=category, date=day)
        for title, amount, category, day in DEMO_EXPENSES
    ]
