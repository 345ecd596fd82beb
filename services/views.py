"""View-models for the expense table and the expense chart.

Both subscribe to the store on construction, refresh synchronously on every
notification and must be closed to stop receiving updates.
"""
import logging
import threading
from typing import Dict, List, Optional

from pydantic import BaseModel

from models.chart import ChartSeries, GroupingMode
from models.expense import CATEGORIES, ExpenseRecord
from services.aggregation import aggregate, day_label, total_amount
from services.expense_store import ExpenseStore, Snapshot, Subscription

logger = logging.getLogger(__name__)

AXIS_LABELS: Dict[GroupingMode, str] = {
    GroupingMode.CATEGORY: 'Category',
    GroupingMode.DAY: 'Date',
    GroupingMode.MONTH: 'Month',
    GroupingMode.YEAR: 'Year',
}

# Matches the category badges in the table, in canonical category order
CATEGORY_COLORS: Dict[str, str] = {
    'Food': '#ffb84d',
    'Travel': '#5fc3e4',
    'Rent': '#ff6b6b',
    'Shopping': '#a893ff',
    'Other': '#b8b8d1',
}


def format_amount(amount: float, currency_symbol: str) -> str:
    return f"{currency_symbol}{amount:.2f}"


class TableRow(BaseModel):
    id: int
    title: str
    category: str
    date: str
    amount: float
    amount_display: str


class TableSnapshot(BaseModel):
    rows: List[TableRow]
    count: int
    total: float
    total_display: str


class ChartSnapshot(BaseModel):
    mode: GroupingMode
    x_axis_label: str
    y_axis_label: str
    show_legend: bool
    color_scheme: List[str]
    data: ChartSeries


class _StoreView:
    """
    Follows the store through a subscription. Records, and whatever a subclass
    derives from them, are only touched under the view's lock.
    """

    def __init__(self, store: ExpenseStore):
        self._lock = threading.RLock()
        self._records: Snapshot = ()
        self._subscription: Optional[Subscription] = store.subscribe(self._on_change)

    def _on_change(self, records: Snapshot) -> None:
        with self._lock:
            self._records = records
            self.refresh()

    def refresh(self) -> None:
        raise NotImplementedError

    @property
    def records(self) -> Snapshot:
        return self._records

    @property
    def closed(self) -> bool:
        return self._subscription is None

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
            logger.debug(f"{type(self).__name__} unsubscribed from the expense store.")


class TableView(_StoreView):
    """Rows for the expense table plus the footer total, rebuilt on every change."""

    def __init__(self, store: ExpenseStore, currency_symbol: str = '₹'):
        self.currency_symbol = currency_symbol
        self._snapshot = TableSnapshot(rows=[], count=0, total=0.0, total_display=format_amount(0, currency_symbol))
        super().__init__(store)

    def _row(self, record: ExpenseRecord) -> TableRow:
        return TableRow(
            id=record.id,
            title=record.title,
            category=record.category,
            date=day_label(record.date),
            amount=record.amount,
            amount_display=format_amount(record.amount, self.currency_symbol),
        )

    def refresh(self) -> None:
        with self._lock:
            total = total_amount(self._records)
            self._snapshot = TableSnapshot(
                rows=[self._row(record) for record in self._records],
                count=len(self._records),
                total=total,
                total_display=format_amount(total, self.currency_symbol),
            )

    def snapshot(self) -> TableSnapshot:
        with self._lock:
            return self._snapshot


class ChartView(_StoreView):
    """
    Chart data for the active grouping mode, recomputed whenever the store
    changes or the mode is switched. `mode` and `data` always change together.
    """

    y_axis_label_template = 'Amount ({symbol})'

    def __init__(self, store: ExpenseStore, mode: GroupingMode = GroupingMode.CATEGORY, currency_symbol: str = '₹'):
        self.mode = GroupingMode(mode)
        self.currency_symbol = currency_symbol
        self.data: ChartSeries = aggregate((), self.mode)
        self.refresh_count = 0
        super().__init__(store)

    def refresh(self) -> None:
        with self._lock:
            mode = self.mode
            data = aggregate(self._records, mode)
            # A mode change during aggregation has already refreshed for the new mode
            if mode is self.mode:
                self.data = data
                self.refresh_count += 1

    def change_mode(self, mode: GroupingMode) -> None:
        with self._lock:
            self.mode = GroupingMode(mode)
            logger.info(f"Chart grouping mode changed to '{self.mode.value}'.")
            self.refresh()

    @property
    def x_axis_label(self) -> str:
        return AXIS_LABELS[self.mode]

    @property
    def show_legend(self) -> bool:
        # grouped series only
        return self.mode in (GroupingMode.MONTH, GroupingMode.YEAR)

    def snapshot(self) -> ChartSnapshot:
        with self._lock:
            return ChartSnapshot(
                mode=self.mode,
                x_axis_label=self.x_axis_label,
                y_axis_label=self.y_axis_label_template.format(symbol=self.currency_symbol),
                show_legend=self.show_legend,
                color_scheme=[CATEGORY_COLORS[c] for c in CATEGORIES],
                data=self.data,
            )
