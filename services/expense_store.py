"""In-memory expense store with synchronous change notifications."""
import logging
import threading
from typing import Callable, Iterable, List, Optional, Tuple

from models.expense import ExpenseCandidate, ExpenseRecord
from services.aggregation import total_amount

logger = logging.getLogger(__name__)

Snapshot = Tuple[ExpenseRecord, ...]
Observer = Callable[[Snapshot], None]


class Subscription:
    """Handle returned by ExpenseStore.subscribe; call unsubscribe() to stop updates."""

    def __init__(self, store: "ExpenseStore", observer: Observer):
        self._store = store
        self.observer = observer
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._store._remove_subscription(self)


class ExpenseStore:
    """
    Single source of truth for the current expense list.

    Every mutation publishes an immutable snapshot of the full list to all
    subscribers, in subscription order, before the call returns. An observer
    that raises is logged and skipped; it never undoes the mutation. Ids start at 1
    and are never reused, even after deletes or clear().
    """

    def __init__(self, initial: Iterable[ExpenseCandidate] = ()):
        self._lock = threading.RLock()
        self._records: List[ExpenseRecord] = []
        self._subscriptions: List[Subscription] = []
        self._next_id = 1
        for candidate in initial:
            self._append(candidate)
        if self._records:
            logger.info(f"Expense store initialised with {len(self._records)} records.")

    def _append(self, candidate: ExpenseCandidate) -> ExpenseRecord:
        record = ExpenseRecord.from_candidate(self._next_id, candidate)
        self._next_id += 1
        self._records.append(record)
        return record

    def _notify(self) -> None:
        snapshot = tuple(self._records)
        for subscription in list(self._subscriptions):
            if not subscription.active:
                continue
            try:
                subscription.observer(snapshot)
            except Exception as e:
                # The mutation is already applied; remaining observers still get the snapshot
                logger.exception(f"Observer {subscription.observer!r} failed on change notification: {e}")

    def _remove_subscription(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def _index_of(self, record_id: int) -> Optional[int]:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    def create(self, candidate: ExpenseCandidate) -> ExpenseRecord:
        with self._lock:
            record = self._append(candidate)
            logger.info(f"Created expense {record.id}: '{record.title}' ({record.category}, {record.amount})")
            self._notify()
            return record

    def update(self, record_id: int, candidate: ExpenseCandidate) -> bool:
        """Replace every field but the id. Returns False when no such record exists."""
        with self._lock:
            index = self._index_of(record_id)
            if index is None:
                logger.warning(f"Update ignored: expense {record_id} not found.")
            else:
                self._records[index] = ExpenseRecord.from_candidate(record_id, candidate)
                logger.info(f"Updated expense {record_id}.")
            self._notify()
            return index is not None

    def delete(self, record_id: int) -> bool:
        """Remove the record. Returns False when no such record exists."""
        with self._lock:
            index = self._index_of(record_id)
            if index is None:
                logger.warning(f"Delete ignored: expense {record_id} not found.")
            else:
                del self._records[index]
                logger.info(f"Deleted expense {record_id}.")
            self._notify()
            return index is not None

    def clear(self) -> int:
        """Remove every record. Returns how many were removed."""
        with self._lock:
            removed = len(self._records)
            self._records.clear()
            logger.warning(f"Cleared {removed} expenses from the store.")
            self._notify()
            return removed

    def get(self, record_id: int) -> Optional[ExpenseRecord]:
        with self._lock:
            index = self._index_of(record_id)
            return None if index is None else self._records[index]

    def list(self) -> Snapshot:
        with self._lock:
            return tuple(self._records)

    def total(self) -> float:
        return total_amount(self.list())

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def subscribe(self, observer: Observer) -> Subscription:
        """Register an observer; it receives the current snapshot right away."""
        with self._lock:
            observer(tuple(self._records))
            # Registered only once the first delivery succeeded
            subscription = Subscription(self, observer)
            self._subscriptions.append(subscription)
            return subscription
