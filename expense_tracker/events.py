from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

from expense_tracker.aggregation import budget_status
from expense_tracker.domain import STATUS_GOOD

__all__ = [
    'EXPENSE_ADDED', 'EXPENSE_DELETED', 'BUDGET_ADDED', 'BUDGET_UPDATED', 'BUDGET_DELETED',
    'Event', 'EventBus', 'budget_alert_handler', 'create_event_bus',
]

EXPENSE_ADDED = "EXPENSE_ADDED"
EXPENSE_DELETED = "EXPENSE_DELETED"
BUDGET_ADDED = "BUDGET_ADDED"
BUDGET_UPDATED = "BUDGET_UPDATED"
BUDGET_DELETED = "BUDGET_DELETED"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = self._subscribers.get(name)
        if not handlers:
            return []
        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in list(handlers)]


def budget_alert_handler(event: Event, payload: dict) -> dict:
    """Report budgets in the new expense's category that are near or over their limit.

    Expects ``expense``, ``expenses`` and ``budgets`` in the payload; the
    snapshots are the store's state after the expense was added.
    """
    expense = payload["expense"]
    expenses = payload.get("expenses", ())
    now = payload.get("now")

    alerts = []
    for b in payload.get("budgets", ()):
        if b.category != expense.category:
            continue
        status = budget_status(b, expenses, now)
        if status.status != STATUS_GOOD:
            alerts.append({
                "budget_id": b.id,
                "category": b.category,
                "status": status.status,
                "spent": status.spent,
                "limit": b.amount,
            })
    return {"alerts": alerts}


def create_event_bus() -> EventBus:
    bus = EventBus()
    bus.subscribe(EXPENSE_ADDED, budget_alert_handler)
    return bus
