import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, NamedTuple

from moneyflow.budgets import progress
from moneyflow.cycles import current_cycle
from moneyflow.domain import OUTCOME

__all__ = [
    'event_bus', 'Event', 'EventBus',
    'TRANSACTION_ADDED', 'TRANSACTION_DELETED', 'BUDGET_ALERT',
    'budget_alert_handler', 'register_default_handlers',
]

logger = logging.getLogger(__name__)

TRANSACTION_ADDED = "TRANSACTION_ADDED"
TRANSACTION_DELETED = "TRANSACTION_DELETED"
BUDGET_ALERT = "BUDGET_ALERT"


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

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = self._subscribers.get(name, [])
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now(timezone.utc).isoformat(), payload=payload)
        logger.debug("publishing %s to %d handler(s)", name, len(handlers))
        return [handler(event, payload) for handler in handlers]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


event_bus = EventBus()


def budget_alert_handler(event: Event, payload: dict) -> dict:
    """Check the budgets of the new transaction's category against their current cycle.

    Expects ``transaction``, ``transactions`` (the snapshot including it),
    ``budgets`` and ``now`` in the payload.
    """
    t = payload.get("transaction")
    if t is None or t.type != OUTCOME:
        return {}

    now = payload["now"]
    snapshot = payload.get("transactions", ())
    alerts = []
    for budget in payload.get("budgets", ()):
        if budget.category_id != t.category_id:
            continue
        cycle = current_cycle(budget, now)
        p = progress(budget, snapshot, cycle, now)
        if p.is_over_budget:
            alerts.append({
                "alert": f"Budget exceeded for category {budget.category_id}: "
                         f"{p.spent} / {budget.amount} {budget.currency}",
                "budget_id": budget.id,
                "category_id": budget.category_id,
                "spent": p.spent,
                "limit": budget.amount,
            })

    if not alerts:
        return {}
    return {"alerts": alerts}


def register_default_handlers(bus: EventBus = event_bus) -> EventBus:
    bus.subscribe(TRANSACTION_ADDED, budget_alert_handler)
    return bus
