from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Set

from expense_tracker.domain import BudgetStatus
from expense_tracker.utils import format_currency, get_logger

__all__ = ['BUDGET_ALERT', 'Event', 'EventBus', 'Notification', 'BudgetAlertMonitor',
           'over_budget_notification', 'near_budget_notification']

logger = get_logger(__name__)

BUDGET_ALERT = "BUDGET_ALERT"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], Optional[dict]]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[Optional[dict]]:
        handlers = self._subscribers.get(name, [])
        if not handlers:
            return []
        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in list(handlers)]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


@dataclass(frozen=True)
class Notification:
    severity: str        # "error" | "warning"
    title: str
    message: str
    auto_dismiss: bool
    category: str = ""

    def to_payload(self) -> dict:
        return asdict(self)


def over_budget_notification(status: BudgetStatus) -> Notification:
    name = status.category.value
    return Notification(
        severity="error",
        title=f"Over Budget: {name}",
        message=f"You've exceeded your {name} budget by {format_currency(status.spent - status.limit)}",
        auto_dismiss=False,
        category=name,
    )


def near_budget_notification(status: BudgetStatus) -> Notification:
    name = status.category.value
    return Notification(
        severity="warning",
        title=f"Near Budget Limit: {name}",
        message=f"You've used {status.percentage_used:.0f}% of your {name} budget",
        auto_dismiss=True,
        category=name,
    )


class BudgetAlertMonitor:
    """Turns successive budget evaluations into at most one alert per
    category per transition into over-budget or near-budget.

    Flags for a category are cleared once its status is back to normal or
    it no longer appears in the evaluation (budget removed).
    """

    def __init__(self, bus: Optional[EventBus] = None):
        self.bus = bus
        self._over: Set[str] = set()
        self._near: Set[str] = set()

    def check(self, statuses: Iterable[BudgetStatus]) -> List[Notification]:
        fired: List[Notification] = []
        seen: Set[str] = set()

        for status in statuses:
            name = status.category.value
            seen.add(name)
            if status.is_over_budget:
                if name not in self._over:
                    fired.append(over_budget_notification(status))
                    self._over.add(name)
            elif status.is_near_budget:
                if name not in self._near:
                    fired.append(near_budget_notification(status))
                    self._near.add(name)
            else:
                self._over.discard(name)
                self._near.discard(name)

        self._over &= seen
        self._near &= seen

        for note in fired:
            logger.info("budget alert: %s", note.title)
            if self.bus is not None:
                self.bus.publish(BUDGET_ALERT, note.to_payload())
        return fired

    def reset(self) -> None:
        self._over.clear()
        self._near.clear()
