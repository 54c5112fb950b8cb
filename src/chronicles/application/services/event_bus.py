from collections import defaultdict
from dataclasses import dataclass
import logging
from typing import Callable, DefaultDict, List, Type


Handler = Callable[[object], None]

DEFAULT_PRIORITY = 100


@dataclass(frozen=True)
class _Subscription:
    priority: int
    order: int
    handler: Handler

    @property
    def sort_key(self) -> tuple[int, int]:
        return self.priority, self.order


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", None) or getattr(handler, "__name__", None) or repr(handler)


class EventBus:
    """Synchronous publisher for domain events.

    Handlers registered for a base class also receive its subclasses, so subscribing to ``object``
    observes every event. Lower priorities run first, ties in subscription order.
    """

    def __init__(self) -> None:
        self._subscriptions: DefaultDict[Type[object], List[_Subscription]] = defaultdict(list)
        self._issued = 0
        self._errors: List[Exception] = []
        self._logger = logging.getLogger(__name__)

    def subscribe(self, event_type: Type[object], handler: Handler, *, priority: int = DEFAULT_PRIORITY) -> None:
        self._subscriptions[event_type].append(_Subscription(int(priority), self._issued, handler))
        self._issued += 1

    def unsubscribe(self, event_type: Type[object], handler: Handler) -> bool:
        current = self._subscriptions.get(event_type, [])
        remaining = [entry for entry in current if entry.handler is not handler]
        self._subscriptions[event_type] = remaining
        return len(remaining) != len(current)

    def _matching(self, event_type: Type[object]) -> List[_Subscription]:
        matched = [entry for klass in event_type.__mro__ for entry in self._subscriptions.get(klass, ())]
        return sorted(matched, key=lambda entry: entry.sort_key)

    def publish(self, event: object) -> None:
        self._errors = []
        event_name = type(event).__name__
        for entry in self._matching(type(event)):
            try:
                entry.handler(event)
            except Exception as exc:
                # Isolated: remaining handlers still receive the event.
                self._errors.append(exc)
                self._logger.exception(
                    "Event handler failed and was isolated",
                    extra={"event_type": event_name, "handler": _handler_name(entry.handler), "priority": entry.priority},
                )

    def last_publish_errors(self) -> List[Exception]:
        return list(self._errors)
