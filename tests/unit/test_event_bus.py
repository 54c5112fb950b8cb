import sys
from pathlib import Path
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from chronicles.application.services.event_bus import EventBus
from chronicles.domain.events import LevelUpApplied, TurnAdvanced


def _turn_event() -> TurnAdvanced:
    return TurnAdvanced(character_id=1, action="Rest", turn_after=1, year=1, month=2)


class EventBusTests(unittest.TestCase):
    def test_handlers_run_in_priority_then_subscription_order(self) -> None:
        bus = EventBus()
        calls: list[str] = []
        bus.subscribe(TurnAdvanced, lambda _event: calls.append("late"), priority=200)
        bus.subscribe(TurnAdvanced, lambda _event: calls.append("first"))
        bus.subscribe(TurnAdvanced, lambda _event: calls.append("second"))

        bus.publish(_turn_event())

        self.assertEqual(["first", "second", "late"], calls)

    def test_object_subscribers_observe_every_event(self) -> None:
        bus = EventBus()
        seen: list[object] = []
        bus.subscribe(object, seen.append)

        bus.publish(_turn_event())
        bus.publish(LevelUpApplied(character_id=1, from_level=1, to_level=2, max_health=110, max_energy=105))

        self.assertEqual(["TurnAdvanced", "LevelUpApplied"], [type(event).__name__ for event in seen])

    def test_failing_handler_is_isolated(self) -> None:
        bus = EventBus()
        calls: list[str] = []

        def _boom(_event) -> None:
            raise RuntimeError("handler failed")

        bus.subscribe(TurnAdvanced, _boom, priority=1)
        bus.subscribe(TurnAdvanced, lambda _event: calls.append("after"))

        with self.assertLogs("chronicles.application.services.event_bus", level="ERROR"):
            bus.publish(_turn_event())

        self.assertEqual(["after"], calls)
        self.assertEqual(1, len(bus.last_publish_errors()))

    def test_unsubscribe_removes_handler(self) -> None:
        bus = EventBus()
        calls: list[str] = []

        def _handler(_event) -> None:
            calls.append("called")

        bus.subscribe(TurnAdvanced, _handler)
        self.assertTrue(bus.unsubscribe(TurnAdvanced, _handler))
        self.assertFalse(bus.unsubscribe(TurnAdvanced, _handler))

        bus.publish(_turn_event())

        self.assertEqual([], calls)


if __name__ == "__main__":
    unittest.main()
