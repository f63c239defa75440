"""Value-type tests for events, messages, and the component base class."""

from __future__ import annotations

import dataclasses
import unittest

from tuiloop import (
    QUIT,
    TICK,
    Component,
    Custom,
    EventResult,
    Key,
    KeyCode,
    KeyModifiers,
    Quit,
    Tick,
    route_event,
)
from tuiloop.runtime.bus import MessageBus


class _Payload:
    def __init__(self, value: int) -> None:
        self.value = value


class EventValueTests(unittest.TestCase):
    def test_events_are_immutable_values(self) -> None:
        key = Key("a", KeyModifiers.CONTROL)

        self.assertEqual(key, Key("a", KeyModifiers.CONTROL))
        self.assertEqual(Tick(), TICK)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            key.code = "b"  # type: ignore[misc]

    def test_key_matches_requires_exact_modifiers(self) -> None:
        key = Key(KeyCode.TAB, KeyModifiers.SHIFT)

        self.assertTrue(key.matches(KeyCode.TAB, KeyModifiers.SHIFT))
        self.assertFalse(key.matches(KeyCode.TAB))
        self.assertTrue(Key("x").is_char)
        self.assertFalse(Key(KeyCode.ENTER).is_char)

    def test_event_result_consumed_flag(self) -> None:
        self.assertTrue(EventResult.CONSUMED.consumed)
        self.assertFalse(EventResult.PROPAGATE.consumed)


class MessageTests(unittest.TestCase):
    def test_payload_downcast_is_type_checked(self) -> None:
        payload = _Payload(3)
        message = Custom(payload)

        self.assertIs(message.payload_as(_Payload), payload)
        self.assertIsNone(message.payload_as(int))
        self.assertTrue(message.holds(_Payload))
        self.assertEqual(Custom(5).payload_as(int), 5)

    def test_quit_is_a_single_value(self) -> None:
        self.assertEqual(Quit(), QUIT)
        self.assertNotIsInstance(QUIT, Custom)


class ComponentBaseTests(unittest.TestCase):
    def test_defaults_propagate_and_ignore(self) -> None:
        component = Component()

        self.assertIs(component.handle_event(Key("a")), EventResult.PROPAGATE)
        self.assertIsNone(component.update(Custom(1)))
        with self.assertRaises(NotImplementedError):
            component.render(None, None)

    def test_post_requires_injected_sender(self) -> None:
        component = Component()
        self.assertFalse(component.post(QUIT))

        bus = MessageBus()
        component.set_message_sender(bus.sender())
        self.assertTrue(component.post(QUIT))
        self.assertEqual(bus.try_receive(), QUIT)

    def test_route_event_stops_at_first_consumer(self) -> None:
        calls: list[str] = []

        class _Child(Component):
            def __init__(self, name: str, result: EventResult) -> None:
                self.name = name
                self.result = result

            def handle_event(self, event):
                calls.append(self.name)
                return self.result

        children = [
            _Child("a", EventResult.PROPAGATE),
            _Child("b", EventResult.CONSUMED),
            _Child("c", EventResult.CONSUMED),
        ]

        self.assertIs(route_event(Key("x"), children), EventResult.CONSUMED)
        self.assertEqual(calls, ["a", "b"])
        self.assertIs(route_event(Key("x"), children[:1]), EventResult.PROPAGATE)


if __name__ == "__main__":
    unittest.main()
