"""Behavior tests for the bundled demo components."""

from __future__ import annotations

import unittest

from tuiloop import QUIT, TICK, Custom, EventResult, Key, KeyCode, KeyModifiers, Mouse, MouseKind, Resize
from tuiloop.demos import Counter, InputSubmitted, ProgressDemo, TabsDemo, TextInput
from tuiloop.runtime.bus import MessageBus
from tuiloop.screen import Rect, Surface


def _drain(bus: MessageBus) -> list:
    received = []
    while (message := bus.try_receive()) is not None:
        received.append(message)
    return received


class _Clock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class CounterTests(unittest.TestCase):
    def test_arrows_change_count_and_q_posts_quit(self) -> None:
        bus = MessageBus()
        counter = Counter()
        counter.set_message_sender(bus.sender())

        self.assertIs(counter.handle_event(Key(KeyCode.UP)), EventResult.CONSUMED)
        counter.handle_event(Key(KeyCode.UP))
        counter.handle_event(Key(KeyCode.DOWN))
        self.assertEqual(counter.count, 1)
        self.assertEqual(_drain(bus), [])

        self.assertIs(counter.handle_event(Key("q")), EventResult.CONSUMED)
        self.assertEqual(_drain(bus), [QUIT])

    def test_unrelated_input_propagates(self) -> None:
        counter = Counter()

        self.assertIs(counter.handle_event(Key("x")), EventResult.PROPAGATE)
        self.assertIs(counter.handle_event(Key("q", KeyModifiers.CONTROL)), EventResult.PROPAGATE)
        self.assertIs(counter.handle_event(Resize(80, 24)), EventResult.PROPAGATE)
        self.assertIs(counter.handle_event(Mouse(MouseKind.DOWN, 1, 1)), EventResult.PROPAGATE)
        self.assertEqual(counter.count, 0)

    def test_render_centers_text(self) -> None:
        counter = Counter()
        counter.count = 3
        surface = Surface(60, 5)

        counter.render(surface, surface.area)

        self.assertIn("Count: 3", surface.lines()[2])
        self.assertEqual(surface.lines()[0].strip(), "")


class ProgressDemoTests(unittest.TestCase):
    def test_ticks_follow_clock_unless_paused(self) -> None:
        clock = _Clock()
        demo = ProgressDemo(clock=clock)

        clock.now += 3.5
        self.assertIs(demo.handle_event(TICK), EventResult.CONSUMED)
        self.assertEqual((demo.ticks, demo.progress), (1, 30))

        demo.handle_event(Key(" "))
        clock.now += 2
        demo.handle_event(TICK)
        self.assertTrue(demo.paused)
        self.assertEqual((demo.ticks, demo.progress), (2, 30))

        clock.now += 12
        demo.handle_event(Key(" "))
        demo.handle_event(TICK)
        # 17.5 seconds elapsed wraps to 7.
        self.assertEqual(demo.progress, 70)

    def test_reset_restarts_cycle(self) -> None:
        clock = _Clock()
        demo = ProgressDemo(clock=clock)
        clock.now += 4
        demo.handle_event(TICK)
        demo.paused = True

        demo.handle_event(Key("r"))
        demo.handle_event(TICK)

        self.assertFalse(demo.paused)
        self.assertEqual(demo.progress, 0)

    def test_render_shows_status(self) -> None:
        demo = ProgressDemo(clock=_Clock())
        demo.paused = True
        surface = Surface(60, 12)

        demo.render(surface, surface.area)
        text = "\n".join(surface.lines())

        self.assertIn("Progress Bar Demo", text)
        self.assertIn("Status: PAUSED", text)
        self.assertIn("0%", text)

    def test_render_tolerates_tiny_areas(self) -> None:
        demo = ProgressDemo(clock=_Clock())
        for width, height in ((0, 0), (1, 1), (3, 2), (10, 4)):
            surface = Surface(width, height)
            demo.render(surface, surface.area)


class TextInputTests(unittest.TestCase):
    def test_typing_and_submit(self) -> None:
        bus = MessageBus()
        field = TextInput()
        field.set_message_sender(bus.sender())

        for key in (Key("h"), Key("I", KeyModifiers.SHIFT), Key("x"), Key(KeyCode.BACKSPACE)):
            self.assertIs(field.handle_event(key), EventResult.CONSUMED)
        self.assertEqual(field.value, "hI")

        field.handle_event(Key(KeyCode.ENTER))

        messages = _drain(bus)
        self.assertEqual(len(messages), 1)
        self.assertEqual(messages[0].payload_as(InputSubmitted), InputSubmitted("hI"))
        self.assertEqual(field.value, "")

    def test_empty_submit_posts_nothing(self) -> None:
        bus = MessageBus()
        field = TextInput()
        field.set_message_sender(bus.sender())

        field.handle_event(Key(KeyCode.ENTER))

        self.assertEqual(_drain(bus), [])

    def test_navigation_keys_propagate(self) -> None:
        field = TextInput()

        self.assertIs(field.handle_event(Key(KeyCode.TAB)), EventResult.PROPAGATE)
        self.assertIs(field.handle_event(Key(KeyCode.ESC)), EventResult.PROPAGATE)
        self.assertIs(field.handle_event(Key("a", KeyModifiers.CONTROL)), EventResult.PROPAGATE)
        self.assertEqual(field.value, "")


class TabsDemoTests(unittest.TestCase):
    def setUp(self) -> None:
        self.bus = MessageBus()
        self.tabs = TabsDemo()
        self.tabs.set_message_sender(self.bus.sender())

    def test_children_get_their_own_sender_on_the_same_bus(self) -> None:
        counter = self.tabs.children[0]
        self.assertIsNotNone(counter.message_sender)
        self.assertIsNot(counter.message_sender, self.tabs.message_sender)
        self.assertEqual(counter.message_sender, self.tabs.message_sender)

    def test_focused_child_sees_events_first(self) -> None:
        self.tabs.handle_event(Key(KeyCode.UP))
        self.assertEqual(self.tabs.children[0].count, 1)
        self.assertEqual(self.tabs.selected, 0)

    def test_tab_navigation_wraps(self) -> None:
        self.tabs.handle_event(Key(KeyCode.TAB))
        self.assertEqual(self.tabs.selected, 1)
        self.tabs.handle_event(Key(KeyCode.TAB, KeyModifiers.SHIFT))
        self.tabs.handle_event(Key(KeyCode.LEFT, KeyModifiers.ALT))
        self.assertEqual(self.tabs.selected, 2)
        self.tabs.handle_event(Key(KeyCode.RIGHT, KeyModifiers.ALT))
        self.assertEqual(self.tabs.selected, 0)

    def test_text_pane_consumes_letters_but_not_tab(self) -> None:
        self.tabs.selected = 1
        self.tabs.handle_event(Key("q"))
        self.assertEqual(_drain(self.bus), [])
        self.assertEqual(self.tabs.children[1].value, "q")

        self.tabs.handle_event(Key(KeyCode.TAB))
        self.assertEqual(self.tabs.selected, 2)

    def test_escape_posts_quit(self) -> None:
        self.assertIs(self.tabs.handle_event(Key(KeyCode.ESC)), EventResult.CONSUMED)
        self.assertEqual(_drain(self.bus), [QUIT])

    def test_update_records_bounded_history(self) -> None:
        for idx in range(7):
            self.tabs.update(Custom(InputSubmitted(f"entry {idx}")))
        self.tabs.update(Custom("ignored"))

        self.assertEqual(self.tabs.history, [f"entry {idx}" for idx in range(2, 7)])

    def test_render_marks_selected_tab(self) -> None:
        self.tabs.history = ["hello"]
        surface = Surface(60, 10)

        self.tabs.render(surface, surface.area)

        self.assertTrue(surface.lines()[0].startswith(" Counter "))
        self.assertEqual(surface.style_at(1, 0), "1;33")
        self.assertIn("last: hello", surface.lines()[9])

    def test_render_into_empty_area_draws_nothing(self) -> None:
        surface = Surface(20, 4)
        self.tabs.render(surface, Rect(0, 0, 0, 0))
        self.assertEqual(surface.lines(), [" " * 20] * 4)


if __name__ == "__main__":
    unittest.main()
