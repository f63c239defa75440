"""Demo components exercising the runtime contract."""

from __future__ import annotations

from .counter import Counter
from .progress import ProgressDemo
from .tabs import TabsDemo
from .text_input import InputSubmitted, TextInput

DEMOS = {
    "counter": Counter,
    "progress": ProgressDemo,
    "tabs": TabsDemo,
}

__all__ = ["DEMOS", "Counter", "InputSubmitted", "ProgressDemo", "TabsDemo", "TextInput"]
