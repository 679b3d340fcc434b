"""Nested marked classes sharing a simple name."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from field_subscriptions_generator import markers


class Outer:
    class Middle:
        @dataclass
        class Widget:
            _Size: Annotated[int, markers.EventSubscription] = 1
            label: str = "widget"


class Widget[T]:
    _Color: Annotated[str, markers.DisposableSubscription()] = "red"
    m_Payload: Annotated[T | None, markers.DisposableSubscription] = None
