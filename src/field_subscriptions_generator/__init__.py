"""Observable property and subscription generator for marked class fields.

Only the markers are exported here. Annotated source modules and generated
units import this package, so the generator and its dependencies load only
from their own modules (``generator``, ``cli``).
"""

from __future__ import annotations

from .markers import DisposableSubscription, EventSubscription

__all__ = [
    "DisposableSubscription",
    "EventSubscription",
]
