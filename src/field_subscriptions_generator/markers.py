"""Field markers recognized by the generator.

Markers are placed in ``Annotated`` metadata on class-body fields::

    class Player:
        _Score: Annotated[int, EventSubscription] = 0
        _Lives: ClassVar[Annotated[int, DisposableSubscription()]] = 3

Detection is purely syntactic, so the class itself, an instance, or a dotted
reference (``markers.EventSubscription``) are all accepted.
"""

from __future__ import annotations


class SubscriptionMarker:
    """Base class for subscription markers."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class DisposableSubscription(SubscriptionMarker):
    """Generate a ``SubscribeTo*`` method returning a disposable guard."""


class EventSubscription(SubscriptionMarker):
    """Generate a public subscription event replaying the current value."""


MARKER_NAMES: tuple[str, ...] = (
    DisposableSubscription.__name__,
    EventSubscription.__name__,
)
