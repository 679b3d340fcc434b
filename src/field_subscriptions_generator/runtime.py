"""Support runtime imported by generated companion members."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Optional

type Action[T] = Callable[[T], None]
type EventHandler[T] = Callable[[Any, T], None]

_PARTIAL_HOOK_ATTRIBUTE = "__partial_hook__"


class Event:
    """Ordered multicast list of handlers."""

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: list[Callable[..., Any]] = []

    def add(self, handler: Callable[..., Any]) -> None:
        """Append a handler; the same handler may be added more than once."""
        self._handlers.append(handler)

    def remove(self, handler: Callable[..., Any]) -> None:
        """Remove the most recently added occurrence of ``handler``, if any."""
        for index in range(len(self._handlers) - 1, -1, -1):
            if self._handlers[index] == handler:
                del self._handlers[index]
                return

    def invoke(self, *args: Any) -> None:
        """Call every handler with ``args``; does nothing without handlers."""
        for handler in tuple(self._handlers):
            handler(*args)

    def __iadd__(self, handler: Callable[..., Any]) -> Event:
        self.add(handler)
        return self

    def __isub__(self, handler: Callable[..., Any]) -> Event:
        self.remove(handler)
        return self

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"Event(handlers={len(self._handlers)})"


class EventField:
    """Descriptor giving every instance its own private :class:`Event`."""

    def __init__(self) -> None:
        self._name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self._name = name

    def __get__(self, obj: Any, owner: Optional[type] = None) -> Any:
        if obj is None:
            return self
        storage = self._storage(obj)
        event = storage.get(self._name)
        if event is None:
            event = Event()
            storage[self._name] = event
        return event

    def __set__(self, obj: Any, value: Any) -> None:
        if not isinstance(value, Event):
            raise TypeError(f"{self._name} only accepts Event values, got {type(value)!r}")
        self._storage(obj)[self._name] = value

    def _storage(self, obj: Any) -> dict[str, Any]:
        try:
            return vars(obj)
        except TypeError as exc:
            raise TypeError(
                f"{type(obj).__qualname__} instances have no __dict__ to hold {self._name}; "
                "create them from the merged class"
            ) from exc


class DisposeAction:
    """Scope guard running its release action exactly once."""

    __slots__ = ("_action", "_disposed")

    def __init__(self, action: Callable[[], Any]) -> None:
        self._action = action
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Run the release action; later calls have no effect."""
        if self._disposed:
            return
        self._disposed = True
        self._action()

    def __enter__(self) -> DisposeAction:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.dispose()


def partial_hook[F: Callable[..., Any]](func: F) -> F:
    """Mark a generated hook that a hand-written member may replace."""
    setattr(func, _PARTIAL_HOOK_ATTRIBUTE, True)
    return func


def is_partial_hook(member: Any) -> bool:
    """Return whether ``member`` (or the function it wraps) is a partial hook."""
    func = getattr(member, "__func__", member)
    return bool(getattr(func, _PARTIAL_HOOK_ATTRIBUTE, False))


class static_property(property):  # pylint: disable=invalid-name
    """Class-level property, installed on the owner's metaclass when merged.

    Once bound to its declaring class, reads and writes through subclasses
    reach the declaring class, so the value has a single storage.
    """

    owner: Optional[type] = None

    def __get__(self, obj: Any, objtype: Optional[type] = None) -> Any:
        if obj is None:
            return self
        return super().__get__(obj if self.owner is None else self.owner, objtype)

    def __set__(self, obj: Any, value: Any) -> None:
        super().__set__(obj if self.owner is None else self.owner, value)


class BoundEvent:
    """A subscription event bound to its owner, supporting ``+=`` and ``-=``."""

    __slots__ = ("descriptor", "target")

    def __init__(self, descriptor: subscription_event, target: Any) -> None:
        self.descriptor = descriptor
        self.target = target

    def subscribe(self, handler: Callable[..., Any]) -> None:
        self.descriptor.add(self.target, handler)

    def unsubscribe(self, handler: Callable[..., Any]) -> None:
        self.descriptor.remove(self.target, handler)

    def __iadd__(self, handler: Callable[..., Any]) -> BoundEvent:
        self.subscribe(handler)
        return self

    def __isub__(self, handler: Callable[..., Any]) -> BoundEvent:
        self.unsubscribe(handler)
        return self

    def __repr__(self) -> str:
        return f"BoundEvent({self.descriptor.name!r}, target={self.target!r})"


class subscription_event:  # pylint: disable=invalid-name
    """Event with custom add and remove accessors, declared like ``property``::

        @subscription_event
        def ScoreChanged(self, handler):
            ...

        @ScoreChanged.remover
        def ScoreChanged(self, handler):
            ...
    """

    def __init__(
        self,
        fadd: Callable[[Any, Callable[..., Any]], None],
        fremove: Optional[Callable[[Any, Callable[..., Any]], None]] = None,
    ) -> None:
        self.fadd = fadd
        self.fremove = fremove
        self.name = fadd.__name__
        self.__doc__ = fadd.__doc__

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def remover(self, fremove: Callable[[Any, Callable[..., Any]], None]) -> subscription_event:
        """Return a copy of this event using ``fremove`` as remove accessor."""
        return type(self)(self.fadd, fremove)

    def add(self, target: Any, handler: Callable[..., Any]) -> None:
        self.fadd(target, handler)

    def remove(self, target: Any, handler: Callable[..., Any]) -> None:
        if self.fremove is None:
            raise AttributeError(f"event {self.name!r} has no remove accessor")
        self.fremove(target, handler)

    def __get__(self, obj: Any, owner: Optional[type] = None) -> Any:
        if obj is None:
            return self
        return BoundEvent(self, obj)

    def __set__(self, obj: Any, value: Any) -> None:
        # Augmented assignment stores the bound event back on its owner.
        if isinstance(value, BoundEvent) and value.descriptor is self and value.target is obj:
            return
        raise AttributeError(f"event {self.name!r} only supports += and -=")


class static_subscription_event(subscription_event):  # pylint: disable=invalid-name
    """Class-level subscription event, installed on the owner's metaclass when merged."""


__all__ = [
    "Action",
    "BoundEvent",
    "DisposeAction",
    "Event",
    "EventField",
    "EventHandler",
    "is_partial_hook",
    "partial_hook",
    "static_property",
    "static_subscription_event",
    "subscription_event",
]
