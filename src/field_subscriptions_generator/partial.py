"""Merge generated fragments into the live classes they complete."""

from __future__ import annotations

from types import ModuleType
from typing import Any

from .model_types import OutputUnit
from .runtime import is_partial_hook, static_property, static_subscription_event

_STATIC_DESCRIPTORS = (static_property, static_subscription_event)
_LOCAL_SCOPE = "<locals>"


class PartialMergeError(RuntimeError):
    """Raised when a generated fragment cannot be merged into its target."""


def merge_partial(target: type, fragment: type) -> type:
    """Copy generated members of ``fragment`` onto ``target``.

    Partial hooks already defined by ``target`` are kept, so a hand-written
    implementation replaces the generated one. Class-level properties and
    events only work on a metaclass, and per-instance events need instances
    with a ``__dict__``. When the fragment has class-level members or the
    target's instances have no ``__dict__``, a subclass of ``target`` with the
    same name is created and returned instead of ``target``. Its metaclass
    derives from the target's and carries the class-level members.

    Args:
        target (type): Hand-written class.
        fragment (type): Generated class with the same name.

    Returns:
        type: The merged class, either ``target`` itself or its subclass.
    """
    static_members: dict[str, Any] = {}
    for name, member in fragment.__dict__.items():
        if name.startswith("__") and name.endswith("__"):
            continue
        if isinstance(member, _STATIC_DESCRIPTORS):
            static_members[name] = member
            continue
        if is_partial_hook(member) and name in target.__dict__:
            continue
        setattr(target, name, member)

    if not static_members and target.__dictoffset__ != 0:
        return target

    metaclass = type(target)
    if static_members:
        metaclass = type(f"{target.__name__}Meta", (metaclass,), static_members)
    merged = _derive(target, (target,), metaclass)
    for member in static_members.values():
        if isinstance(member, static_property):
            member.owner = merged
    return merged


def apply_unit(module: ModuleType, unit: OutputUnit) -> type:
    """Execute a generated unit beside ``module`` and merge its class.

    The unit runs in a copy of the module globals so names of the original
    module resolve without rebinding them. When merging creates a subclass,
    it is rebound in place of the original, and classes of ``module``
    deriving from the original are rebound to subclasses that also derive
    from the merged class.

    Args:
        module (ModuleType): Live module holding the hand-written class.
        unit (OutputUnit): Generated unit targeting a class of ``module``.

    Returns:
        type: The merged class, also rebound on its parent scope.
    """
    namespace: dict[str, Any] = dict(vars(module))
    exec(compile(unit.text, unit.file_name, "exec"), namespace)  # pylint: disable=exec-used

    target_parent: Any = module
    fragment_parent: Any = namespace
    for depth, name in enumerate(unit.type_path):
        is_last = depth == len(unit.type_path) - 1
        target = getattr(target_parent, name, None)
        fragment = (
            fragment_parent.get(name)
            if isinstance(fragment_parent, dict)
            else getattr(fragment_parent, name, None)
        )
        if not isinstance(target, type) or not isinstance(fragment, type):
            path = ".".join(unit.type_path[: depth + 1])
            raise PartialMergeError(f"Cannot resolve class {path} in module {module.__name__}")
        if is_last:
            merged = merge_partial(target, fragment)
            if merged is not target:
                setattr(target_parent, name, merged)
                _extend_subclasses(module, target, merged)
            return merged
        target_parent = target
        fragment_parent = fragment

    raise PartialMergeError(f"Unit {unit.identifier} has an empty type path")


def _extend_subclasses(module: ModuleType, original: type, replacement: type) -> None:
    for subclass in original.__subclasses__():
        if subclass is replacement or subclass.__module__ != module.__name__:
            continue
        metaclass = type(replacement)
        if not issubclass(metaclass, type(subclass)):
            metaclass = type(
                f"{subclass.__name__}Meta",
                (metaclass, type(subclass)),
                {},
            )
        try:
            extended = _derive(subclass, (subclass, replacement), metaclass)
        except TypeError as exc:
            raise PartialMergeError(
                f"Cannot derive {subclass.__qualname__} from merged {replacement.__qualname__}: "
                f"{exc}"
            ) from exc
        _rebind(module, subclass, extended)
        _extend_subclasses(module, subclass, extended)


def _derive(original: type, bases: tuple[type, ...], metaclass: type) -> type:
    derived = metaclass(
        original.__name__,
        bases,
        {"__module__": original.__module__, "__qualname__": original.__qualname__},
    )
    if original.__doc__ is not None:
        derived.__doc__ = original.__doc__
    return derived


def _rebind(module: ModuleType, original: type, replacement: type) -> None:
    *parents, name = original.__qualname__.split(".")
    if _LOCAL_SCOPE in parents:
        return
    parent: Any = module
    for part in parents:
        parent = getattr(parent, part, None)
        if parent is None:
            return
    if getattr(parent, name, None) is original:
        setattr(parent, name, replacement)
