"""Internal datatypes for selection, synthesis and output."""

from __future__ import annotations

import ast
import enum
from dataclasses import dataclass
from typing import Optional


class Companions(enum.Enum):
    """Optional companion members requested by the markers on one field."""

    NONE = "none"
    DISPOSABLE_ONLY = "disposable_only"
    EVENT_ONLY = "event_only"
    BOTH = "both"

    @classmethod
    def from_markers(cls, *, disposable: bool, event: bool) -> Companions:
        """Map marker presence to the matching variant."""
        if disposable and event:
            return cls.BOTH
        if disposable:
            return cls.DISPOSABLE_ONLY
        if event:
            return cls.EVENT_ONLY
        return cls.NONE

    @property
    def includes_disposable(self) -> bool:
        return self in (Companions.DISPOSABLE_ONLY, Companions.BOTH)

    @property
    def includes_event(self) -> bool:
        return self in (Companions.EVENT_ONLY, Companions.BOTH)


class MemberKind(enum.Enum):
    """Kinds of synthesized companion members."""

    PARTIAL_HOOK = "partial_hook"
    EVENT_FIELD = "event_field"
    PROPERTY = "property"
    DISPOSABLE_SUBSCRIPTION = "disposable_subscription"
    SUBSCRIPTION_EVENT = "subscription_event"


@dataclass(frozen=True)
class TypeDeclaration:
    """A host-owned class declaration with its enclosing scope.

    The ``ast`` nodes are read-only input and are never mutated.
    """

    node: ast.ClassDef
    namespace: str
    enclosing: tuple[ast.ClassDef, ...]
    imports: tuple[ast.stmt, ...]

    @property
    def name(self) -> str:
        return self.node.name

    @property
    def type_path(self) -> tuple[str, ...]:
        """Class names from the outermost enclosing class down to this one."""
        return tuple(outer.name for outer in self.enclosing) + (self.node.name,)

    @property
    def qualified_name(self) -> str:
        return ".".join((self.namespace, *self.type_path))


@dataclass(frozen=True)
class AnnotatedField:
    """A class-body field carrying at least one subscription marker."""

    name: str
    field_type: ast.expr
    is_static: bool
    companions: Companions


@dataclass(frozen=True)
class DerivedNames:
    """Identifiers derived from one field name."""

    field_name: str
    property_name: str
    private_event_name: str
    public_event_name: str
    subscription_method_name: str
    partial_hook_name: str


@dataclass(frozen=True)
class GeneratedMember:
    """One synthesized member and the class-body statements that declare it."""

    kind: MemberKind
    name: str
    statements: tuple[ast.stmt, ...]


@dataclass(frozen=True)
class RebuiltType:
    """Generated counterpart of a declaration, wrapped in its enclosing classes."""

    namespace: str
    type_path: tuple[str, ...]
    node: ast.ClassDef
    members: tuple[GeneratedMember, ...]

    @property
    def name(self) -> str:
        return self.type_path[-1]


@dataclass(frozen=True)
class OutputUnit:
    """Rendered generated module handed back to the host."""

    identifier: str
    namespace: str
    type_path: tuple[str, ...]
    text: str
    member_names: tuple[str, ...]

    @property
    def file_name(self) -> str:
        return f"{self.identifier}.py"

    @property
    def qualified_name(self) -> str:
        return ".".join((self.namespace, *self.type_path))


@dataclass(frozen=True)
class GenerationResult:
    """Generation output metadata."""

    units: tuple[OutputUnit, ...]
    warnings: tuple[str, ...]
    output_dir: Optional[str] = None
