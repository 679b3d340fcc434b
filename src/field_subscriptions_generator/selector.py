"""Selection of marked fields from a class body."""

from __future__ import annotations

import ast
from collections.abc import Iterable
from typing import Optional

from .markers import DisposableSubscription, EventSubscription, MARKER_NAMES
from .model_types import AnnotatedField, Companions, TypeDeclaration

_ANNOTATED = "Annotated"
_CLASS_VAR = "ClassVar"


def field_markers(
    statement: ast.stmt,
    marker_names: Iterable[str] = MARKER_NAMES,
) -> frozenset[str]:
    """Return marker names attached to a class-body field statement."""
    unpacked = _unpack_field(statement)
    if unpacked is None:
        return frozenset()
    _, _, metadata, _ = unpacked
    wanted = set(marker_names)
    return frozenset(name for name in map(_terminal_name, metadata) if name in wanted)


def select_fields(
    declaration: TypeDeclaration,
    marker_names: Iterable[str] = MARKER_NAMES,
) -> list[AnnotatedField]:
    """Collect marked fields of a declaration in declaration order.

    Args:
        declaration (TypeDeclaration): Class declaration to scan.
        marker_names (Iterable[str]): Marker names to recognize.

    Returns:
        list[AnnotatedField]: Marked fields with their requested companions.
    """
    names = tuple(marker_names)
    fields: list[AnnotatedField] = []
    for statement in declaration.node.body:
        markers = field_markers(statement, names)
        if not markers:
            continue
        unpacked = _unpack_field(statement)
        if unpacked is None:
            continue
        name, field_type, _, is_static = unpacked
        fields.append(
            AnnotatedField(
                name=name,
                field_type=field_type,
                is_static=is_static,
                companions=Companions.from_markers(
                    disposable=DisposableSubscription.__name__ in markers,
                    event=EventSubscription.__name__ in markers,
                ),
            )
        )
    return fields


def _unpack_field(
    statement: ast.stmt,
) -> Optional[tuple[str, ast.expr, tuple[ast.expr, ...], bool]]:
    """Split a field into (name, field type, Annotated metadata, is static)."""
    if not isinstance(statement, ast.AnnAssign) or not isinstance(statement.target, ast.Name):
        return None

    annotation = statement.annotation
    is_static = False
    outer_class_var = _subscript_argument(annotation, _CLASS_VAR)
    if outer_class_var is not None:
        is_static = True
        annotation = outer_class_var

    annotated_arguments = _subscript_argument(annotation, _ANNOTATED)
    if not isinstance(annotated_arguments, ast.Tuple) or len(annotated_arguments.elts) < 2:
        return None

    field_type, *metadata = annotated_arguments.elts
    inner_class_var = _subscript_argument(field_type, _CLASS_VAR)
    if inner_class_var is not None:
        is_static = True
        field_type = inner_class_var
    return statement.target.id, field_type, tuple(metadata), is_static


def _subscript_argument(node: ast.expr, origin: str) -> Optional[ast.expr]:
    if isinstance(node, ast.Subscript) and _terminal_name(node.value) == origin:
        return node.slice
    return None


def _terminal_name(node: ast.expr) -> Optional[str]:
    if isinstance(node, ast.Call):
        node = node.func
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None
