"""Rebuild a declaration's class hierarchy around generated members."""

from __future__ import annotations

import ast
from collections.abc import Sequence
from copy import deepcopy

from .model_types import GeneratedMember, RebuiltType, TypeDeclaration


def rebuild_type(
    declaration: TypeDeclaration,
    members: Sequence[GeneratedMember],
) -> RebuiltType:
    """Produce the generated counterpart of ``declaration``.

    The new class keeps the name, bases, keywords, decorators and type
    parameters of the original and carries only ``members``. It is wrapped in
    copies of every enclosing class header so both fragments name the same
    nested type. Docstrings and other body content of the originals are dropped.

    Args:
        declaration (TypeDeclaration): Original class declaration.
        members (Sequence[GeneratedMember]): Members for the new class body.

    Returns:
        RebuiltType: Outermost rebuilt class with the generated type inside.
    """
    body: list[ast.stmt] = [statement for member in members for statement in member.statements]
    node = _copy_class_header(declaration.node, body)
    for outer in reversed(declaration.enclosing):
        node = _copy_class_header(outer, [node])

    return RebuiltType(
        namespace=declaration.namespace,
        type_path=declaration.type_path,
        node=node,
        members=tuple(members),
    )


def _copy_class_header(original: ast.ClassDef, body: list[ast.stmt]) -> ast.ClassDef:
    return ast.ClassDef(
        name=original.name,
        bases=[deepcopy(base) for base in original.bases],
        keywords=[deepcopy(keyword) for keyword in original.keywords],
        body=body or [ast.Pass()],
        decorator_list=[deepcopy(decorator) for decorator in original.decorator_list],
        type_params=[deepcopy(param) for param in getattr(original, "type_params", [])],
    )
