"""Assembly and rendering of generated output modules."""

from __future__ import annotations

import ast
from collections.abc import Sequence
from copy import deepcopy

from .model_types import OutputUnit, RebuiltType

_RUNTIME_MODULE = "field_subscriptions_generator.runtime"

_RUNTIME_IMPORT_ORDER: tuple[str, ...] = (
    "DisposeAction",
    "Event",
    "EventField",
    "partial_hook",
    "static_property",
    "static_subscription_event",
    "subscription_event",
)

_HANDLER_TYPE_IMPORT_ORDER: tuple[str, ...] = (
    "Action",
    "EventHandler",
)


def assemble_unit(
    imports: Sequence[ast.stmt],
    rebuilt: RebuiltType,
    counter: int,
) -> OutputUnit:
    """Compose the generated module for one rebuilt type.

    Args:
        imports (Sequence[ast.stmt]): Import statements of the original module.
        rebuilt (RebuiltType): Rebuilt hierarchy to embed.
        counter (int): Run-scoped sequence number of this unit.

    Returns:
        OutputUnit: Rendered module text and its collision-free identifier.
    """
    return OutputUnit(
        identifier=f"{rebuilt.name}Gen{counter}",
        namespace=rebuilt.namespace,
        type_path=rebuilt.type_path,
        text=render_unit_module(imports, rebuilt),
        member_names=tuple(member.name for member in rebuilt.members),
    )


def render_unit_module(imports: Sequence[ast.stmt], rebuilt: RebuiltType) -> str:
    """Render imports plus the rebuilt hierarchy as Python source code using AST."""
    qualified_name = ".".join((rebuilt.namespace, *rebuilt.type_path))
    body: list[ast.stmt] = [
        ast.Expr(value=ast.Constant(value=f"Generated companion members for {qualified_name}.")),
        ast.ImportFrom(module="__future__", names=[ast.alias(name="annotations")], level=0),
    ]
    body.extend(deepcopy(statement) for statement in imports)
    body.extend(_support_imports())
    body.append(deepcopy(rebuilt.node))

    module = ast.Module(body=body, type_ignores=[])
    ast.fix_missing_locations(module)
    return ast.unparse(module) + "\n"


def _support_imports() -> list[ast.stmt]:
    return [
        ast.ImportFrom(
            module=_RUNTIME_MODULE,
            names=[ast.alias(name=name) for name in _RUNTIME_IMPORT_ORDER],
            level=0,
        ),
        ast.ImportFrom(
            module=_RUNTIME_MODULE,
            names=[ast.alias(name=name) for name in _HANDLER_TYPE_IMPORT_ORDER],
            level=0,
        ),
    ]
