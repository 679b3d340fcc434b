"""Pylint checks for classes using field subscription markers."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from astroid import nodes
from pylint.checkers import BaseChecker
from pylint.lint import PyLinter

from field_subscriptions_generator.config import GeneratorConfig
from field_subscriptions_generator.markers import MARKER_NAMES
from field_subscriptions_generator.naming import (
    NAMING_PRESETS,
    NamingConvention,
    derive_names,
    has_conventional_prefix,
)

_MESSAGE_DUPLICATE_COMPANION = "duplicate-companion-name"
_MESSAGE_UNPREFIXED_FIELD = "unprefixed-subscription-field"
_MESSAGE_SHADOWED_COMPANION = "companion-shadows-member"

_EVENT_MARKER = "EventSubscription"
_DISPOSABLE_MARKER = "DisposableSubscription"
_DEFAULT_PRESET: str = GeneratorConfig.model_fields["naming_preset"].default


class FieldSubscriptionsChecker(BaseChecker):
    """Detect marked fields whose generated companions would collide."""

    name = "field-subscriptions"

    msgs = {
        "E9601": (
            "Marked fields %r and %r both derive companion member %r",
            _MESSAGE_DUPLICATE_COMPANION,
            "Generated companions of two marked fields would share one name.",
        ),
        "W9602": (
            "Marked field %r has no conventional private prefix",
            _MESSAGE_UNPREFIXED_FIELD,
            "The generated property would reuse the field name and shadow it.",
        ),
        "E9603": (
            "Companion %r derived from %r shadows a member defined in the class",
            _MESSAGE_SHADOWED_COMPANION,
            "Generated companions replace hand-written members with the same name.",
        ),
    }

    options = (
        (
            "subscription-naming-preset",
            {
                "default": _DEFAULT_PRESET,
                "type": "choice",
                "choices": sorted(NAMING_PRESETS),
                "metavar": "<preset>",
                "help": "Naming preset used to derive companion member names.",
            },
        ),
    )

    def visit_classdef(self, node: nodes.ClassDef) -> None:
        """Check marked fields of a class body."""
        marked: list[tuple[nodes.AnnAssign, str, frozenset[str]]] = []
        for statement in node.body:
            field = _marked_field(statement)
            if field is not None:
                marked.append((statement, *field))
        if not marked:
            return

        convention = self._convention()
        hand_written = set(self._hand_written_names(node.body))
        owners: dict[str, str] = {}
        for statement, field_name, markers in marked:
            if not has_conventional_prefix(field_name, convention.prefixes):
                self.add_message(_MESSAGE_UNPREFIXED_FIELD, node=statement, args=(field_name,))

            names = derive_names(field_name, convention)
            companions = [names.property_name, names.private_event_name]
            if _DISPOSABLE_MARKER in markers:
                companions.append(names.subscription_method_name)
            if _EVENT_MARKER in markers:
                companions.append(names.public_event_name)

            for companion in [*companions, names.partial_hook_name]:
                owner = owners.setdefault(companion, field_name)
                if owner != field_name:
                    self.add_message(
                        _MESSAGE_DUPLICATE_COMPANION,
                        node=statement,
                        args=(owner, field_name, companion),
                    )
            # A hand-written partial hook is the intended implementation.
            for companion in companions:
                if companion in hand_written:
                    self.add_message(
                        _MESSAGE_SHADOWED_COMPANION,
                        node=statement,
                        args=(companion, field_name),
                    )

    def _convention(self) -> NamingConvention:
        return NAMING_PRESETS[self.linter.config.subscription_naming_preset]

    @staticmethod
    def _hand_written_names(body: Iterable[nodes.NodeNG]) -> Iterable[str]:
        for statement in body:
            if isinstance(statement, (nodes.FunctionDef, nodes.ClassDef)):
                yield statement.name
            elif isinstance(statement, nodes.Assign):
                for target in statement.targets:
                    if isinstance(target, nodes.AssignName):
                        yield target.name
            elif isinstance(statement, nodes.AnnAssign) and _marked_field(statement) is None:
                if isinstance(statement.target, nodes.AssignName):
                    yield statement.target.name


def _marked_field(statement: nodes.NodeNG) -> Optional[tuple[str, frozenset[str]]]:
    if not isinstance(statement, nodes.AnnAssign):
        return None
    if not isinstance(statement.target, nodes.AssignName):
        return None

    annotation = _subscript_argument(statement.annotation, "ClassVar") or statement.annotation
    arguments = _subscript_argument(annotation, "Annotated")
    if not isinstance(arguments, nodes.Tuple):
        return None
    markers = frozenset(
        name
        for name in (_terminal_name(element) for element in arguments.elts[1:])
        if name in MARKER_NAMES
    )
    if not markers:
        return None
    return statement.target.name, markers


def _subscript_argument(node: nodes.NodeNG, origin: str) -> Optional[nodes.NodeNG]:
    if isinstance(node, nodes.Subscript) and _terminal_name(node.value) == origin:
        return node.slice
    return None


def _terminal_name(node: nodes.NodeNG) -> Optional[str]:
    if isinstance(node, nodes.Call):
        node = node.func
    if isinstance(node, nodes.Name):
        return node.name
    if isinstance(node, nodes.Attribute):
        return node.attrname
    return None


def register(linter: PyLinter) -> None:
    """Register checker."""
    linter.register_checker(FieldSubscriptionsChecker(linter))
