"""Unit tests for marked field selection."""

from __future__ import annotations

import ast
import textwrap

from field_subscriptions_generator.compilation import Compilation
from field_subscriptions_generator.model_types import Companions, TypeDeclaration
from field_subscriptions_generator.selector import field_markers, select_fields

_SOURCE = textwrap.dedent(
    """
    import typing
    from typing import Annotated, ClassVar

    from field_subscriptions_generator.markers import DisposableSubscription, EventSubscription


    class Inventory:
        _unmarked: int = 0
        _capacity: Annotated[int, DisposableSubscription] = 10
        _label: Annotated[str, EventSubscription()] = ""
        _items: Annotated[list[str], DisposableSubscription, EventSubscription]
        _note: Annotated[str, "documentation only"] = ""
        _version: ClassVar[Annotated[int, EventSubscription]] = 1
        _revision: typing.Annotated[typing.ClassVar[int], DisposableSubscription] = 0

        def method(self) -> None:
            self._local: Annotated[int, EventSubscription] = 0


    class Plain:
        _value: int = 0
    """
)


def _declarations() -> list[TypeDeclaration]:
    compilation = Compilation.from_sources({"shop.inventory": _SOURCE})
    return compilation.classes_by_field_markers()


def test_only_classes_with_marked_fields_are_returned() -> None:
    """The host query skips classes without markers."""
    declarations = _declarations()

    assert [declaration.name for declaration in declarations] == ["Inventory"]
    assert declarations[0].namespace == "shop.inventory"


def test_fields_are_selected_in_declaration_order() -> None:
    """Marked fields keep their order and unmarked fields are dropped."""
    fields = select_fields(_declarations()[0])

    assert [field.name for field in fields] == [
        "_capacity",
        "_label",
        "_items",
        "_version",
        "_revision",
    ]


def test_companions_follow_markers() -> None:
    """Each marker combination maps to one companion variant."""
    companions = {field.name: field.companions for field in select_fields(_declarations()[0])}

    assert companions["_capacity"] is Companions.DISPOSABLE_ONLY
    assert companions["_label"] is Companions.EVENT_ONLY
    assert companions["_items"] is Companions.BOTH
    assert companions["_items"].includes_disposable
    assert companions["_items"].includes_event
    assert not companions["_capacity"].includes_event


def test_class_var_marks_fields_static() -> None:
    """ClassVar outside or inside Annotated makes a field static."""
    fields = {field.name: field for field in select_fields(_declarations()[0])}

    assert fields["_version"].is_static
    assert fields["_revision"].is_static
    assert not fields["_capacity"].is_static
    assert ast.unparse(fields["_version"].field_type) == "int"
    assert ast.unparse(fields["_revision"].field_type) == "int"
    assert ast.unparse(fields["_items"].field_type) == "list[str]"


def test_field_markers_ignores_other_statements() -> None:
    """Statements that are not annotated fields carry no markers."""
    tree = ast.parse("x = 1\ndef f(): pass\ny: int = 2\nz: Annotated[int, Other] = 3\n")

    assert all(field_markers(statement) == frozenset() for statement in tree.body)


def test_field_markers_respects_requested_names() -> None:
    """Only requested marker names are reported."""
    statement = ast.parse("a: Annotated[int, EventSubscription, DisposableSubscription]").body[0]

    assert field_markers(statement, ["EventSubscription"]) == frozenset({"EventSubscription"})


def test_companions_variant_from_markers() -> None:
    """The closed variant set covers every combination."""
    assert Companions.from_markers(disposable=False, event=False) is Companions.NONE
    assert Companions.from_markers(disposable=True, event=False) is Companions.DISPOSABLE_ONLY
    assert Companions.from_markers(disposable=False, event=True) is Companions.EVENT_ONLY
    assert Companions.from_markers(disposable=True, event=True) is Companions.BOTH
