"""Unit tests for output unit assembly."""

from __future__ import annotations

import ast
import textwrap

from field_subscriptions_generator.compilation import Compilation
from field_subscriptions_generator.generator import FieldSubscriptionsGenerator

_SOURCE = textwrap.dedent(
    """
    from __future__ import annotations

    import typing
    from typing import Annotated

    from field_subscriptions_generator.markers import DisposableSubscription


    class Counter:
        _Count: Annotated[int, DisposableSubscription] = 0
    """
)


def _unit_text() -> str:
    compilation = Compilation.from_sources({"app.counter": _SOURCE})
    (unit,) = FieldSubscriptionsGenerator().execute(compilation).units
    return unit.text


def test_identifier_and_metadata() -> None:
    """Units are named after the type and the run counter."""
    compilation = Compilation.from_sources({"app.counter": _SOURCE})
    (declaration,) = compilation.classes_by_field_markers()

    unit, _ = FieldSubscriptionsGenerator().generate_type(declaration, 7)

    assert unit.identifier == "CounterGen7"
    assert unit.file_name == "CounterGen7.py"
    assert unit.namespace == "app.counter"
    assert unit.type_path == ("Counter",)
    assert unit.qualified_name == "app.counter.Counter"
    assert unit.member_names == (
        "OnCountChange",
        "_CountChanged",
        "Count",
        "SubscribeToCount",
    )


def test_module_layout() -> None:
    """Docstring, future import, original imports, runtime imports, then the class."""
    tree = ast.parse(_unit_text())

    assert ast.get_docstring(tree) == "Generated companion members for app.counter.Counter."
    statements = [ast.unparse(statement) for statement in tree.body[1:-1]]
    assert statements == [
        "from __future__ import annotations",
        "from __future__ import annotations",
        "import typing",
        "from typing import Annotated",
        "from field_subscriptions_generator.markers import DisposableSubscription",
        "from field_subscriptions_generator.runtime import DisposeAction, Event, EventField, "
        "partial_hook, static_property, static_subscription_event, subscription_event",
        "from field_subscriptions_generator.runtime import Action, EventHandler",
    ]
    assert isinstance(tree.body[-1], ast.ClassDef)
    assert tree.body[-1].name == "Counter"


def test_unit_text_compiles() -> None:
    """Rendered text is a valid module even with a repeated future import."""
    compile(_unit_text(), "CounterGen0.py", "exec")


def test_rendering_is_deterministic() -> None:
    """Identical input produces identical text."""
    assert _unit_text() == _unit_text()


def test_counter_is_sequential_within_a_run() -> None:
    """Several classes in one run get increasing numbers."""
    compilation = Compilation.from_sources(
        {
            "app.first": _SOURCE,
            "app.second": _SOURCE.replace("class Counter", "class Tally"),
        }
    )

    result = FieldSubscriptionsGenerator().execute(compilation)

    assert [unit.identifier for unit in result.units] == ["CounterGen0", "TallyGen1"]
    assert [unit.namespace for unit in result.units] == ["app.first", "app.second"]
