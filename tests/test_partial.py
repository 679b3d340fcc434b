"""Behavioral tests for generated members merged into their classes."""

from __future__ import annotations

import types

import pytest

from field_subscriptions_generator.model_types import OutputUnit
from field_subscriptions_generator.partial import PartialMergeError, apply_unit, merge_partial
from field_subscriptions_generator.runtime import (
    DisposeAction,
    Event,
    EventField,
    is_partial_hook,
    partial_hook,
    static_property,
)
from fixture_helpers import load_merged_fixture, load_merged_source


def test_property_notifies_only_on_change() -> None:
    """Assigning an equal value is silent; a new value fires the event before the hook."""
    module = load_merged_fixture("game_models")
    player = module.Player(score=1)
    seen: list[tuple[int, int]] = []

    player.SubscribeToScore(lambda sender, value: seen.append((value, len(sender.hook_calls))))
    player.Score = 1
    player.Score = 5

    assert player.Score == 5
    assert player.hook_calls == [5]
    # The replayed value, then the change observed before the hook ran.
    assert seen == [(1, 0), (5, 0)]


def test_disposable_subscription_replays_and_disposes() -> None:
    """The guard removes the handler once; disposing twice is harmless."""
    module = load_merged_fixture("game_models")
    player = module.Player(score=2)
    values: list[int] = []

    subscription = player.SubscribeToScore(lambda sender, value: values.append(value))
    player.Score = 3
    subscription.dispose()
    subscription.dispose()
    player.Score = 4

    assert isinstance(subscription, DisposeAction)
    assert values == [2, 3]

    with player.SubscribeToScore(lambda sender, value: values.append(value)):
        player.Score = 6
    player.Score = 7
    assert values == [2, 3, 4, 6]


def test_subscription_event_replays_on_add() -> None:
    """Adding a handler delivers the current value; removing it stops delivery."""
    module = load_merged_fixture("game_models")
    player = module.Player()
    received: list[tuple[object, str]] = []

    def on_name(sender: object, value: str) -> None:
        received.append((sender, value))

    player.NameChanged += on_name
    player.Name = "ann"
    player.NameChanged -= on_name
    player.Name = "bob"

    assert received == [(player, "anonymous"), (player, "ann")]
    assert player.Name == "bob"


def test_both_markers_share_one_private_event() -> None:
    """The method and the event of one field notify through the same private event."""
    module = load_merged_fixture("game_models")
    player = module.Player()
    from_method: list[int] = []
    from_event: list[int] = []

    player.SubscribeToLives(lambda sender, value: from_method.append(value))
    player.LivesChanged += lambda sender, value: from_event.append(value)
    player.Lives = 2

    assert from_method == [3, 2]
    assert from_event == [3, 2]
    assert len(player._LivesChanged) == 2  # pylint: disable=protected-access


def test_instances_do_not_share_events() -> None:
    """Private events are created per instance."""
    module = load_merged_fixture("game_models")
    first, second = module.Player(), module.Player()
    values: list[int] = []

    first.SubscribeToScore(lambda sender, value: values.append(value))
    second.Score = 9

    assert values == [0]
    assert isinstance(module.Player.__dict__["_ScoreChanged"], EventField)


def test_hand_written_hook_wins() -> None:
    """A hand-written hook replaces the generated one; others stay generated."""
    module = load_merged_fixture("game_models")

    assert not is_partial_hook(module.Player.__dict__["OnScoreChange"])
    assert is_partial_hook(module.Player.__dict__["OnNameChange"])
    assert is_partial_hook(module.Player.__dict__["OnLivesChange"])


def test_unmarked_fields_get_no_companions() -> None:
    """Only marked fields gain members."""
    module = load_merged_fixture("game_models")

    assert not hasattr(module.Player, "Title")
    assert not hasattr(module.Player, "SubscribeToTitle")


def test_static_field_members_are_class_level() -> None:
    """Static fields are observed through the class without any instance."""
    module = load_merged_fixture("game_models")
    scoreboard = module.Scoreboard
    values: list[int] = []
    events: list[int] = []

    subscription = scoreboard.SubscribeToHighScore(values.append)
    scoreboard.HighScoreChanged += events.append
    scoreboard.HighScore = 0
    scoreboard.HighScore = 10
    subscription.dispose()
    scoreboard.HighScore = 12

    assert scoreboard.HighScore == 12
    assert scoreboard.history == [10, 12]
    assert values == [0, 10]
    assert events == [0, 10, 12]
    assert scoreboard.__name__ == "Scoreboard"
    assert scoreboard.__doc__ == "Process-wide high score."


def test_static_members_reach_module_subclasses() -> None:
    """Subclasses declared beside the class see and share its static members."""
    module = load_merged_fixture("game_models")
    league = module.LeagueScoreboard
    values: list[int] = []

    assert issubclass(league, module.Scoreboard)
    assert league.HighScore == 0

    league.SubscribeToHighScore(values.append)
    league.HighScore = 7
    module.Scoreboard.HighScore = 9

    assert module.Scoreboard.HighScore == 9
    assert league.HighScore == 9
    assert values == [0, 7, 9]
    assert module.Scoreboard.history == [7, 9]
    assert league.leader() == 9
    assert league.__name__ == "LeagueScoreboard"
    assert league.__doc__ == "Scoreboard of one league."


def test_slotted_dataclass_instances_hold_events() -> None:
    """Instances of slotted classes get per-instance events after merging."""
    module = load_merged_fixture("game_models")
    first, second = module.Position(), module.Position(_X=4)
    values: list[int] = []

    first.SubscribeToX(lambda sender, value: values.append(value))
    first.X = 2
    second.X = 5

    assert values == [0, 2]
    assert first.X == 2
    assert second.X == 5
    assert isinstance(first._XChanged, Event)  # pylint: disable=protected-access
    assert module.Position.__name__ == "Position"
    assert module.Position.__doc__ == "A slotted position on the board."


def test_event_field_rejects_instances_without_dict() -> None:
    """Slotted instances created from the unmerged class fail with a clear error."""

    class Slotted:
        __slots__ = ("_value",)

        changed = EventField()

    with pytest.raises(TypeError, match="no __dict__"):
        Slotted().changed.add(print)


def test_nested_and_generic_classes_merge() -> None:
    """Classes nested in other classes and generic classes are completed in place."""
    module = load_merged_fixture("nested_scopes")
    widget = module.Outer.Middle.Widget()
    generic = module.Widget()
    sizes: list[int] = []
    payloads: list[object] = []

    widget.SizeChanged += lambda sender, value: sizes.append(value)
    widget.Size = 4
    generic.SubscribeToPayload(lambda sender, value: payloads.append(value))
    generic.Payload = 8

    assert sizes == [1, 4]
    assert payloads == [None, 8]
    assert generic.Color == "red"


def test_mutable_values_compare_by_equality() -> None:
    """Equal but distinct values do not notify."""
    module = load_merged_source(
        "from typing import Annotated\n"
        "from field_subscriptions_generator.markers import DisposableSubscription\n"
        "\n"
        "class Basket:\n"
        "    _Items: Annotated[list[str], DisposableSubscription] = []\n"
    )
    basket = module.Basket()
    changes: list[list[str]] = []

    basket.SubscribeToItems(lambda sender, value: changes.append(value))
    basket.Items = []
    basket.Items = ["apple"]

    assert changes == [[], ["apple"]]


def test_merge_partial_without_static_members_returns_target() -> None:
    """Fragments without class-level descriptors merge in place."""

    class Target:
        def OnValueChange(self, new_value: int) -> None:
            pass

    class Fragment:
        @partial_hook
        def OnValueChange(self, new_value: int) -> None:
            pass

        @partial_hook
        def OnOtherChange(self, new_value: int) -> None:
            pass

    hand_written = Target.__dict__["OnValueChange"]

    assert merge_partial(Target, Fragment) is Target
    assert Target.__dict__["OnValueChange"] is hand_written
    assert is_partial_hook(Target.__dict__["OnOtherChange"])


def test_merge_partial_moves_static_descriptors_to_metaclass() -> None:
    """Class-level properties live on a metaclass derived from the target's."""

    class Target:
        _Value = 1

    class Fragment:
        @static_property
        def Value(cls) -> int:
            return cls._Value

    merged = merge_partial(Target, Fragment)

    assert merged is not Target
    assert issubclass(merged, Target)
    assert merged.Value == 1
    assert "Value" not in Target.__dict__


def test_merge_partial_derives_slotted_targets() -> None:
    """Slotted targets are replaced by a subclass whose instances have a dict."""

    class Target:
        __slots__ = ("_Value",)

    class Fragment:
        _ValueChanged = EventField()

    merged = merge_partial(Target, Fragment)

    assert merged is not Target
    assert isinstance(merged()._ValueChanged, Event)  # pylint: disable=protected-access


def test_apply_unit_rejects_unknown_class() -> None:
    """Units naming a class the module lacks cannot be merged."""
    module = types.ModuleType("empty_module")
    unit = OutputUnit(
        identifier="MissingGen0",
        namespace="empty_module",
        type_path=("Missing",),
        text="class Missing:\n    pass\n",
        member_names=(),
    )

    with pytest.raises(PartialMergeError):
        apply_unit(module, unit)
