"""AST synthesis of companion members for one marked field."""

from __future__ import annotations

import ast
from copy import deepcopy
from typing import Optional, Union

from .model_types import AnnotatedField, DerivedNames, GeneratedMember, MemberKind

_NEW_VALUE_PARAMETER = "new_value"
_VALUE_PARAMETER = "value"
_HANDLER_PARAMETER = "handler"


def synthesize_members(field: AnnotatedField, names: DerivedNames) -> tuple[GeneratedMember, ...]:
    """Build every companion member requested for a field.

    Args:
        field (AnnotatedField): Marked field to generate companions for.
        names (DerivedNames): Identifiers derived from the field name.

    Returns:
        tuple[GeneratedMember, ...]: Partial hook, private event and property,
        followed by the disposable subscription method and the subscription
        event when their markers are present.
    """
    members = [
        create_partial_hook(names, field.field_type, is_static=field.is_static),
        create_event_field(names, is_static=field.is_static),
        create_property(names, field.field_type, is_static=field.is_static),
    ]
    if field.companions.includes_disposable:
        members.append(
            create_disposable_subscription_method(
                names, field.field_type, is_static=field.is_static
            )
        )
    if field.companions.includes_event:
        members.append(
            create_subscription_event(names, field.field_type, is_static=field.is_static)
        )
    return tuple(members)


def create_event_field(names: DerivedNames, *, is_static: bool) -> GeneratedMember:
    """Declare the private change-notification event."""
    factory = "Event" if is_static else "EventField"
    statement = ast.Assign(
        targets=[ast.Name(id=names.private_event_name, ctx=ast.Store())],
        value=ast.Call(func=_load(factory), args=[], keywords=[]),
    )
    return GeneratedMember(
        kind=MemberKind.EVENT_FIELD,
        name=names.private_event_name,
        statements=(statement,),
    )


def create_partial_hook(
    names: DerivedNames,
    field_type: ast.expr,
    *,
    is_static: bool,
) -> GeneratedMember:
    """Declare the overridable hook called after every value change."""
    decorators: list[ast.expr] = [_load("partial_hook")]
    if is_static:
        decorators.insert(0, _load("classmethod"))
    hook = _function(
        name=names.partial_hook_name,
        receiver=_receiver(is_static),
        parameters=[(_NEW_VALUE_PARAMETER, deepcopy(field_type))],
        body=[ast.Pass()],
        decorators=decorators,
        returns=ast.Constant(value=None),
    )
    return GeneratedMember(
        kind=MemberKind.PARTIAL_HOOK,
        name=names.partial_hook_name,
        statements=(hook,),
    )


def create_property(
    names: DerivedNames,
    field_type: ast.expr,
    *,
    is_static: bool,
) -> GeneratedMember:
    """Declare the public property with its change-gated setter."""
    receiver = _receiver(is_static)
    getter = _function(
        name=names.property_name,
        receiver=receiver,
        parameters=[],
        body=[ast.Return(value=_attribute(receiver, names.field_name))],
        decorators=[_load("static_property" if is_static else "property")],
        returns=deepcopy(field_type),
    )

    change_body: list[ast.stmt] = [
        ast.Assign(
            targets=[_attribute(receiver, names.field_name, store=True)],
            value=_load(_VALUE_PARAMETER),
        ),
        ast.Expr(
            value=_call(
                _attribute(_attribute(receiver, names.private_event_name), "invoke"),
                _handler_arguments(receiver, _load(_VALUE_PARAMETER), is_static=is_static),
            )
        ),
        ast.Expr(
            value=_call(
                _attribute(receiver, names.partial_hook_name),
                [_load(_VALUE_PARAMETER)],
            )
        ),
    ]
    setter = _function(
        name=names.property_name,
        receiver=receiver,
        parameters=[(_VALUE_PARAMETER, deepcopy(field_type))],
        body=[
            ast.If(
                test=ast.Compare(
                    left=_attribute(receiver, names.field_name),
                    ops=[ast.NotEq()],
                    comparators=[_load(_VALUE_PARAMETER)],
                ),
                body=change_body,
                orelse=[],
            )
        ],
        decorators=[_attribute(names.property_name, "setter")],
        returns=ast.Constant(value=None),
    )
    return GeneratedMember(
        kind=MemberKind.PROPERTY,
        name=names.property_name,
        statements=(getter, setter),
    )


def create_subscription_event(
    names: DerivedNames,
    field_type: ast.expr,
    *,
    is_static: bool,
) -> GeneratedMember:
    """Declare the public event that replays the current value to new subscribers."""
    receiver = _receiver(is_static)
    private_event = _attribute(receiver, names.private_event_name)
    adder = _function(
        name=names.public_event_name,
        receiver=receiver,
        parameters=[(_HANDLER_PARAMETER, _handler_type(field_type, is_static=is_static))],
        body=[
            ast.Expr(value=_replay_call(receiver, names, is_static=is_static)),
            ast.Expr(value=_call(_attribute(private_event, "add"), [_load(_HANDLER_PARAMETER)])),
        ],
        decorators=[_load("static_subscription_event" if is_static else "subscription_event")],
        returns=ast.Constant(value=None),
    )
    remover = _function(
        name=names.public_event_name,
        receiver=receiver,
        parameters=[(_HANDLER_PARAMETER, _handler_type(field_type, is_static=is_static))],
        body=[
            ast.Expr(
                value=_call(
                    _attribute(deepcopy(private_event), "remove"),
                    [_load(_HANDLER_PARAMETER)],
                )
            ),
        ],
        decorators=[_attribute(names.public_event_name, "remover")],
        returns=ast.Constant(value=None),
    )
    return GeneratedMember(
        kind=MemberKind.SUBSCRIPTION_EVENT,
        name=names.public_event_name,
        statements=(adder, remover),
    )


def create_disposable_subscription_method(
    names: DerivedNames,
    field_type: ast.expr,
    *,
    is_static: bool,
) -> GeneratedMember:
    """Declare the subscription method returning a disposable guard."""
    receiver = _receiver(is_static)
    remove_handler = ast.Lambda(
        args=_empty_arguments(),
        body=_call(
            _attribute(_attribute(receiver, names.private_event_name), "remove"),
            [_load(_HANDLER_PARAMETER)],
        ),
    )
    body: list[ast.stmt] = [
        ast.Expr(
            value=_call(
                _attribute(_attribute(receiver, names.private_event_name), "add"),
                [_load(_HANDLER_PARAMETER)],
            )
        ),
        ast.Expr(value=_replay_call(receiver, names, is_static=is_static)),
        ast.Return(value=_call(_load("DisposeAction"), [remove_handler])),
    ]
    method = _function(
        name=names.subscription_method_name,
        receiver=receiver,
        parameters=[(_HANDLER_PARAMETER, _handler_type(field_type, is_static=is_static))],
        body=body,
        decorators=[_load("classmethod")] if is_static else [],
        returns=_load("DisposeAction"),
    )
    return GeneratedMember(
        kind=MemberKind.DISPOSABLE_SUBSCRIPTION,
        name=names.subscription_method_name,
        statements=(method,),
    )


def _replay_call(receiver: str, names: DerivedNames, *, is_static: bool) -> ast.Call:
    current_value = _attribute(receiver, names.field_name)
    return _call(
        _load(_HANDLER_PARAMETER),
        _handler_arguments(receiver, current_value, is_static=is_static),
    )


def _handler_arguments(receiver: str, value: ast.expr, *, is_static: bool) -> list[ast.expr]:
    if is_static:
        return [value]
    return [_load(receiver), value]


def _handler_type(field_type: ast.expr, *, is_static: bool) -> ast.expr:
    return ast.Subscript(
        value=_load("Action" if is_static else "EventHandler"),
        slice=deepcopy(field_type),
        ctx=ast.Load(),
    )


def _receiver(is_static: bool) -> str:
    return "cls" if is_static else "self"


def _function(
    *,
    name: str,
    receiver: str,
    parameters: list[tuple[str, Optional[ast.expr]]],
    body: list[ast.stmt],
    decorators: list[ast.expr],
    returns: Optional[ast.expr],
) -> ast.FunctionDef:
    args = [ast.arg(arg=receiver)]
    args.extend(
        ast.arg(arg=param_name, annotation=annotation) for param_name, annotation in parameters
    )
    return ast.FunctionDef(
        name=name,
        args=ast.arguments(
            posonlyargs=[],
            args=args,
            vararg=None,
            kwonlyargs=[],
            kw_defaults=[],
            kwarg=None,
            defaults=[],
        ),
        body=body,
        decorator_list=decorators,
        returns=returns,
        type_params=[],
    )


def _empty_arguments() -> ast.arguments:
    return ast.arguments(
        posonlyargs=[],
        args=[],
        vararg=None,
        kwonlyargs=[],
        kw_defaults=[],
        kwarg=None,
        defaults=[],
    )


def _call(func: ast.expr, args: list[ast.expr]) -> ast.Call:
    return ast.Call(func=func, args=args, keywords=[])


def _attribute(owner: Union[str, ast.expr], attr: str, *, store: bool = False) -> ast.Attribute:
    value = _load(owner) if isinstance(owner, str) else owner
    return ast.Attribute(value=value, attr=attr, ctx=ast.Store() if store else ast.Load())


def _load(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())
