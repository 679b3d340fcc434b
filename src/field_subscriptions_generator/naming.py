"""Naming helpers deriving companion member identifiers from field names."""

from __future__ import annotations

import keyword
import string

from pydantic import BaseModel, ConfigDict, field_validator

from .model_types import DerivedNames

_TEMPLATE_PLACEHOLDERS: frozenset[str] = frozenset({"field", "property"})


class NamingConvention(BaseModel):
    """Prefix and template rules mapping a field name to its companions."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    prefixes: tuple[str, ...] = ("m_", "_")
    private_event: str = "{field}Changed"
    public_event: str = "{property}Changed"
    subscription_method: str = "SubscribeTo{property}"
    partial_hook: str = "On{property}Change"

    @field_validator("prefixes")
    @classmethod
    def _check_prefixes(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if any(not prefix for prefix in value):
            raise ValueError("prefixes must be non-empty strings")
        return value

    @field_validator("private_event", "public_event", "subscription_method", "partial_hook")
    @classmethod
    def _check_template(cls, value: str) -> str:
        names = {
            field_name
            for _, field_name, _, _ in string.Formatter().parse(value)
            if field_name is not None
        }
        unknown = names - _TEMPLATE_PLACEHOLDERS
        if unknown:
            raise ValueError(f"unknown template placeholders: {', '.join(sorted(unknown))}")
        if not names:
            raise ValueError("template must reference {field} or {property}")
        return value


PASCAL_CONVENTION = NamingConvention()
PYTHON_CONVENTION = NamingConvention(
    private_event="{field}_changed",
    public_event="{property}_changed",
    subscription_method="subscribe_to_{property}",
    partial_hook="on_{property}_change",
)

NAMING_PRESETS: dict[str, NamingConvention] = {
    "python": PYTHON_CONVENTION,
    "pascal": PASCAL_CONVENTION,
}


def strip_conventional_prefix(field_name: str, prefixes: tuple[str, ...]) -> str:
    """Remove the first matching private-field prefix.

    Names without a recognized prefix, or made only of one, come back unchanged.
    """
    for prefix in prefixes:
        if field_name.startswith(prefix) and len(field_name) > len(prefix):
            return field_name[len(prefix) :]
    return field_name


def has_conventional_prefix(field_name: str, prefixes: tuple[str, ...]) -> bool:
    """Return whether stripping changes the field name."""
    return strip_conventional_prefix(field_name, prefixes) != field_name


def derive_names(
    field_name: str,
    convention: NamingConvention = PASCAL_CONVENTION,
) -> DerivedNames:
    """Derive every companion identifier for one field."""
    property_name = strip_conventional_prefix(field_name, convention.prefixes)

    def _apply(template: str) -> str:
        return template.format(field=field_name, property=property_name)

    return DerivedNames(
        field_name=field_name,
        property_name=property_name,
        private_event_name=_apply(convention.private_event),
        public_event_name=_apply(convention.public_event),
        subscription_method_name=_apply(convention.subscription_method),
        partial_hook_name=_apply(convention.partial_hook),
    )


def is_valid_member_name(name: str) -> bool:
    """Return whether ``name`` can be declared as a class member."""
    return name.isidentifier() and not keyword.iskeyword(name)
