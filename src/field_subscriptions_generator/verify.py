"""Verification that generated units merge into their source modules."""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from dataclasses import dataclass
from types import ModuleType

from .compilation import SourceModule
from .model_types import OutputUnit
from .module_loading import load_module_from_path
from .partial import apply_unit


@dataclass(frozen=True)
class VerificationMismatch:
    """One verification mismatch."""

    identifier: str
    qualified_name: str
    member_name: str
    detail: str


@dataclass(frozen=True)
class VerificationReport:
    """Result of the verification phase."""

    verified_count: int
    mismatch_count: int
    mismatches: tuple[VerificationMismatch, ...]


def verify_units(
    *,
    units: Sequence[OutputUnit],
    modules: Sequence[SourceModule],
) -> VerificationReport:
    """Load each source module, merge its units and check the companions exist.

    Args:
        units (Sequence[OutputUnit]): Units produced by one generation run.
        modules (Sequence[SourceModule]): Source modules the units were generated from.

    Returns:
        VerificationReport: Count of verified units and every mismatch found.
    """
    mismatches: list[VerificationMismatch] = []
    modules_by_name = {module.name: module for module in modules}
    loaded: dict[str, ModuleType] = {}

    for unit in units:
        source = modules_by_name.get(unit.namespace)
        if source is None or source.path is None:
            mismatches.append(_to_mismatch(unit, "", "source module is not available on disk"))
            continue

        live_module = loaded.get(unit.namespace)
        if live_module is None:
            try:
                live_module = load_module_from_path(
                    module_name=f"verified_{next(_COUNTER)}_{unit.namespace.replace('.', '_')}",
                    module_path=source.path,
                )
            except Exception as exc:  # pylint: disable=broad-exception-caught
                mismatches.append(_to_mismatch(unit, "", f"source module failed to load: {exc!r}"))
                continue
            loaded[unit.namespace] = live_module

        try:
            merged = apply_unit(live_module, unit)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            mismatches.append(_to_mismatch(unit, "", f"merge failed: {exc}"))
            continue

        for member_name in unit.member_names:
            if not _has_member(merged, member_name):
                mismatches.append(_to_mismatch(unit, member_name, "member missing after merge"))

    return VerificationReport(
        verified_count=len(units),
        mismatch_count=len(mismatches),
        mismatches=tuple(mismatches),
    )


def format_report(report: VerificationReport) -> str:
    """Render report as CLI output text."""
    lines = [
        f"Verified units: {report.verified_count}",
        f"Mismatches: {report.mismatch_count}",
    ]
    for mismatch in report.mismatches:
        target = mismatch.qualified_name
        if mismatch.member_name:
            target = f"{target}.{mismatch.member_name}"
        lines.extend(
            [
                f"- {mismatch.identifier}: {target}",
                f"  detail: {mismatch.detail}",
            ]
        )
    return "\n".join(lines)


def _has_member(merged: type, member_name: str) -> bool:
    # Class-level companions live on the metaclass of the merged class.
    return any(member_name in vars(owner) for owner in (*merged.__mro__, *type(merged).__mro__))


def _to_mismatch(unit: OutputUnit, member_name: str, detail: str) -> VerificationMismatch:
    return VerificationMismatch(
        identifier=unit.identifier,
        qualified_name=unit.qualified_name,
        member_name=member_name,
        detail=detail,
    )


_COUNTER = itertools.count(1)
