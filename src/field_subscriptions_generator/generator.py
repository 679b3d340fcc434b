"""High-level generator orchestration."""

from __future__ import annotations

import itertools
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .assembler import assemble_unit
from .compilation import Compilation, CompilationError
from .config import ConfigLoadError, GeneratorConfig, load_config
from .hierarchy import rebuild_type
from .logging import get_logger
from .markers import MARKER_NAMES
from .model_types import (
    AnnotatedField,
    DerivedNames,
    GeneratedMember,
    GenerationResult,
    OutputUnit,
    TypeDeclaration,
)
from .naming import (
    PASCAL_CONVENTION,
    NamingConvention,
    derive_names,
    has_conventional_prefix,
    is_valid_member_name,
)
from .selector import select_fields
from .synthesizer import synthesize_members
from .verify import VerificationReport, verify_units
from .writer import WriteError, create_output_layout, format_generated_tree, write_units

_LOGGER = get_logger("generator")


@dataclass(frozen=True)
class GenerationRun:
    """Generation result with optional verification report."""

    result: GenerationResult
    verification_report: Optional[VerificationReport]


class FieldSubscriptionsGenerator:
    """Generate companion members for every class with marked fields."""

    def __init__(
        self,
        convention: NamingConvention = PASCAL_CONVENTION,
        marker_names: Iterable[str] = MARKER_NAMES,
    ) -> None:
        self._convention = convention
        self._marker_names = tuple(marker_names)

    def execute(self, compilation: Compilation) -> GenerationResult:
        """Run one generation pass over a compilation.

        Output identifiers are numbered by a counter owned by this pass, so
        every call starts again from zero.

        Args:
            compilation (Compilation): Parsed source modules.

        Returns:
            GenerationResult: One unit per marked class plus naming warnings.
        """
        counter = itertools.count()
        units: list[OutputUnit] = []
        warnings: list[str] = []
        for declaration in compilation.classes_by_field_markers(self._marker_names):
            unit, unit_warnings = self.generate_type(declaration, next(counter))
            units.append(unit)
            warnings.extend(unit_warnings)
        _LOGGER.info("Generated %d unit(s) with %d warning(s)", len(units), len(warnings))
        return GenerationResult(units=tuple(units), warnings=tuple(warnings))

    def generate_type(
        self,
        declaration: TypeDeclaration,
        counter: int,
    ) -> tuple[OutputUnit, list[str]]:
        """Generate the output unit for one class declaration."""
        fields = select_fields(declaration, self._marker_names)
        members: list[GeneratedMember] = []
        named_fields: list[tuple[AnnotatedField, DerivedNames]] = []
        for field in fields:
            names = derive_names(field.name, self._convention)
            named_fields.append((field, names))
            members.extend(synthesize_members(field, names))
            _LOGGER.debug(
                "%s.%s -> %s (%s, static=%s)",
                declaration.qualified_name,
                field.name,
                names.property_name,
                field.companions.value,
                field.is_static,
            )

        rebuilt = rebuild_type(declaration, members)
        unit = assemble_unit(declaration.imports, rebuilt, counter)
        _LOGGER.debug("Assembled %s for %s", unit.identifier, declaration.qualified_name)
        warnings = _naming_warnings(declaration, named_fields, members, self._convention)
        return unit, warnings


def run_generation(
    *,
    input_paths: Sequence[Path],
    output_dir: Path,
    verify: bool = False,
    config_path: Optional[Path] = None,
    source_root: Optional[Path] = None,
) -> GenerationRun:
    """Generate companion modules for source files and write them to disk.

    Args:
        input_paths (Sequence[Path]): Python source files to scan.
        output_dir (Path): Directory where generated files are written.
        verify (bool): Whether to merge the units into the loaded sources afterwards.
        config_path (Optional[Path]): Optional YAML configuration file.
        source_root (Optional[Path]): Import root for deriving module names.

    Returns:
        GenerationRun: Generation metadata and optional verification report.
    """
    config = load_config(config_path) if config_path is not None else GeneratorConfig()
    compilation = Compilation.from_paths(input_paths, root=source_root)
    generator = FieldSubscriptionsGenerator(convention=config.convention())
    generated = generator.execute(compilation)

    create_output_layout(output_dir)
    write_units(output_dir=output_dir, units=generated.units)
    format_generated_tree(output_dir=output_dir)

    result = GenerationResult(
        units=generated.units,
        warnings=generated.warnings,
        output_dir=str(output_dir),
    )

    if not verify:
        return GenerationRun(result=result, verification_report=None)

    report = verify_units(units=result.units, modules=compilation.modules)
    return GenerationRun(result=result, verification_report=report)


def _naming_warnings(
    declaration: TypeDeclaration,
    named_fields: list[tuple[AnnotatedField, DerivedNames]],
    members: list[GeneratedMember],
    convention: NamingConvention,
) -> list[str]:
    warnings: list[str] = []
    for field, names in named_fields:
        if not has_conventional_prefix(field.name, convention.prefixes):
            warnings.append(
                f"{declaration.qualified_name}.{field.name} has no conventional prefix; "
                f"property {names.property_name} shadows the field"
            )

    invalid = sorted({member.name for member in members if not is_valid_member_name(member.name)})
    if invalid:
        warnings.append(
            f"{declaration.qualified_name} derives invalid member names: {', '.join(invalid)}"
        )

    counts = Counter(member.name for member in members)
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if duplicates:
        warnings.append(
            f"{declaration.qualified_name} derives duplicate member names: {', '.join(duplicates)}"
        )
    return warnings


__all__ = [
    "CompilationError",
    "ConfigLoadError",
    "FieldSubscriptionsGenerator",
    "GenerationRun",
    "WriteError",
    "run_generation",
]
