"""Parsed source modules and the marked-class query used by the generator."""

from __future__ import annotations

import ast
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .markers import MARKER_NAMES
from .model_types import TypeDeclaration
from .selector import field_markers


class CompilationError(RuntimeError):
    """Raised when source modules cannot be read or parsed."""


@dataclass(frozen=True)
class SourceModule:
    """A parsed Python module."""

    name: str
    tree: ast.Module
    path: Optional[Path] = None

    @property
    def imports(self) -> tuple[ast.stmt, ...]:
        """Module-level import statements in source order."""
        return tuple(
            statement
            for statement in self.tree.body
            if isinstance(statement, (ast.Import, ast.ImportFrom))
        )


class Compilation:
    """A batch of parsed modules handed to the generator."""

    def __init__(self, modules: Iterable[SourceModule]) -> None:
        self._modules = tuple(modules)

    @property
    def modules(self) -> tuple[SourceModule, ...]:
        return self._modules

    @classmethod
    def from_sources(cls, sources: Mapping[str, str]) -> Compilation:
        """Parse in-memory sources keyed by dotted module name."""
        return cls(_parse_module(name, text, path=None) for name, text in sources.items())

    @classmethod
    def from_paths(cls, paths: Iterable[Path], *, root: Optional[Path] = None) -> Compilation:
        """Read and parse source files.

        Args:
            paths (Iterable[Path]): Python source files.
            root (Optional[Path]): Import root used to derive dotted module
                names. Without it the file stem is the module name.

        Returns:
            Compilation: Parsed modules in the given order.
        """
        modules: list[SourceModule] = []
        for path in paths:
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as exc:
                raise CompilationError(f"Failed to read source file {path}: {exc}") from exc
            modules.append(_parse_module(module_name_for_path(path, root=root), text, path=path))
        return cls(modules)

    def classes_by_field_markers(
        self,
        marker_names: Iterable[str] = MARKER_NAMES,
    ) -> list[TypeDeclaration]:
        """Return every class declaring at least one marked field directly."""
        names = tuple(marker_names)
        declarations: list[TypeDeclaration] = []
        for module in self._modules:
            imports = module.imports
            for node, enclosing in _iter_classes(module.tree.body, ()):
                if any(field_markers(statement, names) for statement in node.body):
                    declarations.append(
                        TypeDeclaration(
                            node=node,
                            namespace=module.name,
                            enclosing=enclosing,
                            imports=imports,
                        )
                    )
        return declarations


def module_name_for_path(path: Path, *, root: Optional[Path] = None) -> str:
    """Derive a dotted module name for a source file."""
    if root is None:
        return path.stem
    try:
        relative = path.resolve().relative_to(root.resolve())
    except ValueError as exc:
        raise CompilationError(f"Source file {path} is outside of root {root}") from exc
    parts = list(relative.with_suffix("").parts)
    if parts and parts[-1] == "__init__":
        parts.pop()
    if not parts:
        raise CompilationError(f"Cannot derive a module name for {path}")
    return ".".join(parts)


def _parse_module(name: str, text: str, *, path: Optional[Path]) -> SourceModule:
    filename = str(path) if path is not None else f"<{name}>"
    try:
        tree = ast.parse(text, filename=filename)
    except SyntaxError as exc:
        raise CompilationError(f"Failed to parse {filename}: {exc}") from exc
    return SourceModule(name=name, tree=tree, path=path)


def _iter_classes(
    body: list[ast.stmt],
    enclosing: tuple[ast.ClassDef, ...],
) -> Iterator[tuple[ast.ClassDef, tuple[ast.ClassDef, ...]]]:
    for statement in body:
        if not isinstance(statement, ast.ClassDef):
            continue
        yield statement, enclosing
        yield from _iter_classes(statement.body, (*enclosing, statement))
