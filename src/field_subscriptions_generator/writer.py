"""Filesystem writers for generated units."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
import subprocess
import sys

from .model_types import OutputUnit

_GENERATED_TARGET_VERSION = "py312"
_GENERATED_RUFF_IGNORE_CODES: tuple[str, ...] = (
    "E501",
    "F401",
    "F811",
    "F821",
)


class WriteError(RuntimeError):
    """Raised when output files cannot be written."""


def create_output_layout(output_dir: Path) -> Path:
    """Create the output directory.

    Args:
        output_dir (Path): Root output directory to create.

    Returns:
        Path: The created directory.
    """
    if output_dir.exists():
        raise WriteError(f"Output directory already exists: {output_dir}")
    try:
        output_dir.mkdir(parents=True, exist_ok=False)
    except OSError as exc:
        raise WriteError(f"Failed to create output directory {output_dir}: {exc}") from exc
    return output_dir


def write_units(*, output_dir: Path, units: Sequence[OutputUnit]) -> list[Path]:
    """Write one module per generated unit.

    Args:
        output_dir (Path): Directory receiving the generated modules.
        units (Sequence[OutputUnit]): Units to write.

    Returns:
        list[Path]: Written file paths in unit order.
    """
    written: list[Path] = []
    for unit in units:
        path = output_dir / unit.file_name
        _write_file(path, unit.text)
        written.append(path)
    return written


def format_generated_tree(*, output_dir: Path) -> None:
    """Run Ruff formatter and auto-fixes against generated files.

    Args:
        output_dir (Path): Generated modules directory to format.
    """
    format_args = ("format", "--target-version", _GENERATED_TARGET_VERSION, str(output_dir))
    _run_ruff(output_dir=output_dir, args=format_args)
    _run_ruff(
        output_dir=output_dir,
        args=(
            "check",
            "--fix",
            "--target-version",
            _GENERATED_TARGET_VERSION,
            "--ignore",
            ",".join(_GENERATED_RUFF_IGNORE_CODES),
            str(output_dir),
        ),
    )
    _run_ruff(output_dir=output_dir, args=format_args)


def _run_ruff(*, output_dir: Path, args: tuple[str, ...]) -> None:
    command = [sys.executable, "-m", "ruff", *args]
    command_desc = " ".join(args)
    try:
        subprocess.run(
            command,
            check=True,
            capture_output=True,
            text=True,
        )
    except OSError as exc:
        raise WriteError(f"Failed to execute ruff {command_desc} for {output_dir}: {exc}") from exc
    except subprocess.CalledProcessError as exc:
        error_text = exc.stderr.strip() or exc.stdout.strip() or str(exc)
        raise WriteError(f"ruff {command_desc} failed for {output_dir}: {error_text}") from exc


def _write_file(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise WriteError(f"Failed to write file {path}: {exc}") from exc
