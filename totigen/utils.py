"""Shared utilities for totigen.

Console output helpers built on Rich, logging setup, definition-file loading
and the project-root lookup used by the command-line entry point.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.table import Table

console = Console()

PROJECT_ROOT_MARKERS: tuple[str, ...] = ("package.json", "src", ".env.example")


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def configure_logging(verbose: bool = False) -> None:
    """Route stdlib logging through Rich.  Safe to call more than once."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


# ---------------------------------------------------------------------------
# Definition files
# ---------------------------------------------------------------------------


def load_definition(path: str | Path) -> dict[str, Any]:
    """Load a collection definition from a JSON or YAML file.

    A top-level list is treated as the collection list with no options.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file does not hold a mapping or a list.
    """
    file_path = Path(path)
    raw = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(raw)
    else:
        data = json.loads(raw)

    if isinstance(data, list):
        return {"collections": data, "options": {}}
    if not isinstance(data, dict):
        raise ValueError(f"{file_path}: expected a mapping or a list, got {type(data).__name__}")
    data.setdefault("collections", [])
    data.setdefault("options", {})
    return data


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def is_project_root(path: Path) -> bool:
    return all((path / marker).exists() for marker in PROJECT_ROOT_MARKERS) and (
        path / "src"
    ).is_dir()


def find_project_root(start: Optional[str | Path] = None) -> Optional[Path]:
    """Walk up from *start* (default: cwd) to the first project root.

    A project root holds ``package.json``, a ``src/`` directory and
    ``.env.example``.  Returns ``None`` when no ancestor qualifies.
    """
    current = Path(start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if is_project_root(candidate):
            return candidate
    return None


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(0.42)   -> "0.42s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.00s"
    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.2f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_stage_header(name: str) -> None:
    """Print a full-width rule naming a pipeline stage."""
    console.print(Rule(f"[bold bright_cyan] {name} [/bold bright_cyan]", style="bright_cyan"))


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message (taken literally, never as markup)."""
    console.print(message, style="bold red", markup=False)


def print_warning(message: str) -> None:
    """Print a yellow warning message (taken literally, never as markup)."""
    console.print(message, style="bold yellow", markup=False)
