"""Shared utility functions for thisgen.

Provides naming helpers (snake/pascal/camel case, English pluralisation),
YAML I/O for the relationship document, and Rich-based console reporting.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Naming helpers
# ---------------------------------------------------------------------------

_SEPARATORS = re.compile(r"[-_\s]+")


def to_snake_case(name: str) -> str:
    """Convert an arbitrary name to ``snake_case``.

    Examples::

        to_snake_case("ProductCategory")  -> "product_category"
        to_snake_case("product-category") -> "product_category"
        to_snake_case("HTMLParser")       -> "html_parser"
        to_snake_case("myAPI")            -> "my_api"
    """
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name.strip())
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return _SEPARATORS.sub("_", s2).strip("_").lower()


def to_pascal_case(name: str) -> str:
    """Convert ``some_thing`` or ``some-thing`` to ``SomeThing``.

    Only the first character of each part is upper-cased, so ``stockItem``
    stays ``StockItem`` rather than collapsing to ``Stockitem``.
    """
    return "".join(part[0].upper() + part[1:] for part in _SEPARATORS.split(name) if part)


def to_camel_case(name: str) -> str:
    """Convert ``some_thing`` to ``someThing``."""
    pascal = to_pascal_case(name)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""


def pluralize(word: str) -> str:
    """Basic English pluralisation.

    Examples::

        pluralize("product")  -> "products"
        pluralize("category") -> "categories"
        pluralize("status")   -> "statuses"
        pluralize("key")      -> "keys"
        pluralize("products") -> "products"
    """
    if not word:
        return word
    # Already plural.
    if word.endswith("s") and not word.endswith(("ss", "us")):
        return word
    if word.endswith("y") and len(word) > 1 and word[-2] not in "aeiou":
        return word[:-1] + "ies"
    if word.endswith(("s", "x", "z", "sh", "ch")):
        return word + "es"
    return word + "s"


# ---------------------------------------------------------------------------
# YAML I/O
# ---------------------------------------------------------------------------


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML mapping from disk.

    Returns an empty dict when the file does not exist or is empty.

    Raises:
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If the top-level value is not a mapping.
    """
    file_path = Path(path)
    if not file_path.exists():
        return {}
    data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a YAML mapping at the top of {file_path}")
    return data


def dump_yaml(data: dict[str, Any]) -> str:
    """Serialise *data* to block-style YAML, preserving key order."""
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_step(message: str) -> None:
    """Print a bold cyan step heading."""
    console.print(f"[bold cyan]==>[/bold cyan] [bold]{escape(message)}[/bold]")


def print_info(message: str) -> None:
    """Print a dimmed informational line."""
    console.print(f"  [dim]{escape(message)}[/dim]")


def print_file_created(path: str) -> None:
    """Report a written file."""
    console.print(f"  [green]+[/green] {escape(path)}")


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")


def print_next_steps(lines: list[str]) -> None:
    """Print a block of follow-up instructions for the user."""
    console.print()
    for line in lines:
        console.print(f"  {line}", markup=False, highlight=False)
    console.print()


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


def display_path(path: str | Path, root: str | Path) -> str:
    """Return *path* relative to *root* when possible, for user-facing output."""
    try:
        return Path(path).relative_to(root).as_posix()
    except ValueError:
        return str(path)
