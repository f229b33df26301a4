"""File-write abstraction shared by all commands.

``FileWriter`` writes to disk; ``DryRunWriter`` records what would have been
written and prints it instead.  Commands only ever go through one of these, so
``--dry-run`` never touches the filesystem.
"""

from __future__ import annotations

from pathlib import Path

from .utils import console


class FileWriter:
    """Writes files for real."""

    def is_dry_run(self) -> bool:
        return False

    def create_dir_all(self, path: Path) -> None:
        """Create a directory (and parents) if it does not exist."""
        Path(path).mkdir(parents=True, exist_ok=True)

    def write_file(self, path: Path, content: str) -> None:
        """Write *content* to *path*, creating parent directories."""
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(content, encoding="utf-8")

    def read_text(self, path: Path) -> str:
        """Return the current content of *path*."""
        return Path(path).read_text(encoding="utf-8")

    def exists(self, path: Path) -> bool:
        return Path(path).exists()


class DryRunWriter(FileWriter):
    """Records writes without touching disk.

    ``written`` maps each path to the content that would have been written,
    so callers can inspect the outcome of a dry run.  Reads see pending
    content first, so a multi-step command behaves the same as a real run.
    """

    def __init__(self) -> None:
        self.written: dict[Path, str] = {}
        self.created_dirs: list[Path] = []

    def is_dry_run(self) -> bool:
        return True

    def create_dir_all(self, path: Path) -> None:
        self.created_dirs.append(Path(path))
        console.print(f"  [dim]would create directory {path}[/dim]")

    def write_file(self, path: Path, content: str) -> None:
        self.written[Path(path)] = content
        line_count = content.count("\n")
        console.print(f"  [dim]would write {path} ({line_count} lines)[/dim]")

    def read_text(self, path: Path) -> str:
        pending = self.written.get(Path(path))
        if pending is not None:
            return pending
        return Path(path).read_text(encoding="utf-8")

    def exists(self, path: Path) -> bool:
        return Path(path) in self.written or Path(path).exists()


def writer_for(dry_run: bool) -> FileWriter:
    """Return the writer matching the ``--dry-run`` setting."""
    return DryRunWriter() if dry_run else FileWriter()
