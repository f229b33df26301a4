"""Anchor-based mutation of generated Rust source.

Generated files carry single-line comment anchors such as
``// [this:store_fields]``.  New declarations are inserted directly after
their anchor, exactly once, with the anchor's indentation.  Everything here is
a pure function of its input text: callers decide whether and where to write
the result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..errors import LegacyFileError


ANCHOR_PATTERN = re.compile(r"\[this:[a-z0-9_]+\]")

_USE_PREFIX = "use "


@dataclass(frozen=True)
class AnchorSite:
    """A located anchor inside one buffer.  Recomputed on every call."""

    anchor: str
    line_index: int
    indent: str

    @property
    def insert_at(self) -> int:
        """Line index a new line is inserted at (directly after the anchor)."""
        return self.line_index + 1


@dataclass(frozen=True)
class Insertion:
    """Result of an idempotent insertion."""

    text: str
    inserted: bool


# ---------------------------------------------------------------------------
# Line splitting helpers
# ---------------------------------------------------------------------------


def _split(text: str) -> tuple[list[str], str, bool]:
    """Split *text* into lines, returning ``(lines, newline, trailing)``."""
    newline = "\r\n" if "\r\n" in text else "\n"
    trailing = text.endswith(newline)
    body = text[: -len(newline)] if trailing else text
    lines = body.split(newline) if body else []
    return lines, newline, trailing


def _join(lines: list[str], newline: str, trailing: bool) -> str:
    text = newline.join(lines)
    if trailing or not lines:
        text += newline
    return text


def _indent_of(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def _mentions(line: str, needle: str) -> bool:
    """True if *needle* occurs in *line* and does not continue an identifier."""
    return re.search(r"(?<![A-Za-z0-9_])" + re.escape(needle), line) is not None


# ---------------------------------------------------------------------------
# Anchor Locator
# ---------------------------------------------------------------------------


def locate_anchor(text: str, anchor: str) -> AnchorSite:
    """Find the first line whose trimmed content contains *anchor*.

    Raises:
        LegacyFileError: If the anchor does not occur in *text*.
    """
    lines, _, _ = _split(text)
    return _locate(lines, anchor)


def _locate(lines: list[str], anchor: str) -> AnchorSite:
    for index, line in enumerate(lines):
        if anchor in line.strip():
            return AnchorSite(anchor=anchor, line_index=index, indent=_indent_of(line))
    raise LegacyFileError(anchor)


def _window(lines: list[str], site: AnchorSite) -> list[str]:
    """Lines belonging to the anchor's block.

    The block is the run of non-blank lines after the anchor that are indented
    at least as deep as the anchor and are not anchors themselves.
    """
    block: list[str] = []
    for line in lines[site.insert_at:]:
        stripped = line.strip()
        if not stripped or ANCHOR_PATTERN.search(stripped):
            break
        if len(_indent_of(line)) < len(site.indent):
            break
        block.append(line)
    return block


# ---------------------------------------------------------------------------
# Idempotent Line Inserter
# ---------------------------------------------------------------------------


def has_line_after_anchor(text: str, anchor: str, needle: str) -> bool:
    """Return ``True`` if *needle* already appears in the anchor's block.

    A missing anchor counts as "not present".
    """
    lines, _, _ = _split(text)
    try:
        site = _locate(lines, anchor)
    except LegacyFileError:
        return False
    return any(_mentions(line.strip(), needle.strip()) for line in _window(lines, site))


def insert_line(
    text: str,
    anchor: str,
    line: str,
    needle: str | None = None,
) -> Insertion:
    """Insert *line* directly after *anchor*, once.

    Args:
        text: Current buffer.
        anchor: Anchor token, e.g. ``"[this:store_fields]"``.
        line: Line to insert, without indentation.
        needle: Distinguishing substring used for duplicate detection.  It
            must not be preceded by an identifier character.
            Defaults to the stripped *line*.

    Returns:
        ``Insertion(text, inserted)``.  When the needle is already in the
        anchor's block the original *text* comes back with ``inserted=False``.

    Raises:
        LegacyFileError: If the anchor is absent.
    """
    lines, newline, trailing = _split(text)
    site = _locate(lines, anchor)
    key = (needle or line).strip()

    if any(_mentions(existing.strip(), key) for existing in _window(lines, site)):
        return Insertion(text=text, inserted=False)

    updated = list(lines)
    updated.insert(site.insert_at, site.indent + line.strip())
    return Insertion(text=_join(updated, newline, trailing), inserted=True)


# ---------------------------------------------------------------------------
# Import Injector
# ---------------------------------------------------------------------------


def _import_key(statement: str) -> str:
    """Normalise a ``use`` statement to its imported path."""
    body = statement.strip()
    if body.startswith("pub "):
        body = body[len("pub "):]
    if body.startswith(_USE_PREFIX):
        body = body[len(_USE_PREFIX):]
    return re.sub(r"\s+", "", body.rstrip().rstrip(";"))


def _leading_use_run(lines: list[str]) -> tuple[int, list[str]]:
    """Locate the leading run of ``use`` statements.

    Returns ``(index_after_run, statements)`` where ``index_after_run`` is -1
    when the file has no leading run.
    """
    index = 0
    # Skip the preamble: blank lines, line comments, inner attributes.
    while index < len(lines):
        stripped = lines[index].strip()
        if not stripped or stripped.startswith("//") or stripped.startswith("#!["):
            index += 1
            continue
        break

    statements: list[str] = []
    end = -1
    while index < len(lines) and lines[index].lstrip().startswith(_USE_PREFIX):
        start = index
        while not lines[index].rstrip().endswith(";") and index + 1 < len(lines):
            index += 1
        statements.append(" ".join(part.strip() for part in lines[start:index + 1]))
        index += 1
        end = index
    return end, statements


def add_import(text: str, import_line: str) -> Insertion:
    """Add a ``use`` declaration after the leading run of imports, once.

    If the file has no leading ``use`` run the import becomes the first line.
    Duplicates are detected on the imported path, anywhere in the file's
    import statements.
    """
    lines, newline, trailing = _split(text)
    key = _import_key(import_line)

    existing = {
        _import_key(line)
        for line in lines
        if line.lstrip().startswith(_USE_PREFIX) and line.rstrip().endswith(";")
    }
    end, run = _leading_use_run(lines)
    existing.update(_import_key(statement) for statement in run)
    if key in existing:
        return Insertion(text=text, inserted=False)

    updated = list(lines)
    updated.insert(end if end >= 0 else 0, import_line.strip())
    return Insertion(text=_join(updated, newline, trailing or not lines), inserted=True)


def append_module_declaration(text: str, declaration: str) -> Insertion:
    """Append ``pub mod <name>;`` to a module index file, once."""
    lines, newline, _ = _split(text)
    wanted = declaration.strip()
    if any(line.strip() == wanted for line in lines):
        return Insertion(text=text, inserted=False)

    while lines and not lines[-1].strip():
        lines.pop()
    lines.append(wanted)
    return Insertion(text=_join(lines, newline, True), inserted=True)
