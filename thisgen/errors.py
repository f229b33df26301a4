"""Error taxonomy for thisgen.

Every error raised by the core derives from ``ThisgenError`` so the CLI can
turn it into a red message and a non-zero exit code.  The four named failure
kinds also exist as ``IssueKind`` values in ``thisgen.introspect.models`` for
the non-fatal reporting path, where a failure is recorded and the scan goes on.
"""

from __future__ import annotations


class ThisgenError(Exception):
    """Base class for all thisgen errors."""


class StructuralMismatchError(ThisgenError):
    """Source text does not match the one supported macro/descriptor shape.

    Attributes:
        path: File the text came from (may be empty for in-memory text).
        line: 1-based line of the offending token.
        column: 1-based column of the offending token.
        hint: Diff-style hint with ``- expected`` / ``+ found`` lines.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str = "",
        line: int = 0,
        column: int = 0,
        hint: str = "",
    ) -> None:
        self.path = path
        self.line = line
        self.column = column
        self.hint = hint
        location = f"{path}:{line}:{column}" if path else f"line {line}, column {column}"
        super().__init__(f"{location}: {message}")


class UnsupportedTypeError(ThisgenError):
    """One or more fields declare a type outside the supported set.

    ``fields`` holds ``(field_name, declared_type)`` pairs, one per offending
    field, so each can be reported individually.
    """

    def __init__(self, fields: list[tuple[str, str]], *, path: str = "") -> None:
        self.fields = fields
        self.path = path
        listing = ", ".join(f"{name}: {declared}" for name, declared in fields)
        prefix = f"{path}: " if path else ""
        super().__init__(f"{prefix}unsupported field type(s): {listing}")


class LegacyFileError(ThisgenError):
    """A required anchor is absent from a generated file."""

    def __init__(self, anchor: str, *, path: str = "") -> None:
        self.anchor = anchor
        self.path = path
        where = f" in {path}" if path else ""
        super().__init__(f"Anchor '{anchor}' not found{where}")


class MissingRelationEndpointError(ThisgenError):
    """A relation entry lacks its ``source`` or ``target``."""

    def __init__(self, index: int, missing: list[str]) -> None:
        self.index = index
        self.missing = missing
        super().__init__(
            f"Link entry #{index} is missing required key(s): {', '.join(missing)}"
        )
