"""Register a new entity in the anchored project files.

For one file role, every catalog marker of that role is applied to the file's
buffer in catalog order.  A file missing any of its anchors is treated as a
legacy file: nothing is changed and the caller gets the manual instructions
instead, so a file is never left half-registered.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..errors import LegacyFileError
from .anchors import add_import, has_line_after_anchor, insert_line, locate_anchor
from .catalog import FILE_ROLE_IMPORTS, EntityNames, FileRole, markers_for


class FileRegistration(BaseModel):
    """Outcome of registering one entity in one file."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    role: FileRole
    text: str = Field(..., description="Resulting buffer (unchanged for legacy files)")
    inserted: list[str] = Field(default_factory=list, description="Markers that received a line")
    already_present: list[str] = Field(default_factory=list)
    import_added: bool = False
    legacy: LegacyFileError | None = Field(
        default=None, description="Set when the file lacks one of its anchors"
    )
    manual_instructions: list[str] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.inserted) or self.import_added


def manual_instructions(role: FileRole, names: EntityNames) -> list[str]:
    """Lines a user must add by hand to a legacy file of *role*."""
    instructions: list[str] = []
    template = FILE_ROLE_IMPORTS.get(role)
    if template:
        instructions.append(f"Add the import: {template.format(**names.model_dump())}")
    for marker in markers_for(role):
        instructions.append(f"{marker.description}: {marker.render_line(names)}")
    return instructions


def register_entity(text: str, role: FileRole, names: EntityNames) -> FileRegistration:
    """Apply every marker of *role* to *text* for the entity *names*.

    The returned ``text`` equals the input when the entity was already
    registered everywhere or when the file is legacy.
    """
    markers = markers_for(role)

    # Check every anchor up front so a legacy file is never partially written.
    for marker in markers:
        try:
            locate_anchor(text, marker.token)
        except LegacyFileError as exc:
            return FileRegistration(
                role=role,
                text=text,
                legacy=exc,
                manual_instructions=manual_instructions(role, names),
            )

    result = FileRegistration(role=role, text=text)
    buffer = text
    for marker in markers:
        outcome = insert_line(
            buffer,
            marker.token,
            marker.render_line(names),
            needle=marker.render_needle(names),
        )
        buffer = outcome.text
        if outcome.inserted:
            result.inserted.append(marker.name)
        else:
            result.already_present.append(marker.name)

    template = FILE_ROLE_IMPORTS.get(role)
    if template:
        outcome = add_import(buffer, template.format(**names.model_dump()))
        buffer = outcome.text
        result.import_added = outcome.inserted

    result.text = buffer
    return result


def registration_status(text: str, role: FileRole, names: EntityNames) -> dict[str, bool]:
    """Report, per marker of *role*, whether *names* is already registered."""
    return {
        marker.name: has_line_after_anchor(text, marker.token, marker.render_needle(names))
        for marker in markers_for(role)
    }
