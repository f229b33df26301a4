"""The marker catalog: every anchor thisgen is allowed to extend.

One immutable table keyed by ``(FileRole, logical name)``.  Each entry names
the literal anchor token searched for in the file and the line rendered for a
new entity.  Line and needle templates take ``{snake}``, ``{pascal}`` and
``{plural}`` placeholders.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict


class FileRole(str, Enum):
    """Generated files that carry anchors."""
    MODULE = "module"
    STORES = "stores"


class EntityNames(BaseModel):
    """The three spellings of an entity name used in generated code."""
    model_config = ConfigDict(frozen=True)

    snake: str
    pascal: str
    plural: str


class Marker(BaseModel):
    """One named insertion point inside one generated file."""
    model_config = ConfigDict(frozen=True)

    role: FileRole
    name: str
    token: str
    line: str
    needle: str
    description: str = ""

    @property
    def comment(self) -> str:
        """The anchor as it appears in generated source."""
        return f"// {self.token}"

    def render_line(self, names: EntityNames) -> str:
        return self.line.format(**names.model_dump())

    def render_needle(self, names: EntityNames) -> str:
        return self.needle.format(**names.model_dump())


# Import added to each role's file alongside its anchored lines.
FILE_ROLE_IMPORTS: Mapping[FileRole, str] = MappingProxyType({
    FileRole.STORES: "use crate::entities::{snake}::{{{pascal}Store, InMemory{pascal}Store}};",
})


def _marker(role: FileRole, name: str, line: str, needle: str, description: str) -> Marker:
    return Marker(
        role=role,
        name=name,
        token=f"[this:{name}]",
        line=line,
        needle=needle,
        description=description,
    )


_MARKERS: tuple[Marker, ...] = (
    _marker(
        FileRole.MODULE,
        "entity_types",
        '"{snake}",',
        '"{snake}"',
        "entity_types(): list of registered entity type names",
    ),
    _marker(
        FileRole.MODULE,
        "register_entities",
        "registry.register(Box::new({pascal}Descriptor::new(self.stores.{plural}_store.clone())));",
        "{pascal}Descriptor::",
        "register_entities(): descriptor registration",
    ),
    _marker(
        FileRole.MODULE,
        "entity_fetchers",
        '"{snake}" => Some(Arc::new(self.stores.{plural}_store.clone())),',
        '"{snake}" =>',
        "get_entity_fetcher(): match arm",
    ),
    _marker(
        FileRole.MODULE,
        "entity_creators",
        '"{snake}" => Some(Arc::new(self.stores.{plural}_store.clone())),',
        '"{snake}" =>',
        "get_entity_creator(): match arm",
    ),
    _marker(
        FileRole.STORES,
        "store_fields",
        "pub {plural}_store: Arc<dyn {pascal}Store>,",
        "{plural}_store:",
        "struct fields: one store per entity",
    ),
    _marker(
        FileRole.STORES,
        "store_init_vars",
        "let {plural} = Arc::new(InMemory{pascal}Store::default());",
        "let {plural} =",
        "new_in_memory(): store construction",
    ),
    _marker(
        FileRole.STORES,
        "store_init_fields",
        "{plural}_store: {plural}.clone(),",
        "{plural}_store:",
        "new_in_memory(): struct initialiser",
    ),
)

MARKER_CATALOG: Mapping[tuple[FileRole, str], Marker] = MappingProxyType(
    {(marker.role, marker.name): marker for marker in _MARKERS}
)


def markers_for(role: FileRole) -> list[Marker]:
    """Return the markers of one file role in catalog order."""
    return [marker for marker in MARKER_CATALOG.values() if marker.role is role]


def lookup_marker(role: FileRole, name: str) -> Marker:
    """Return one marker.

    Raises:
        KeyError: If no marker is registered under ``(role, name)``.
    """
    return MARKER_CATALOG[(role, name)]
