"""Pydantic v2 models for project introspection.

Defines the structural project model rebuilt from generated source: entities
with their fields and routes, relations between entities, and the issues
recorded while scanning.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class FieldType(str, Enum):
    """Supported field type tokens, spelled as they appear in Rust source."""
    STRING = "String"
    I32 = "i32"
    I64 = "i64"
    U32 = "u32"
    U64 = "u64"
    F32 = "f32"
    F64 = "f64"
    BOOL = "bool"
    UUID = "Uuid"


class HTTPMethod(str, Enum):
    """HTTP methods a descriptor can route."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class IssueKind(str, Enum):
    """Classification of non-fatal introspection problems."""
    STRUCTURAL_MISMATCH = "structural_mismatch"
    UNSUPPORTED_TYPE = "unsupported_type"
    LEGACY_FILE = "legacy_file"
    MISSING_RELATION_ENDPOINT = "missing_relation_endpoint"


# Fields generated by the entity macro itself; never part of EntityRecord.fields.
RESERVED_FIELDS: frozenset[str] = frozenset({
    "id",
    "entity_type",
    "created_at",
    "updated_at",
    "deleted_at",
    "status",
})

OPTION_WRAPPER = "Option"


# ---------------------------------------------------------------------------
# Entity models
# ---------------------------------------------------------------------------

class FieldDescriptor(BaseModel):
    """A single declared field of an entity."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Field name (snake_case)")
    type: FieldType = Field(..., description="Base type token")
    optional: bool = Field(default=False, description="Declared as Option<T>")

    @property
    def declared_type(self) -> str:
        """The type as written in source, e.g. ``Option<String>``."""
        if self.optional:
            return f"{OPTION_WRAPPER}<{self.type.value}>"
        return self.type.value


class RouteRecord(BaseModel):
    """A REST route declared in an entity descriptor."""
    model_config = ConfigDict(frozen=True)

    method: HTTPMethod = Field(..., description="HTTP verb")
    path: str = Field(..., description="Path template, e.g. '/products/{id}'")
    description: str = Field(default="", description="Derived from the handler name")


class EntityRecord(BaseModel):
    """Everything known about one entity after introspection."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Lowercase identifier, e.g. 'product'")
    pascal_name: str = Field(..., description="Type name, e.g. 'Product'")
    plural: str = Field(..., description="Plural used in routes, e.g. 'products'")
    fields: tuple[FieldDescriptor, ...] = Field(default_factory=tuple)
    indexed_fields: tuple[str, ...] = Field(default_factory=tuple)
    routes: tuple[RouteRecord, ...] = Field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Relation models
# ---------------------------------------------------------------------------

class RelationRecord(BaseModel):
    """A typed link between two entity types."""
    model_config = ConfigDict(frozen=True)

    source: str = Field(..., description="Source entity name")
    target: str = Field(..., description="Target entity name")
    link_type: str = Field(..., description="e.g. 'has_invoice'")
    forward: str = Field(..., description="Route segment on the source, e.g. 'invoices'")
    reverse: str = Field(..., description="Route segment on the target, e.g. 'order'")

    @property
    def key(self) -> tuple[str, str, str]:
        """Identity used for de-duplication."""
        return (self.source, self.target, self.link_type)


# ---------------------------------------------------------------------------
# Issues
# ---------------------------------------------------------------------------

class Issue(BaseModel):
    """A non-fatal problem found while introspecting."""
    model_config = ConfigDict(frozen=True)

    kind: IssueKind
    subject: str = Field(..., description="Entity name, field or link entry concerned")
    message: str
    path: Optional[str] = Field(default=None, description="File the issue refers to")
    hint: str = Field(default="", description="Diff-style hint for structural mismatches")

    def render(self) -> str:
        """One-line (plus optional hint) human-readable form."""
        where = f" ({self.path})" if self.path else ""
        text = f"[{self.kind.value}] {self.subject}{where}: {self.message}"
        if self.hint:
            text += "\n" + self.hint
        return text


class EntityScan(BaseModel):
    """Result of scanning the entities directory."""
    entities: list[EntityRecord] = Field(default_factory=list)
    issues: list[Issue] = Field(default_factory=list)


class RelationScan(BaseModel):
    """Result of reading the relationship document."""
    relations: list[RelationRecord] = Field(default_factory=list)
    issues: list[Issue] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Project model
# ---------------------------------------------------------------------------

class ProjectModel(BaseModel):
    """Entities (ordered by name) and relations (declaration order)."""
    model_config = ConfigDict(frozen=True)

    entities: tuple[EntityRecord, ...] = Field(default_factory=tuple)
    relations: tuple[RelationRecord, ...] = Field(default_factory=tuple)

    def entity(self, name: str) -> EntityRecord | None:
        """Look an entity up by its lowercase name."""
        for record in self.entities:
            if record.name == name:
                return record
        return None

    @property
    def entity_names(self) -> list[str]:
        return [record.name for record in self.entities]


class IntrospectionResult(BaseModel):
    """Complete result of introspecting one API project."""
    model: ProjectModel
    issues: list[Issue] = Field(default_factory=list)
