"""TypeScript API client emitter.

Renders a ``ProjectModel`` into one self-contained TypeScript module that only
depends on ``fetch``:

- a shared ``request`` helper and ``ApiError`` class,
- per entity (alphabetical): the full record, create-input and update-input
  interfaces, then list/get/create/update/delete functions,
- per relation (declaration order): one traversal function on
  ``/<source-plural>/{id}/<forward>``.

The output is a pure function of the model.  Golden tests compare it
byte-for-byte, so the section order is part of the contract.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from ..introspect.models import EntityRecord, FieldDescriptor, FieldType, ProjectModel, RelationRecord
from ..utils import pluralize, to_pascal_case


# ---------------------------------------------------------------------------
# Type mapping
# ---------------------------------------------------------------------------

TYPESCRIPT_TYPE_MAP: Mapping[FieldType, str] = MappingProxyType({
    FieldType.STRING: "string",
    FieldType.I32: "number",
    FieldType.I64: "number",
    FieldType.U32: "number",
    FieldType.U64: "number",
    FieldType.F32: "number",
    FieldType.F64: "number",
    FieldType.BOOL: "boolean",
    FieldType.UUID: "string",
})

# Fields every record carries, emitted ahead of the declared ones.
_BASE_RECORD_FIELDS: tuple[str, ...] = (
    "id: string;",
    "entity_type: string;",
    "created_at: string;",
    "updated_at: string;",
    "deleted_at?: string;",
    "status: string;",
)

_SECTION_RULE = "// " + "-" * 75

_PRELUDE: tuple[str, ...] = (
    "// Auto-generated by thisgen. Do not edit by hand.",
    "// Regenerate with `thisgen generate-client`.",
    "",
    "export interface ClientOptions {",
    "  baseUrl: string;",
    "  headers?: Record<string, string>;",
    "}",
    "",
    "export class ApiError extends Error {",
    "  constructor(",
    "    public readonly status: number,",
    "    public readonly body: string,",
    "  ) {",
    "    super(`Request failed with status ${status}`);",
    "    this.name = 'ApiError';",
    "  }",
    "}",
    "",
    "async function request<T>(",
    "  options: ClientOptions,",
    "  method: string,",
    "  path: string,",
    "  body?: unknown,",
    "): Promise<T> {",
    "  const response = await fetch(`${options.baseUrl}${path}`, {",
    "    method,",
    "    headers: { 'Content-Type': 'application/json', ...options.headers },",
    "    body: body === undefined ? undefined : JSON.stringify(body),",
    "  });",
    "  if (!response.ok) {",
    "    throw new ApiError(response.status, await response.text());",
    "  }",
    "  if (response.status === 204) {",
    "    return undefined as T;",
    "  }",
    "  return (await response.json()) as T;",
    "}",
)


def _check_total(type_map: Mapping[FieldType, str]) -> None:
    missing = [field_type.value for field_type in FieldType if field_type not in type_map]
    if missing:
        raise ValueError(f"type map has no entry for: {', '.join(missing)}")


# ---------------------------------------------------------------------------
# Emission helpers
# ---------------------------------------------------------------------------

def _section(title: str) -> list[str]:
    return ["", _SECTION_RULE, f"// {title}", _SECTION_RULE]


def _property(field: FieldDescriptor, type_map: Mapping[FieldType, str], *, force_optional: bool) -> str:
    marker = "?" if field.optional or force_optional else ""
    return f"  {field.name}{marker}: {type_map[field.type]};"


def _interface(name: str, members: list[str]) -> list[str]:
    return ["", f"export interface {name} {{", *members, "}"]


def _id_path(plural: str, suffix: str = "") -> str:
    return f"`/{plural}/${{encodeURIComponent(id)}}{suffix}`"


def _operation(doc: str, signature: str, call: str) -> list[str]:
    return [
        "",
        f"/** {doc} */",
        f"export function {signature} {{",
        f"  return {call};",
        "}",
    ]


def _emit_entity(entity: EntityRecord, type_map: Mapping[FieldType, str]) -> list[str]:
    pascal = entity.pascal_name
    plural = entity.plural
    create_input = f"Create{pascal}Input"
    update_input = f"Update{pascal}Input"

    lines = _section(pascal)
    lines += _interface(pascal, [
        *(f"  {member}" for member in _BASE_RECORD_FIELDS),
        *(_property(field, type_map, force_optional=False) for field in entity.fields),
    ])
    lines += _interface(create_input, [
        _property(field, type_map, force_optional=False) for field in entity.fields
    ])
    lines += _interface(update_input, [
        _property(field, type_map, force_optional=True) for field in entity.fields
    ])

    lines += _operation(
        f"GET /{plural}",
        f"list{to_pascal_case(plural)}(options: ClientOptions): Promise<{pascal}[]>",
        f"request<{pascal}[]>(options, 'GET', '/{plural}')",
    )
    lines += _operation(
        f"GET /{plural}/{{id}}",
        f"get{pascal}(options: ClientOptions, id: string): Promise<{pascal}>",
        f"request<{pascal}>(options, 'GET', {_id_path(plural)})",
    )
    lines += _operation(
        f"POST /{plural}",
        f"create{pascal}(options: ClientOptions, input: {create_input}): Promise<{pascal}>",
        f"request<{pascal}>(options, 'POST', '/{plural}', input)",
    )
    lines += _operation(
        f"PUT /{plural}/{{id}}",
        f"update{pascal}(options: ClientOptions, id: string, input: {update_input}): Promise<{pascal}>",
        f"request<{pascal}>(options, 'PUT', {_id_path(plural)}, input)",
    )
    lines += _operation(
        f"DELETE /{plural}/{{id}}",
        f"delete{pascal}(options: ClientOptions, id: string): Promise<void>",
        f"request<void>(options, 'DELETE', {_id_path(plural)})",
    )
    return lines


def _crud_names(entity: EntityRecord) -> set[str]:
    pascal = entity.pascal_name
    return {
        f"list{to_pascal_case(entity.plural)}",
        f"get{pascal}",
        f"create{pascal}",
        f"update{pascal}",
        f"delete{pascal}",
    }


def _traversal_name(relation: RelationRecord, taken: set[str]) -> str:
    name = f"list{to_pascal_case(relation.source)}{to_pascal_case(relation.forward)}"
    if name not in taken:
        return name
    name += f"Via{to_pascal_case(relation.link_type)}"
    candidate, counter = name, 2
    while candidate in taken:
        candidate = f"{name}{counter}"
        counter += 1
    return candidate


def _emit_relation(relation: RelationRecord, model: ProjectModel, name: str) -> list[str]:
    source = model.entity(relation.source)
    target = model.entity(relation.target)
    source_plural = source.plural if source else pluralize(relation.source)
    item_type = target.pascal_name if target else "unknown"

    return _operation(
        f"GET /{source_plural}/{{id}}/{relation.forward} ({relation.link_type})",
        f"{name}(options: ClientOptions, id: string): Promise<{item_type}[]>",
        f"request<{item_type}[]>(options, 'GET', {_id_path(source_plural, '/' + relation.forward)})",
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def emit(model: ProjectModel, type_map: Mapping[FieldType, str] = TYPESCRIPT_TYPE_MAP) -> str:
    """Render *model* as TypeScript client source.

    Args:
        model: Introspected project model.
        type_map: Field type token -> TypeScript type.  Must cover every
            ``FieldType``.

    Returns:
        The complete client module text, ending with a newline.

    Raises:
        ValueError: *type_map* is missing an entry.
    """
    _check_total(type_map)

    lines: list[str] = list(_PRELUDE)
    taken: set[str] = set()
    for entity in model.entities:
        lines += _emit_entity(entity, type_map)
        taken |= _crud_names(entity)

    if model.relations:
        lines += _section("Links")
        for relation in model.relations:
            name = _traversal_name(relation, taken)
            taken.add(name)
            lines += _emit_relation(relation, model, name)

    return "\n".join(lines) + "\n"
