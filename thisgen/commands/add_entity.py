"""``thisgen add-entity`` -- scaffold an entity and register it.

The command renders the entity files, appends the module declaration to
``entities/mod.rs`` and registers the entity under every anchor of
``module.rs`` and ``stores.rs``.  Every step is idempotent, so re-running it
for the same entity leaves the project unchanged.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, Field

from ..config import Config
from ..errors import ThisgenError
from ..introspect.extractor import parse_definition
from ..introspect.models import OPTION_WRAPPER, EntityRecord, FieldType
from ..markers import (
    EntityNames,
    FileRegistration,
    FileRole,
    append_module_declaration,
    manual_instructions,
    register_entity,
)
from ..scaffolder import TemplateRenderer
from ..utils import (
    display_path,
    pluralize,
    print_file_created,
    print_info,
    print_next_steps,
    print_step,
    print_success,
    print_warning,
    to_pascal_case,
    to_snake_case,
)
from ..writer import FileWriter, writer_for

SUPPORTED_FIELD_TYPES: tuple[str, ...] = tuple(field_type.value for field_type in FieldType)

_ENTITY_NAME = re.compile(r"^[a-z][a-z0-9_]*$")


class FieldSpec(BaseModel):
    """One ``name:Type`` pair from ``--fields``."""

    name: str
    rust_type: str = Field(..., description="Declared type, e.g. 'Option<String>'")
    is_optional: bool = False


class EntityAddition(BaseModel):
    """What ``add_entity`` did."""

    entity: EntityRecord
    files: list[Path] = Field(default_factory=list, description="Entity files rendered")
    registrations: list[FileRegistration] = Field(default_factory=list)
    module_declared: bool = False


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def parse_field_spec(spec: str | None) -> list[FieldSpec]:
    """Parse ``"sku:String,price:f64,note:Option<String>"`` into field specs.

    Raises:
        ThisgenError: A pair is not ``name:Type`` or names an unsupported type.
    """
    fields: list[FieldSpec] = []
    if not spec:
        return fields

    for pair in spec.split(","):
        pair = pair.strip()
        if not pair:
            continue
        name, sep, rust_type = pair.partition(":")
        name, rust_type = name.strip(), rust_type.strip()
        if not sep or not name or not rust_type:
            raise ThisgenError(
                f"Invalid field format: '{pair}'. Expected 'name:Type' (e.g. 'sku:String')"
            )

        base_type = rust_type
        is_optional = False
        prefix = f"{OPTION_WRAPPER}<"
        if rust_type.startswith(prefix) and rust_type.endswith(">"):
            base_type = rust_type[len(prefix):-1].strip()
            is_optional = True

        if base_type not in SUPPORTED_FIELD_TYPES:
            raise ThisgenError(
                f"Unsupported field type: '{base_type}'. "
                f"Supported types: {', '.join(SUPPORTED_FIELD_TYPES)}"
            )
        fields.append(FieldSpec(name=name, rust_type=rust_type, is_optional=is_optional))

    return fields


def parse_indexed(spec: str | None) -> list[str]:
    """Split the comma-separated ``--indexed`` value."""
    if not spec:
        return []
    return [item.strip() for item in spec.split(",") if item.strip()]


def entity_names(name: str) -> EntityNames:
    """Derive the snake, Pascal and plural spellings of *name*.

    Raises:
        ThisgenError: *name* does not yield a valid snake_case identifier.
    """
    snake = to_snake_case(name)
    if not _ENTITY_NAME.match(snake):
        raise ThisgenError(
            f"Invalid entity name '{name}': expected a snake_case identifier such as 'product'"
        )
    return EntityNames(snake=snake, pascal=to_pascal_case(snake), plural=pluralize(snake))


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


def _register(
    config: Config,
    writer: FileWriter,
    names: EntityNames,
) -> list[FileRegistration]:
    registrations: list[FileRegistration] = []
    for role, path in ((FileRole.MODULE, config.module_path), (FileRole.STORES, config.stores_path)):
        shown = display_path(path, config.api_root)
        if not writer.exists(path):
            print_warning(f"{shown} not found; register '{names.snake}' by hand:")
            print_next_steps(manual_instructions(role, names))
            continue

        registration = register_entity(writer.read_text(path), role, names)
        registrations.append(registration)
        if registration.legacy is not None:
            print_warning(f"{shown}: {registration.legacy}. Register '{names.snake}' by hand:")
            print_next_steps(registration.manual_instructions)
        elif registration.changed:
            writer.write_file(path, registration.text)
            print_info(f"Registered '{names.snake}' in {shown} ({', '.join(registration.inserted)})")
        else:
            print_info(f"'{names.snake}' already registered in {shown}")
    return registrations


def add_entity(
    root: str | Path,
    name: str,
    fields: str | None = None,
    indexed: str | None = "name",
    validated: bool = False,
    *,
    dry_run: bool = False,
    writer: FileWriter | None = None,
) -> EntityAddition:
    """Scaffold entity *name* under *root* and register it.

    Args:
        root: API project root.
        name: Entity name in any casing; normalised to snake_case.
        fields: ``name:Type`` pairs, comma-separated.
        indexed: Comma-separated indexed field names.
        validated: Render the validated definition macro.
        dry_run: Print the changes instead of writing them.
        writer: Explicit writer, mainly for tests.

    Raises:
        ThisgenError: Bad arguments, or the written definition cannot be read
            back (``StructuralMismatchError``/``UnsupportedTypeError``).
    """
    config = Config.for_root(root, dry_run=dry_run)
    writer = writer or writer_for(config.dry_run)
    names = entity_names(name)
    field_specs = parse_field_spec(fields)

    print_step(f"Adding entity '{names.snake}'")

    entity_dir = config.entities_path / names.snake
    model_path = entity_dir / "model.rs"
    files: list[Path] = []
    if writer.exists(model_path):
        print_warning(
            f"{display_path(entity_dir, config.api_root)} already exists; keeping its files"
        )
    else:
        writer.create_dir_all(entity_dir)
        context = {
            "entity_name": names.snake,
            "entity_pascal": names.pascal,
            "entity_plural": names.plural,
            "fields": [spec.model_dump() for spec in field_specs],
            "indexed_fields": parse_indexed(indexed),
        }
        if validated:
            renames = {"model.rs.j2": "", "model_validated.rs.j2": "model.rs"}
        else:
            renames = {"model_validated.rs.j2": ""}
        files = TemplateRenderer().render_tree("entity", entity_dir, context, writer, renames=renames)
        for path in files:
            print_file_created(display_path(path, config.api_root))

    # Read the definition back so a broken model.rs fails here rather than
    # later in generate-client.
    entity = parse_definition(writer.read_text(model_path), str(model_path))

    mod_path = config.entities_mod_path
    current = writer.read_text(mod_path) if writer.exists(mod_path) else ""
    declaration = append_module_declaration(current, f"pub mod {names.snake};")
    if declaration.inserted:
        writer.write_file(mod_path, declaration.text)
        print_info(f"Declared 'pub mod {names.snake};' in {display_path(mod_path, config.api_root)}")

    registrations = _register(config, writer, names)

    print_success(f"Entity '{names.snake}' ready!")
    return EntityAddition(
        entity=entity,
        files=files,
        registrations=registrations,
        module_declared=declaration.inserted,
    )
