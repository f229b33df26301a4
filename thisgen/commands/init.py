"""``thisgen init`` -- render the anchored project skeleton."""

from __future__ import annotations

from pathlib import Path

from ..config import Config
from ..errors import ThisgenError
from ..scaffolder import TemplateRenderer
from ..utils import (
    display_path,
    print_file_created,
    print_next_steps,
    print_step,
    print_success,
    to_pascal_case,
    to_snake_case,
)
from ..writer import FileWriter, writer_for

# Template -> Config attribute holding the output path.
PROJECT_FILES: tuple[tuple[str, str], ...] = (
    ("project/module.rs.j2", "module_path"),
    ("project/stores.rs.j2", "stores_path"),
    ("project/entities_mod.rs.j2", "entities_mod_path"),
    ("project/links.yaml.j2", "links_path"),
)


def init_project(
    root: str | Path,
    name: str | None = None,
    *,
    dry_run: bool = False,
    writer: FileWriter | None = None,
) -> list[Path]:
    """Create the anchored skeleton of a new API project under *root*.

    Args:
        root: API project root; created when missing.
        name: Project name.  Defaults to the root directory name.
        dry_run: Print the files instead of writing them.
        writer: Explicit writer, mainly for tests.

    Returns:
        The paths written, in render order.

    Raises:
        ThisgenError: The root already holds a ``module.rs`` or ``stores.rs``.
    """
    config = Config.for_root(root, dry_run=dry_run)
    writer = writer or writer_for(config.dry_run)
    project_name = to_snake_case(name or Path(root).resolve().name)

    for existing in (config.module_path, config.stores_path):
        if writer.exists(existing):
            raise ThisgenError(
                f"{display_path(existing, config.api_root)} already exists; "
                "refusing to overwrite an initialised project"
            )

    print_step(f"Creating project skeleton: {project_name}")
    writer.create_dir_all(config.entities_path)
    writer.create_dir_all(config.links_path.parent)

    context = {
        "project_name": project_name,
        "project_pascal": to_pascal_case(project_name),
    }
    renderer = TemplateRenderer()
    written: list[Path] = []
    for template, attribute in PROJECT_FILES:
        target = getattr(config, attribute)
        written.append(renderer.render_to_file(template, target, context, writer))
        print_file_created(display_path(target, config.api_root))

    saved = config.save(writer=writer)
    written.append(saved)
    print_file_created(display_path(saved, config.api_root))

    print_success(f"Project '{project_name}' initialised!")
    print_next_steps([
        "Add an entity:  thisgen add-entity product --fields \"name:String,price:f64\"",
        "Link entities:  thisgen add-link order product",
        "Build a client: thisgen generate-client",
    ])
    return written
