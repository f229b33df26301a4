"""``thisgen generate-client`` -- emit a typed API client from the project."""

from __future__ import annotations

from pathlib import Path

import yaml

from ..client import SUPPORTED_LANGUAGES, emit
from ..config import Config
from ..errors import ThisgenError
from ..introspect import introspect_project
from ..utils import (
    display_path,
    print_file_created,
    print_info,
    print_step,
    print_success,
    print_warning,
)
from ..writer import FileWriter, writer_for


def generate_client(
    root: str | Path,
    output: str | Path | None = None,
    lang: str = "typescript",
    *,
    dry_run: bool = False,
    writer: FileWriter | None = None,
) -> Path:
    """Introspect the project at *root* and write its client.

    Introspection issues are printed as warnings; the affected entities or
    links are simply absent from the client.

    Args:
        root: API project root.
        output: Output file.  Defaults to ``Config.client_output_path``.
        lang: Client language; only ``typescript`` is supported.

    Returns:
        The path the client was written to.

    Raises:
        ThisgenError: Unsupported language, or no entity could be read.
    """
    if lang not in SUPPORTED_LANGUAGES:
        raise ThisgenError(
            f"Unsupported language: '{lang}'. Supported: {', '.join(SUPPORTED_LANGUAGES)}"
        )

    config = Config.for_root(root, dry_run=dry_run)
    writer = writer or writer_for(config.dry_run)
    if writer.is_dry_run():
        print_step("Dry run -- no files will be written")

    print_step("Introspecting project entities and links...")
    try:
        result = introspect_project(config)
    except (ValueError, yaml.YAMLError) as exc:
        raise ThisgenError(f"{display_path(config.links_path, config.api_root)}: {exc}") from exc

    for issue in result.issues:
        print_warning(issue.render())

    model = result.model
    if not model.entities:
        raise ThisgenError(
            f"No entities found in {display_path(config.entities_path, config.api_root)}. "
            "Add entities with `thisgen add-entity <name>` first."
        )
    print_info(f"Found {len(model.entities)} entities, {len(model.relations)} links")

    print_step("Generating TypeScript API client...")
    content = emit(model)

    output_path = Path(output) if output is not None else config.client_output_path
    writer.create_dir_all(output_path.parent)
    writer.write_file(output_path, content)
    print_file_created(display_path(output_path, config.api_root))

    print_success(
        f"Generated API client: {output_path} "
        f"({len(model.entities)} entities, {len(model.relations)} links)"
    )
    return output_path
