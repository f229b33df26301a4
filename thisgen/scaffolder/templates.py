"""Jinja2 rendering of the Rust project skeleton and per-entity files.

Templates live in ``thisgen/scaffolder/templates/``: ``project/`` holds the
anchored files written by ``thisgen init`` and ``entity/`` the files written by
``thisgen add-entity``.  Output always goes through a ``FileWriter`` so dry runs
render without touching disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from ..utils import pluralize, to_camel_case, to_pascal_case, to_snake_case
from ..writer import FileWriter


_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Jinja2 environment plus the naming filters the Rust templates use.

    Undefined variables raise, so a template never emits an empty identifier.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["pascal_case"] = to_pascal_case
        self.env.filters["snake_case"] = to_snake_case
        self.env.filters["camel_case"] = to_camel_case
        self.env.filters["pluralize"] = pluralize

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render *template_path* (relative to the template root, e.g.
        ``"entity/model.rs.j2"``) with *context*."""
        template = self.env.get_template(template_path)
        return template.render(**context)

    # -- File-based rendering ----------------------------------------------

    def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
        writer: FileWriter,
    ) -> Path:
        """Render a template and hand the result to *writer*.

        Returns the output path.
        """
        content = self.render(template_path, context)
        out = Path(output_path)
        writer.write_file(out, content)
        return out

    def render_tree(
        self,
        template_prefix: str,
        output_dir: str | Path,
        context: dict[str, Any],
        writer: FileWriter,
        *,
        renames: dict[str, str] | None = None,
    ) -> list[Path]:
        """Render every ``*.j2`` file under *template_prefix* to *output_dir*.

        The directory structure is preserved and the ``.j2`` suffix dropped.

        Args:
            template_prefix: Subdirectory inside the template root to scan.
            output_dir: Target directory where rendered files are written.
            context: Template context variables.
            writer: Destination for the rendered files.
            renames: Optional map of template-relative path -> output-relative
                path.  A value of ``""`` skips the template.

        Returns:
            List of written file paths.
        """
        renames = renames or {}
        prefix_path = self.template_dir / template_prefix
        if not prefix_path.is_dir():
            return []

        written: list[Path] = []
        out_base = Path(output_dir)

        for template_file in sorted(prefix_path.rglob("*.j2")):
            rel_str = template_file.relative_to(prefix_path).as_posix()
            output_name = renames.get(rel_str, rel_str[: -len(".j2")])
            if not output_name:
                continue

            template_key = f"{template_prefix}/{rel_str}"
            written.append(
                self.render_to_file(template_key, out_base / output_name, context, writer)
            )

        return written
