"""``thisgen info`` -- summarise a project's entities, links and wiring."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from rich.markup import escape
from rich.table import Table

from ..config import Config
from ..errors import ThisgenError
from ..introspect import find_unresolved_endpoints, introspect_project
from ..introspect.models import IssueKind, ProjectModel
from ..markers import EntityNames, FileRole, registration_status
from ..utils import console, display_path, print_step, print_summary_table


class EntitySummary(BaseModel):
    name: str
    fields: list[str] = Field(default_factory=list)
    routes: int = 0


class ProjectInfo(BaseModel):
    """What ``info`` reports about one project."""

    name: str
    entities: list[EntitySummary] = Field(default_factory=list)
    links: list[str] = Field(default_factory=list, description="'source -> target (link_type)'")
    module_registered: int = 0
    stores_configured: int = 0
    link_issues: list[str] = Field(default_factory=list)

    @property
    def links_valid(self) -> bool:
        return not self.link_issues


def _count_registered(path: Path, role: FileRole, model: ProjectModel) -> int:
    """Entities registered under every anchor of *role*; 0 for a missing file."""
    if not path.exists():
        return 0
    text = path.read_text(encoding="utf-8")
    registered = 0
    for entity in model.entities:
        names = EntityNames(snake=entity.name, pascal=entity.pascal_name, plural=entity.plural)
        if all(registration_status(text, role, names).values()):
            registered += 1
    return registered


def collect_info(config: Config) -> ProjectInfo:
    """Gather the ``info`` summary without printing anything.

    Raises:
        ThisgenError: The relationship document cannot be read.
    """
    try:
        result = introspect_project(config)
    except (ValueError, yaml.YAMLError) as exc:
        raise ThisgenError(f"{display_path(config.links_path, config.api_root)}: {exc}") from exc

    model = result.model
    link_issues = [
        issue.render() for issue in result.issues
        if issue.kind == IssueKind.MISSING_RELATION_ENDPOINT
    ]
    link_issues += find_unresolved_endpoints(model)

    return ProjectInfo(
        name=config.api_root.resolve().name,
        entities=[
            EntitySummary(
                name=entity.name,
                fields=[field.name for field in entity.fields],
                routes=len(entity.routes),
            )
            for entity in model.entities
        ],
        links=[
            f"{relation.source} -> {relation.target} ({relation.link_type})"
            for relation in model.relations
        ],
        module_registered=_count_registered(config.module_path, FileRole.MODULE, model),
        stores_configured=_count_registered(config.stores_path, FileRole.STORES, model),
        link_issues=link_issues,
    )


def info(root: str | Path) -> ProjectInfo:
    """Print a summary of the project at *root*."""
    config = Config.for_root(root)
    print_step(f"Project: {config.api_root}")

    summary = collect_info(config)
    if summary.entities:
        table = Table(title="Entities", show_header=True, header_style="bold cyan")
        table.add_column("Entity", style="bold")
        table.add_column("Fields")
        table.add_column("Routes", justify="right")
        for entity in summary.entities:
            table.add_row(entity.name, ", ".join(entity.fields) or "-", str(entity.routes))
        console.print(table)

    for link in summary.links:
        console.print(f"  {link}", markup=False, highlight=False)
    for issue in summary.link_issues:
        console.print(f"  [yellow]![/yellow] {escape(issue)}", highlight=False)

    total = len(summary.entities)
    print_summary_table(
        {
            "Project": summary.name,
            "Entities": str(total),
            "Links": str(len(summary.links)),
            "Module": f"{summary.module_registered}/{total} entities registered",
            "Stores": f"{summary.stores_configured}/{total} stores configured",
            "Links status": "valid" if summary.links_valid else f"{len(summary.link_issues)} issue(s)",
        },
        title="Info",
    )
    return summary
