"""``thisgen doctor`` -- check that a project is coherent.

Runs introspection and then cross-checks its result against the anchored
files: every entity should be declared in ``entities/mod.rs`` and registered
under each anchor of ``module.rs`` and ``stores.rs``, and every link should
connect two known entities.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from ..config import Config
from ..errors import LegacyFileError
from ..introspect import find_unresolved_endpoints, introspect_project
from ..introspect.models import IssueKind, ProjectModel
from ..markers import EntityNames, FileRole, locate_anchor, markers_for, registration_status
from ..utils import console, display_path, print_step, print_summary_table


class DiagnosticLevel(str, Enum):
    PASS = "pass"
    WARN = "warn"
    ERROR = "error"


_LEVEL_STYLE = {
    DiagnosticLevel.PASS: "[green]ok[/green]  ",
    DiagnosticLevel.WARN: "[yellow]warn[/yellow]",
    DiagnosticLevel.ERROR: "[red]err[/red] ",
}


class Diagnostic(BaseModel):
    level: DiagnosticLevel
    category: str
    message: str


class DoctorReport(BaseModel):
    """All diagnostics of one ``doctor`` run, in check order."""

    diagnostics: list[Diagnostic] = Field(default_factory=list)

    def add(self, level: DiagnosticLevel, category: str, message: str) -> None:
        self.diagnostics.append(Diagnostic(level=level, category=category, message=message))

    def count(self, level: DiagnosticLevel) -> int:
        return sum(1 for diagnostic in self.diagnostics if diagnostic.level == level)

    @property
    def has_errors(self) -> bool:
        return self.count(DiagnosticLevel.ERROR) > 0


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def _check_registration(
    report: DoctorReport,
    config: Config,
    model: ProjectModel,
    role: FileRole,
    path: Path,
) -> None:
    category = role.value.capitalize()
    shown = display_path(path, config.api_root)
    if not path.exists():
        report.add(DiagnosticLevel.WARN, category, f"{shown} not found")
        return

    text = path.read_text(encoding="utf-8")
    try:
        for marker in markers_for(role):
            locate_anchor(text, marker.token)
    except LegacyFileError as exc:
        report.add(DiagnosticLevel.WARN, category, f"{shown} is a legacy file: {exc}")
        return

    if not model.entities:
        report.add(DiagnosticLevel.PASS, category, "No entities to register")
        return

    for entity in model.entities:
        names = EntityNames(snake=entity.name, pascal=entity.pascal_name, plural=entity.plural)
        status = registration_status(text, role, names)
        missing = [name for name, present in status.items() if not present]
        if missing:
            report.add(
                DiagnosticLevel.WARN,
                category,
                f"'{entity.name}' is not registered under: {', '.join(missing)}",
            )
        else:
            report.add(DiagnosticLevel.PASS, category, f"'{entity.name}' registered in {shown}")


def _check_module_index(report: DoctorReport, config: Config, model: ProjectModel) -> None:
    path = config.entities_mod_path
    declared: set[str] = set()
    if path.exists():
        declared = {line.strip() for line in path.read_text(encoding="utf-8").splitlines()}
    for entity in model.entities:
        if f"pub mod {entity.name};" not in declared:
            report.add(
                DiagnosticLevel.WARN,
                "Entities",
                f"'{entity.name}' is not declared in {display_path(path, config.api_root)}",
            )


def run_checks(config: Config) -> DoctorReport:
    """Run every check against the project described by *config*."""
    report = DoctorReport()

    try:
        result = introspect_project(config)
    except (ValueError, yaml.YAMLError) as exc:
        report.add(
            DiagnosticLevel.ERROR,
            "Links",
            f"{display_path(config.links_path, config.api_root)} is invalid: {exc}",
        )
        return report

    for issue in result.issues:
        level = (
            DiagnosticLevel.WARN
            if issue.kind == IssueKind.MISSING_RELATION_ENDPOINT
            else DiagnosticLevel.ERROR
        )
        report.add(level, "Introspection", issue.render())

    model = result.model
    report.add(
        DiagnosticLevel.PASS,
        "Entities",
        f"{len(model.entities)} entities introspected",
    )
    _check_module_index(report, config, model)
    _check_registration(report, config, model, FileRole.MODULE, config.module_path)
    _check_registration(report, config, model, FileRole.STORES, config.stores_path)

    unresolved = find_unresolved_endpoints(model)
    for problem in unresolved:
        report.add(DiagnosticLevel.WARN, "Links", problem)
    if not unresolved:
        report.add(
            DiagnosticLevel.PASS,
            "Links",
            f"{len(model.relations)} links, all endpoints known",
        )
    return report


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


def doctor(root: str | Path) -> DoctorReport:
    """Diagnose the project at *root* and print the findings."""
    config = Config.for_root(root)
    print_step(f"Checking project at {config.api_root}")

    report = run_checks(config)
    for diagnostic in report.diagnostics:
        console.print(
            f"  {_LEVEL_STYLE[diagnostic.level]} [bold]{diagnostic.category}[/bold]: ",
            end="",
        )
        console.print(diagnostic.message, markup=False, highlight=False)

    print_summary_table(
        {
            "Passed": str(report.count(DiagnosticLevel.PASS)),
            "Warnings": str(report.count(DiagnosticLevel.WARN)),
            "Errors": str(report.count(DiagnosticLevel.ERROR)),
        },
        title="Doctor",
    )
    return report
