"""thisgen commands.  Each one is a plain function the CLI dispatches to."""

from thisgen.commands.add_entity import (
    EntityAddition,
    FieldSpec,
    add_entity,
    entity_names,
    parse_field_spec,
    parse_indexed,
)
from thisgen.commands.add_link import add_link
from thisgen.commands.doctor import Diagnostic, DiagnosticLevel, DoctorReport, doctor, run_checks
from thisgen.commands.generate import generate_client
from thisgen.commands.info import EntitySummary, ProjectInfo, collect_info, info
from thisgen.commands.init import init_project

__all__ = [
    "Diagnostic",
    "DiagnosticLevel",
    "DoctorReport",
    "EntityAddition",
    "EntitySummary",
    "FieldSpec",
    "ProjectInfo",
    "add_entity",
    "add_link",
    "collect_info",
    "doctor",
    "entity_names",
    "generate_client",
    "info",
    "init_project",
    "parse_field_spec",
    "parse_indexed",
    "run_checks",
]
