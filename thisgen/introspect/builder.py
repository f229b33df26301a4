"""Assemble the project model from entity and relation records."""

from __future__ import annotations

from typing import Iterable

from ..config import Config
from .entities import introspect_entities
from .models import (
    EntityRecord,
    IntrospectionResult,
    ProjectModel,
    RelationRecord,
)
from .relations import extract_relations, load_relation_document


def build_project_model(
    entities: Iterable[EntityRecord],
    relations: Iterable[RelationRecord],
) -> ProjectModel:
    """Merge records into one ordered, de-duplicated ``ProjectModel``.

    Entities are ordered by name; relations keep declaration order.  The
    first occurrence wins for duplicate entity names and for duplicate
    ``(source, target, link_type)`` relations.  Relation endpoints are not
    checked against the entities.
    """
    unique_entities: dict[str, EntityRecord] = {}
    for record in entities:
        unique_entities.setdefault(record.name, record)

    unique_relations: dict[tuple[str, str, str], RelationRecord] = {}
    for relation in relations:
        unique_relations.setdefault(relation.key, relation)

    return ProjectModel(
        entities=tuple(sorted(unique_entities.values(), key=lambda record: record.name)),
        relations=tuple(unique_relations.values()),
    )


def find_unresolved_endpoints(model: ProjectModel) -> list[str]:
    """Describe every relation endpoint that names no known entity."""
    known = set(model.entity_names)
    problems: list[str] = []
    for relation in model.relations:
        for role, name in (("source", relation.source), ("target", relation.target)):
            if name not in known:
                problems.append(
                    f"'{relation.link_type}' references unknown {role} entity '{name}'"
                )
    return problems


def introspect_project(config: Config) -> IntrospectionResult:
    """Introspect the entities and relations of the project described by *config*."""
    entity_scan = introspect_entities(config.entities_path)
    relation_scan = extract_relations(load_relation_document(config.links_path))

    return IntrospectionResult(
        model=build_project_model(entity_scan.entities, relation_scan.relations),
        issues=[*entity_scan.issues, *relation_scan.issues],
    )
