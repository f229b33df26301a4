"""thisgen project introspection.

Rebuilds a structural model of a ``this`` API project from its generated
source: entity macros, entity descriptors and the ``links.yaml`` relationship
document.

Usage::

    from thisgen.config import Config
    from thisgen.introspect import introspect_project

    result = introspect_project(Config(api_root=Path("api")))
    print(result.model.entities)
    print(result.issues)
"""

from thisgen.introspect.builder import (
    build_project_model,
    find_unresolved_endpoints,
    introspect_project,
)
from thisgen.introspect.entities import introspect_entities, introspect_entity
from thisgen.introspect.extractor import parse_definition, parse_descriptor
from thisgen.introspect.models import (
    EntityRecord,
    FieldDescriptor,
    FieldType,
    IntrospectionResult,
    Issue,
    IssueKind,
    ProjectModel,
    RelationRecord,
    RouteRecord,
)
from thisgen.introspect.relations import extract_relations, load_relation_document

__all__ = [
    "EntityRecord",
    "FieldDescriptor",
    "FieldType",
    "IntrospectionResult",
    "Issue",
    "IssueKind",
    "ProjectModel",
    "RelationRecord",
    "RouteRecord",
    "build_project_model",
    "extract_relations",
    "find_unresolved_endpoints",
    "introspect_entities",
    "introspect_entity",
    "introspect_project",
    "load_relation_document",
    "parse_definition",
    "parse_descriptor",
]
