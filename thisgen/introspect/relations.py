"""Read relation records from the relationship document (``links.yaml``).

Only the top-level ``links`` list is read.  Each entry becomes one
``RelationRecord``; unknown keys are ignored, and an entry without a source or
target is skipped with an issue while the remaining entries are still read.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..errors import MissingRelationEndpointError
from ..utils import load_yaml, pluralize
from .models import Issue, IssueKind, RelationRecord, RelationScan

# Canonical key -> spellings accepted in an entry, in lookup order.
_KEY_ALIASES: dict[str, tuple[str, ...]] = {
    "source": ("source", "source_type"),
    "target": ("target", "target_type"),
    "link_type": ("link_type",),
    "forward": ("forward", "forward_route_name"),
    "reverse": ("reverse", "reverse_route_name"),
}


def _lookup(entry: dict[str, Any], key: str) -> str | None:
    for alias in _KEY_ALIASES[key]:
        value = entry.get(alias)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def relation_from_entry(entry: dict[str, Any], index: int) -> RelationRecord:
    """Build one ``RelationRecord`` from a ``links`` entry, applying defaults.

    Raises:
        MissingRelationEndpointError: ``source`` or ``target`` is absent.
    """
    source = _lookup(entry, "source")
    target = _lookup(entry, "target")
    missing = [
        key for key, value in (("source", source), ("target", target)) if value is None
    ]
    if missing:
        raise MissingRelationEndpointError(index, missing)

    return RelationRecord(
        source=source,
        target=target,
        link_type=_lookup(entry, "link_type") or f"has_{target}",
        forward=_lookup(entry, "forward") or pluralize(target),
        reverse=_lookup(entry, "reverse") or source,
    )


def extract_relations(document: dict[str, Any] | str | None) -> RelationScan:
    """Extract relations from a parsed document or raw YAML text.

    Args:
        document: The relationship document as a mapping, YAML text, or
            ``None`` for "no document".

    Returns:
        A ``RelationScan`` with relations in declaration order.

    Raises:
        yaml.YAMLError: *document* is text that is not valid YAML.
        ValueError: The document or its ``links`` value has the wrong shape.
    """
    if isinstance(document, str):
        document = yaml.safe_load(document)
    if document is None:
        return RelationScan()
    if not isinstance(document, dict):
        raise ValueError("relationship document must be a mapping")

    links = document.get("links") or []
    if not isinstance(links, list):
        raise ValueError("'links' must be a list")

    scan = RelationScan()
    for index, entry in enumerate(links):
        if not isinstance(entry, dict):
            scan.issues.append(Issue(
                kind=IssueKind.MISSING_RELATION_ENDPOINT,
                subject=f"links[{index}]",
                message="link entry is not a mapping",
            ))
            continue
        try:
            scan.relations.append(relation_from_entry(entry, index))
        except MissingRelationEndpointError as exc:
            scan.issues.append(Issue(
                kind=IssueKind.MISSING_RELATION_ENDPOINT,
                subject=f"links[{index}]",
                message=str(exc),
            ))
    return scan


def load_relation_document(path: str | Path) -> dict[str, Any]:
    """Load ``links.yaml``; a missing file is an empty document."""
    return load_yaml(path)
