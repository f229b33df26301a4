"""``thisgen add-link`` -- declare a relationship in ``config/links.yaml``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..config import Config
from ..errors import MissingRelationEndpointError, ThisgenError
from ..introspect.models import RelationRecord
from ..introspect.relations import relation_from_entry
from ..utils import (
    display_path,
    dump_yaml,
    pluralize,
    print_info,
    print_next_steps,
    print_step,
    print_success,
    to_pascal_case,
    to_snake_case,
)
from ..writer import FileWriter, writer_for

DEFAULT_AUTH = "authenticated"
_OPERATIONS = ("list", "get", "create", "update", "delete")


def _default_auth() -> dict[str, str]:
    return {operation: DEFAULT_AUTH for operation in _OPERATIONS}


def _load_document(text: str, shown: str) -> dict[str, Any]:
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ThisgenError(f"Failed to parse {shown}: {exc}") from exc
    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise ThisgenError(f"{shown} must contain a mapping at the top level")

    for key, empty in (("entities", list), ("links", list), ("validation_rules", dict)):
        if document.get(key) is None:
            document[key] = empty()
        elif not isinstance(document[key], empty):
            raise ThisgenError(f"'{key}' in {shown} must be a {empty.__name__}")
    return document


def _existing_keys(links: list[Any]) -> set[tuple[str, str, str]]:
    keys: set[tuple[str, str, str]] = set()
    for index, entry in enumerate(links):
        if not isinstance(entry, dict):
            continue
        try:
            keys.add(relation_from_entry(entry, index).key)
        except MissingRelationEndpointError:
            continue
    return keys


def add_link(
    root: str | Path,
    source: str,
    target: str,
    link_type: str | None = None,
    forward: str | None = None,
    reverse: str | None = None,
    description: str | None = None,
    validation_rule: bool = True,
    *,
    dry_run: bool = False,
    writer: FileWriter | None = None,
) -> RelationRecord:
    """Add a ``source -> target`` link to the relationship document.

    Defaults follow the relation extractor: ``link_type`` is
    ``has_<target>``, ``forward`` the target plural and ``reverse`` the
    source name.  Entity entries are added for both endpoints when missing.

    Raises:
        ThisgenError: The document is missing or malformed, or the same
            ``(link_type, source, target)`` link already exists.
    """
    config = Config.for_root(root, dry_run=dry_run)
    writer = writer or writer_for(config.dry_run)
    links_path = config.links_path
    shown = display_path(links_path, config.api_root)

    if not writer.exists(links_path):
        raise ThisgenError(f"{shown} not found. Run 'thisgen init' first or create it manually.")

    source = to_snake_case(source)
    target = to_snake_case(target)
    relation = RelationRecord(
        source=source,
        target=target,
        link_type=link_type or f"has_{target}",
        forward=forward or pluralize(target),
        reverse=reverse or source,
    )

    print_step(f"Adding link '{source} -> {target}' to {shown}")

    document = _load_document(writer.read_text(links_path), shown)
    if relation.key in _existing_keys(document["links"]):
        raise ThisgenError(
            f"Link '{relation.link_type}' from '{source}' to '{target}' already exists in {shown}"
        )

    known = {
        entry.get("singular")
        for entry in document["entities"]
        if isinstance(entry, dict)
    }
    for name in (source, target):
        if name not in known:
            document["entities"].append({
                "singular": name,
                "plural": pluralize(name),
                "auth": _default_auth(),
            })
            known.add(name)
            print_info(f"Added entity config for: {name}")

    document["links"].append({
        "link_type": relation.link_type,
        "source_type": source,
        "target_type": target,
        "forward_route_name": relation.forward,
        "reverse_route_name": relation.reverse,
        "description": description
        or f"{to_pascal_case(source)} -> {to_pascal_case(target)} relationship",
        "auth": _default_auth(),
    })

    if validation_rule:
        rules = document["validation_rules"].setdefault(relation.link_type, [])
        rules.append({"source": source, "targets": [target]})

    writer.write_file(links_path, dump_yaml(document))

    source_plural = pluralize(source)
    target_plural = pluralize(target)
    print_info(f"Link type: {relation.link_type}")
    print_success(f"Link added to {shown}!")
    print_next_steps([
        "Routes that will be generated:",
        f"  GET    /{source_plural}/{{id}}/{relation.forward}  - List {target_plural} for a {source}",
        f"  POST   /{source_plural}/{{id}}/{relation.forward}  - Link a {target} to a {source}",
        f"  GET    /{target_plural}/{{id}}/{relation.reverse}  - Get {source} for a {target}",
    ])
    return relation
