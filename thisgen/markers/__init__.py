"""Anchor-based mutation of generated source files.

Usage::

    from thisgen.markers import EntityNames, FileRole, register_entity

    names = EntityNames(snake="product", pascal="Product", plural="products")
    outcome = register_entity(stores_text, FileRole.STORES, names)
    if outcome.legacy:
        print("\\n".join(outcome.manual_instructions))
"""

from thisgen.markers.anchors import (
    AnchorSite,
    Insertion,
    add_import,
    append_module_declaration,
    has_line_after_anchor,
    insert_line,
    locate_anchor,
)
from thisgen.markers.catalog import (
    MARKER_CATALOG,
    EntityNames,
    FileRole,
    Marker,
    lookup_marker,
    markers_for,
)
from thisgen.markers.registrar import (
    FileRegistration,
    manual_instructions,
    register_entity,
    registration_status,
)

__all__ = [
    "AnchorSite",
    "EntityNames",
    "FileRegistration",
    "FileRole",
    "Insertion",
    "MARKER_CATALOG",
    "Marker",
    "add_import",
    "append_module_declaration",
    "has_line_after_anchor",
    "insert_line",
    "locate_anchor",
    "lookup_marker",
    "manual_instructions",
    "markers_for",
    "register_entity",
    "registration_status",
]
