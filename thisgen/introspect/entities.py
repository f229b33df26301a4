"""Scan the entities directory of a ``this`` API project.

Each immediate subdirectory holding a ``model.rs`` is one entity.  An
optional ``descriptor.rs`` beside it contributes the plural and the REST
routes.  A failure in one entity is recorded as an ``Issue`` and the scan goes
on with the next entity.
"""

from __future__ import annotations

from pathlib import Path

from ..errors import StructuralMismatchError, UnsupportedTypeError
from .extractor import parse_definition, parse_descriptor
from .models import EntityRecord, EntityScan, Issue, IssueKind

DEFINITION_FILE = "model.rs"
DESCRIPTOR_FILE = "descriptor.rs"


def _entity_dirs(entities_dir: Path) -> list[Path]:
    return sorted(
        (
            child
            for child in entities_dir.iterdir()
            if child.is_dir() and not child.name.startswith((".", "__"))
        ),
        key=lambda child: child.name,
    )


def introspect_entity(entity_dir: Path) -> EntityRecord:
    """Rebuild one ``EntityRecord`` from its directory.

    Raises:
        FileNotFoundError: No definition file in *entity_dir*.
        StructuralMismatchError: Definition or descriptor has the wrong shape.
        UnsupportedTypeError: A field type is outside the supported set.
    """
    model_path = entity_dir / DEFINITION_FILE
    record = parse_definition(model_path.read_text(encoding="utf-8"), str(model_path))

    descriptor_path = entity_dir / DESCRIPTOR_FILE
    if not descriptor_path.exists():
        return record

    plural, routes = parse_descriptor(
        descriptor_path.read_text(encoding="utf-8"), str(descriptor_path)
    )
    return record.model_copy(update={
        "plural": plural or record.plural,
        "routes": tuple(routes),
    })


def introspect_entities(entities_dir: str | Path) -> EntityScan:
    """Introspect every entity under *entities_dir*.

    Returns:
        An ``EntityScan`` whose entities are sorted by entity name.  Entities
        that failed to parse are absent and reported in ``issues``.
    """
    root = Path(entities_dir)
    scan = EntityScan()
    if not root.is_dir():
        return scan

    for entity_dir in _entity_dirs(root):
        if not (entity_dir / DEFINITION_FILE).exists():
            continue
        try:
            scan.entities.append(introspect_entity(entity_dir))
        except StructuralMismatchError as exc:
            scan.issues.append(Issue(
                kind=IssueKind.STRUCTURAL_MISMATCH,
                subject=entity_dir.name,
                message=str(exc),
                path=exc.path or str(entity_dir),
                hint=exc.hint,
            ))
        except UnsupportedTypeError as exc:
            for field_name, declared in exc.fields:
                scan.issues.append(Issue(
                    kind=IssueKind.UNSUPPORTED_TYPE,
                    subject=f"{entity_dir.name}.{field_name}",
                    message=f"unsupported field type '{declared}'",
                    path=exc.path,
                ))
        except (OSError, UnicodeDecodeError) as exc:
            scan.issues.append(Issue(
                kind=IssueKind.STRUCTURAL_MISMATCH,
                subject=entity_dir.name,
                message=f"cannot read entity files: {exc}",
                path=str(entity_dir),
            ))

    scan.entities.sort(key=lambda record: record.name)
    return scan
