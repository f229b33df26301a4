"""Readers for the two generated-file shapes thisgen understands.

Definition files (``model.rs``) hold one entity macro invocation::

    impl_data_entity!(Product, "product", ["sku"], { sku: String, price: f64 });

Descriptor files (``descriptor.rs``) declare the plural and the REST routes::

    fn plural(&self) -> &str { "products" }
    .route("/products", get(list_products).post(create_product))

This is deliberately not a Rust parser.  A regex finds where each shape
starts, and a recursive-descent reader walks the shape itself.  Anything
outside the supported form is a ``StructuralMismatchError`` and never a
partial read.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..errors import StructuralMismatchError, UnsupportedTypeError
from ..utils import pluralize
from .models import (
    OPTION_WRAPPER,
    RESERVED_FIELDS,
    EntityRecord,
    FieldDescriptor,
    FieldType,
    HTTPMethod,
    RouteRecord,
)
from .reader import Cursor, TokenKind


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_MACRO_START = re.compile(r"\bimpl_data_entity(?:_validated)?\s*!\s*\(")
_ENTITY_NAME = re.compile(r"^[a-z][a-z0-9_]*$")
_PLURAL_FN = re.compile(
    r"fn\s+plural\s*\(\s*&\s*self\s*\)\s*->\s*&\s*(?:'static\s+)?str\s*\{\s*\"(\w+)\"\s*\}"
)
_ROUTE_CALL = re.compile(r"\.route\s*\(")

_EXPECTED_SHAPE = 'impl_data_entity!(TypeName, "entity_name", [index_list], {field: Type, ...})'

_ROUTE_VERBS: dict[str, HTTPMethod] = {
    "get": HTTPMethod.GET,
    "post": HTTPMethod.POST,
    "put": HTTPMethod.PUT,
    "patch": HTTPMethod.PATCH,
    "delete": HTTPMethod.DELETE,
}


# ---------------------------------------------------------------------------
# Type expressions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TypeExpr:
    """A parsed field type such as ``Option<String>``."""
    name: str
    args: tuple["TypeExpr", ...] = ()

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}<{', '.join(str(arg) for arg in self.args)}>"


def _base_type(name: str) -> FieldType | None:
    try:
        return FieldType(name)
    except ValueError:
        return None


def resolve_type(expr: TypeExpr) -> tuple[FieldType, bool] | None:
    """Map a type expression onto ``(base type, optional)``.

    Returns ``None`` for anything outside the supported set, including nested
    wrappers such as ``Option<Option<String>>``.
    """
    if not expr.args:
        base = _base_type(expr.name)
        return (base, False) if base else None
    if expr.name == OPTION_WRAPPER and len(expr.args) == 1 and not expr.args[0].args:
        base = _base_type(expr.args[0].name)
        return (base, True) if base else None
    return None


def read_type(cursor: Cursor) -> TypeExpr:
    """type := path ('<' type (',' type)* '>')?"""
    name = cursor.expect_kind(TokenKind.IDENT, "starting a field type").value
    while cursor.accept("::"):
        name += "::" + cursor.expect_kind(TokenKind.IDENT, "after '::'").value

    args: list[TypeExpr] = []
    if cursor.accept("<"):
        args.append(read_type(cursor))
        while cursor.accept(","):
            args.append(read_type(cursor))
        cursor.expect(">", f"closing the type arguments of {name}")
    return TypeExpr(name, tuple(args))


# ---------------------------------------------------------------------------
# Definition files
# ---------------------------------------------------------------------------

def _read_string_list(cursor: Cursor) -> list[str]:
    items: list[str] = []
    while not cursor.at("]"):
        items.append(cursor.expect_kind(TokenKind.STRING, "in the index list").value)
        if not cursor.accept(","):
            break
    cursor.expect("]", "closing the index list")
    return items


def _read_fields(cursor: Cursor) -> list[tuple[str, TypeExpr]]:
    fields: list[tuple[str, TypeExpr]] = []
    while not cursor.at("}"):
        name = cursor.expect_kind(TokenKind.IDENT, "naming a field").value
        cursor.expect(":", f"after field name '{name}'")
        fields.append((name, read_type(cursor)))
        if not cursor.accept(","):
            break
    cursor.expect("}", "closing the field block")
    return fields


def parse_definition(text: str, path: str = "") -> EntityRecord:
    """Read the entity macro invocation in a ``model.rs`` file.

    Args:
        text: Full file content.
        path: Source path, used only in error messages.

    Returns:
        An ``EntityRecord`` with no routes and the derived plural.

    Raises:
        StructuralMismatchError: The text does not hold the supported shape.
        UnsupportedTypeError: One or more fields use an unsupported type.
    """
    match = _MACRO_START.search(text)
    if not match:
        raise StructuralMismatchError(
            "no impl_data_entity! invocation found",
            path=path,
            hint=f"- expected {_EXPECTED_SHAPE}\n+ (no invocation)",
        )

    cursor = Cursor(text, match.end(), path=path)
    type_name = cursor.expect_kind(TokenKind.IDENT, "naming the entity type").value
    cursor.expect(",", "after the entity type")

    name_token = cursor.expect_kind(TokenKind.STRING, "with the entity name")
    if not _ENTITY_NAME.match(name_token.value):
        raise cursor.mismatch(name_token, "a lowercase identifier as the entity name")
    cursor.expect(",", "after the entity name")

    cursor.expect("[", "opening the index list")
    indexed = _read_string_list(cursor)
    cursor.expect(",", "after the index list")

    cursor.expect("{", "opening the field block")
    raw_fields = _read_fields(cursor)

    if cursor.accept(",") and not cursor.at(")"):
        # Validated form: `validate: { ... }` follows the field block.
        cursor.skip_balanced(")")
    else:
        cursor.expect(")", "closing the invocation")

    fields: list[FieldDescriptor] = []
    unsupported: list[tuple[str, str]] = []
    for field_name, expr in raw_fields:
        if field_name in RESERVED_FIELDS:
            continue
        resolved = resolve_type(expr)
        if resolved is None:
            unsupported.append((field_name, str(expr)))
            continue
        base, optional = resolved
        fields.append(FieldDescriptor(name=field_name, type=base, optional=optional))

    if unsupported:
        raise UnsupportedTypeError(unsupported, path=path)

    entity_name = name_token.value
    return EntityRecord(
        name=entity_name,
        pascal_name=type_name,
        plural=pluralize(entity_name),
        fields=tuple(fields),
        indexed_fields=tuple(indexed),
    )


# ---------------------------------------------------------------------------
# Descriptor files
# ---------------------------------------------------------------------------

def _read_handler(cursor: Cursor) -> str:
    """handler := IDENT ('::' (IDENT | '<' ... '>'))*  -- returns the last name."""
    name = cursor.expect_kind(TokenKind.IDENT, "naming the route handler").value
    while cursor.accept("::"):
        if cursor.accept("<"):
            depth = 1
            while depth:
                token = cursor.advance()
                if token.kind is TokenKind.EOF:
                    raise cursor.mismatch(token, "'>' closing the handler's type arguments")
                if token.value == "<":
                    depth += 1
                elif token.value == ">":
                    depth -= 1
        else:
            name = cursor.expect_kind(TokenKind.IDENT, "after '::'").value
    return name


def describe_handler(handler: str) -> str:
    """``list_products`` -> ``list products``."""
    return handler.replace("_", " ").strip()


def parse_descriptor(text: str, path: str = "") -> tuple[str, list[RouteRecord]]:
    """Read the plural and routes from a ``descriptor.rs`` file.

    Returns:
        ``(plural, routes)``.  ``plural`` is empty when the descriptor does not
        declare one.  Routes come out in declaration order, one per verb.

    Raises:
        StructuralMismatchError: A ``.route(...)`` call is not in the
            supported ``("/path", verb(handler).verb(handler))`` form.
    """
    plural_match = _PLURAL_FN.search(text)
    plural = plural_match.group(1) if plural_match else ""

    routes: list[RouteRecord] = []
    for match in _ROUTE_CALL.finditer(text):
        cursor = Cursor(text, match.end(), path=path)
        route_token = cursor.expect_kind(TokenKind.STRING, "with the route path")
        if not route_token.value.startswith("/"):
            raise cursor.mismatch(route_token, "a route path starting with '/'")
        cursor.expect(",", "after the route path")

        while True:
            verb = cursor.expect_kind(TokenKind.IDENT, "naming an HTTP method")
            method = _ROUTE_VERBS.get(verb.value)
            if method is None:
                raise cursor.mismatch(verb, f"one of {', '.join(_ROUTE_VERBS)}")
            cursor.expect("(", f"after {verb.value}")
            handler = _read_handler(cursor)
            cursor.expect(")", "closing the handler")
            routes.append(RouteRecord(
                method=method,
                path=route_token.value,
                description=describe_handler(handler),
            ))
            if not cursor.accept("."):
                break

        cursor.accept(",")
        cursor.expect(")", "closing the route call")

    return plural, routes
