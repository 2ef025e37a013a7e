"""Load wrapper declarations from JSON documents."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .annotations import resolve_config
from .errors import DeclarationError, UnsupportedShape
from .types import (
    Alternative,
    Field,
    FieldStyle,
    GenericKind,
    GenericParam,
    NamedGeneric,
    Opaque,
    Parenthesized,
    Pointer,
    Product,
    Reference,
    Sum,
    Target,
    TypeDescriptor,
)

logger = logging.getLogger(__name__)

DERIVES = ("Wrap", "Unwrap")


@dataclass(frozen=True)
class Declaration:
    """A target together with the derives requested for it."""

    target: Target
    derives: tuple[str, ...] = DERIVES


def _expect(data: Any, kind: type, location: str, what: str) -> Any:
    if not isinstance(data, kind):
        raise DeclarationError(location, f"{what} must be a {kind.__name__}, got {data!r}")
    return data


def _optional(data: Any, kind: type, location: str, what: str) -> Any:
    return None if data is None else _expect(data, kind, location, what)


def _strings(data: Any, location: str, what: str) -> list[str]:
    return [_expect(item, str, location, what) for item in _expect(data, list, location, what)]


def load_type(data: Any, location: str) -> TypeDescriptor:
    """Build a type descriptor from its JSON structure.

    A bare string is a path without arguments (`"i64"`, `"T"`).
    """
    if isinstance(data, str):
        if not data:
            raise DeclarationError(location, "Type name must not be empty")
        return NamedGeneric(data)

    _expect(data, dict, location, "Type")

    if "path" in data:
        args = _expect(data.get("args", []), list, location, "Type arguments")
        lifetimes = _strings(data.get("lifetimes", []), location, "Lifetime arguments")
        return NamedGeneric(
            name=_expect(data["path"], str, location, "Type path"),
            args=tuple(load_type(a, location) for a in args),
            lifetimes=tuple(lifetimes),
        )

    mutable = _expect(data.get("mutable", False), bool, location, "mutable")
    if "pointer" in data:
        return Pointer(load_type(data["pointer"], location), mutable)
    if "reference" in data:
        return Reference(
            load_type(data["reference"], location),
            mutable,
            _optional(data.get("lifetime"), str, location, "Reference lifetime"),
        )
    if "paren" in data:
        return Parenthesized(load_type(data["paren"], location))
    if "opaque" in data:
        return Opaque(_expect(data["opaque"], str, location, "Opaque type"))

    raise DeclarationError(location, f"Unrecognized type {data!r}")


def _load_generics(data: Any, location: str) -> tuple[GenericParam, ...]:
    params = []
    for item in _expect(data, list, location, "generics"):
        if isinstance(item, str):
            kind = GenericKind.LIFETIME if item.startswith("'") else GenericKind.TYPE
            params.append(GenericParam(name=item, kind=kind))
            continue

        _expect(item, dict, location, "Generic parameter")
        try:
            kind = GenericKind(item.get("kind", GenericKind.TYPE))
        except ValueError as e:
            raise DeclarationError(location, f"Unknown generic kind {item.get('kind')!r}") from e
        if kind == GenericKind.CONST and not item.get("type"):
            raise DeclarationError(location, f"Const parameter {item.get('name')} needs a type")
        params.append(
            GenericParam(
                name=_expect(item.get("name"), str, location, "Generic parameter name"),
                kind=kind,
                bounds=_optional(item.get("bounds"), str, location, "Generic bounds"),
                const_type=_optional(item.get("type"), str, location, "Const parameter type"),
            )
        )
    return tuple(params)


def _load_fields(
    data: Any, location: str
) -> tuple[FieldStyle, tuple[Field, ...], list[str]]:
    """Return the field style, the fields and the field-level annotations."""
    if data is None:
        return FieldStyle.UNIT, (), []

    if isinstance(data, dict):
        items = _expect(data.get("items", []), list, location, "Field items")
        style = data.get("style")
    else:
        items = _expect(data, list, location, "fields")
        style = None

    fields = []
    annotations: list[str] = []
    for item in items:
        _expect(item, dict, location, "Field")
        if "type" not in item:
            raise DeclarationError(location, "Field is missing its type")
        field_name = _optional(item.get("name"), str, location, "Field name")
        fields.append(Field(name=field_name, type=load_type(item["type"], location)))
        annotations.extend(_strings(item.get("annotations", []), location, "annotations"))

    if style is None:
        if not fields:
            style = FieldStyle.UNIT
        elif all(f.name is not None for f in fields):
            style = FieldStyle.NAMED
        else:
            style = FieldStyle.UNNAMED

    try:
        style = FieldStyle(style)
    except ValueError as e:
        raise DeclarationError(location, f"Unknown field style {style!r}") from e

    if style == FieldStyle.NAMED and any(f.name is None for f in fields):
        raise DeclarationError(location, "Named fields must all have a name")
    if style == FieldStyle.UNNAMED and any(f.name is not None for f in fields):
        raise DeclarationError(location, "Positional fields must not have a name")
    if style == FieldStyle.UNIT and fields:
        raise DeclarationError(location, "Unit shapes cannot have fields")

    return style, tuple(fields), annotations


def _load_derives(data: dict[str, Any], location: str) -> tuple[str, ...]:
    derives = tuple(_expect(data.get("derive", list(DERIVES)), list, location, "derive"))
    for name in derives:
        if name not in DERIVES:
            raise DeclarationError(location, f"Unknown derive {name!r}")
    return derives


def load_target(data: Any) -> Declaration:
    """Build a declaration from one JSON target object."""
    _expect(data, dict, "<document>", "Target")
    name = _expect(data.get("name"), str, "<document>", "Target name")
    kind = data.get("kind", "struct")
    derives = _load_derives(data, name)
    generics = _load_generics(data.get("generics", []), name)
    where_clause = _optional(data.get("where"), str, name, "where")
    annotations = _strings(data.get("annotations", []), name, "annotations")

    if kind == "union":
        raise UnsupportedShape(name, derives[0] if derives else DERIVES[0], "Union")

    target: Target
    if kind == "struct":
        location = f"{name}.fields"
        style, fields, field_annotations = _load_fields(data.get("fields"), location)
        config = resolve_config(annotations, name)
        config = resolve_config(field_annotations, location, base=config)
        target = Product(name, style, fields, config, generics, where_clause)
    elif kind == "enum":
        alternatives = []
        for variant in _expect(data.get("variants", []), list, name, "variants"):
            _expect(variant, dict, name, "Variant")
            variant_name = _expect(variant.get("name"), str, name, "Variant name")
            location = f"{name}::{variant_name}"
            style, fields, field_annotations = _load_fields(variant.get("fields"), location)
            variant_annotations = _strings(variant.get("annotations", []), location, "annotations")
            config = resolve_config([*variant_annotations, *field_annotations], location)
            alternatives.append(Alternative(variant_name, style, fields, config))
        target = Sum(name, tuple(alternatives), generics, where_clause)
    else:
        raise DeclarationError(name, f"Unknown declaration kind {kind!r}")

    logger.debug("Loaded %s %s (derive %s)", kind, name, ", ".join(derives))
    return Declaration(target, derives)


def loads(text: str) -> list[Declaration]:
    """Load declarations from a JSON string.

    The document is either a single target object or `{"targets": [...]}`.
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise DeclarationError("<document>", f"Invalid JSON: {e}") from e

    if isinstance(document, dict) and "targets" in document:
        targets = _expect(document["targets"], list, "<document>", "targets")
    else:
        targets = [document]

    return [load_target(t) for t in targets]


def load(path: str | Path) -> list[Declaration]:
    """Load declarations from a JSON file."""
    with open(path, encoding="utf-8") as f:
        declarations = loads(f.read())
    logger.info("Loaded %d declaration(s) from %s", len(declarations), path)
    return declarations
