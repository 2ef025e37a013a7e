"""Type definitions for declarations and conversion derivation."""

from dataclasses import dataclass, field
from enum import StrEnum, auto

from dataclasses_json import DataClassJsonMixin, config


@dataclass(frozen=True)
class NamedGeneric:
    """A named type path, optionally applied to type arguments.

    Only the first entry of `args` is followed during traversal. `lifetimes`
    are carried through for rendering, they never take part in traversal.
    """

    name: str
    args: tuple["TypeDescriptor", ...] = ()
    lifetimes: tuple[str, ...] = ()


@dataclass(frozen=True)
class Pointer:
    """A raw pointer to another type."""

    inner: "TypeDescriptor"
    mutable: bool = False


@dataclass(frozen=True)
class Reference:
    """A reference to another type."""

    inner: "TypeDescriptor"
    mutable: bool = False
    lifetime: str | None = None


@dataclass(frozen=True)
class Parenthesized:
    """Transparent grouping around another type."""

    inner: "TypeDescriptor"


@dataclass(frozen=True)
class Opaque:
    """A type without structure relevant to traversal (tuple, array, ...)."""

    text: str


TypeDescriptor = NamedGeneric | Pointer | Reference | Parenthesized | Opaque


def strip_parens(t: TypeDescriptor) -> TypeDescriptor:
    """Remove outer parentheses from a type."""
    while isinstance(t, Parenthesized):
        t = t.inner
    return t


def peel(t: TypeDescriptor) -> TypeDescriptor | None:
    """Return the next inner type of `t`, or None at a leaf.

    Parentheses on either side are skipped, they never count as a step.
    """
    t = strip_parens(t)
    if isinstance(t, NamedGeneric):
        if not t.args:
            return None
        return strip_parens(t.args[0])
    if isinstance(t, (Pointer, Reference)):
        return strip_parens(t.inner)
    return None


def canonical(t: TypeDescriptor) -> TypeDescriptor:
    """Return `t` with parentheses removed at every level.

    Two types are considered the same source type when their canonical
    forms compare equal.
    """
    t = strip_parens(t)
    if isinstance(t, NamedGeneric):
        return NamedGeneric(t.name, tuple(canonical(a) for a in t.args), t.lifetimes)
    if isinstance(t, Pointer):
        return Pointer(canonical(t.inner), t.mutable)
    if isinstance(t, Reference):
        return Reference(canonical(t.inner), t.mutable, t.lifetime)
    return t


@dataclass(frozen=True)
class Config(DataClassJsonMixin):
    """Resolved derivation options for one field or alternative.

    wrap_depth:
    - None: default depth of 1 (no chaining)
    - 0: unbounded, peel until a leaf is reached
    - n: at most n conversion sources
    """

    wrap_depth: int | None = field(default=None, metadata=config(field_name="wrapDepth"))
    no_wrap: bool = field(default=False, metadata=config(field_name="noWrap"))
    no_unwrap: bool = field(default=False, metadata=config(field_name="noUnwrap"))

    def chain_depth(self) -> int | None:
        """Depth bound to hand to the chain builder (None is unbounded)."""
        if self.wrap_depth is None:
            return 1
        if self.wrap_depth == 0:
            return None
        return self.wrap_depth


class FieldStyle(StrEnum):
    """How the fields of a struct or alternative are declared."""

    NAMED = auto()  # { a: T }
    UNNAMED = auto()  # (T)
    UNIT = auto()  # no fields at all


@dataclass(frozen=True)
class Field:
    """A single declared field. `name` is None for positional fields."""

    name: str | None
    type: TypeDescriptor


class GenericKind(StrEnum):
    """Kind of a declared generic parameter."""

    TYPE = auto()
    LIFETIME = auto()
    CONST = auto()


@dataclass(frozen=True)
class GenericParam:
    """A generic parameter declared by a target.

    For const parameters `const_type` holds the value type (`usize`).
    """

    name: str
    kind: GenericKind = GenericKind.TYPE
    bounds: str | None = None
    const_type: str | None = None


@dataclass(frozen=True)
class Product:
    """A struct target. Conversions require exactly one field."""

    name: str
    style: FieldStyle
    fields: tuple[Field, ...]
    config: Config = Config()
    generics: tuple[GenericParam, ...] = ()
    where_clause: str | None = None

    def type_params(self) -> frozenset[str]:
        return _type_params(self.generics)


@dataclass(frozen=True)
class Alternative:
    """One named case of an enum target."""

    name: str
    style: FieldStyle
    fields: tuple[Field, ...]
    config: Config = Config()


@dataclass(frozen=True)
class Sum:
    """An enum target made of named alternatives."""

    name: str
    alternatives: tuple[Alternative, ...]
    generics: tuple[GenericParam, ...] = ()
    where_clause: str | None = None

    def type_params(self) -> frozenset[str]:
        return _type_params(self.generics)


Target = Product | Sum


def _type_params(generics: tuple[GenericParam, ...]) -> frozenset[str]:
    return frozenset(g.name for g in generics if g.kind == GenericKind.TYPE)


def is_type_param(t: TypeDescriptor, params: frozenset[str]) -> bool:
    """Check if a chain entry names one of the declared type parameters."""
    return isinstance(t, NamedGeneric) and t.name in params
