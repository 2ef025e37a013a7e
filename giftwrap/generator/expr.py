"""Expressions that rebuild a wrapped value from an inner one."""

from collections.abc import Sequence
from dataclasses import dataclass

from .types import NamedGeneric, Pointer, Reference, TypeDescriptor


@dataclass(frozen=True)
class Input:
    """The value handed to the conversion."""

    @property
    def depth(self) -> int:
        return 0


@dataclass(frozen=True)
class Construct:
    """`generic::<_>::from(inner)`."""

    generic: str
    inner: "Expr"

    @property
    def depth(self) -> int:
        return self.inner.depth + 1


@dataclass(frozen=True)
class AddressOf:
    """`&inner` or `&mut inner`."""

    inner: "Expr"
    mutable: bool = False

    @property
    def depth(self) -> int:
        return self.inner.depth + 1


Expr = Input | Construct | AddressOf


def synthesize_forward(prefix: Sequence[TypeDescriptor]) -> Expr:
    """Fold the chain entries before a source type into a construction.

    `prefix` is ordered outer to inner; the innermost entry wraps the input
    first. An empty prefix is the input itself.
    """
    expr: Expr = Input()
    for ty in reversed(prefix):
        if isinstance(ty, NamedGeneric):
            expr = Construct(ty.name, expr)
        elif isinstance(ty, (Pointer, Reference)):
            expr = AddressOf(expr, ty.mutable)
    return expr
