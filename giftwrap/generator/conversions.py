"""Derived conversion definitions, independent of the output language."""

from collections.abc import Iterator
from dataclasses import dataclass

from .expr import Expr
from .types import FieldStyle, Target, TypeDescriptor


@dataclass(frozen=True)
class ForwardConversion:
    """Build `owner` from a value of `source`.

    `variant` is None for structs. `field` is None for positional fields.
    """

    owner: Target
    source: TypeDescriptor
    variant: str | None
    field: str | None
    value: Expr


@dataclass(frozen=True)
class ReverseConversion:
    """Infallibly project the single field of a struct `owner`."""

    owner: Target
    target: TypeDescriptor
    field: str | None


@dataclass(frozen=True)
class MatchArm:
    """One arm of a fallible reverse conversion.

    Success arms yield the field of the alternative, failure arms carry the
    message returned by the generated code.
    """

    variant: str
    style: FieldStyle
    field: str | None = None
    message: str | None = None

    @property
    def success(self) -> bool:
        return self.message is None


@dataclass(frozen=True)
class FallibleReverseConversion:
    """Try to extract a field of type `target` from an enum `owner`."""

    owner: Target
    target: TypeDescriptor
    arms: tuple[MatchArm, ...]

    def success_variants(self) -> list[str]:
        return [arm.variant for arm in self.arms if arm.success]


Conversion = ForwardConversion | ReverseConversion | FallibleReverseConversion


@dataclass(frozen=True)
class CodeFragment:
    """An ordered, concatenable sequence of conversion definitions."""

    conversions: tuple[Conversion, ...] = ()

    def __add__(self, other: "CodeFragment") -> "CodeFragment":
        if not isinstance(other, CodeFragment):
            return NotImplemented
        return CodeFragment(self.conversions + other.conversions)

    def __iter__(self) -> Iterator[Conversion]:
        return iter(self.conversions)

    def __len__(self) -> int:
        return len(self.conversions)

    def forward(self) -> list[ForwardConversion]:
        return [c for c in self.conversions if isinstance(c, ForwardConversion)]

    def reverse(self) -> list[ReverseConversion | FallibleReverseConversion]:
        return [c for c in self.conversions if not isinstance(c, ForwardConversion)]

    def render(self) -> str:
        """Render the fragment as Rust source."""
        from .rust import render

        return render(self)
