"""Single-field lookup shared by the derivers."""

from .errors import NotSingleField, UnitVariantUnsupported
from .types import Alternative, Field, FieldStyle, Product, Sum


def get_field(shape: Product | Alternative, location: str, derive: str) -> Field:
    """Return the only field of a struct or alternative.

    Raises UnitVariantUnsupported for unit shapes and NotSingleField when
    there is not exactly one field.
    """
    what = "struct" if isinstance(shape, Product) else "variant"
    if shape.style == FieldStyle.UNIT:
        raise UnitVariantUnsupported(location, derive, what)
    if len(shape.fields) != 1:
        raise NotSingleField(location, derive, what)
    return shape.fields[0]


def product_location(target: Product) -> str:
    return f"{target.name}.fields"


def alternative_location(target: Sum, alternative: Alternative) -> str:
    return f"{target.name}::{alternative.name}"
