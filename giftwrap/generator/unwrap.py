"""Reverse conversions: extract the inner field of a wrapper."""

import logging

from .conversions import CodeFragment, FallibleReverseConversion, MatchArm, ReverseConversion
from .fields import alternative_location, get_field, product_location
from .rust import render_type
from .types import Alternative, Field, Product, Sum, Target, TypeDescriptor, canonical

logger = logging.getLogger(__name__)

DERIVE = "Unwrap"


def derive_unwrap(target: Target) -> CodeFragment:
    """Derive the reverse conversions for a struct or enum target."""
    if isinstance(target, Product):
        return _derive_product(target)
    if isinstance(target, Sum):
        return _derive_sum(target)
    raise TypeError(f"Cannot derive {DERIVE} for {type(target).__name__}")


def _derive_product(target: Product) -> CodeFragment:
    field = get_field(target, product_location(target), DERIVE)

    if target.config.no_unwrap:
        logger.debug("%s: reverse conversion suppressed", target.name)
        return CodeFragment()

    # Always the declared type, whatever the wrap depth.
    return CodeFragment((ReverseConversion(owner=target, target=field.type, field=field.name),))


def failure_message(target: Sum, alternative: Alternative, field_type: str) -> str:
    """Message returned when an enum value holds another alternative."""
    return f"Can't convert {target.name}::{alternative.name} into {field_type}"


def _derive_sum(target: Sum) -> CodeFragment:
    groups: dict[TypeDescriptor, list[tuple[Alternative, Field]]] = {}
    declared: dict[TypeDescriptor, TypeDescriptor] = {}

    for alternative in target.alternatives:
        if alternative.config.no_unwrap:
            logger.debug("%s::%s: skipped (noUnwrap)", target.name, alternative.name)
            continue
        field = get_field(alternative, alternative_location(target, alternative), DERIVE)
        key = canonical(field.type)
        groups.setdefault(key, []).append((alternative, field))
        declared.setdefault(key, field.type)

    conversions = []
    for key, members in groups.items():
        field_type = declared[key]
        matched = {alternative.name: field for alternative, field in members}
        arms = []
        for alternative in target.alternatives:
            if alternative.name in matched:
                arms.append(
                    MatchArm(alternative.name, alternative.style, matched[alternative.name].name)
                )
            else:
                message = failure_message(target, alternative, render_type(field_type))
                arms.append(MatchArm(alternative.name, alternative.style, message=message))

        logger.debug(
            "%s: fallible reverse conversion into %s (%d of %d alternatives)",
            target.name,
            render_type(field_type),
            len(members),
            len(arms),
        )
        conversions.append(
            FallibleReverseConversion(owner=target, target=field_type, arms=tuple(arms))
        )

    return CodeFragment(tuple(conversions))
