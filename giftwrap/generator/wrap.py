"""Forward conversions: build a wrapper from its inner type(s)."""

import logging

from .chain import SubtypeChain, build_chain
from .conversions import CodeFragment, ForwardConversion
from .errors import DuplicateInnerType, GenericConflict
from .expr import synthesize_forward
from .fields import alternative_location, get_field, product_location
from .types import Product, Sum, Target, TypeDescriptor, canonical, is_type_param

logger = logging.getLogger(__name__)

DERIVE = "Wrap"


def derive_wrap(target: Target) -> CodeFragment:
    """Derive every forward conversion for a struct or enum target."""
    if isinstance(target, Product):
        return _derive_product(target)
    if isinstance(target, Sum):
        return _derive_sum(target)
    raise TypeError(f"Cannot derive {DERIVE} for {type(target).__name__}")


def _conversions(
    target: Target,
    chain: SubtypeChain,
    variant: str | None,
    field: str | None,
) -> list[ForwardConversion]:
    conversions = []
    for i, ty in enumerate(chain):
        conversion = ForwardConversion(
            owner=target,
            source=ty,
            variant=variant,
            field=field,
            value=synthesize_forward(chain[:i]),
        )
        logger.debug(
            "%s: forward conversion #%d (%d construction layers)",
            target.name if variant is None else f"{target.name}::{variant}",
            i,
            conversion.value.depth,
        )
        conversions.append(conversion)
    return conversions


def _derive_product(target: Product) -> CodeFragment:
    location = product_location(target)
    field = get_field(target, location, DERIVE)

    if target.config.no_wrap:
        logger.debug("%s: forward conversions suppressed", target.name)
        return CodeFragment()

    chain = build_chain(field.type, target.config.chain_depth())
    params = target.type_params()

    # Peeling a type parameter yields a second conversion that may overlap.
    if len(chain) > 1 and any(is_type_param(ty, params) for ty in chain):
        raise GenericConflict(location)

    return CodeFragment(tuple(_conversions(target, chain, None, field.name)))


def _derive_sum(target: Sum) -> CodeFragment:
    params = target.type_params()
    seen_types: set[TypeDescriptor] = set()
    generic_wrap_seen = False
    conversions: list[ForwardConversion] = []

    for alternative in target.alternatives:
        if alternative.config.no_wrap:
            logger.debug("%s::%s: skipped (noWrap)", target.name, alternative.name)
            continue

        location = alternative_location(target, alternative)
        field = get_field(alternative, location, DERIVE)
        chain = build_chain(field.type, alternative.config.chain_depth())

        # A conversion from a bare type parameter overlaps every other source type.
        if generic_wrap_seen:
            raise GenericConflict(location)
        if any(is_type_param(ty, params) for ty in chain):
            if seen_types:
                raise GenericConflict(location)
            generic_wrap_seen = True

        for ty in chain:
            key = canonical(ty)
            if key in seen_types:
                raise DuplicateInnerType(location)
            seen_types.add(key)

        conversions.extend(_conversions(target, chain, alternative.name, field.name))

    return CodeFragment(tuple(conversions))
