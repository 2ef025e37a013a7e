"""Subtype chains: the ordered source types of forward conversions."""

from .types import TypeDescriptor, peel, strip_parens

SubtypeChain = tuple[TypeDescriptor, ...]


def build_chain(root: TypeDescriptor, depth: int | None) -> SubtypeChain:
    """Peel `root` layer by layer, outermost first.

    `depth` caps the chain length; None peels until a leaf is reached. The
    root is always included and parentheses never produce an entry.
    """
    if depth is not None and depth < 1:
        raise ValueError(f"Chain depth must be positive or None, got {depth}")

    chain = [strip_parens(root)]
    while depth is None or len(chain) < depth:
        inner = peel(chain[-1])
        if inner is None:
            break
        chain.append(inner)

    return tuple(chain)
