"""Combined derivation entry points."""

from .conversions import CodeFragment
from .loader import Declaration
from .types import Target
from .unwrap import derive_unwrap
from .wrap import derive_wrap


def derive(target: Target, *, wrap: bool = True, unwrap: bool = True) -> CodeFragment:
    """Derive forward and/or reverse conversions for a target.

    Nothing is returned if either derivation fails.
    """
    fragment = CodeFragment()
    if wrap:
        fragment += derive_wrap(target)
    if unwrap:
        fragment += derive_unwrap(target)
    return fragment


def derive_declaration(declaration: Declaration) -> CodeFragment:
    """Derive the conversions requested by a loaded declaration."""
    return derive(
        declaration.target,
        wrap="Wrap" in declaration.derives,
        unwrap="Unwrap" in declaration.derives,
    )
