"""Giftwrap conversion generator."""

from .annotations import parse_annotation as parse_annotation
from .annotations import resolve_config as resolve_config
from .chain import build_chain as build_chain
from .conversions import *
from .derivation import derive as derive
from .derivation import derive_declaration as derive_declaration
from .errors import *
from .expr import synthesize_forward as synthesize_forward
from .loader import Declaration as Declaration
from .loader import load as load
from .loader import loads as loads
from .rust import render as render
from .types import *
from .unwrap import derive_unwrap as derive_unwrap
from .wrap import derive_wrap as derive_wrap
