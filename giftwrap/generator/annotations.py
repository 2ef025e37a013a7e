"""Annotation parsing using Lark, resolved into derivation options."""

import logging
import os
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from lark import Lark, Token
from lark.exceptions import LarkError
from lark.visitors import Transformer

from .errors import MalformedAnnotation
from .types import Config

logger = logging.getLogger(__name__)

_g_parser: Lark | None = None

# Annotation holding several options: giftwrap(wrapDepth = 2, noUnwrap)
OPTION_GROUP = "giftwrap"

# Accepted spellings -> serialized Config field name
ALIASES = {
    "wrapDepth": "wrapDepth",
    "wrap_depth": "wrapDepth",
    "noWrap": "noWrap",
    "no_wrap": "noWrap",
    "noUnwrap": "noUnwrap",
    "no_unwrap": "noUnwrap",
}

FLAGS = frozenset(["noWrap", "noUnwrap"])

# Largest wrapDepth accepted (u32)
MAX_WRAP_DEPTH = 2**32 - 1

_LEADING_NAME = re.compile(r"\s*([A-Za-z_][A-Za-z0-9_]*)")


@dataclass
class AnnotationArg:
    """An argument of an annotation. `name` is None for positional values."""

    name: str | None
    value: Any


@dataclass
class Annotation:
    """A parsed annotation."""

    name: str
    arguments: list[AnnotationArg]


class TreeTransformer(Transformer):
    """Transform parse tree into annotations."""

    def start(self, args: list[Any]) -> Annotation:
        return args[0]

    def annotation(self, args: list[Any]) -> Annotation:
        arguments = args[1] if len(args) > 1 and args[1] is not None else []
        return Annotation(name=str(args[0]), arguments=arguments)

    def arguments(self, args: list[Any]) -> list[AnnotationArg]:
        return [a for a in args if isinstance(a, AnnotationArg)]

    def keyed(self, args: list[Any]) -> AnnotationArg:
        return AnnotationArg(name=str(args[0]), value=args[1])

    def positional(self, args: list[Any]) -> AnnotationArg:
        return AnnotationArg(name=None, value=args[0])

    def bare(self, args: list[Any]) -> AnnotationArg:
        return AnnotationArg(name=str(args[0]), value=True)

    def value(self, args: list[Token]) -> bool | int:
        token = args[0]
        if token.type == "BOOL":
            return str(token) == "true"
        return int(token)


def _parser() -> Lark:
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/annotation.lark", encoding="utf-8") as f:
            grammar = f.read()
        _g_parser = Lark(grammar, parser="lalr")
    return _g_parser


def parse_annotation(text: str, location: str = "<annotation>") -> Annotation:
    """Parse a single annotation such as `wrapDepth(2)`."""
    try:
        tree = _parser().parse(text)
    except LarkError as e:
        raise MalformedAnnotation(location, f"Malformed annotation {text!r}") from e
    return TreeTransformer().transform(tree)


def _check(key: str, value: Any, location: str) -> None:
    if key == "wrapDepth":
        if (
            isinstance(value, bool)
            or not isinstance(value, int)
            or not 0 <= value <= MAX_WRAP_DEPTH
        ):
            raise MalformedAnnotation(location, "wrapDepth must be an unsigned integer")
    elif not isinstance(value, bool):
        raise MalformedAnnotation(location, f"{key} must be true or false")


def _options(annotation: Annotation, location: str) -> dict[str, Any]:
    """Options set by one recognized annotation."""
    options: dict[str, Any] = {}

    if annotation.name == OPTION_GROUP:
        for arg in annotation.arguments:
            if arg.name is None:
                raise MalformedAnnotation(
                    location, f"{OPTION_GROUP}(...) options must be named, got {arg.value!r}"
                )
            if arg.name not in ALIASES:
                raise MalformedAnnotation(location, f"Unknown option {arg.name!r}")
            options[ALIASES[arg.name]] = arg.value
        return options

    key = ALIASES[annotation.name]
    if not annotation.arguments:
        if key not in FLAGS:
            raise MalformedAnnotation(location, f"{annotation.name} requires a value")
        options[key] = True
    elif len(annotation.arguments) == 1 and annotation.arguments[0].name is None:
        options[key] = annotation.arguments[0].value
    else:
        raise MalformedAnnotation(location, f"{annotation.name} takes a single value")
    return options


def resolve_config(
    annotations: Iterable[str],
    location: str = "<annotation>",
    base: Config | None = None,
) -> Config:
    """Resolve annotation strings into a Config.

    Later annotations override earlier ones and `base`.
    """
    options = (base or Config()).to_dict()
    for text in annotations:
        if not isinstance(text, str):
            raise MalformedAnnotation(location, f"Annotation must be a string, got {text!r}")
        match = _LEADING_NAME.match(text)
        name = match.group(1) if match else ""
        if name != OPTION_GROUP and name not in ALIASES:
            logger.debug("%s: ignoring annotation %r", location, name)
            continue
        options.update(_options(parse_annotation(text, location), location))

    for key, value in options.items():
        if key == "wrapDepth" and value is None:
            continue
        _check(key, value, location)

    return Config.from_dict(options)
