"""Rust code generator for derived conversions."""

from jinja2 import Environment, PackageLoader

from .conversions import (
    CodeFragment,
    Conversion,
    FallibleReverseConversion,
    ForwardConversion,
    MatchArm,
    ReverseConversion,
)
from .expr import AddressOf, Construct, Expr, Input
from .types import (
    FieldStyle,
    GenericKind,
    GenericParam,
    NamedGeneric,
    Opaque,
    Parenthesized,
    Pointer,
    Reference,
    Target,
    TypeDescriptor,
)

env = Environment(
    loader=PackageLoader("giftwrap.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

template = env.get_template("rust.rs.j2")

# Name of the conversion argument in every generated function
INPUT = "f"


def render_type(t: TypeDescriptor) -> str:
    """Spell a type descriptor as Rust source."""
    if isinstance(t, NamedGeneric):
        args = [*t.lifetimes, *(render_type(a) for a in t.args)]
        if args:
            return f"{t.name}<{', '.join(args)}>"
        return t.name
    if isinstance(t, Pointer):
        return f"*{'mut' if t.mutable else 'const'} {render_type(t.inner)}"
    if isinstance(t, Reference):
        lifetime = f"{t.lifetime} " if t.lifetime else ""
        mutable = "mut " if t.mutable else ""
        return f"&{lifetime}{mutable}{render_type(t.inner)}"
    if isinstance(t, Parenthesized):
        return f"({render_type(t.inner)})"
    if isinstance(t, Opaque):
        return t.text
    raise ValueError(f"Unknown type descriptor: {t!r}")


def render_expr(e: Expr) -> str:
    """Spell a construction expression as Rust source."""
    if isinstance(e, Input):
        return INPUT
    if isinstance(e, Construct):
        return f"{e.generic}::<_>::from({render_expr(e.inner)})"
    if isinstance(e, AddressOf):
        return f"&{'mut ' if e.mutable else ''}{render_expr(e.inner)}"
    raise ValueError(f"Unknown expression: {e!r}")


def _param_decl(param: GenericParam) -> str:
    if param.kind == GenericKind.CONST:
        return f"const {param.name}: {param.const_type}"
    if param.bounds:
        return f"{param.name}: {param.bounds}"
    return param.name


def impl_generics(owner: Target) -> str:
    """Generic parameters as declared after `impl`."""
    if not owner.generics:
        return ""
    return "<" + ", ".join(_param_decl(p) for p in owner.generics) + ">"


def owner_type(owner: Target) -> str:
    """The target type applied to its own generic parameters."""
    if not owner.generics:
        return owner.name
    return f"{owner.name}<{', '.join(p.name for p in owner.generics)}>"


def where_clause(owner: Target) -> str:
    if not owner.where_clause:
        return ""
    return f" where {owner.where_clause}"


def construct(conversion: ForwardConversion) -> str:
    """Body of a forward conversion."""
    path = "Self" if conversion.variant is None else f"Self::{conversion.variant}"
    value = render_expr(conversion.value)
    if conversion.field is None:
        return f"{path}({value})"
    return f"{path} {{ {conversion.field}: {value} }}"


def project(conversion: ReverseConversion) -> str:
    """Body of an infallible reverse conversion."""
    return f"{INPUT}.{conversion.field if conversion.field is not None else 0}"


def _rust_str(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def match_arm(owner: Target, arm: MatchArm) -> str:
    """One arm of the exhaustive match in a fallible reverse conversion."""
    path = f"{owner.name}::{arm.variant}"

    if arm.success:
        if arm.field is None:
            return f"{path}(v) => Ok(v),"
        return f"{path} {{ {arm.field} }} => Ok({arm.field}),"

    if arm.style == FieldStyle.NAMED:
        pattern = f"{path} {{ .. }}"
    elif arm.style == FieldStyle.UNNAMED:
        pattern = f"{path}(..)"
    else:
        pattern = path
    return f"{pattern} => Err({_rust_str(arm.message or '')}),"


def _is_forward(conversion: Conversion) -> bool:
    return isinstance(conversion, ForwardConversion)


def _is_fallible(conversion: Conversion) -> bool:
    return isinstance(conversion, FallibleReverseConversion)


def render(fragment: CodeFragment) -> str:
    """Render derived conversions to Rust source code."""
    return template.render(
        fragment=fragment,
        is_forward=_is_forward,
        is_fallible=_is_fallible,
        render_type=render_type,
        impl_generics=impl_generics,
        owner_type=owner_type,
        where_clause=where_clause,
        construct=construct,
        project=project,
        match_arm=match_arm,
    )
