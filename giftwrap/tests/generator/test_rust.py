"""Tests for Rust code rendering."""

from giftwrap.generator import CodeFragment, derive, derive_unwrap, derive_wrap, load, render
from giftwrap.generator.expr import AddressOf, Construct, Input
from giftwrap.generator.rust import impl_generics, owner_type, render_expr, render_type
from giftwrap.generator.types import (
    Alternative,
    Config,
    Field,
    FieldStyle,
    GenericKind,
    GenericParam,
    NamedGeneric,
    Opaque,
    Parenthesized,
    Pointer,
    Product,
    Reference,
    Sum,
)


def g(name, *args):
    return NamedGeneric(name, tuple(args))


def describe_render_type():
    def renders_paths(expect):
        expect(render_type(g("i64"))) == "i64"
        expect(render_type(g("std::sync::Arc", g("Mutex", g("T"))))) == "std::sync::Arc<Mutex<T>>"

    def renders_lifetimes_before_type_arguments(expect):
        cow = NamedGeneric("Cow", (g("str"),), ("'a",))
        expect(render_type(cow)) == "Cow<'a, str>"

    def renders_pointers_and_references(expect):
        expect(render_type(Pointer(g("u8")))) == "*const u8"
        expect(render_type(Pointer(g("u8"), mutable=True))) == "*mut u8"
        expect(render_type(Reference(g("str")))) == "&str"
        expect(render_type(Reference(g("T"), mutable=True, lifetime="'a"))) == "&'a mut T"

    def renders_parentheses_and_opaque_types(expect):
        expect(render_type(Parenthesized(g("u8")))) == "(u8)"
        expect(render_type(g("Vec", Opaque("[u8; 4]")))) == "Vec<[u8; 4]>"


def describe_render_expr():
    def renders_nested_constructions(expect):
        expr = Construct("Arc", Construct("Mutex", Input()))
        expect(render_expr(expr)) == "Arc::<_>::from(Mutex::<_>::from(f))"

    def renders_address_taking(expect):
        expect(render_expr(AddressOf(Input()))) == "&f"
        expect(render_expr(Construct("Box", AddressOf(Input(), mutable=True)))) == (
            "Box::<_>::from(&mut f)"
        )


def describe_generics():
    def renders_every_parameter_kind(expect):
        target = Product(
            "Buffer",
            FieldStyle.UNNAMED,
            (Field(None, g("u8")),),
            generics=(
                GenericParam("'a", GenericKind.LIFETIME),
                GenericParam("T", bounds="Clone + Send"),
                GenericParam("N", GenericKind.CONST, const_type="usize"),
            ),
        )
        expect(impl_generics(target)) == "<'a, T: Clone + Send, const N: usize>"
        expect(owner_type(target)) == "Buffer<'a, T, N>"

    def renders_nothing_without_parameters(expect):
        target = Product("Plain", FieldStyle.UNNAMED, (Field(None, g("u8")),))
        expect(impl_generics(target)) == ""
        expect(owner_type(target)) == "Plain"


def describe_render():
    def starts_with_a_header(expect):
        expect(render(CodeFragment()).startswith("// Generated by giftwrap")) == True

    def renders_struct_conversions(expect):
        target = Product("MyStruct", FieldStyle.UNNAMED, (Field(None, g("i64")),))
        code = derive(target).render()

        expect("impl std::convert::From<i64> for MyStruct {" in code) == True
        expect("    fn from(f: i64) -> Self {" in code) == True
        expect("        Self(f)" in code) == True
        expect("impl std::convert::From<MyStruct> for i64 {" in code) == True
        expect("    fn from(f: MyStruct) -> Self {" in code) == True
        expect("        f.0" in code) == True

    def renders_named_fields(expect):
        target = Product("MyNamedStruct", FieldStyle.NAMED, (Field("f", g("i64")),))
        code = derive(target).render()

        expect("Self { f: f }" in code) == True
        expect("        f.f" in code) == True

    def renders_chained_construction(expect, fixture_path):
        _, some_enum = load(fixture_path("enum.json"))
        code = derive_wrap(some_enum.target).render()

        expect("impl std::convert::From<Arc<Mutex<bool>>> for SomeEnum {" in code) == True
        expect("impl std::convert::From<Mutex<bool>> for SomeEnum {" in code) == True
        expect("impl std::convert::From<bool> for SomeEnum {" in code) == True
        expect("Self::DeepVariant(Arc::<_>::from(Mutex::<_>::from(f)))" in code) == True
        expect("Self::DeepVariant(Arc::<_>::from(f))" in code) == True
        expect("From<f64>" in code) == False

    def renders_generics_and_where_clauses(expect, fixture_path):
        borrowed = load(fixture_path("structs.json"))[3].target
        code = derive(borrowed).render()

        expect(
            "impl<'a, T: Clone> std::convert::From<&'a T> for Borrowed<'a, T> where T: Default {"
            in code
        ) == True
        expect("Self { inner: f }" in code) == True
        expect("TryFrom" in code) == False

    def renders_exhaustive_matches(expect):
        target = Sum(
            "SomeEnum",
            (
                Alternative("Number", FieldStyle.UNNAMED, (Field(None, g("i64")),)),
                Alternative("Named", FieldStyle.NAMED, (Field("n", g("i64")),)),
                Alternative("Text", FieldStyle.UNNAMED, (Field(None, g("String")),)),
                Alternative("Empty", FieldStyle.UNIT, (), Config(no_unwrap=True)),
            ),
        )
        code = derive_unwrap(target).render()

        expect("impl std::convert::TryFrom<SomeEnum> for i64 {" in code) == True
        expect("    type Error = &'static str;" in code) == True
        expect(
            "    fn try_from(f: SomeEnum) -> std::result::Result<Self, Self::Error> {" in code
        ) == True
        expect("        match f {" in code) == True
        expect("SomeEnum::Number(v) => Ok(v)," in code) == True
        expect("SomeEnum::Named { n } => Ok(n)," in code) == True
        expect("SomeEnum::Text(..) => Err(\"Can't convert SomeEnum::Text into i64\")," in code) == True
        expect("SomeEnum::Empty => Err(\"Can't convert SomeEnum::Empty into i64\")," in code) == True
        expect("SomeEnum::Named { .. } => Err(\"Can't convert SomeEnum::Named into String\")," in code) == True
        expect(code.count("impl std::convert::TryFrom<SomeEnum>")) == 2
