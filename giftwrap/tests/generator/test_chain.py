"""Tests for subtype chains and forward expressions."""

import pytest

from giftwrap.generator import build_chain, synthesize_forward
from giftwrap.generator.expr import AddressOf, Construct, Input
from giftwrap.generator.types import NamedGeneric, Opaque, Parenthesized, Pointer, Reference


def g(name, *args):
    return NamedGeneric(name, tuple(args))


LEAF = g("Leaf")
NESTED = g("Outer", g("Inner", LEAF))


def describe_build_chain():
    def contains_only_the_root_at_depth_one(expect):
        expect(build_chain(NESTED, 1)) == (NESTED,)

    def stops_at_the_depth_bound(expect):
        expect(build_chain(NESTED, 2)) == (NESTED, g("Inner", LEAF))

    def stops_at_a_leaf_before_the_bound(expect):
        expect(build_chain(NESTED, 10)) == (NESTED, g("Inner", LEAF), LEAF)

    def peels_until_a_leaf_when_unbounded(expect):
        expect(build_chain(NESTED, None)) == (NESTED, g("Inner", LEAF), LEAF)

    def never_exceeds_the_bound(expect):
        deep = LEAF
        for name in "ABCDEFG":
            deep = g(name, deep)

        expect(len(build_chain(deep, None))) == 8
        for n in range(1, 12):
            expect(len(build_chain(deep, n))) == min(n, 8)

    def follows_only_the_first_type_argument(expect):
        result = g("Result", g("Vec", LEAF), g("Error"))
        expect(build_chain(result, None)) == (result, g("Vec", LEAF), LEAF)

    def keeps_lifetimes_out_of_traversal(expect):
        cow = NamedGeneric("Cow", (g("str"),), ("'a",))
        expect(build_chain(cow, None)) == (cow, g("str"))

    def stops_at_opaque_types(expect):
        boxed = g("Box", Opaque("[u8; 4]"))
        expect(build_chain(boxed, None)) == (boxed, Opaque("[u8; 4]"))

    def stops_at_a_type_without_arguments(expect):
        expect(build_chain(g("i64"), None)) == (g("i64"),)

    def peels_pointers_and_references(expect):
        ref = Reference(Pointer(LEAF, mutable=True), lifetime="'a")
        expect(build_chain(ref, None)) == (ref, Pointer(LEAF, mutable=True), LEAF)

    def skips_parentheses_for_free(expect):
        wrapped = Parenthesized(g("Outer", Parenthesized(g("Inner", Parenthesized(LEAF)))))
        chain = build_chain(wrapped, None)

        expect(len(chain)) == 3
        expect(chain[0]) == wrapped.inner
        expect(chain[1]) == g("Inner", Parenthesized(LEAF))
        expect(chain[2]) == LEAF

    def gives_the_same_chain_with_parentheses_around_the_root(expect):
        for depth in (1, 2, 3, None):
            expect(build_chain(Parenthesized(Parenthesized(NESTED)), depth)) == build_chain(
                NESTED, depth
            )

    def rejects_a_zero_depth(expect):
        with pytest.raises(ValueError):
            build_chain(LEAF, 0)


def describe_synthesize_forward():
    def returns_the_input_for_an_empty_prefix(expect):
        expect(synthesize_forward([])) == Input()
        expect(synthesize_forward([]).depth) == 0

    def constructs_generics_inner_first(expect):
        chain = build_chain(NESTED, None)
        expr = synthesize_forward(chain[:2])

        expect(expr) == Construct("Outer", Construct("Inner", Input()))
        expect(expr.depth) == 2

    def constructs_a_single_layer(expect):
        expect(synthesize_forward(build_chain(NESTED, None)[:1])) == Construct("Outer", Input())

    def takes_the_address_for_pointers_and_references(expect):
        expr = synthesize_forward([g("Box", Reference(LEAF, mutable=True)), Reference(LEAF, True)])
        expect(expr) == Construct("Box", AddressOf(Input(), mutable=True))

        expect(synthesize_forward([Pointer(LEAF)])) == AddressOf(Input())

    def leaves_other_entries_unchanged(expect):
        expect(synthesize_forward([Opaque("(i32, i32)")])) == Input()
