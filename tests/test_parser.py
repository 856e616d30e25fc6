import pytest

from piet_layout.internals.errors import ParseError
from piet_layout.internals.parser import parse_to_ast
from piet_layout.schema.ast import EnumDef, StructDef
from piet_layout.schema.typesys import NamedRef, RefType, ScalarKind, ScalarType, VectorType


def test_module_wrapper_and_declaration_order(scene_source):
    module, _ = parse_to_ast(scene_source)

    assert module.name == "scene"
    assert [d.name for d in module.defs] == ["BBox", "SRGBColor", "PietGlyph", "PietCircle", "PietItem"]
    assert isinstance(module.defs[0], StructDef)
    assert isinstance(module.defs[-1], EnumDef)


def test_bare_declarations_form_anonymous_module(ptcl_source):
    module, _ = parse_to_ast(ptcl_source)

    assert module.name is None
    assert [d.name for d in module.structs] == ["CmdLine", "CmdFill", "Segment"]
    assert [d.name for d in module.enums] == ["Cmd"]


@pytest.mark.parametrize("keyword,kind", [
    ("i32", ScalarKind.I32),
    ("f32", ScalarKind.F32),
    ("u32", ScalarKind.U32),
    ("u16", ScalarKind.U16),
    ("u16x2", ScalarKind.U16x2),
    ("u8x4", ScalarKind.U8x4),
    ("u8", ScalarKind.U8),
])
def test_scalar_keywords(keyword, kind):
    module, _ = parse_to_ast(f"struct A {{ v: {keyword} }}")
    assert module.defs[0].fields[0].ty == ScalarType(kind)


def test_field_type_shapes():
    module, _ = parse_to_ast("""
        struct A {
            pos: [f32; 2],
            inner: B,
            link: Ref<B>,
            raw: Ref<[u32; 4]>,
            nested: Ref<Ref<B>>,
        }
    """)
    types = [f.ty for f in module.defs[0].fields]

    assert types == [
        VectorType(ScalarKind.F32, 2),
        NamedRef("B"),
        RefType(NamedRef("B")),
        RefType(VectorType(ScalarKind.U32, 4)),
        RefType(RefType(NamedRef("B"))),
    ]


def test_enum_variants_and_payloads():
    module, _ = parse_to_ast("enum E { Empty, One(Item), Word(u32), }")
    variants = module.defs[0].variants

    assert [v.name for v in variants] == ["Empty", "One", "Word"]
    assert variants[0].payload == []
    assert variants[1].payload == [NamedRef("Item")]
    assert variants[2].payload == [ScalarType(ScalarKind.U32)]


def test_empty_struct_and_comments():
    module, _ = parse_to_ast("""
        // nothing here
        struct Empty {}
        /* still nothing */
    """)
    assert module.defs[0].fields == []


def test_spans_point_at_declarations():
    module, _ = parse_to_ast("struct A {\n    x: u32,\n}\n")
    struct = module.defs[0]

    assert struct.name_span.line == 1
    assert struct.fields[0].loc.line == 2


def test_missing_field_name():
    with pytest.raises(ParseError) as info:
        parse_to_ast("struct A { u32 }")
    assert info.value.code == "CE0002"
    assert "'A'" in info.value.message


def test_variable_length_array():
    with pytest.raises(ParseError) as info:
        parse_to_ast("struct A { data: [u32; N] }")
    assert info.value.code == "CE0004"
    assert "field 'data' of struct 'A'" in info.value.message


def test_non_scalar_array_element():
    with pytest.raises(ParseError) as info:
        parse_to_ast("struct A { boxes: [BBox; 4] }")
    assert info.value.code == "CE0005"
    assert "'BBox'" in info.value.message


def test_nested_array_is_non_scalar():
    with pytest.raises(ParseError) as info:
        parse_to_ast("struct A { m: [[f32; 2]; 2] }")
    assert info.value.code == "CE0005"


def test_zero_length_array():
    with pytest.raises(ParseError) as info:
        parse_to_ast("struct A { nothing: [u32; 0] }")
    assert info.value.code == "CE0006"


@pytest.mark.parametrize("shape", ["Vec<u32>", "Ref<A, B>", "Box<A>"])
def test_unsupported_generic_wrappers(shape):
    with pytest.raises(ParseError) as info:
        parse_to_ast(f"struct A {{ v: {shape} }}")
    assert info.value.code == "CE0003"


def test_unsupported_type_in_variant_names_variant():
    with pytest.raises(ParseError) as info:
        parse_to_ast("enum E { Many(Vec<u32>) }")
    assert "variant 'E::Many'" in info.value.message


def test_syntax_error_carries_location():
    with pytest.raises(ParseError) as info:
        parse_to_ast("struct A {\n    x: u32\n    y: u32\n}")
    err = info.value
    assert err.code == "CE0001"
    assert err.span is not None
    assert err.span.line == 3


def test_item_attributes_are_ignored():
    module, _ = parse_to_ast("#[rust_encode]\nmod scene {\n    #[derive]\n    struct A { x: u32 }\n}")

    assert module.name == "scene"
    assert [d.name for d in module.defs] == ["A"]


def test_keyword_hints_are_readable():
    with pytest.raises(ParseError) as info:
        parse_to_ast("mod m { x }")
    message = info.value.message
    assert "'struct'" in message
    assert "'enum'" in message
    assert "STRUCT" not in message
