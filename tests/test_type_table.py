import pytest

from piet_layout.internals.errors import ResolutionError, UnsupportedShapeError
from piet_layout.internals.parser import parse_to_ast
from piet_layout.schema.ast import StructDef
from piet_layout.semantics.dependency_graph import build_dependency_graph
from piet_layout.semantics.type_table import build_type_table


def table_for(src):
    module, _ = parse_to_ast(src)
    return build_type_table(module)


def test_lookup_and_order(scene_source):
    table = table_for(scene_source)

    assert table.module_name == "scene"
    assert table.order == ("BBox", "SRGBColor", "PietGlyph", "PietCircle", "PietItem")
    assert isinstance(table.lookup("BBox"), StructDef)
    assert table.lookup("Missing") is None
    assert [d.name for d in table.defs()] == list(table.order)


def test_leading_payload_structs_are_tagged(scene_source, ptcl_source):
    scene = table_for(scene_source)
    assert scene.tagged_structs == frozenset({"PietGlyph", "PietCircle"})
    assert not scene.is_tagged("BBox")

    ptcl = table_for(ptcl_source)
    assert ptcl.tagged_structs == frozenset({"CmdLine", "CmdFill"})
    assert not ptcl.is_tagged("Segment")


def test_table_is_read_only(scene_source):
    table = table_for(scene_source)
    with pytest.raises(TypeError):
        table.by_name["Extra"] = table.lookup("BBox")


def test_duplicate_type_name():
    with pytest.raises(ResolutionError) as info:
        table_for("struct A { x: u32 } enum A { X }")
    assert info.value.code == "CE0104"
    assert "'A'" in info.value.message


def test_duplicate_field():
    with pytest.raises(ResolutionError) as info:
        table_for("struct A { x: u32, x: f32 }")
    assert info.value.code == "CE0105"


def test_duplicate_variant():
    with pytest.raises(ResolutionError) as info:
        table_for("enum E { X, Y, X }")
    assert info.value.code == "CE0106"


def test_self_containment_is_a_cycle():
    with pytest.raises(UnsupportedShapeError) as info:
        table_for("struct S { next: S }")
    assert info.value.code == "CE0201"
    assert "S -> S" in info.value.message


def test_mutual_containment_reports_path():
    with pytest.raises(UnsupportedShapeError) as info:
        table_for("struct A { b: B } struct B { a: A }")
    assert info.value.code == "CE0201"
    assert "A -> B -> A" in info.value.message


def test_references_break_cycles():
    table = table_for("struct Node { value: u32, next: Ref<Node> }")
    assert table.order == ("Node",)


def test_multi_field_variant_rejected():
    with pytest.raises(UnsupportedShapeError) as info:
        table_for("enum E { Pair(u32, u32) }")
    assert info.value.code == "CE0202"
    assert "E::Pair" in info.value.message


def test_non_leading_inline_payload_rejected():
    with pytest.raises(UnsupportedShapeError) as info:
        table_for("struct S {} enum E { Mixed(u32, S) }")
    assert info.value.code == "CE0202"
    assert "'S'" in info.value.message


def test_undeclared_inline_name_is_resolved_lazily():
    # Resolution of inline names happens when the layout is computed.
    table = table_for("struct A { b: Missing }")
    assert table.order == ("A",)


def test_dependency_graph_skips_references_and_undeclared():
    module, _ = parse_to_ast("""
        struct A { b: B, r: Ref<C>, m: Missing }
        struct B { x: u32 }
        struct C { x: u32 }
        enum E { Has(A) }
    """)
    graph = build_dependency_graph(module.defs)

    assert graph.get_dependencies("A") == ["B"]
    assert graph.get_dependencies("E") == ["A"]
    assert graph.find_cycle() == []


def test_tag_field_reserved_in_payload_struct():
    with pytest.raises(ResolutionError) as info:
        table_for("struct A { tag: u32 } enum E { V(A) }")
    assert info.value.code == "CE0107"
    assert "'A'" in info.value.message


def test_tag_field_allowed_in_plain_struct():
    table = table_for("struct A { tag: u32 }")
    assert not table.is_tagged("A")
