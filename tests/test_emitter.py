import pytest

from piet_layout.compiler.pipeline import compile_schema
from piet_layout.internals.errors import ResolutionError, UnsupportedShapeError
from piet_layout.internals.report import Reporter


def test_scene_matches_golden_output(scene_source, fixtures_dir):
    expected = (fixtures_dir / "scene.expected").read_text(encoding="utf-8")

    result = compile_schema(scene_source)

    assert result.text == expected
    assert result.warnings == []


def test_output_is_deterministic(ptcl_source):
    assert compile_schema(ptcl_source).text == compile_schema(ptcl_source).text


def test_aliases_precede_declarations(ptcl_source):
    lines = compile_schema(ptcl_source).text.splitlines()

    assert lines[:4] == [
        "typedef uint CmdLineRef;",
        "typedef uint CmdFillRef;",
        "typedef uint SegmentRef;",
        "typedef uint CmdRef;",
    ]
    assert lines[4] == ""


def test_vector_and_reference_accessors(ptcl_source):
    text = compile_schema(ptcl_source).text

    assert "struct CmdLinePacked {\n    uint tag;\n    float2 start;\n    float2 end;\n};" in text
    assert ("float2 CmdLine_start(const device char *buf, CmdLineRef ref) {\n"
            "    return *((const device float2 *)(buf + ref + 8));\n}") in text
    assert ("SegmentRef CmdFill_seg_ref(const device char *buf, CmdFillRef ref) {\n"
            "    return *((const device SegmentRef *)(buf + ref + 4));\n}") in text
    assert "int CmdFill_backdrop(const device char *buf, CmdFillRef ref)" in text
    assert "float4 points;" in text
    assert "(buf + ref));" in text


def test_enum_tags_count_from_one(ptcl_source):
    text = compile_schema(ptcl_source).text

    assert "struct Cmd {\n    uint tag;\n    uint body[5];\n};" in text
    defines = [line for line in text.splitlines() if line.startswith("#define")]
    assert defines == [
        "#define Cmd_End 1",
        "#define Cmd_Line 2",
        "#define Cmd_Fill 3",
        "#define Cmd_Jump 4",
    ]


def test_inline_fields_get_no_accessor(scene_source):
    text = compile_schema(scene_source).text

    assert "PietGlyph_scene_bbox" not in text
    assert "PietGlyph_read" in text


def test_reference_to_undeclared_type_warns():
    reporter = Reporter()
    result = compile_schema("struct A { link: Ref<Missing> }", reporter=reporter)

    assert "    uint link;" in result.text
    assert "uint A_link(const device char *buf, ARef ref)" in result.text
    assert [w.code for w in result.warnings] == ["CW0101"]
    assert "field 'link' of struct 'A'" in result.warnings[0].message
    assert reporter.has_warnings and not reporter.has_errors


def test_reference_to_non_name_is_plain_word():
    result = compile_schema("struct A { raw: Ref<[u32; 4]> }")

    assert "    uint raw;" in result.text
    assert result.warnings == []


def test_scalar_kind_spellings():
    text = compile_schema(
        "struct S { a: i32, b: f32, c: u32, d: u16, e: u16x2, f: u8x4, g: u8 }"
    ).text

    body = text.split("struct SPacked {\n", 1)[1].split("};", 1)[0]
    assert body.splitlines() == [
        "    int a;", "    float b;", "    uint c;", "    uint d;",
        "    uint e;", "    uint f;", "    uint g;",
    ]


def test_empty_enum_has_empty_body():
    text = compile_schema("enum Never {}").text
    assert "    uint body[0];" in text


@pytest.mark.parametrize("src,error", [
    ("struct A { b: Missing }", ResolutionError),
    ("enum E { X } struct A { e: E }", UnsupportedShapeError),
])
def test_layout_errors_produce_no_text(src, error):
    with pytest.raises(error):
        compile_schema(src)
