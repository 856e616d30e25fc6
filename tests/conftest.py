from pathlib import Path

import pytest

from piet_layout.internals.parser import parse_to_ast
from piet_layout.layout.sizing import TypeSizing
from piet_layout.semantics.type_table import build_type_table

FIXTURES = Path(__file__).parent / "fixtures"


def _sizing_for(src: str) -> TypeSizing:
    module, _ = parse_to_ast(src)
    return TypeSizing(build_type_table(module))


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def scene_source() -> str:
    return (FIXTURES / "scene.pgs").read_text(encoding="utf-8")


@pytest.fixture
def ptcl_source() -> str:
    return (FIXTURES / "ptcl.pgs").read_text(encoding="utf-8")


@pytest.fixture
def sizing_for():
    """Parse, resolve and return a fresh layout calculator for a schema string."""
    return _sizing_for
