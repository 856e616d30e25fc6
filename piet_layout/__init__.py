"""piet-layout - packed GPU layout compiler for piet scene schemas."""
from importlib.metadata import PackageNotFoundError, version as _dist_version
from pathlib import Path


def _checkout_version() -> str:
    """Version declared in pyproject.toml when running from a source tree."""
    import tomllib

    pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
    try:
        with pyproject.open("rb") as f:
            project = tomllib.load(f).get("project", {})
    except (OSError, tomllib.TOMLDecodeError):
        return "unknown"
    return str(project.get("version", "unknown"))


try:
    __version__ = _dist_version("piet-layout")
    __dev__ = False
except PackageNotFoundError:
    __version__ = _checkout_version()
    __dev__ = True
