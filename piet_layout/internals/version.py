from __future__ import annotations
import sys, platform

from piet_layout import __version__ as app_ver, __dev__ as is_dev


def _get_versions() -> dict[str, str]:
    from importlib.metadata import version, PackageNotFoundError

    versions = {
        "app": app_ver,
        "python": platform.python_version(),
    }
    for dist in ("lark", "msgpack"):
        try:
            versions[dist] = version(dist)
        except PackageNotFoundError:
            versions[dist] = "unknown"
    return versions


def version_line() -> str:
    v = _get_versions()
    dev_marker = " (dev)" if is_dev else ""
    return f"piet-layout {v['app']}{dev_marker} • Python {v['python']} • lark {v['lark']} • msgpack {v['msgpack']}"


def print_banner(stream=None) -> None:
    """Print the version banner.

    Goes to stderr by default so generated text on stdout stays clean.
    """
    stream = stream or sys.stderr
    use_ansi = getattr(stream, "isatty", lambda: False)()
    BOLD, RESET = ("\x1b[1m", "\x1b[0m") if use_ansi else ("", "")
    print(f"{BOLD}{version_line()}{RESET}", file=stream)
