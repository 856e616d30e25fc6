"""Diagnostic collection and rendering for schema compilation."""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, TextIO

from lark import Token


class C:
    """ANSI color/style escape codes."""
    RESET = "\x1b[0m"
    BOLD  = "\x1b[1m"
    DIM   = "\x1b[2m"
    RED   = "\x1b[31m"
    YELLOW = "\x1b[33m"
    CYAN  = "\x1b[36m"
    GRAY  = "\x1b[90m"


@dataclass(frozen=True)
class Span:
    line: int
    col: int
    end_line: int
    end_col: int


@dataclass
class Diagnostic:
    kind: str
    code: str
    message: str
    span: Optional[Span] = None


def span_of(t: Any) -> Optional[Span]:
    """Source span of a lark Tree (via propagated meta) or Token."""
    m = getattr(t, "meta", None)
    if m is not None and not getattr(m, "empty", True):
        return Span(m.line, m.column, m.end_line, m.end_column)
    if isinstance(t, Token):
        line = getattr(t, "line", None)
        col = getattr(t, "column", None)
        if line is not None and col is not None:
            end_line = getattr(t, "end_line", None)
            end_col = getattr(t, "end_column", None)
            return Span(line, col, end_line or line, end_col or col)
    return None


def _display_name(filename: str) -> str:
    try:
        rel_path = Path(filename).resolve().relative_to(Path.cwd())
        return f"./{rel_path}"
    except (ValueError, OSError):
        return Path(filename).name or filename


class Reporter:
    def __init__(self, source: Optional[str] = None, filename: str = "<schema>") -> None:
        self.source = source
        self.filename = filename
        self.items: List[Diagnostic] = []

    def error(self, code: str, msg: str, span: Optional[Span]) -> None:
        self.items.append(Diagnostic("error", code, msg, span))

    def warn(self, code: str, msg: str, span: Optional[Span]) -> None:
        self.items.append(Diagnostic("warning", code, msg, span))

    @property
    def has_errors(self) -> bool:
        return any(d.kind == "error" for d in self.items)

    @property
    def has_warnings(self) -> bool:
        return any(d.kind == "warning" for d in self.items)

    def format(self, use_color: bool = True, use_unicode: bool = True) -> str:
        """Render all diagnostics.

        use_color   → ANSI colorize location/kind/markers
        use_unicode → use │ / ╰ guides instead of the ASCII | / ` fallback
        """
        out: List[str] = []
        src_lines = self.source.splitlines() if self.source else []
        filename = self.filename if self.filename.startswith("<") else _display_name(self.filename)

        for d in self.items:
            loc = f"{filename}:{d.span.line}:{d.span.col}" if d.span else filename
            message = d.message if d.message.endswith('.') else f"{d.message}."

            if use_color:
                colour = C.RED if d.kind == "error" else C.YELLOW
                head = f"{C.CYAN}{loc}{C.RESET}: {C.BOLD}{colour}{d.kind}{C.RESET} [{C.DIM}{d.code}{C.RESET}]: {message}"
            else:
                head = f"{loc}: {d.kind} [{d.code}]: {message}"
            out.append(head)

            if d.span is None:
                continue

            line_idx = d.span.line - 1
            line_text = src_lines[line_idx] if 0 <= line_idx < len(src_lines) else ""
            caret = " " * (max(1, d.span.col) - 1) + "^"
            line_prefix, caret_prefix = ("  │ ", "  ╰ ") if use_unicode else ("  | ", "  ` ")
            if use_color:
                line_prefix = f"{C.GRAY}{line_prefix}{C.RESET}"
                caret_prefix = f"{C.GRAY}{caret_prefix}{C.RESET}"
                caret = f"{C.RED if d.kind == 'error' else C.YELLOW}{caret}{C.RESET}"
            out.append(f"{line_prefix}{line_text}")
            out.append(f"{caret_prefix}{caret}")

        return "\n".join(out)

    def print(self, stream: Optional[TextIO] = None, use_color: Optional[bool] = None,
              use_unicode: Optional[bool] = None) -> None:
        """Print diagnostics to `stream` (default: sys.stderr).

        Color is auto-enabled for TTY unless NO_COLOR or TERM=dumb.
        Unicode guides are auto-enabled for TTY unless NO_UNICODE or TERM=dumb.
        """
        stream = stream or sys.stderr
        is_tty = getattr(stream, "isatty", lambda: False)()
        dumb = os.getenv("TERM") == "dumb"

        if use_color is None:
            use_color = bool(is_tty and os.getenv("NO_COLOR") is None and not dumb)
        if use_unicode is None:
            use_unicode = bool(is_tty and os.getenv("NO_UNICODE") is None and not dumb)

        text = self.format(use_color=use_color, use_unicode=use_unicode)
        if text:
            print(text, file=stream)
