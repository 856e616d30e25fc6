"""CLI entry point and argument parsing."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from piet_layout.internals.version import print_banner, version_line


def print_manifest_info(manifest_path: Path) -> int:
    """Print the layouts recorded in a manifest file.

    Returns:
        0 on success, 2 on error.
    """
    from piet_layout.codegen.manifest import LayoutManifest
    from piet_layout.internals.errors import ManifestError

    if not manifest_path.exists():
        print(f"error: file not found: {manifest_path}", file=sys.stderr)
        return 2

    try:
        manifest = LayoutManifest.read(manifest_path)
    except ManifestError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"error: cannot read {manifest_path}: {e}", file=sys.stderr)
        return 2

    print(f"Module: {manifest.get('module') or '<anonymous>'}")
    print(f"Types: {len(manifest['types'])}")
    print()
    for entry in manifest["types"]:
        _print_type_entry(entry)
    return 0


def _print_type_entry(entry: dict) -> None:
    if entry["kind"] == "struct":
        tagged = ", tagged" if entry["tagged"] else ""
        print(f"  struct {entry['name']} (size {entry['size']}, align {entry['alignment']}{tagged}):")
        for f in entry["fields"]:
            print(f"    +{f['offset']:<4} {f['name']}: {f['type']} ({f['size']} bytes)")
    else:
        print(f"  enum {entry['name']} (size {entry['size']}, body words {entry['body_words']}):")
        for v in entry["variants"]:
            print(f"    {v['tag']:<5} {v['name']}")


def main(argv: list[str] | None = None) -> int:
    """Main compiler entry point."""
    ap = argparse.ArgumentParser(
        prog="piet-layout",
        description="Compile a piet scene schema into packed kernel declarations and accessors",
    )
    ap.add_argument("source", nargs="?", help="Path to schema file")
    ap.add_argument("--version", action="store_true", help="Show version and exit")
    ap.add_argument("-o", "--out", metavar="OUT",
                    help="Output file for generated kernel source (default: stdout)")
    ap.add_argument("--dump-parse", action="store_true", help="Print raw lark tree")
    ap.add_argument("--dump-ast", action="store_true", help="Print schema AST")
    ap.add_argument("--dump-layout", action="store_true",
                    help="Print computed sizes and field offsets")
    ap.add_argument("--manifest", metavar="PATH",
                    help="Also write a binary layout manifest for encoders")
    ap.add_argument("--manifest-info", metavar="FILE",
                    help="Display the layouts recorded in a manifest file")
    ap.add_argument("--no-banner", action="store_true", help="Do not print the version banner")
    args = ap.parse_args(argv)

    if args.version:
        print(version_line())
        return 0

    if not args.no_banner:
        print_banner()

    if args.manifest_info:
        return print_manifest_info(Path(args.manifest_info))

    if not args.source:
        print("error: schema file required (unless using --manifest-info)", file=sys.stderr)
        return 2

    from piet_layout.codegen.manifest import LayoutManifest, build_manifest
    from piet_layout.compiler.pipeline import compile_module
    from piet_layout.internals.errors import SchemaError
    from piet_layout.internals.parser import parse_to_ast
    from piet_layout.internals.report import Reporter

    src_path = Path(args.source).resolve()
    try:
        src = src_path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"error: cannot read {src_path}: {e}", file=sys.stderr)
        return 2

    reporter = Reporter(source=src, filename=str(src_path))

    try:
        module, _tree = parse_to_ast(src, dump_parse=args.dump_parse)
        if args.dump_ast:
            print(module)
            print()
        result = compile_module(module, reporter)
        manifest = build_manifest(result.table, result.sizing) if (args.manifest or args.dump_layout) else None
    except SchemaError as exc:
        exc.report(reporter)
        reporter.print()
        return 2

    if args.dump_layout:
        for entry in manifest["types"]:
            _print_type_entry(entry)
        print()

    if args.out:
        Path(args.out).write_text(result.text, encoding="utf-8")
    else:
        sys.stdout.write(result.text)

    if args.manifest:
        LayoutManifest.write(Path(args.manifest), manifest)

    reporter.print()
    return 1 if reporter.has_warnings else 0


if __name__ == "__main__":
    raise SystemExit(main())
