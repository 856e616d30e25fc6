"""Binary layout manifest (.playout) for downstream encoders.

The manifest records the offsets computed for a schema so that byte builders
written outside the kernel sources can check their field placement against
the compiler instead of hard-coding it.

File format (version 1):

    ┌─────────────────────────────────────────────────────────────┐
    │ MAGIC (8 bytes): PIETLYT\\0                                  │
    ├─────────────────────────────────────────────────────────────┤
    │ VERSION (4 bytes): uint32 LE                                │
    ├─────────────────────────────────────────────────────────────┤
    │ METADATA_LENGTH (8 bytes): uint64 LE                        │
    ├─────────────────────────────────────────────────────────────┤
    │ METADATA_BLOB (N bytes): MessagePack-encoded dict           │
    └─────────────────────────────────────────────────────────────┘
"""
from __future__ import annotations

import struct
from pathlib import Path
from typing import Any, BinaryIO, Dict

import msgpack

from piet_layout.internals.errors import ManifestError
from piet_layout.layout.sizing import TypeSizing
from piet_layout.semantics.type_table import TypeTable


def build_manifest(table: TypeTable, sizing: TypeSizing) -> Dict[str, Any]:
    """Describe every declaration's layout as plain msgpack-friendly data."""
    types = []
    for definition in table.defs():
        layout = sizing.layout_of(definition.name)
        entry: Dict[str, Any] = {
            "name": definition.name,
            "kind": layout.kind,
            "size": layout.size,
        }
        if layout.kind == "struct":
            entry["alignment"] = layout.alignment
            entry["tagged"] = layout.tagged
            entry["fields"] = [
                {"name": f.name, "type": str(f.ty), "offset": f.offset, "size": f.size}
                for f in layout.fields
            ]
        else:
            entry["body_words"] = layout.body_words
            entry["variants"] = [{"name": v, "tag": tag} for v, tag in layout.variants]
        types.append(entry)

    return {"module": table.module_name, "types": types}


def _read_bytes(f: BinaryIO, size: int, path: str) -> bytes:
    data = f.read(size)
    if len(data) != size:
        raise ManifestError("CE3003", path=path, expected=size, actual=len(data))
    return data


class LayoutManifest:
    """Binary format reader/writer for layout manifests."""

    MAGIC = b"PIETLYT\x00"
    VERSION = 1

    @staticmethod
    def write(output_path: Path, manifest: Dict[str, Any]) -> None:
        blob = msgpack.packb(manifest, use_bin_type=True)

        with open(output_path, "wb") as f:
            f.write(LayoutManifest.MAGIC)
            f.write(struct.pack("<I", LayoutManifest.VERSION))
            f.write(struct.pack("<Q", len(blob)))
            f.write(blob)

    @staticmethod
    def read(path: Path) -> Dict[str, Any]:
        """Read and validate a manifest.

        Raises:
            ManifestError: CE3001-CE3004 for format errors.
        """
        path_str = str(path)
        with open(path, "rb") as f:
            magic = f.read(len(LayoutManifest.MAGIC))
            if magic != LayoutManifest.MAGIC:
                raise ManifestError("CE3001", path=path_str)

            version = struct.unpack("<I", _read_bytes(f, 4, path_str))[0]
            if version != LayoutManifest.VERSION:
                raise ManifestError("CE3002", path=path_str,
                                    version=version, supported=LayoutManifest.VERSION)

            length = struct.unpack("<Q", _read_bytes(f, 8, path_str))[0]
            blob = _read_bytes(f, length, path_str)

        try:
            manifest = msgpack.unpackb(blob, raw=False)
        except (ValueError, msgpack.UnpackException) as e:
            raise ManifestError("CE3004", path=path_str, reason=str(e))

        types = manifest.get("types") if isinstance(manifest, dict) else None
        if not isinstance(types, list) or not all(
            isinstance(t, dict) and t.get("kind") in ("struct", "enum") for t in types
        ):
            raise ManifestError("CE3004", path=path_str, reason="metadata is not a layout table")
        return manifest
