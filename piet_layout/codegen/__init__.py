"""Text and manifest generation from a resolved type table."""
from piet_layout.codegen.emitter import emit_module
from piet_layout.codegen.manifest import LayoutManifest, build_manifest

__all__ = ["emit_module", "LayoutManifest", "build_manifest"]
