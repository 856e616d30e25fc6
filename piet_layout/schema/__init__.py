"""Schema data model: field types and declaration AST nodes."""
