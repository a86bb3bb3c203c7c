"""Legal document templates and rendering."""

from equityledger.documents.rendering import (
    render_document,
    render_html_preview,
    storage_path,
    unresolved_placeholders,
)
from equityledger.documents.templates import BUILTIN_TEMPLATES, builtin_template

__all__ = [
    "BUILTIN_TEMPLATES",
    "builtin_template",
    "render_document",
    "render_html_preview",
    "storage_path",
    "unresolved_placeholders",
]
