"""Template rendering and document storage helpers."""

from datetime import datetime
from uuid import UUID

from jinja2 import DebugUndefined, Environment, meta

from equityledger.models import DocumentData, DocumentType

# Unknown or unset fields render back as ``{{ name }}``
document_env = Environment(undefined=DebugUndefined, autoescape=False)

preview_env = Environment(autoescape=True)

PREVIEW_TEMPLATE = preview_env.from_string(
    '<div style="font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; '
    'padding: 20px; line-height: 1.5;">'
    "{% for line in lines %}{{ line }}{% if not loop.last %}<br>{% endif %}{% endfor %}"
    "</div>"
)


def render_document(template_content: str, data: DocumentData) -> str:
    """Substitute ``{{name}}`` fields; unknown or unset fields are left in place."""
    template = document_env.from_string(template_content)
    return template.render(data.placeholders()).strip() + "\n"


def unresolved_placeholders(content: str) -> set[str]:
    return meta.find_undeclared_variables(document_env.parse(content))


def render_html_preview(content: str) -> str:
    """Escaped HTML block for preview, one ``<br>`` per line break."""
    return PREVIEW_TEMPLATE.render(lines=content.split("\n"))


def storage_path(document_type: DocumentType, document_id: UUID, created_at: datetime) -> str:
    """Content handle: ``<type>/<document_id>/<yyyyMMdd-HHmmss>-draft.txt``."""
    return f"{document_type.value}/{document_id}/{created_at:%Y%m%d-%H%M%S}-draft.txt"
