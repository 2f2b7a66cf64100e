"""Jinja2 filters for rendering a specification as Markdown.

These filters keep the templates free of type-dispatch logic: every
TypeInfo renders through ``type_signature`` and every free-text value
through ``md_escape``.
"""

import re

from rpcdoc.models.types import ClassInfo, FieldRequirement, TypeInfo, UnresolvedClassInfo

# Characters with meaning inside a Markdown table cell
_MARKDOWN_SPECIAL_RE = re.compile(r"([\\`*_|<>\[\]])")


def md_escape(text: str | None) -> str:
    """Escape text for use inside Markdown tables and headings.

    Newlines are folded into spaces so a multi-line doc string stays in one
    table cell.

    Args:
        text: Text to escape (None renders as empty)

    Returns:
        Escaped single-line text

    Examples:
        >>> md_escape("list<i32>")
        'list\\\\<i32\\\\>'
        >>> md_escape(None)
        ''
    """
    if not text:
        return ""
    single_line = " ".join(text.split())
    return _MARKDOWN_SPECIAL_RE.sub(r"\\\1", single_line)


def type_signature(type_info: TypeInfo) -> str:
    """Render a type as an IDL-style signature.

    Named types (and unresolved aliases) render as their simple name; the
    qualified name is available through ``anchor``.
    """
    if isinstance(type_info, (ClassInfo, UnresolvedClassInfo)):
        return type_info.name.rsplit(".", 1)[-1]
    return type_info.signature()


def requirement_label(requirement: FieldRequirement) -> str:
    """Render a field requirement for display."""
    if requirement is FieldRequirement.DEFAULT:
        return ""
    return requirement.value


def anchor(name: str) -> str:
    """Build a Markdown heading anchor from a qualified name.

    Examples:
        >>> anchor("com.example.FooStruct")
        'comexamplefoostruct'
    """
    return re.sub(r"[^a-z0-9_-]", "", name.lower())
