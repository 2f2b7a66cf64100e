"""Jinja2 filters used by the specification templates."""

from rpcdoc.renderers.filters import anchor, md_escape, requirement_label, type_signature

__all__ = [
    "anchor",
    "md_escape",
    "requirement_label",
    "type_signature",
]
