"""Jinja2 templates for specification documents.

Templates:
- SPEC.md.j2: Markdown rendering of a ServiceSpecification
"""

from rpcdoc.templates.renderer import DEFAULT_TEMPLATE, SpecificationRenderer

__all__ = ["DEFAULT_TEMPLATE", "SpecificationRenderer"]
