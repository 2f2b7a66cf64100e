"""Specification renderer.

Renders a ServiceSpecification to Markdown using Jinja2 templates, or to
JSON. Output is deterministic: the specification's mappings are already
ordered, and no timestamps are rendered.
"""

import json
import logging
from pathlib import Path
from typing import Any

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    TemplateError,
    select_autoescape,
)

from rpcdoc.models.generation import GenerationResult
from rpcdoc.models.specification import ServiceSpecification
from rpcdoc.renderers.filters import anchor, md_escape, requirement_label, type_signature

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "SPEC.md.j2"
DEFAULT_TITLE = "Service Specification"


class SpecificationRenderer:
    """Renders a specification to Markdown or JSON.

    Usage:
        renderer = SpecificationRenderer()
        markdown = renderer.render(spec, title="Account API")
    """

    def __init__(self, template_path: Path | None = None) -> None:
        """Initialize the renderer.

        Args:
            template_path: Custom template file; its directory is searched
                before the packaged templates
        """
        self.template_name = DEFAULT_TEMPLATE
        loaders: list[Any] = []
        if template_path is not None:
            loaders.append(FileSystemLoader(str(template_path.parent)))
            self.template_name = template_path.name
        loaders.append(PackageLoader("rpcdoc", "templates"))

        self._env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        self._env.filters["md_escape"] = md_escape
        self._env.filters["type_signature"] = type_signature
        self._env.filters["requirement_label"] = requirement_label
        self._env.filters["anchor"] = anchor

    @property
    def environment(self) -> Environment:
        return self._env

    def render(
        self,
        spec: ServiceSpecification,
        title: str = DEFAULT_TITLE,
        result: GenerationResult | None = None,
    ) -> str:
        """Render a specification to Markdown.

        Args:
            spec: Specification to render
            title: Document title
            result: Generation result whose errors are listed in the document

        Returns:
            Rendered Markdown

        Raises:
            ValueError: If the template is missing or fails to render
        """
        try:
            template = self._env.get_template(self.template_name)
        except TemplateError as e:
            logger.error("Failed to load template %s: %s", self.template_name, e)
            raise ValueError(f"Template not found: {self.template_name}") from e

        context = {
            "title": title,
            "spec": spec,
            "services": list(spec.services.values()),
            "classes": list(spec.classes.values()),
            "errors": [e.to_dict() for e in result.errors] if result else [],
        }

        try:
            rendered = template.render(**context)
        except TemplateError as e:
            logger.error("Template rendering failed: %s", e)
            raise ValueError(f"Template rendering failed: {e}") from e

        logger.debug("Rendered specification (%d characters)", len(rendered))
        return rendered

    def render_json(self, spec: ServiceSpecification, result: GenerationResult | None = None) -> str:
        """Render a specification (and optionally the run's errors) as JSON."""
        data = result.to_dict() if result is not None else spec.to_dict()
        return json.dumps(data, indent=2) + "\n"

    def render_to_file(
        self,
        spec: ServiceSpecification,
        output_path: Path,
        output_format: str = "markdown",
        title: str = DEFAULT_TITLE,
        result: GenerationResult | None = None,
    ) -> Path:
        """Render a specification and write it to a file.

        Args:
            spec: Specification to render
            output_path: Path to write
            output_format: markdown or json
            title: Document title (markdown only)
            result: Generation result to include

        Returns:
            Path to written file
        """
        if output_format == "json":
            content = self.render_json(spec, result)
        else:
            content = self.render(spec, title, result)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        logger.info("Wrote specification to %s", output_path)

        return output_path

    def preview(self, spec: ServiceSpecification, title: str = DEFAULT_TITLE, max_lines: int = 50) -> str:
        """Generate a preview of the rendered Markdown.

        Args:
            spec: Specification to render
            title: Document title
            max_lines: Maximum lines to include

        Returns:
            Preview string with truncation indicator
        """
        lines = self.render(spec, title).split("\n")

        if len(lines) <= max_lines:
            return "\n".join(lines)

        preview_lines = lines[:max_lines]
        preview_lines.append(f"\n... [{len(lines) - max_lines} more lines] ...")
        return "\n".join(preview_lines)
