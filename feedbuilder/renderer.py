"""Jinja2 rendering of Atom and RSS documents."""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import jinja2

from .logging_config import create_execution_logger

TEMPLATES_DIR = Path(__file__).parent / "templates"


class TemplateRenderer:
    """Fills a feed template with items, channel metadata and namespaces."""

    def __init__(
        self,
        templates_dir: Path | None = None,
        execution_id: str | None = None,
    ):
        """Initialize the renderer.

        Args:
            templates_dir: Directory holding ``atom.xml.jinja`` and
                ``rss.xml.jinja``. Defaults to the bundled templates.
            execution_id: Execution ID for logging context
        """
        self.templates_dir = templates_dir or TEMPLATES_DIR
        self.logger = create_execution_logger("renderer", execution_id)
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(
        self,
        template_name: str,
        *,
        items: Sequence[Mapping[str, Any]],
        channel: Mapping[str, Any],
        namespaces: Sequence[str],
    ) -> str:
        """Render a feed document.

        Raises:
            jinja2.TemplateError: If the template is missing or fails
        """
        self.logger.debug(
            "Rendering template", template=template_name, items_count=len(items)
        )
        template = self.env.get_template(template_name)
        return template.render(items=items, channel=channel, namespaces=namespaces)
