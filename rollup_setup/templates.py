"""Jinja2 template rendering for the generated project files.

Provides the TemplateRenderer class which loads the ``.j2`` templates shipped
in ``rollup_setup/templates/`` and renders them with a small context (year,
author).  Also holds the fixed table of files the writer produces.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# Fixed file tables: (output path relative to the project, template name)
# ---------------------------------------------------------------------------

TEMPLATE_FILES: tuple[tuple[str, str], ...] = (
    ("rollup.config.js", "rollup.config.js.j2"),
    ("tsconfig.types.json", "tsconfig.types.json.j2"),
    (".gitignore", "gitignore.j2"),
    (".npmignore", "npmignore.j2"),
    ("README.md", "README.md.j2"),
)

SOURCE_STUB_TEMPLATE = "src/index.js.j2"
LICENSE_TEMPLATE = "LICENSE.j2"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders the Jinja2 templates for the generated files.

    Missing context variables raise instead of rendering as empty strings,
    so a LICENSE can never be written without its year and author.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render(self, template_path: str, context: dict[str, Any] | None = None) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"src/index.js.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**(context or {}))
