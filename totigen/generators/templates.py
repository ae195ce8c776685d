"""Jinja2 template rendering for generated artifacts.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``totigen/generators/templates/`` directory and renders them with
collection-specific context.  Rendering is pure: writing the result to disk
is the job of :class:`totigen.generators.artifacts.ArtifactWriter`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders the ``.j2`` templates behind every generated artifact.

    Undefined template variables raise instead of rendering as empty text,
    since a silently missing identifier would produce a broken import in
    the generated code.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([], default_for_string=False),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        # Register custom filters
        self.env.filters["js"] = js_literal

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"stores/collectionActions.js.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def js_literal(value: Any) -> str:
    """Render a Python value as a JavaScript literal.

    Strings use single quotes to match the generated code style; everything
    else goes through JSON.
    """
    if isinstance(value, str):
        return _js_string(value)
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return "[" + ", ".join(_js_string(v) for v in value) + "]"
    return json.dumps(value, ensure_ascii=False, sort_keys=False)


def _js_string(value: str) -> str:
    body = json.dumps(value, ensure_ascii=False)[1:-1]
    body = body.replace('\\"', '"').replace("'", "\\'")
    return f"'{body}'"
