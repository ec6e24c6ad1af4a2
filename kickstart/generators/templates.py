"""Jinja2 template rendering for generated project documents.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``kickstart/generators/templates/`` directory and renders them with context
built from the provisioning state.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Iterable

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for generated documents.

    Templates are Markdown with a ``.j2`` suffix.  Undefined variables raise
    instead of rendering blank, so a missing profile field cannot silently
    drop a sentence from a legal document.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        # Register custom filters
        self.env.filters["bullets"] = _bullets_filter
        self.env.filters["yesno"] = _yesno_filter
        self.env.filters["tbd"] = _tbd_filter

    # -- Rendering ---------------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"legal/en/privacy.md.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*.

        Parent directories are created automatically.
        """
        content = self.render(template_path, context)
        out = Path(output_path)
        await asyncio.to_thread(_write_file, out, content)
        return out


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _bullets_filter(items: Iterable[Any]) -> str:
    """Render an iterable as a Markdown bullet list."""
    return "\n".join(f"- {item}" for item in items)


def _yesno_filter(value: Any) -> str:
    return "yes" if value else "no"


def _tbd_filter(value: Any) -> str:
    """Placeholder for values not collected yet."""
    if value is None or value == "" or value == []:
        return "TBD"
    return str(value)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
