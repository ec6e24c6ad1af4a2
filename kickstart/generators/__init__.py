"""Kickstart content generators -- everything written into the new project.

Quick usage::

    from kickstart.generators import LegalDocumentRenderer, write_app_config

    write_app_config(repo_path, state.data, "20260126000000_init.sql")
    result = await LegalDocumentRenderer().generate(repo_path, profile, ["en", "fr"], "Acme")
"""

from kickstart.generators.app_config import build_app_config, write_app_config
from kickstart.generators.design_system import DesignSystemImporter
from kickstart.generators.legal import LegalDocsResult, LegalDocumentRenderer
from kickstart.generators.project import copy_template
from kickstart.generators.templates import TemplateRenderer
from kickstart.generators.theme import apply_ui_overrides, normalize_hex, shade_hex
from kickstart.generators.todo import summary_rows, write_app_todo

__all__ = [
    "DesignSystemImporter",
    "LegalDocsResult",
    "LegalDocumentRenderer",
    "TemplateRenderer",
    "apply_ui_overrides",
    "build_app_config",
    "copy_template",
    "normalize_hex",
    "shade_hex",
    "summary_rows",
    "write_app_config",
    "write_app_todo",
]
