"""Application configuration artifact for the new project.

Writes ``src/config/app.json``, the document the web app reads its branding
and locale list from, and aligns the initial database migration's default
locale with the chosen one.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from kickstart.state import ProjectData
from kickstart.utils import normalize_locales, save_json

APP_CONFIG_PATH = Path("src") / "config" / "app.json"
MIGRATIONS_DIR = Path("supabase") / "migrations"

DEFAULT_APP_NAME = "App"
DEFAULT_SUPPORT_EMAIL = "support@example.com"
DEFAULT_LOGO_URL = "/brand/logo.svg"
DEFAULT_PRIMARY_COLOR = "#1b7f6a"
DEFAULT_LOCALE = "en"

_MIGRATION_DEFAULT_RE = re.compile(r"default 'en'")
_MIGRATION_INSERT_RE = re.compile(r"values \(new\.id, 'en'\)")


def build_app_config(data: ProjectData) -> dict[str, Any]:
    """Merge the identity, branding and i18n sub-records into one mapping."""
    project = data.project
    params = data.app_params
    i18n = data.i18n

    app_name = project.app_name if project else DEFAULT_APP_NAME
    default_locale = i18n.default_locale if i18n else DEFAULT_LOCALE
    supported = i18n.supported_locales if i18n else [DEFAULT_LOCALE]

    return {
        "appName": app_name,
        "publicAppName": params.public_app_name if params else app_name,
        "supportEmail": params.support_email if params else DEFAULT_SUPPORT_EMAIL,
        "logoUrl": (params.logo_url if params and params.logo_url else DEFAULT_LOGO_URL),
        "primaryColor": params.primary_color if params else DEFAULT_PRIMARY_COLOR,
        "defaultLocale": default_locale,
        "supportedLocales": normalize_locales(default_locale, supported),
    }


def rewrite_migration_locale(migration: Path, locale: str) -> bool:
    """Replace the hard-coded ``'en'`` locale literals in *migration*.

    Returns ``True`` when the file existed and was rewritten.
    """
    if not migration.is_file():
        return False
    content = migration.read_text(encoding="utf-8")
    content = _MIGRATION_DEFAULT_RE.sub(f"default '{locale}'", content)
    content = _MIGRATION_INSERT_RE.sub(f"values (new.id, '{locale}')", content)
    migration.write_text(content, encoding="utf-8")
    return True


def write_app_config(
    repo_path: str | Path, data: ProjectData, migration_name: str | None = None
) -> Path:
    """Write ``app.json`` and, when *migration_name* is given, patch that migration."""
    root = Path(repo_path)
    config = build_app_config(data)
    path = save_json(config, root / APP_CONFIG_PATH)

    if migration_name:
        rewrite_migration_locale(root / MIGRATIONS_DIR / migration_name, config["defaultLocale"])
    return path
