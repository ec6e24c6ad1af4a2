"""Input validators and filesystem safety checks.

Every predicate here is pure: it takes a string and answers ``True`` or
``False``.  The prompt engine feeds them straight into ``ask_validated``.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_DOMAIN_RE = re.compile(r"^[a-z0-9.-]+$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^\s@]+\.[^\s@]+$")
_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_LOCALE_RE = re.compile(r"^[a-z]{2}(?:-[a-z]{2})?$")

LEGAL_MODES = ("web", "stores")
REPO_VISIBILITIES = ("private", "public")


def is_valid_slug(value: str) -> bool:
    """Kebab-case: lowercase alphanumerics separated by single hyphens."""
    return bool(_SLUG_RE.match(value))


def is_valid_domain(value: str) -> bool:
    return bool(_DOMAIN_RE.match(value)) and "." in value


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))


def is_valid_hex_color(value: str) -> bool:
    """Accept ``#rgb`` shorthand or full ``#rrggbb``."""
    return bool(_HEX_COLOR_RE.match(value))


def is_valid_locale(value: str) -> bool:
    """Two-letter language code with an optional two-letter region (``fr-ca``)."""
    return bool(_LOCALE_RE.match(value))


def is_valid_locale_list(value: str) -> bool:
    items = [item.strip().lower() for item in value.split(",") if item.strip()]
    return bool(items) and all(is_valid_locale(item) for item in items)


def is_https_url(value: str) -> bool:
    return value.startswith("https://")


def is_https_url_or_empty(value: str) -> bool:
    return not value or is_https_url(value)


def is_valid_repo_url(value: str) -> bool:
    """Accept SSH (``git@host:owner/repo``) and HTTP(S) clone URLs."""
    return value.startswith(("git@", "https://", "http://"))


def is_legal_mode(value: str) -> bool:
    return value.lower() in LEGAL_MODES


def is_repo_visibility(value: str) -> bool:
    return value.lower() in REPO_VISIBILITIES


def is_existing_directory(value: str) -> bool:
    return bool(value) and Path(value).expanduser().is_dir()


# ---------------------------------------------------------------------------
# Containment
# ---------------------------------------------------------------------------


def is_sub_path(parent: str | Path, child: str | Path) -> bool:
    """Return ``True`` if *child* resolves to *parent* or somewhere below it.

    Both paths get a trailing separator before the prefix comparison, so
    ``/template2`` is not considered inside ``/template``.
    """
    parent_path = os.path.join(str(Path(parent).expanduser().resolve()), "")
    child_path = os.path.join(str(Path(child).expanduser().resolve()), "")
    return child_path.startswith(parent_path)


def check_target_directory(target: str | Path, template_root: str | Path) -> str | None:
    """Validate where a new project may be materialised.

    Returns:
        ``None`` when *target* is safe, otherwise the reason it is not.
    """
    target_path = Path(target).expanduser().resolve()
    root_path = Path(template_root).expanduser().resolve()

    if target_path == root_path:
        return "Target directory cannot be the template repo itself."
    if is_sub_path(root_path, target_path):
        return "Target directory cannot be inside the template repo."
    if target_path.exists():
        return f"Target directory already exists: {target_path}"
    return None


def check_project_directory(project: str | Path, template_root: str | Path) -> str | None:
    """Validate an already-materialised project directory before writing into it."""
    project_path = Path(project).expanduser().resolve()
    root_path = Path(template_root).expanduser().resolve()

    if is_sub_path(root_path, project_path):
        return "Project directory cannot be the template repo or inside it."
    if not project_path.is_dir():
        return f"Project directory does not exist: {project_path}"
    return None
