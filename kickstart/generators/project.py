"""Materialise the new project directory from the template checkout."""

from __future__ import annotations

import shutil
from pathlib import Path

# Names skipped at any depth when copying the template.
IGNORED_NAMES = frozenset(
    {
        ".git",
        ".bootstrap",
        "node_modules",
        "pnpm-lock.yaml",
        "package-lock.json",
        "yarn.lock",
        "APP_TODO.md",
    }
)


def _ignore(directory: str, names: list[str]) -> set[str]:
    return {name for name in names if name in IGNORED_NAMES}


def copy_template(source_dir: str | Path, target_dir: str | Path) -> Path:
    """Copy the template tree into *target_dir*, which must not exist yet."""
    target = Path(target_dir)
    shutil.copytree(Path(source_dir), target, ignore=_ignore, symlinks=True)
    return target
