"""Import selected files from an external design-system repository.

The repository is shallow-cloned into a scratch directory, then a fixed
allowlist of stylesheets and directories is copied into the new project.
Sources missing from the clone are skipped.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from kickstart.platforms.git import GitAdapter, read_head_branch
from kickstart.utils import ensure_dir

UNKNOWN_REF = "unknown"

# (source relative to the clone, destination relative to the project)
FILE_COPIES: tuple[tuple[str, str], ...] = (
    ("src/styles/theme.css", "src/styles/ds-theme.css"),
    ("src/styles/fonts.css", "src/styles/ds-fonts.css"),
    ("src/styles/index.css", "src/styles/ds-index.css"),
    ("src/styles/tailwind.css", "src/styles/ds-tailwind.css"),
)
DIRECTORY_COPIES: tuple[tuple[str, str], ...] = (
    ("guidelines", "docs/design-system"),
    ("src/components", "src/design-system/components"),
)


@dataclass
class CloneResult:
    ok: bool
    path: Path
    ref: str = UNKNOWN_REF


@dataclass
class DesignSystemImporter:
    """Clones the design-system repo and copies the allowlisted paths."""

    git: GitAdapter
    clone_dir: Path

    async def clone(self, repo_url: str) -> CloneResult:
        """Shallow-clone *repo_url*, replacing any previous scratch clone."""
        if self.clone_dir.exists():
            shutil.rmtree(self.clone_dir)
        ensure_dir(self.clone_dir.parent)

        result = await self.git.clone_shallow(repo_url, self.clone_dir)
        if not result.ok:
            return CloneResult(ok=False, path=self.clone_dir)
        ref = read_head_branch(self.clone_dir) or UNKNOWN_REF
        return CloneResult(ok=True, path=self.clone_dir, ref=ref)

    def copy_into(self, repo_path: str | Path, source_dir: Path | None = None) -> list[str]:
        """Copy the allowlist into *repo_path* and return the copied relative paths.

        Directories are recorded with a trailing ``/``.  An existing
        destination directory is replaced.
        """
        source = source_dir or self.clone_dir
        root = Path(repo_path)
        copied: list[str] = []

        for src_rel, dest_rel in FILE_COPIES:
            src = source / src_rel
            if not src.is_file():
                continue
            dest = root / dest_rel
            ensure_dir(dest.parent)
            shutil.copy2(src, dest)
            copied.append(dest_rel)

        for src_rel, dest_rel in DIRECTORY_COPIES:
            src = source / src_rel
            if not src.is_dir():
                continue
            dest = root / dest_rel
            if dest.exists():
                shutil.rmtree(dest)
            ensure_dir(dest.parent)
            shutil.copytree(src, dest)
            copied.append(f"{dest_rel}/")

        return copied
