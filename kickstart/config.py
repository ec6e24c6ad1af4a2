"""Kickstart configuration.

Centralised, typed configuration for the bootstrap run. All settings use
Pydantic v2 models so they can be validated at construction time and built
from environment variables without boiler-plate.

The process environment is captured once into :attr:`Config.environ` and
handed to the command runner and platform adapters from there, so nothing
downstream reads or mutates ``os.environ`` directly.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, Field


class TokenConfig(BaseModel):
    """Names of the access-token environment variables for each platform."""

    github: tuple[str, ...] = Field(default=("GH_TOKEN", "GITHUB_TOKEN"))
    vercel: str = Field(default="VERCEL_TOKEN")
    supabase: str = Field(default="SUPABASE_ACCESS_TOKEN")


class ProvisionDefaults(BaseModel):
    """Defaults offered to the operator while collecting parameters."""

    vercel_scope: str = Field(default="personal")
    supabase_region: str = Field(default="eu-west-1")
    primary_color: str = Field(default="#3b5bdb")
    default_locale: str = Field(default="en")
    supported_locales: str = Field(default="en,fr")
    legal_mode: str = Field(default="web")
    repo_visibility: str = Field(default="private")
    darken_percent: float = Field(
        default=-0.18, ge=-1.0, le=0.0, description="Shade applied to derive the strong brand color"
    )


class Config(BaseModel):
    """Global Kickstart configuration.

    Instances are typically created once by the CLI entry point and then
    passed through the rest of the system.
    """

    template_root: Path = Field(default_factory=Path.cwd)
    state_dir_name: str = Field(default=".bootstrap")
    state_file_name: str = Field(default="state.json")
    skills_lock_name: str = Field(default="skills.lock.json")
    skills_installer: str = Field(default="scripts/install-skills.mjs")
    migration_name: str = Field(default="20260126000000_init.sql")
    codex_home: Path | None = Field(default=None)
    environ: dict[str, str] = Field(default_factory=dict)
    tokens: TokenConfig = Field(default_factory=TokenConfig)
    defaults: ProvisionDefaults = Field(default_factory=ProvisionDefaults)

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def state_dir(self) -> Path:
        """Root of the ``.bootstrap/`` metadata directory inside the template."""
        return self.template_root / self.state_dir_name

    @property
    def state_path(self) -> Path:
        """Path to the persisted provisioning state JSON file."""
        return self.state_dir / self.state_file_name

    @property
    def design_system_clone_path(self) -> Path:
        """Scratch directory for the shallow design-system clone."""
        return self.state_dir / "design-system"

    @property
    def skills_lock_path(self) -> Path:
        """Path to the template's ``skills.lock.json``."""
        return self.template_root / self.skills_lock_name

    @property
    def skills_installer_path(self) -> Path:
        """Path to the template's skill installer script."""
        return self.template_root / self.skills_installer

    @property
    def skills_dir(self) -> Path:
        """Directory the agent loads skills from."""
        home = self.codex_home or Path.home() / ".codex"
        return home / "skills"

    # ------------------------------------------------------------------
    # Token lookup
    # ------------------------------------------------------------------

    @property
    def github_token(self) -> str | None:
        for name in self.tokens.github:
            if self.environ.get(name):
                return self.environ[name]
        return None

    @property
    def vercel_token(self) -> str | None:
        return self.environ.get(self.tokens.vercel) or None

    @property
    def supabase_token(self) -> str | None:
        return self.environ.get(self.tokens.supabase) or None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            KICKSTART_TEMPLATE_ROOT, CODEX_HOME,
            GH_TOKEN / GITHUB_TOKEN, VERCEL_TOKEN, SUPABASE_ACCESS_TOKEN.
        """
        env = dict(os.environ if environ is None else environ)

        kwargs: dict[str, object] = {"environ": env}
        if env.get("KICKSTART_TEMPLATE_ROOT"):
            kwargs["template_root"] = Path(env["KICKSTART_TEMPLATE_ROOT"])
        if env.get("CODEX_HOME"):
            kwargs["codex_home"] = Path(env["CODEX_HOME"])

        return cls(**kwargs)

    def ensure_directories(self) -> None:
        """Create the metadata directory that must exist before the run."""
        self.state_dir.mkdir(parents=True, exist_ok=True)
