"""Workstation readiness steps: agent skills, platform CLIs, authentication."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from kickstart.prompts import Prompter
from kickstart.state import ProvisioningState, TokenCheck
from kickstart.steps.base import Step, StepOutcome
from kickstart.utils import (
    console,
    load_json,
    print_bullets,
    print_error,
    print_info,
    print_success,
    print_warning,
)

SKILLS_INSTALLED_FLAG = "skills_installed"
SKILLS_RESTART_FLAG = "skills_restart_confirmed"

REQUIRED_CLIS: tuple[tuple[str, str], ...] = (
    ("gh", "GitHub CLI"),
    ("vercel", "Vercel CLI"),
    ("supabase", "Supabase CLI"),
)

INSTALL_HINTS: dict[str, dict[str, str]] = {
    "win32": {
        "gh": "winget install GitHub.cli --accept-source-agreements --accept-package-agreements",
        "vercel": "npm i -g vercel",
        "supabase": "npm i -g supabase",
    },
    "linux": {
        "gh": "sudo apt-get install gh",
        "vercel": "npm i -g vercel",
        "supabase": "npm i -g supabase",
    },
    "darwin": {
        "gh": "brew install gh",
        "vercel": "npm i -g vercel",
        "supabase": "npm i -g supabase",
    },
}


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------


def read_skills_lock(path: Path) -> list[dict[str, Any]]:
    """Return the skill entries of ``skills.lock.json``.

    A missing lock file means the template requires no skills.  An unreadable
    one is reported and treated the same way.
    """
    if not path.is_file():
        return []
    try:
        payload = load_json(path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        print_warning(f"Could not read {path}: {exc}")
        return []
    skills = payload.get("skills") if isinstance(payload, dict) else None
    if not isinstance(skills, list):
        return []
    return [s for s in skills if isinstance(s, dict) and s.get("name") and s.get("path")]


def skill_dest_name(skill: dict[str, Any]) -> str:
    """Directory name a skill is installed under."""
    if skill.get("dest"):
        return str(skill["dest"])
    path = str(skill["path"]).rstrip("/")
    return path.rsplit("/", 1)[-1] or path


def missing_skills(lock_path: Path, skills_dir: Path) -> list[str]:
    return [
        str(skill["name"])
        for skill in read_skills_lock(lock_path)
        if not (skills_dir / skill_dest_name(skill)).exists()
    ]


class SkillsStep(Step):
    """Make sure the agent skills listed by the template are installed.

    Installing skills requires restarting the agent, so a fresh install stops
    the run; the next run asks the operator to confirm the restart once.
    """

    id = "skills"
    title = "Install required Codex skills"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        while True:
            missing = missing_skills(self.config.skills_lock_path, self.config.skills_dir)

            if not missing:
                state.flags[SKILLS_INSTALLED_FLAG] = True
                if not state.flags.get(SKILLS_RESTART_FLAG):
                    if not prompt.ask_yes_no(
                        "Skills are installed. Have you restarted Codex since installation?"
                    ):
                        print_warning("Please restart Codex and rerun the bootstrap.")
                        return StepOutcome.stop()
                    state.flags[SKILLS_RESTART_FLAG] = True
                return StepOutcome.done()

            print_info("Missing required skills:")
            print_bullets(missing)

            if not prompt.ask_yes_no("Install skills now?"):
                print_warning("Cannot continue without required skills.")
                continue

            if not await self._install():
                print_error("Install failed. Fix the issue and try again.")
                continue

            state.flags[SKILLS_INSTALLED_FLAG] = True
            print_success("Skills installed. Restart Codex, then rerun the bootstrap.")
            return StepOutcome.stop()

    async def _install(self) -> bool:
        script = self.config.skills_installer_path
        if not script.is_file():
            print_error(f"Skill installer not found at {self.config.skills_installer}")
            return False
        result = await self.ctx.runner.run(
            "node", [str(script)], cwd=self.config.template_root, inherit=True
        )
        return result.ok


# ---------------------------------------------------------------------------
# Platform CLIs
# ---------------------------------------------------------------------------


def install_hint(platform: str, command: str) -> str | None:
    """Suggested install command for *command* on *platform*, if known."""
    return INSTALL_HINTS.get(platform, {}).get(command)


class CliCheckStep(Step):
    id = "cli-check"
    title = "Check required CLIs"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        platform = self.ctx.platform
        while True:
            missing = [
                (name, label)
                for name, label in REQUIRED_CLIS
                if not await self.ctx.runner.exists(name)
            ]
            if not missing:
                print_success("All required CLIs are installed.")
                return StepOutcome.done()

            print_info("Missing required CLIs:")
            for name, label in missing:
                print_info(f"- {name} ({label})")
                hint = install_hint(platform, name)
                if hint:
                    print_info(f"  Install: {hint}")

            if prompt.ask_yes_no("Install missing CLIs now?"):
                for name, _label in missing:
                    hint = install_hint(platform, name)
                    if not hint:
                        continue
                    binary, *args = hint.split(" ")
                    console.print(f"Installing [bold]{name}[/bold]...")
                    result = await self.ctx.runner.run(binary, args, inherit=True)
                    if not result.ok:
                        print_warning(f"Install command for {name} failed: {hint}")

            prompt.pause("Install the missing CLIs, then press Enter to re-check.")


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


class TokensStep(Step):
    id = "tokens"
    title = "Check authentication"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        adapters = (self.ctx.github, self.ctx.vercel, self.ctx.supabase)
        while True:
            failures = []
            for adapter in adapters:
                status = await adapter.check_auth()
                if not status.ok:
                    failures.append((adapter.display_name, status.message))

            if not failures:
                state.data.tokens = TokenCheck(
                    github_token=self.ctx.github.has_token,
                    vercel_token=self.ctx.vercel.has_token,
                    supabase_token=self.ctx.supabase.has_token,
                )
                print_success("All platform CLIs are authenticated.")
                return StepOutcome.done()

            print_info("Missing authentication:")
            for name, message in failures:
                print_info(f"- {name}")
                if message:
                    print_info(f"  {message}")
            prompt.pause("Fix authentication (token or CLI login) and press Enter to re-check.")
