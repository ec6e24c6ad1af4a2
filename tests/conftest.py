"""Shared pytest fixtures for the Kickstart test suite.

Provides reusable fixtures for:
- A temporary template repository and matching Config
- A scripted operator (Prompter fed from a list of answers)
- A fake command runner that records invocations and returns canned results
- A step context wired to the fake runner
- A fully populated provisioning state
- Mock subprocess helpers
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from kickstart.config import Config
from kickstart.platforms.git import GitAdapter
from kickstart.platforms.github import GitHubAdapter
from kickstart.platforms.supabase import SupabaseAdapter
from kickstart.platforms.vercel import VercelAdapter
from kickstart.prompts import Prompter
from kickstart.state import (
    AppParams,
    DomainInfo,
    I18nConfig,
    LegalConfig,
    LegalProfile,
    ProjectData,
    ProjectInfo,
    ProvisioningState,
    ScopeInfo,
)
from kickstart.steps.base import StepContext
from kickstart.utils import CommandResult, CommandRunner


# ---------------------------------------------------------------------------
# Scripted operator
# ---------------------------------------------------------------------------


class ScriptedInput:
    """Callable standing in for ``console.input``.

    Returns the queued answers in order and records every prompt shown.
    Running out of answers fails the test instead of blocking.
    """

    def __init__(self, answers: list[str]) -> None:
        self.answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise AssertionError(f"No scripted answer left for prompt: {prompt!r}")
        return self.answers.pop(0)

    @property
    def exhausted(self) -> bool:
        return not self.answers


@pytest.fixture
def scripted():
    """Factory building a ``(Prompter, ScriptedInput)`` pair from answers.

    Usage:
        def test_step(scripted):
            prompt, inputs = scripted(["my app", "", "y"])
    """

    def factory(answers: list[str]) -> tuple[Prompter, ScriptedInput]:
        inputs = ScriptedInput(answers)
        return Prompter(input_fn=inputs), inputs

    return factory


# ---------------------------------------------------------------------------
# Fake command runner
# ---------------------------------------------------------------------------


class FakeRunner(CommandRunner):
    """Records commands and answers them from a table of canned results.

    Responses are keyed by a prefix of ``(command, *args)``; the longest
    matching prefix wins.  A list value is consumed one result per call, and
    its last entry repeats.  Unmatched commands succeed with empty output.
    """

    def __init__(self, environ: dict[str, str] | None = None) -> None:
        super().__init__(environ or {"PATH": "/usr/bin"})
        self.responses: dict[tuple[str, ...], Any] = {}
        self.calls: list[dict[str, Any]] = []
        self.installed: set[str] = {"gh", "vercel", "supabase", "git", "node"}

    def respond(self, *prefix: str, ok: bool = True, stdout: str = "", returncode: int | None = None):
        result = CommandResult(
            ok=ok,
            stdout=stdout,
            returncode=returncode if returncode is not None else (0 if ok else 1),
        )
        self.responses[tuple(prefix)] = result
        return result

    def respond_sequence(self, *prefix: str, results: list[CommandResult]) -> None:
        self.responses[tuple(prefix)] = list(results)

    async def run(
        self,
        command: str,
        args: list[str] | None = None,
        *,
        cwd=None,
        env=None,
        input_text=None,
        inherit=False,
    ) -> CommandResult:
        argv = (command, *(args or []))
        self.calls.append(
            {
                "argv": list(argv),
                "cwd": cwd,
                "env": self.build_env(env),
                "input_text": input_text,
                "inherit": inherit,
            }
        )
        best: tuple[str, ...] | None = None
        for prefix in self.responses:
            if argv[: len(prefix)] == prefix and (best is None or len(prefix) > len(best)):
                best = prefix
        if best is None:
            return CommandResult(ok=True, returncode=0)
        entry = self.responses[best]
        if isinstance(entry, list):
            return entry.pop(0) if len(entry) > 1 else entry[0]
        return entry

    def which(self, command: str) -> str | None:
        return f"/usr/bin/{command}" if command in self.installed else None

    def argvs(self, command: str | None = None) -> list[list[str]]:
        """All recorded argument vectors, optionally filtered by executable."""
        return [c["argv"] for c in self.calls if command is None or c["argv"][0] == command]


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


# ---------------------------------------------------------------------------
# Template, config, context
# ---------------------------------------------------------------------------


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """A small template repository with the artifacts the generators patch."""
    root = tmp_path / "template"
    (root / "src" / "app").mkdir(parents=True)
    (root / "src" / "ui").mkdir(parents=True)
    (root / "supabase" / "migrations").mkdir(parents=True)
    (root / ".git").mkdir()
    (root / "node_modules" / "left-pad").mkdir(parents=True)

    (root / "package.json").write_text('{"name": "template"}\n', encoding="utf-8")
    (root / "pnpm-lock.yaml").write_text("lockfileVersion: 9\n", encoding="utf-8")
    (root / "APP_TODO.md").write_text("# stale\n", encoding="utf-8")
    (root / "src" / "app" / "globals.css").write_text(
        ":root {\n  --color-brand: #1b7f6a;\n  --color-brand-strong: #145e4f;\n}\n",
        encoding="utf-8",
    )
    (root / "src" / "ui" / "tokens.json").write_text(
        json.dumps(
            {
                "color": {
                    "primitive": {
                        "fern": {
                            "500": {"$value": "#1b7f6a"},
                            "700": {"$value": "#145e4f"},
                        }
                    }
                }
            }
        ),
        encoding="utf-8",
    )
    (root / "supabase" / "migrations" / "20260126000000_init.sql").write_text(
        "create table profiles (locale text not null default 'en');\n"
        "insert into profiles (id, locale) values (new.id, 'en');\n",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def config(template_root: Path, tmp_path: Path) -> Config:
    return Config(
        template_root=template_root,
        codex_home=tmp_path / "codex",
        environ={"PATH": "/usr/bin"},
    )


@pytest.fixture
def ctx(config: Config, fake_runner: FakeRunner) -> StepContext:
    """Step context whose adapters all run through ``fake_runner``."""
    return StepContext(
        config=config,
        runner=fake_runner,
        github=GitHubAdapter(fake_runner),
        vercel=VercelAdapter(fake_runner),
        supabase=SupabaseAdapter(fake_runner),
        git=GitAdapter(fake_runner),
        platform="linux",
    )


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_profile() -> LegalProfile:
    return LegalProfile(
        jurisdiction="France/UE",
        app_type="SaaS B2B",
        data_collected=["email", "name"],
        analytics_enabled=True,
        analytics_tool="Plausible",
        payments=False,
        user_generated_content=False,
        legal_entity_name="Acme SAS",
        legal_contact_email="legal@acme.test",
    )


@pytest.fixture
def sample_state(tmp_path: Path, sample_profile: LegalProfile) -> ProvisioningState:
    """State as it looks after every parameter-collecting step has run."""
    return ProvisioningState(
        completed_steps=["skills", "cli-check", "tokens"],
        data=ProjectData(
            project=ProjectInfo(app_name="Acme Notes", slug="acme-notes", description="Notes"),
            local_repo_path=str(tmp_path / "apps" / "acme-notes"),
            domains=DomainInfo(
                root_domain="acme.test",
                staging_domain="staging.acme.test",
                prod_domain="app.acme.test",
            ),
            scopes=ScopeInfo(
                github_owner="acme",
                vercel_scope="acme-team",
                supabase_org="acme-org",
                supabase_region="eu-west-1",
            ),
            app_params=AppParams(
                public_app_name="Acme Notes",
                support_email="support@acme.test",
                primary_color="#3b5bdb",
                logo_url="https://app.acme.test/emails/logo.png",
            ),
            i18n=I18nConfig(default_locale="en", supported_locales=["en", "fr", "de"]),
            legal=LegalConfig(mode="web"),
            legal_profile=sample_profile,
        ),
    )


# ---------------------------------------------------------------------------
# Mock subprocess
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """

    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
