"""Step protocol shared by every provisioning step."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field

from kickstart.config import Config
from kickstart.platforms.git import GitAdapter
from kickstart.platforms.github import GitHubAdapter
from kickstart.platforms.supabase import SupabaseAdapter
from kickstart.platforms.vercel import VercelAdapter
from kickstart.prompts import Prompter
from kickstart.state import ProvisioningState
from kickstart.utils import CommandRunner, print_error


@dataclass
class StepOutcome:
    """Result of running one step.

    ``completed=False, exit=True`` stops the whole run without marking the
    step done (for example when the operator must restart something first).
    """

    completed: bool
    exit: bool = False

    @classmethod
    def done(cls) -> "StepOutcome":
        return cls(completed=True)

    @classmethod
    def stop(cls) -> "StepOutcome":
        return cls(completed=False, exit=True)


@dataclass
class StepContext:
    """Collaborators a step may use.  Swapped for fakes in tests."""

    config: Config
    runner: CommandRunner
    github: GitHubAdapter
    vercel: VercelAdapter
    supabase: SupabaseAdapter
    git: GitAdapter
    platform: str = field(default_factory=lambda: sys.platform)

    @classmethod
    def create(cls, config: Config) -> "StepContext":
        runner = CommandRunner(config.environ)
        return cls(
            config=config,
            runner=runner,
            github=GitHubAdapter(runner, token=config.github_token),
            vercel=VercelAdapter(runner, token=config.vercel_token),
            supabase=SupabaseAdapter(runner, token=config.supabase_token),
            git=GitAdapter(runner),
        )


class Step:
    """One named unit of the provisioning sequence.

    Subclasses set ``id`` and ``title`` and implement :meth:`run`.  Steps hold
    no run state of their own; everything they learn goes into the
    :class:`ProvisioningState` they are handed.
    """

    id: str = ""
    title: str = ""

    def __init__(self, ctx: StepContext) -> None:
        self.ctx = ctx

    @property
    def config(self) -> Config:
        return self.ctx.config

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        raise NotImplementedError

    def require(self, value: object, what: str) -> bool:
        """Report a missing prerequisite from an earlier step."""
        if value:
            return True
        print_error(f"Missing {what}. Delete the state file and restart the bootstrap.")
        return False
