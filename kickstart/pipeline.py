"""Kickstart bootstrap orchestrator.

Runs the provisioning steps in their fixed order, persisting progress after
every completed step so an interrupted run resumes where it stopped:

 1. skills         -- required agent skills are installed
 2. cli-check      -- gh / vercel / supabase are on PATH
 3. tokens         -- every platform CLI is authenticated
 4-10.             -- project parameters are collected interactively
11. local-repo     -- template copied, git initialised
12. design-system  -- design system imported, brand color applied
13. legal-docs     -- legal pages rendered per locale
14. infra          -- GitHub repo, Vercel project, Supabase projects
15. git-remote     -- origin configured, branches pushed, optional deploy
16. summary        -- review and APP_TODO.md
17. finish

Usage::

    kickstart
    kickstart --template-root ../my-template
    python -m kickstart --reset
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from kickstart.config import Config
from kickstart.prompts import Prompter
from kickstart.state import ProvisioningState, StateStore
from kickstart.steps import STEP_IDS, Step, StepContext, default_steps
from kickstart.utils import (
    console,
    print_banner,
    print_error,
    print_step_header,
    print_success,
    print_warning,
)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class BootstrapError(Exception):
    """Raised when the bootstrap cannot start.

    Covers a missing template root and a step registry with duplicate ids.
    """


# ---------------------------------------------------------------------------
# Step machine
# ---------------------------------------------------------------------------


@dataclass
class RunResult:
    """How a run ended.

    ``finished`` is ``True`` only when every step is complete.  ``stopped_at``
    names the step that asked for an early stop.
    """

    finished: bool
    stopped_at: str | None = None


class Bootstrapper:
    """Drives the ordered steps against one persisted state document.

    Attributes:
        steps: Steps in execution order.  Ids must be unique.
        store: Where the state is loaded from and saved to.
        prompter: Passed to every step for operator input.
    """

    def __init__(self, steps: Sequence[Step], store: StateStore, prompter: Prompter) -> None:
        ids = [step.id for step in steps]
        if len(set(ids)) != len(ids):
            raise BootstrapError(f"Duplicate step ids: {ids}")
        self.steps = list(steps)
        self.store = store
        self.prompter = prompter
        self.state: ProvisioningState | None = None

    @classmethod
    def from_config(cls, config: Config, prompter: Prompter | None = None) -> "Bootstrapper":
        ctx = StepContext.create(config)
        return cls(
            default_steps(ctx),
            StateStore(config.state_path, STEP_IDS),
            prompter or Prompter(),
        )

    async def run(self) -> RunResult:
        """Run every incomplete step in order.

        A step reporting ``completed`` is recorded and the state saved before
        the next one starts.  A step reporting ``exit`` ends the run after that
        save.  Exceptions from a step propagate unchanged and the step stays
        incomplete.
        """
        state = self.store.load()
        self.state = state
        total = len(self.steps)

        for index, step in enumerate(self.steps, start=1):
            if state.is_completed(step.id):
                continue

            print_step_header(index, total, step.title)
            outcome = await step.run(state, self.prompter)

            if outcome.completed:
                state.mark_completed(step.id)
            if outcome.completed or outcome.exit:
                self.store.save(state)
            if outcome.exit:
                return RunResult(finished=False, stopped_at=step.id)

        return RunResult(finished=True)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kickstart",
        description="Bootstrap a new app from this template (GitHub, Vercel, Supabase)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  kickstart\n"
            "  kickstart --template-root ../app-template\n"
            "  kickstart --reset\n"
        ),
    )
    parser.add_argument(
        "--template-root",
        default=None,
        help="Template repository root (default: $KICKSTART_TEMPLATE_ROOT or the current directory)",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete saved progress and start from the first step",
    )
    return parser


def load_config(args: argparse.Namespace) -> Config:
    config = Config.from_env()
    if args.template_root:
        config.template_root = Path(args.template_root)
    config.template_root = config.template_root.expanduser().resolve()
    if not config.template_root.is_dir():
        raise BootstrapError(f"Template root not found: {config.template_root}")
    return config


async def _run(config: Config, reset: bool) -> RunResult:
    config.ensure_directories()
    bootstrapper = Bootstrapper.from_config(config)
    if reset and bootstrapper.store.reset():
        print_warning(f"Removed saved progress at {config.state_path}")
    return await bootstrapper.run()


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for ``kickstart`` and ``python -m kickstart``."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
        print_banner(
            "Kickstart",
            f"Template : {config.template_root}\nState    : {config.state_path}",
        )
        result = asyncio.run(_run(config, args.reset))
    except KeyboardInterrupt:
        console.print()
        print_warning("Interrupted. Progress up to the last completed step is saved.")
        return EXIT_INTERRUPTED
    except Exception as exc:
        print_error(str(exc))
        return EXIT_ERROR

    if result.finished:
        print_success("Bootstrap complete.")
    else:
        console.print(f"[dim]Stopped at step {result.stopped_at}. Rerun to continue.[/dim]")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
