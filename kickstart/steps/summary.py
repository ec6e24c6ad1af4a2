"""Closing steps: review the collected parameters and write ``APP_TODO.md``."""

from __future__ import annotations

from kickstart.generators.todo import summary_rows, write_app_todo
from kickstart.prompts import Prompter
from kickstart.state import ProvisioningState
from kickstart.steps.base import Step, StepOutcome
from kickstart.utils import print_success, print_summary_table, print_warning


class SummaryStep(Step):
    id = "summary"
    title = "Review and generate TODO"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        print_summary_table(summary_rows(state.data))

        if not prompt.ask_yes_no("Confirm and generate APP_TODO.md?"):
            print_warning(
                f"Aborted. Delete {self.config.state_path} to restart."
            )
            return StepOutcome.stop()

        output_dir = state.data.local_repo_path or self.config.template_root
        path = await write_app_todo(output_dir, state.data)
        print_success(f"Wrote {path}")
        return StepOutcome.done()


class FinishStep(Step):
    id = "finish"
    title = "Bootstrap summary"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        print_success("Base bootstrap complete. Next: infra automation steps.")
        return StepOutcome.done()
