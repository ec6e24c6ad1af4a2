"""Steps that write the new project to disk.

``local-repo`` and ``design-system`` enforce the path safety checks before
touching anything and stop the run on a violation.
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from kickstart.generators.app_config import write_app_config
from kickstart.generators.design_system import DesignSystemImporter
from kickstart.generators.legal import LegalDocumentRenderer
from kickstart.generators.project import copy_template
from kickstart.generators.theme import apply_ui_overrides
from kickstart.prompts import Prompter
from kickstart.state import DesignSystemSource, ProvisioningState
from kickstart.steps.base import Step, StepContext, StepOutcome
from kickstart.utils import (
    console,
    print_bullets,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from kickstart.validators import (
    check_project_directory,
    check_target_directory,
    is_valid_repo_url,
)

MAIN_BRANCH = "main"
DEVELOP_BRANCH = "develop"
INITIAL_COMMIT_MESSAGE = "chore: init app from template"


class LocalRepoStep(Step):
    """Copy the template into the target directory and make it a git repo."""

    id = "local-repo"
    title = "Create local repo from template"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        repo_path = state.data.local_repo_path
        if not self.require(state.data.project, "project info"):
            return StepOutcome.stop()
        if not self.require(repo_path, "repo path"):
            return StepOutcome.stop()

        problem = check_target_directory(repo_path, self.config.template_root)
        if problem:
            print_error(problem)
            print_info("Delete or rename it, then rerun the bootstrap.")
            return StepOutcome.stop()

        console.print(f"Copying template to [bold]{escape(repo_path)}[/bold]...")
        copy_template(self.config.template_root, repo_path)
        write_app_config(repo_path, state.data, self.config.migration_name)

        git = self.ctx.git
        if not await git.init(repo_path, MAIN_BRANCH):
            print_error("Git init failed. Fix and retry.")
            return StepOutcome.stop()

        await git.add_all(repo_path)
        while True:
            if (await git.commit(repo_path, INITIAL_COMMIT_MESSAGE)).ok:
                break
            if not prompt.ask_yes_no("Git commit failed (user.name/email?). Fix and retry?"):
                print_warning("Continuing without the initial commit.")
                break

        await git.create_branch(repo_path, DEVELOP_BRANCH)
        if not prompt.ask_yes_no("Keep current branch on develop? (recommended)"):
            await git.checkout(repo_path, MAIN_BRANCH)

        print_success(f"Local repo ready at {repo_path}")
        return StepOutcome.done()


class DesignSystemStep(Step):
    """Import the design system and apply the brand color."""

    id = "design-system"
    title = "Design system source (Git repo)"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        repo_path = state.data.local_repo_path
        if not self.require(repo_path, "repo path"):
            return StepOutcome.stop()

        problem = check_project_directory(repo_path, self.config.template_root)
        if problem:
            print_error(problem)
            return StepOutcome.stop()

        importer = DesignSystemImporter(self.ctx.git, self.config.design_system_clone_path)
        while True:
            repo_url = prompt.ask_validated(
                "Design system repo URL (https:// or git@...)", is_valid_repo_url
            )
            console.print("Cloning design system repo...")
            clone = await importer.clone(repo_url)
            if clone.ok:
                break
            print_error("Clone failed. Check repo access (SSH keys or HTTPS auth).")

        copied = importer.copy_into(repo_path, clone.path)
        if copied:
            print_info("Copied from design system:")
            print_bullets(copied, indent=2)
        else:
            print_warning("No design-system files matched the import list.")

        params = state.data.app_params
        color = params.primary_color if params else self.config.defaults.primary_color
        theme = apply_ui_overrides(repo_path, color, self.config.defaults.darken_percent)
        for path in theme.patched:
            print_info(f"Patched {Path(path).name} (brand {theme.primary}, strong {theme.strong})")

        state.data.design_system = DesignSystemSource(
            repo_url=repo_url, ref=clone.ref, copied_paths=copied
        )
        return StepOutcome.done()


class LegalDocsStep(Step):
    id = "legal-docs"
    title = "Generate legal pages"

    def __init__(self, ctx: StepContext, renderer: LegalDocumentRenderer | None = None) -> None:
        super().__init__(ctx)
        self.renderer = renderer or LegalDocumentRenderer()

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        data = state.data
        if not self.require(data.local_repo_path, "repo path"):
            return StepOutcome.stop()
        if not self.require(data.legal_profile, "legal profile"):
            return StepOutcome.stop()

        locales = data.i18n.supported_locales if data.i18n else ["en"]
        if data.app_params:
            app_name = data.app_params.public_app_name
        elif data.project:
            app_name = data.project.app_name
        else:
            app_name = "App"

        result = await self.renderer.generate(
            data.local_repo_path, data.legal_profile, locales, app_name
        )
        print_success(f"Wrote {len(result.written)} legal document(s).")

        if result.locales_needing_translation:
            print_warning("Locales require agent translation:")
            print_bullets(result.locales_needing_translation)
            print_info("Please translate content/legal/en into these locales.")
            prompt.pause("Press Enter once translations are complete.")

        return StepOutcome.done()
