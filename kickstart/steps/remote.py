"""Wire the local repo to GitHub, push, and optionally deploy on Vercel."""

from __future__ import annotations

from kickstart.prompts import Prompter
from kickstart.state import ProvisioningState
from kickstart.steps.base import Step, StepOutcome
from kickstart.steps.materialize import DEVELOP_BRANCH, MAIN_BRANCH
from kickstart.utils import print_error, print_info, print_success, print_warning

PUSH_BRANCHES = (MAIN_BRANCH, DEVELOP_BRANCH)


class GitRemoteStep(Step):
    id = "git-remote"
    title = "Connect git remote and push branches"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        data = state.data
        repo_path = data.local_repo_path
        if not (
            self.require(repo_path, "repo path")
            and self.require(data.project, "project info")
            and self.require(data.scopes, "scopes")
        ):
            return StepOutcome.stop()

        full_name = f"{data.scopes.github_owner}/{data.project.slug}"
        urls = await self.ctx.github.repo_urls(full_name)
        if urls is None:
            print_error("GitHub repo not found or gh auth failed.")
            return StepOutcome.stop()

        use_ssh = prompt.ask_yes_no("Use SSH for git remote? (y = SSH, n = HTTPS)")
        remote_url = urls.ssh if use_ssh else urls.https
        if not remote_url:
            print_error("No remote URL available. Fix and retry.")
            return StepOutcome.stop()

        git = self.ctx.git
        existing = await git.remote_url(repo_path)
        if existing is None:
            await git.set_remote(repo_path, remote_url)
        elif prompt.ask_yes_no(f"Remote 'origin' already set. Replace with {remote_url}?"):
            await git.set_remote(repo_path, remote_url)

        while True:
            results = [await git.push(repo_path, branch) for branch in PUSH_BRANCHES]
            if all(r.ok for r in results):
                print_success("Pushed main and develop.")
                break
            if not prompt.ask_yes_no("Git push failed. Fix credentials and retry?"):
                break

        vercel = self.ctx.vercel.with_scope(data.scopes.vercel_scope)
        project_name = data.project.slug

        if prompt.ask_yes_no("Connect Vercel project to this GitHub repo now?"):
            if not (await vercel.connect_git(remote_url, repo_path)).ok:
                print_warning("Vercel git connect failed. You can connect manually in Vercel UI.")
                print_info(f"Project: {project_name}")
                print_info(f"Repo: {full_name}")

        if prompt.ask_yes_no("Deploy to Vercel now? (preview + production)"):
            await vercel.link(project_name, repo_path)

            print_info("Deploying preview (Vercel auto domain)...")
            if not (await vercel.deploy(repo_path)).ok:
                print_warning("Preview deploy failed. Fix config/env vars and retry with `vercel`.")

            print_info("Deploying production (Vercel auto domain)...")
            if not (await vercel.deploy(repo_path, production=True)).ok:
                print_warning(
                    "Production deploy failed. Fix config/env vars and retry with `vercel --prod`."
                )

        return StepOutcome.done()
