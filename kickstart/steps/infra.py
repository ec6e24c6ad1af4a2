"""Remote provisioning: GitHub repository, Vercel project, Supabase projects.

Every resource is looked up before it is created, so re-running the step
after a partial failure reuses what already exists.  Failures are reported
and the operator decides whether to retry or skip; nothing is rolled back.
"""

from __future__ import annotations

from dataclasses import dataclass

from kickstart.platforms.vercel import VercelAdapter
from kickstart.prompts import Prompter
from kickstart.state import ProvisioningState, SupabaseRefs
from kickstart.steps.base import Step, StepOutcome
from kickstart.utils import console, print_error, print_info, print_success, print_warning
from kickstart.validators import is_repo_visibility

GITHUB_REPO_FLAG = "github_repo_created"

# (state field, project name suffix, Vercel environment target)
SUPABASE_ENVIRONMENTS: tuple[tuple[str, str, str], ...] = (
    ("staging", "staging", "preview"),
    ("prod", "prod", "production"),
)


@dataclass
class VercelProject:
    """The Vercel project one run provisions, linked to the local repo at most once."""

    adapter: VercelAdapter
    name: str
    linked: bool = False

    async def ensure_linked(self, repo_path: str) -> None:
        if self.linked:
            return
        print_info(f"Linking local repo to {self.name}...")
        result = await self.adapter.link(self.name, repo_path)
        if not result.ok:
            print_warning("vercel link failed; environment variables may not apply.")
        self.linked = True

    async def set_env(self, target: str, key: str, value: str, repo_path: str) -> bool:
        print_info(f"Setting {key} ({target})")
        result = await self.adapter.set_environment_variable(target, key, value, repo_path)
        if not result.ok:
            print_warning(f"Failed to set {key} for {target}.")
        return result.ok


class InfraStep(Step):
    id = "infra"
    title = "Provision GitHub / Vercel / Supabase"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        data = state.data
        if not (
            self.require(data.project, "project info")
            and self.require(data.scopes, "scopes")
            and self.require(data.legal, "legal mode")
        ):
            return StepOutcome.stop()

        vercel = VercelProject(
            self.ctx.vercel.with_scope(data.scopes.vercel_scope), data.project.slug
        )

        await self._ensure_github_repo(state, prompt)
        await self._ensure_vercel_auth(vercel, prompt)
        await self._ensure_vercel_project(vercel, prompt)
        await self._add_domains(vercel, state, prompt)
        await self._ensure_supabase_projects(state, prompt)
        await self._set_supabase_env(vercel, state, prompt)
        await self._set_legal_mode_env(vercel, state, prompt)
        return StepOutcome.done()

    # ------------------------------------------------------------------
    # GitHub
    # ------------------------------------------------------------------

    async def _ensure_github_repo(self, state: ProvisioningState, prompt: Prompter) -> None:
        project, scopes = state.data.project, state.data.scopes
        full_name = f"{scopes.github_owner}/{project.slug}"
        github = self.ctx.github

        while True:
            if await github.resource_exists(full_name):
                state.flags[GITHUB_REPO_FLAG] = True
                print_success(f"GitHub repo {full_name} is available.")
                return

            if not prompt.ask_yes_no(f"Create GitHub repo {full_name}?"):
                if prompt.ask_yes_no("Skip GitHub repo creation for now?"):
                    return
                continue

            visibility = prompt.ask_validated(
                "Repo visibility (private/public)",
                is_repo_visibility,
                default=self.config.defaults.repo_visibility,
            ).lower()
            result = await github.create_resource(full_name, visibility, project.description)
            if not result.ok:
                print_error("GitHub repo creation failed. Fix and retry.")
                continue

            state.flags[GITHUB_REPO_FLAG] = True
            return

    # ------------------------------------------------------------------
    # Vercel
    # ------------------------------------------------------------------

    async def _ensure_vercel_auth(self, vercel: VercelProject, prompt: Prompter) -> None:
        while True:
            status = await vercel.adapter.check_auth()
            if status.ok:
                return
            print_error("Vercel CLI is not authenticated.")
            if status.message:
                print_info(status.message)
            prompt.pause("Press Enter to re-check Vercel authentication.")

    async def _ensure_vercel_project(self, vercel: VercelProject, prompt: Prompter) -> None:
        adapter, name = vercel.adapter, vercel.name
        while True:
            if await adapter.resource_exists(name):
                print_success(f"Vercel project {name} is available.")
                return

            console.print(f"Creating Vercel project [bold]{name}[/bold]...")
            if (await adapter.create_resource(name)).ok:
                return
            if not prompt.ask_yes_no("Vercel project creation failed. Fix and retry?"):
                print_warning(f"Skipping Vercel project {name}.")
                return

    async def _add_domains(
        self, vercel: VercelProject, state: ProvisioningState, prompt: Prompter
    ) -> None:
        if not prompt.ask_yes_no("Add staging + production domains to the Vercel project now?"):
            return
        domains = state.data.domains
        targets = [domains.staging_domain, domains.prod_domain] if domains else []

        for domain in targets:
            while True:
                print_info(f"Adding domain {domain} to {vercel.name}")
                if (await vercel.adapter.add_domain(domain, vercel.name)).ok:
                    break
                if not prompt.ask_yes_no("Domain add failed. Fix DNS/ownership and retry?"):
                    break
        print_info("Note: map staging domain to Preview/branch in Vercel if needed.")

    # ------------------------------------------------------------------
    # Supabase
    # ------------------------------------------------------------------

    async def _ensure_supabase_projects(
        self, state: ProvisioningState, prompt: Prompter
    ) -> None:
        scopes = state.data.scopes
        supabase = self.ctx.supabase
        refs = state.data.supabase_refs or SupabaseRefs()
        state.data.supabase_refs = refs
        region = scopes.supabase_region or self.config.defaults.supabase_region

        for field_name, suffix, _target in SUPABASE_ENVIRONMENTS:
            if getattr(refs, field_name):
                continue
            name = f"{state.data.project.slug}-{suffix}"

            existing = await supabase.find_project_ref(name)
            if existing:
                print_success(f"Reusing Supabase project {name} ({existing}).")
                setattr(refs, field_name, existing)
                continue

            while True:
                console.print(f"Creating Supabase project [bold]{name}[/bold]...")
                print_info("Supabase CLI will ask for a database password.")
                if (await supabase.create_resource(name, scopes.supabase_org, region)).ok:
                    ref = await supabase.find_project_ref(name)
                    if not ref:
                        ref = prompt.ask_required(f"Paste Supabase project ref for {name}")
                    setattr(refs, field_name, ref)
                    break
                if not prompt.ask_yes_no("Supabase project creation failed. Fix and retry?"):
                    print_warning(f"Skipping Supabase project {name}.")
                    break

    async def _set_supabase_env(
        self, vercel: VercelProject, state: ProvisioningState, prompt: Prompter
    ) -> None:
        if not prompt.ask_yes_no(
            "Set Supabase env vars on Vercel now? (preview = staging, production = prod)"
        ):
            return

        repo_path = state.data.local_repo_path
        refs = state.data.supabase_refs
        if not repo_path or not refs or not refs.staging or not refs.prod:
            print_warning("Missing repo path or Supabase refs; skipping Supabase env setup.")
            return

        await vercel.ensure_linked(repo_path)
        use_service_role = prompt.ask_yes_no("Also set SUPABASE_SERVICE_ROLE_KEY? (server-only)")
        supabase = self.ctx.supabase

        for field_name, _suffix, target in SUPABASE_ENVIRONMENTS:
            ref = getattr(refs, field_name)
            url = await supabase.project_url(ref)
            keys = await supabase.fetch_secrets(ref)

            public_key = keys.public_key or prompt.ask_required(
                f"Paste Supabase publishable/anon key for {ref} ({target})"
            )
            await vercel.set_env(target, "NEXT_PUBLIC_SUPABASE_URL", url, repo_path)
            await vercel.set_env(target, "NEXT_PUBLIC_SUPABASE_ANON_KEY", public_key, repo_path)

            if use_service_role:
                service_key = keys.service_key or prompt.ask_required(
                    f"Paste Supabase service role key for {ref} ({target})"
                )
                await vercel.set_env(target, "SUPABASE_SERVICE_ROLE_KEY", service_key, repo_path)

    async def _set_legal_mode_env(
        self, vercel: VercelProject, state: ProvisioningState, prompt: Prompter
    ) -> None:
        if not prompt.ask_yes_no(
            "Set NEXT_PUBLIC_LEGAL_MODE on Vercel (preview + production) now?"
        ):
            return
        repo_path = state.data.local_repo_path
        if not repo_path:
            print_warning("Missing local repo path; skipping Vercel env setup.")
            return

        await vercel.ensure_linked(repo_path)
        for _field, _suffix, target in SUPABASE_ENVIRONMENTS:
            await vercel.set_env(target, "NEXT_PUBLIC_LEGAL_MODE", state.data.legal.mode, repo_path)
