"""Parameter-collecting steps.

Each step asks a handful of questions and stores one sub-record on
``state.data``.  Nothing here touches the filesystem or a remote platform,
except the existence checks used to pick a free target directory.
"""

from __future__ import annotations

from pathlib import Path

from kickstart.generators.theme import normalize_hex
from kickstart.prompts import Prompter
from kickstart.state import (
    AppParams,
    DomainInfo,
    I18nConfig,
    LegalConfig,
    LegalProfile,
    ProjectInfo,
    ProvisioningState,
    ScopeInfo,
)
from kickstart.steps.base import Step, StepOutcome
from kickstart.utils import (
    normalize_locales,
    parse_list,
    parse_locales,
    print_warning,
    slugify,
)
from kickstart.validators import (
    is_existing_directory,
    is_https_url_or_empty,
    is_legal_mode,
    is_sub_path,
    is_valid_domain,
    is_valid_email,
    is_valid_hex_color,
    is_valid_locale,
    is_valid_locale_list,
    is_valid_slug,
)


def _slug_ok(value: str) -> bool:
    return is_valid_slug(value.lower())


def _domain_ok(value: str) -> bool:
    return is_valid_domain(value.lower())


class ProjectInfoStep(Step):
    """Name the project and choose where it will be created."""

    id = "project-info"
    title = "Project info"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        template_root = self.config.template_root.expanduser().resolve()

        app_name = prompt.ask_required("App display name")
        slug = prompt.ask_validated(
            "App slug (kebab-case)", _slug_ok, default=slugify(app_name) or None
        ).lower()
        description = prompt.ask("Short description (optional)")

        while True:
            answer = prompt.ask_validated(
                "Base directory for new app",
                is_existing_directory,
                default=str(template_root.parent),
            )
            base_dir = Path(answer).expanduser().resolve()
            if is_sub_path(template_root, base_dir):
                print_warning("Base directory cannot be inside the template repo.")
                continue
            break

        target = base_dir / slug
        while target.exists():
            print_warning(f"A project with this name already exists: {target}")
            slug = prompt.ask_validated(
                "Choose a different slug (kebab-case)", _slug_ok, default=slug
            ).lower()
            target = base_dir / slug

        state.data.project = ProjectInfo(
            app_name=app_name, slug=slug, description=description or None
        )
        state.data.local_repo_path = str(target)
        return StepOutcome.done()


class DomainsStep(Step):
    id = "domains"
    title = "Domains"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        root = prompt.ask_validated("Root domain (example.com)", _domain_ok).lower()
        staging = prompt.ask_validated("Staging domain", _domain_ok, default=f"staging.{root}")
        prod = prompt.ask_validated("Production domain", _domain_ok, default=f"app.{root}")

        state.data.domains = DomainInfo(
            root_domain=root,
            staging_domain=staging.lower(),
            prod_domain=prod.lower(),
        )
        return StepOutcome.done()


class ScopesStep(Step):
    id = "scopes"
    title = "Accounts / scopes"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        defaults = self.config.defaults
        github_owner = prompt.ask_required("GitHub owner (user or org)")
        vercel_scope = prompt.ask_required(
            "Vercel scope (team slug or 'personal')", default=defaults.vercel_scope
        )
        supabase_org = prompt.ask_required("Supabase org slug or ID")
        region = prompt.ask_required("Supabase region", default=defaults.supabase_region)

        state.data.scopes = ScopeInfo(
            github_owner=github_owner,
            vercel_scope=vercel_scope.lower(),
            supabase_org=supabase_org,
            supabase_region=region.lower(),
        )
        return StepOutcome.done()


class AppParamsStep(Step):
    """Branding shown in the app and its emails."""

    id = "app-params"
    title = "App parameters"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        project = state.data.project
        domains = state.data.domains

        public_name = prompt.ask_required(
            "Public app name (for emails)",
            default=project.app_name if project else None,
        )
        support_email = prompt.ask_validated(
            "Support email",
            is_valid_email,
            default=f"support@{domains.root_domain}" if domains else None,
        )
        color = prompt.ask_validated(
            "Primary color (hex)",
            is_valid_hex_color,
            default=self.config.defaults.primary_color,
        )
        logo_url = prompt.ask_validated(
            "Logo URL (https)",
            is_https_url_or_empty,
            default=f"https://{domains.prod_domain}/emails/logo.png" if domains else None,
        )

        state.data.app_params = AppParams(
            public_app_name=public_name,
            support_email=support_email,
            primary_color=normalize_hex(color) or color,
            logo_url=logo_url,
        )
        return StepOutcome.done()


class I18nStep(Step):
    id = "i18n"
    title = "i18n settings"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        defaults = self.config.defaults
        default_locale = prompt.ask_validated(
            "Default locale",
            lambda value: is_valid_locale(value.lower()),
            default=defaults.default_locale,
        ).lower()
        supported = prompt.ask_validated(
            "Supported locales (comma-separated)",
            is_valid_locale_list,
            default=defaults.supported_locales,
        )

        state.data.i18n = I18nConfig(
            default_locale=default_locale,
            supported_locales=normalize_locales(default_locale, parse_locales(supported)),
            detect_browser=False,
        )
        return StepOutcome.done()


class LegalModeStep(Step):
    id = "legal"
    title = "Legal mode"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        mode = prompt.ask_validated(
            "Legal mode (web|stores)", is_legal_mode, default=self.config.defaults.legal_mode
        )
        state.data.legal = LegalConfig(mode=mode.lower())
        return StepOutcome.done()


class LegalProfileStep(Step):
    """Questionnaire driving the generated privacy policy and terms."""

    id = "legal-profile"
    title = "Legal profile"

    async def run(self, state: ProvisioningState, prompt: Prompter) -> StepOutcome:
        jurisdiction = prompt.ask_required("Primary jurisdiction (ex: France/UE, US, UK)")
        app_type = prompt.ask_required(
            "App type (ex: SaaS B2B, B2C, marketplace, content, health, finance)"
        )
        data_collected = parse_list(
            prompt.ask_validated(
                "Data collected (comma-separated, ex: email, name, billing, location)",
                lambda answer: bool(parse_list(answer)),
            )
        )

        analytics_enabled = prompt.ask_yes_no("Analytics / tracking enabled?")
        analytics_tool = None
        if analytics_enabled:
            analytics_tool = prompt.ask_required("Analytics tool (ex: Plausible, GA4)")

        payments = prompt.ask_yes_no("Payments / subscriptions?")
        ugc = prompt.ask_yes_no("User-generated content?")
        entity = prompt.ask_required("Legal entity name (ex: Sans Concept)")

        params = state.data.app_params
        contact = prompt.ask_validated(
            "Legal contact email",
            is_valid_email,
            default=params.support_email if params else None,
        )

        state.data.legal_profile = LegalProfile(
            jurisdiction=jurisdiction,
            app_type=app_type,
            data_collected=data_collected,
            analytics_enabled=analytics_enabled,
            analytics_tool=analytics_tool,
            payments=payments,
            user_generated_content=ugc,
            legal_entity_name=entity,
            legal_contact_email=contact,
        )
        return StepOutcome.done()
