"""The human-readable next-steps document (``APP_TODO.md``).

Also provides :func:`summary_rows`, the key/value overview printed before the
operator confirms generation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from kickstart.generators.templates import TemplateRenderer
from kickstart.state import ProjectData

TODO_FILENAME = "APP_TODO.md"
TBD = "TBD"


def _or_tbd(value: Any) -> str:
    if value is None or value == "" or value == []:
        return TBD
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


def summary_rows(data: ProjectData) -> dict[str, str]:
    """Flatten the collected parameters for display."""
    project, domains, scopes = data.project, data.domains, data.scopes
    params, i18n, legal = data.app_params, data.i18n, data.legal

    rows = {
        "App name": _or_tbd(project and project.app_name),
        "Slug / Repo": _or_tbd(project and project.slug),
        "Root domain": _or_tbd(domains and domains.root_domain),
        "Staging domain": _or_tbd(domains and domains.staging_domain),
        "Production domain": _or_tbd(domains and domains.prod_domain),
        "Local repo path": _or_tbd(data.local_repo_path),
        "GitHub owner": _or_tbd(scopes and scopes.github_owner),
        "Vercel scope": _or_tbd(scopes and scopes.vercel_scope),
        "Supabase org": _or_tbd(scopes and scopes.supabase_org),
        "Supabase region": _or_tbd(scopes and scopes.supabase_region),
        "Public app name": _or_tbd(params and params.public_app_name),
        "Support email": _or_tbd(params and params.support_email),
        "Primary color": _or_tbd(params and params.primary_color),
        "Logo URL": _or_tbd(params and params.logo_url),
        "Locales": _or_tbd(i18n.supported_locales if i18n else ["en"]),
        "Default locale": i18n.default_locale if i18n else "en",
        "Legal mode": legal.mode if legal else "web",
    }

    profile = data.legal_profile
    if profile:
        rows["Jurisdiction"] = profile.jurisdiction
        rows["App type"] = profile.app_type
        rows["Data collected"] = _or_tbd(profile.data_collected)
        rows["Analytics"] = _yes_no(profile.analytics_enabled)
        rows["Payments"] = _yes_no(profile.payments)
        rows["UGC"] = _yes_no(profile.user_generated_content)

    if data.design_system:
        rows["Design system repo"] = data.design_system.repo_url
        rows["Design system ref"] = data.design_system.ref

    refs = data.supabase_refs
    if refs and (refs.staging or refs.prod):
        rows["Supabase refs"] = f"staging={_or_tbd(refs.staging)}, prod={_or_tbd(refs.prod)}"

    return rows


def build_todo_context(data: ProjectData) -> dict[str, Any]:
    """Flatten the state into plain strings for the template."""
    project, domains, scopes = data.project, data.domains, data.scopes
    params, i18n, legal = data.app_params, data.i18n, data.legal
    refs, design = data.supabase_refs, data.design_system
    slug = project.slug if project else None

    return {
        "app_name": _or_tbd(project and project.app_name),
        "slug": _or_tbd(slug),
        "description": _or_tbd(project and project.description),
        "local_repo_path": _or_tbd(data.local_repo_path),
        "root_domain": _or_tbd(domains and domains.root_domain),
        "staging_domain": _or_tbd(domains and domains.staging_domain),
        "prod_domain": _or_tbd(domains and domains.prod_domain),
        "staging_host": domains.staging_domain if domains else "staging.example.com",
        "prod_host": domains.prod_domain if domains else "app.example.com",
        "github_owner": _or_tbd(scopes and scopes.github_owner),
        "project_slug": slug or "app",
        "supabase_region": (scopes.supabase_region if scopes else None) or "EU",
        "supabase_staging_ref": _or_tbd(refs and refs.staging),
        "supabase_prod_ref": _or_tbd(refs and refs.prod),
        "has_supabase_refs": bool(refs and (refs.staging or refs.prod)),
        "legal_mode": legal.mode if legal else "web",
        "public_app_name": _or_tbd(params and params.public_app_name),
        "support_email": _or_tbd(params and params.support_email),
        "primary_color": _or_tbd(params and params.primary_color),
        "logo_url": _or_tbd(params and params.logo_url),
        "default_locale": i18n.default_locale if i18n else "en",
        "supported_locales": ", ".join(i18n.supported_locales if i18n else ["en"]),
        "legal_profile": data.legal_profile,
        "design_repo_url": _or_tbd(design and design.repo_url),
        "design_ref": _or_tbd(design and design.ref),
        "design_paths": _or_tbd(design and design.copied_paths),
    }


async def write_app_todo(
    output_dir: str | Path,
    data: ProjectData,
    renderer: TemplateRenderer | None = None,
) -> Path:
    renderer = renderer or TemplateRenderer()
    return await renderer.render_to_file(
        "project/APP_TODO.md.j2",
        Path(output_dir) / TODO_FILENAME,
        build_todo_context(data),
    )
