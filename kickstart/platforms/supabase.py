"""Supabase adapter built on the ``supabase`` CLI.

The CLI reads ``SUPABASE_ACCESS_TOKEN`` from its environment; when a token is
configured it is passed that way explicitly on each call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from kickstart.platforms.base import (
    AuthStatus,
    PlatformAdapter,
    first_field,
    parse_json_output,
    records,
)
from kickstart.utils import CommandResult

# Candidate key names, most preferred first.
REF_FIELDS = ("ref", "project_ref", "projectRef", "id")
NAME_FIELDS = ("name", "project_name", "projectName")
URL_FIELDS = ("api_url", "rest_url", "url", "project_url", "apiUrl")
KEY_LABEL_FIELDS = ("name", "type", "description")
KEY_VALUE_FIELDS = ("key", "api_key", "apiKey", "value", "secret")

# Substring categories, checked in this order; the first match wins.
KEY_CATEGORIES = ("publishable", "anon", "service")


@dataclass
class SupabaseProject:
    ref: str
    name: str | None = None
    url: str | None = None


@dataclass
class SupabaseKeys:
    publishable: str | None = None
    anon: str | None = None
    service_role: str | None = None

    @property
    def public_key(self) -> str | None:
        return self.publishable or self.anon

    @property
    def service_key(self) -> str | None:
        return self.service_role


def classify_key(label: str) -> str | None:
    """Map a key's name/type/description to a category, or ``None``."""
    lowered = label.lower()
    for category in KEY_CATEGORIES:
        if category in lowered:
            return category
    return None


def parse_api_keys(raw: str) -> SupabaseKeys:
    """Decode ``supabase projects api-keys --output json``.

    Accepts a list of key records or a flat ``{label: value}`` mapping.  The
    first value classified into each category is kept; later ones are ignored.
    Malformed output yields an empty :class:`SupabaseKeys`.
    """
    payload = parse_json_output(raw)
    found: dict[str, str] = {}

    def _keep(label: str, value: Any) -> None:
        if not isinstance(value, str) or not value.strip():
            return
        category = classify_key(label)
        if category and category not in found:
            found[category] = value.strip()

    if isinstance(payload, list):
        for record in records(payload):
            label = first_field(record, KEY_LABEL_FIELDS)
            if label:
                _keep(label, first_field(record, KEY_VALUE_FIELDS))
    elif isinstance(payload, dict):
        for label, value in payload.items():
            _keep(str(label), value)

    return SupabaseKeys(
        publishable=found.get("publishable"),
        anon=found.get("anon"),
        service_role=found.get("service"),
    )


def parse_projects(raw: str) -> list[SupabaseProject]:
    """Decode ``supabase projects list --output json`` into project records."""
    projects: list[SupabaseProject] = []
    for record in records(parse_json_output(raw), "projects"):
        ref = first_field(record, REF_FIELDS)
        if not ref:
            continue
        projects.append(
            SupabaseProject(
                ref=ref,
                name=first_field(record, NAME_FIELDS),
                url=first_field(record, URL_FIELDS),
            )
        )
    return projects


def default_project_url(ref: str) -> str:
    return f"https://{ref}.supabase.co"


class SupabaseAdapter(PlatformAdapter):
    binary = "supabase"
    display_name = "Supabase"
    token_var = "SUPABASE_ACCESS_TOKEN"
    login_hint = "supabase login"

    def _token_env(self) -> dict[str, str]:
        return {"SUPABASE_ACCESS_TOKEN": self.token} if self.token else {}

    async def check_auth(self) -> AuthStatus:
        return await self._probe(["projects", "list"])

    async def list_projects(self) -> list[SupabaseProject]:
        result = await self._run(["projects", "list", "--output", "json"])
        if not result.ok:
            return []
        return parse_projects(result.stdout)

    async def list_resources(self) -> list[str]:
        return [p.name or p.ref for p in await self.list_projects()]

    async def find_project_ref(self, name: str) -> str | None:
        for project in await self.list_projects():
            if project.name == name:
                return project.ref
        return None

    async def resource_exists(self, name: str) -> bool:
        return await self.find_project_ref(name) is not None

    async def create_resource(self, name: str, org_id: str, region: str) -> CommandResult:
        """Create a project.  The CLI prompts the operator for a database password."""
        return await self._run(
            ["projects", "create", name, "--org-id", org_id, "--region", region],
            inherit=True,
        )

    async def project_url(self, ref: str) -> str:
        for project in await self.list_projects():
            if project.ref == ref and project.url:
                return project.url
        return default_project_url(ref)

    async def fetch_secrets(self, ref: str) -> SupabaseKeys:
        result = await self._run(
            ["projects", "api-keys", "--project-ref", ref, "--output", "json"]
        )
        if not result.ok:
            return SupabaseKeys()
        return parse_api_keys(result.stdout)
