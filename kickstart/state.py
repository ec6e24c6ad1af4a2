"""Pydantic v2 models for the persisted provisioning state.

``ProvisioningState`` is the single unit of durability: one JSON document,
rewritten whole after every completed step.  ``ProjectData`` accumulates one
optional sub-record per parameter-collecting step.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from kickstart.utils import print_warning, write_text_atomic

STATE_VERSION = 1


# ---------------------------------------------------------------------------
# Sub-records
# ---------------------------------------------------------------------------

class ProjectInfo(BaseModel):
    """Identity of the new project."""
    app_name: str
    slug: str
    description: Optional[str] = None


class DomainInfo(BaseModel):
    root_domain: str
    staging_domain: str
    prod_domain: str


class ScopeInfo(BaseModel):
    """Owner / org identifiers on each platform."""
    github_owner: str
    vercel_scope: str = "personal"
    supabase_org: str
    supabase_region: Optional[str] = None


class AppParams(BaseModel):
    """Branding parameters."""
    public_app_name: str
    support_email: str
    primary_color: str
    logo_url: str = ""


class I18nConfig(BaseModel):
    default_locale: str = "en"
    supported_locales: list[str] = Field(default_factory=lambda: ["en"])
    detect_browser: bool = False


class LegalConfig(BaseModel):
    mode: Literal["web", "stores"] = "web"


class LegalProfile(BaseModel):
    """Questionnaire answers that drive the generated legal documents."""
    jurisdiction: str
    app_type: str
    data_collected: list[str] = Field(default_factory=list)
    analytics_enabled: bool = False
    analytics_tool: Optional[str] = None
    payments: bool = False
    user_generated_content: bool = False
    legal_entity_name: str
    legal_contact_email: str


class DesignSystemSource(BaseModel):
    repo_url: str
    ref: str = "unknown"
    copied_paths: list[str] = Field(default_factory=list)


class SupabaseRefs(BaseModel):
    """Backend project references per environment."""
    staging: Optional[str] = None
    prod: Optional[str] = None


class TokenCheck(BaseModel):
    """Which access tokens were present when authentication passed."""
    github_token: bool = False
    vercel_token: bool = False
    supabase_token: bool = False


class ProjectData(BaseModel):
    """Parameters collected so far.  Each field is ``None`` until its step runs."""
    project: Optional[ProjectInfo] = None
    domains: Optional[DomainInfo] = None
    scopes: Optional[ScopeInfo] = None
    app_params: Optional[AppParams] = None
    i18n: Optional[I18nConfig] = None
    legal: Optional[LegalConfig] = None
    legal_profile: Optional[LegalProfile] = None
    design_system: Optional[DesignSystemSource] = None
    supabase_refs: Optional[SupabaseRefs] = None
    tokens: Optional[TokenCheck] = None
    local_repo_path: Optional[str] = None


# ---------------------------------------------------------------------------
# Root document
# ---------------------------------------------------------------------------

class ProvisioningState(BaseModel):
    """Progress of a bootstrap run."""
    schema_version: int = STATE_VERSION
    completed_steps: list[str] = Field(default_factory=list)
    flags: dict[str, bool] = Field(default_factory=dict)
    data: ProjectData = Field(default_factory=ProjectData)

    def is_completed(self, step_id: str) -> bool:
        return step_id in self.completed_steps

    def mark_completed(self, step_id: str) -> None:
        if step_id not in self.completed_steps:
            self.completed_steps.append(step_id)


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

class StateStore:
    """Loads and saves the state document at a fixed path.

    Loading never fails: a missing, unparsable, invalid or version-mismatched
    document yields a fresh empty state.  When an existing document is
    discarded a warning is printed so the operator knows progress was reset.
    """

    def __init__(self, path: str | Path, step_ids: Iterable[str] | None = None) -> None:
        self.path = Path(path)
        self.step_ids = list(step_ids) if step_ids is not None else None

    def load(self) -> ProvisioningState:
        if not self.path.exists():
            return ProvisioningState()

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            return self._reset("could not be parsed")

        if not isinstance(raw, dict):
            return self._reset("is not a JSON object")

        version = raw.get("schema_version")
        if type(version) is not int or version != STATE_VERSION:
            return self._reset(
                f"has schema version {version!r} (expected {STATE_VERSION})"
            )

        try:
            state = ProvisioningState.model_validate(raw)
        except ValidationError:
            return self._reset("failed validation")

        if self.step_ids is not None:
            known = set(self.step_ids)
            state.completed_steps = [s for s in state.completed_steps if s in known]
        return state

    def save(self, state: ProvisioningState) -> Path:
        """Persist the whole document (write-temp-then-rename)."""
        return write_text_atomic(self.path, state.model_dump_json(indent=2) + "\n")

    def reset(self) -> bool:
        """Delete the state document.  Returns ``True`` if one existed."""
        if self.path.exists():
            self.path.unlink()
            return True
        return False

    def _reset(self, reason: str) -> ProvisioningState:
        print_warning(
            f"State file {self.path} {reason}; starting over with empty progress."
        )
        return ProvisioningState()
