"""Locale-aware legal document generation.

Each supported locale gets ``privacy.md``, ``terms.md`` and ``imprint.md``
under ``content/legal/<locale>/``, plus ``cookies.md`` when analytics are
enabled.  Locale ``en`` and any ``fr*`` locale have dedicated templates;
every other locale receives the English text and is reported back as needing
translation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from kickstart.generators.templates import TemplateRenderer
from kickstart.state import LegalProfile
from kickstart.utils import ensure_dir, save_json

ENGLISH = "en"
FRENCH = "fr"

BASE_DOCUMENTS = ("privacy", "terms", "imprint")
COOKIES_DOCUMENT = "cookies"


@dataclass
class LegalDocsResult:
    """Files written and locales that still need a human translation."""

    written: list[Path] = field(default_factory=list)
    locales_needing_translation: list[str] = field(default_factory=list)
    profile_path: Path | None = None


def template_language(locale: str) -> str | None:
    """Pick the dedicated template set for *locale*.

    Returns ``None`` when no dedicated set exists and the English fallback
    applies.
    """
    if locale == ENGLISH:
        return ENGLISH
    if locale.startswith(FRENCH):
        return FRENCH
    return None


def document_names(profile: LegalProfile) -> list[str]:
    names = list(BASE_DOCUMENTS)
    if profile.analytics_enabled:
        names.append(COOKIES_DOCUMENT)
    return names


class LegalDocumentRenderer:
    """Renders the legal document set for every supported locale."""

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    async def generate(
        self,
        repo_path: str | Path,
        profile: LegalProfile,
        locales: list[str],
        app_name: str,
        updated: date | None = None,
    ) -> LegalDocsResult:
        """Write the documents and ``profile.json`` under ``content/legal``."""
        stamp = (updated or date.today()).isoformat()
        base_dir = ensure_dir(Path(repo_path) / "content" / "legal")
        result = LegalDocsResult()

        for locale in locales:
            language = template_language(locale)
            if language is None:
                language = ENGLISH
                if locale not in result.locales_needing_translation:
                    result.locales_needing_translation.append(locale)

            locale_dir = base_dir / locale
            for name in document_names(profile):
                out = await self.renderer.render_to_file(
                    _template_path(language, name),
                    locale_dir / f"{name}.md",
                    _context(profile, app_name, stamp),
                )
                result.written.append(out)

        result.profile_path = save_json(
            profile.model_dump(mode="json"), base_dir / "profile.json"
        )
        return result


def _template_path(language: str, name: str) -> str:
    return f"legal/{language}/{name}.md.j2"


def _context(profile: LegalProfile, app_name: str, updated: str) -> dict[str, object]:
    return {"profile": profile, "app_name": app_name, "updated": updated}
