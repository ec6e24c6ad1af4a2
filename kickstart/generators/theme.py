"""Brand color patching for the stylesheet and design-token document.

Both patches are cosmetic: a missing file, an absent CSS variable or an
unexpected token layout is skipped without error.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

from kickstart.utils import save_json

GLOBALS_CSS = Path("src") / "app" / "globals.css"
TOKENS_JSON = Path("src") / "ui" / "tokens.json"

# color.primitive.fern.<shade>.$value
TOKEN_PATH = ("color", "primitive", "fern")
PRIMARY_SHADE = "500"
STRONG_SHADE = "700"

_BRAND_RE = re.compile(r"--color-brand: .*?;")
_BRAND_STRONG_RE = re.compile(r"--color-brand-strong: .*?;")


@dataclass
class ThemePatchResult:
    primary: str
    strong: str
    patched: list[Path] = field(default_factory=list)


def normalize_hex(value: str) -> str | None:
    """Return ``#rrggbb`` (lowercase) for a 3- or 6-digit hex color, else ``None``."""
    raw = value.strip().lstrip("#")
    if len(raw) == 3:
        raw = "".join(ch * 2 for ch in raw)
    if len(raw) != 6:
        return None
    try:
        int(raw, 16)
    except ValueError:
        return None
    return f"#{raw.lower()}"


def _round(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def shade_hex(value: str, percent: float) -> str:
    """Move each RGB channel toward black (``percent < 0``) or white.

    Darkening computes ``c + c * percent``; lightening ``c + (255 - c) * percent``.
    Results are rounded half up and clamped to ``[0, 255]``.  Input that is
    not a valid hex color is returned unchanged.

    Examples::

        shade_hex("#3B5BDB", -0.18) -> "#304bb4"
        shade_hex("#fff", -0.5) -> "#808080"
    """
    normalized = normalize_hex(value)
    if normalized is None:
        return value

    number = int(normalized[1:], 16)
    channels = ((number >> 16) & 255, (number >> 8) & 255, number & 255)

    def _adjust(channel: int) -> int:
        delta = channel * percent if percent < 0 else (255 - channel) * percent
        return min(255, max(0, _round(channel + delta)))

    return "#" + "".join(f"{_adjust(c):02x}" for c in channels)


def patch_stylesheet(path: Path, primary: str, strong: str) -> bool:
    """Rewrite the two brand variables in *path*.  Returns ``True`` if changed."""
    if not path.is_file():
        return False
    css = path.read_text(encoding="utf-8")
    updated = _BRAND_RE.sub(f"--color-brand: var(--primary, {primary});", css, count=1)
    updated = _BRAND_STRONG_RE.sub(
        f"--color-brand-strong: var(--primary-600, {strong});", updated, count=1
    )
    if updated == css:
        return False
    path.write_text(updated, encoding="utf-8")
    return True


def patch_tokens(path: Path, primary: str, strong: str) -> bool:
    """Set the primary and strong primitive shades in a design-token document."""
    if not path.is_file():
        return False
    try:
        tokens = json.loads(path.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return False

    palette = tokens
    for key in TOKEN_PATH:
        palette = palette.get(key) if isinstance(palette, dict) else None
    if not isinstance(palette, dict):
        return False

    changed = False
    for shade, color in ((PRIMARY_SHADE, primary), (STRONG_SHADE, strong)):
        entry = palette.get(shade)
        if isinstance(entry, dict) and isinstance(entry.get("$value"), str):
            entry["$value"] = color
            changed = True

    if changed:
        save_json(tokens, path)
    return changed


def apply_ui_overrides(
    repo_path: str | Path, primary_color: str, darken_percent: float = -0.18
) -> ThemePatchResult:
    """Patch ``globals.css`` and ``tokens.json`` in the new project."""
    root = Path(repo_path)
    primary = normalize_hex(primary_color) or primary_color
    strong = shade_hex(primary, darken_percent)
    result = ThemePatchResult(primary=primary, strong=strong)

    if patch_stylesheet(root / GLOBALS_CSS, primary, strong):
        result.patched.append(root / GLOBALS_CSS)
    if patch_tokens(root / TOKENS_JSON, primary, strong):
        result.patched.append(root / TOKENS_JSON)
    return result
