"""Shared utility functions for Kickstart.

Provides async command execution, JSON I/O, string helpers, and Rich-based
console reporting.  Every external process the bootstrap touches goes through
:class:`CommandRunner`, which carries an explicit environment mapping instead
of reading the live process environment.
"""

from __future__ import annotations

import asyncio
import json
import os
import re
import shutil
import tempfile
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


@dataclass
class CommandResult:
    """Outcome of a single external command."""

    ok: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = -1


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    input_text: str | None = None,
    inherit: bool = False,
    timeout: float | None = None,
) -> CommandResult:
    """Run an external executable and wait for it to exit.

    Args:
        cmd: Executable followed by its arguments.
        cwd: Working directory for the child process.
        env: Complete environment for the child.  ``None`` inherits the
            parent's environment.
        input_text: Text piped to the child's stdin.  Secret values are
            passed this way rather than on the command line.
        inherit: Let stdout/stderr go straight to the operator's terminal
            (for interactive tools).  Output is not captured in this mode.
        timeout: Optional wall-clock limit.  ``None`` waits indefinitely.

    Returns:
        A :class:`CommandResult`.  A missing executable yields ``ok=False``
        with return code 127 rather than raising.
    """
    out_pipe = None if inherit else asyncio.subprocess.PIPE
    stdin_pipe = asyncio.subprocess.PIPE if input_text is not None else None
    if inherit and input_text is None:
        stdin_pipe = None

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=stdin_pipe,
            stdout=out_pipe,
            stderr=out_pipe,
            cwd=str(cwd) if cwd else None,
            env=dict(env) if env is not None else None,
        )
    except (FileNotFoundError, PermissionError) as exc:
        return CommandResult(ok=False, stderr=str(exc), returncode=127)

    payload = input_text.encode("utf-8") if input_text is not None else None
    try:
        if timeout is None:
            stdout_bytes, stderr_bytes = await process.communicate(payload)
        else:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                process.communicate(payload), timeout=timeout
            )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return CommandResult(
            ok=False,
            stderr=f"Command timed out after {timeout}s: {' '.join(cmd)}",
            returncode=-1,
        )

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    returncode = process.returncode or 0
    return CommandResult(
        ok=returncode == 0,
        stdout=stdout_str,
        stderr=stderr_str,
        returncode=returncode,
    )


class CommandRunner:
    """Invokes external executables with a fixed base environment.

    Adapters pass per-call overrides (for example an access token) which are
    layered over the base mapping for that call only.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self.environ: dict[str, str] = dict(environ or {})

    def build_env(self, overrides: Mapping[str, str] | None = None) -> dict[str, str]:
        merged = dict(self.environ)
        if overrides:
            merged.update({k: v for k, v in overrides.items() if v is not None})
        return merged

    async def run(
        self,
        command: str,
        args: list[str] | None = None,
        *,
        cwd: str | Path | None = None,
        env: Mapping[str, str] | None = None,
        input_text: str | None = None,
        inherit: bool = False,
    ) -> CommandResult:
        """Run *command* with *args* under the runner's environment."""
        return await run_command(
            [command, *(args or [])],
            cwd=cwd,
            env=self.build_env(env),
            input_text=input_text,
            inherit=inherit,
        )

    def which(self, command: str) -> str | None:
        """Locate *command* on the runner's ``PATH``."""
        return shutil.which(command, path=self.environ.get("PATH"))

    async def exists(self, command: str, args: list[str] | None = None) -> bool:
        """Return ``True`` if *command* is installed and ``--version`` succeeds."""
        if self.which(command) is None:
            return False
        result = await self.run(command, args if args is not None else ["--version"])
        return result.ok


# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def slugify(value: str) -> str:
    """Convert an arbitrary display name to a kebab-case slug.

    Accents are folded to ASCII before non-alphanumeric runs become hyphens.

    Examples::

        slugify("Café Déjà Vu") -> "cafe-deja-vu"
        slugify("  My App!! ") -> "my-app"
    """
    folded = unicodedata.normalize("NFKD", value)
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
    result = re.sub(r"[^a-z0-9]+", "-", folded.lower())
    result = result.strip("-")
    return re.sub(r"-{2,}", "-", result)


def parse_list(value: str) -> list[str]:
    """Split a comma-separated answer into trimmed, non-empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_locales(value: str) -> list[str]:
    """Split a comma-separated locale answer into an ordered unique list."""
    unique: list[str] = []
    for locale in parse_list(value):
        locale = locale.lower()
        if locale not in unique:
            unique.append(locale)
    return unique


def normalize_locales(default_locale: str, supported: list[str]) -> list[str]:
    """Return *supported* deduplicated, with *default_locale* forced first.

    Examples::

        normalize_locales("en", ["fr", "en", "fr"]) -> ["en", "fr"]
        normalize_locales("de", ["en"]) -> ["de", "en"]
    """
    unique: list[str] = []
    for locale in supported:
        if locale not in unique:
            unique.append(locale)
    if default_locale in unique:
        unique.remove(default_locale)
    return [default_locale, *unique]


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> Any:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    raw = Path(path).read_text(encoding="utf-8")
    return json.loads(raw)


def write_text_atomic(path: str | Path, content: str) -> Path:
    """Write *content* to a sibling temp file, then rename it over *path*.

    A crash mid-write leaves either the previous file or the new one, never
    a truncated document.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent)
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return target


def save_json(data: Any, path: str | Path) -> Path:
    """Save data as pretty-printed JSON (atomic write)."""
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    return write_text_atomic(path, content)


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist."""
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_banner(title: str, body: str) -> None:
    """Print the run banner."""
    console.print(
        Panel(body, title=f"[bold]{title}[/bold]", border_style="bright_cyan")
    )


def print_step_header(index: int, total: int, title: str) -> None:
    """Print a full-width rule announcing the next step."""
    console.print()
    console.print(
        Rule(f"[bold bright_cyan] {index}/{total}  {title} [/bold bright_cyan]", style="cyan")
    )


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_bullets(items: list[str], indent: int = 0) -> None:
    pad = " " * indent
    for item in items:
        console.print(f"{pad}- {item}", markup=False, highlight=False)


def print_info(message: str) -> None:
    """Print plain text (no markup interpretation)."""
    console.print(message, markup=False, highlight=False)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
