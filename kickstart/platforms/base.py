"""Shared pieces for the platform CLI adapters.

Platform CLIs do not promise a stable JSON shape, and the same logical field
has appeared under several key names across releases.  Each field is
therefore decoded through an explicit, ordered tuple of candidate keys (see
:func:`first_field`), and unparsable output decodes to "no data" instead of
raising.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from kickstart.utils import CommandResult, CommandRunner


@dataclass
class AuthStatus:
    """Result of an authentication probe."""

    ok: bool
    message: str | None = None


def parse_json_output(raw: str) -> Any:
    """Parse CLI JSON output, returning ``None`` when it is not valid JSON.

    Some CLIs print a banner line before the payload, so when the whole text
    does not parse the first line starting with ``[`` or ``{`` is retried.
    """
    raw = raw.strip()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        pass

    lines = raw.splitlines()
    for index, line in enumerate(lines):
        if line.lstrip().startswith(("[", "{")):
            try:
                return json.loads("\n".join(lines[index:]))
            except json.JSONDecodeError:
                return None
    return None


def first_field(record: Mapping[str, Any], candidates: Sequence[str]) -> str | None:
    """Return the first non-empty string found under any of *candidates*."""
    for key in candidates:
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def records(payload: Any, *containers: str) -> list[dict[str, Any]]:
    """Extract a list of object records from a decoded payload.

    Accepts a bare list, or an object wrapping the list under one of
    *containers* (``{"projects": [...]}``).  Non-object entries are dropped.
    """
    items: Any = payload
    if isinstance(payload, dict):
        items = None
        for key in containers:
            if isinstance(payload.get(key), list):
                items = payload[key]
                break
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


class PlatformAdapter:
    """Typed wrapper around one platform's command-line tool.

    Subclasses set :attr:`binary`, :attr:`token_var` and :attr:`login_hint`
    and route every call through :meth:`_run`.
    """

    binary: str = ""
    display_name: str = ""
    token_var: str = ""
    login_hint: str = ""

    def __init__(self, runner: CommandRunner, token: str | None = None) -> None:
        self.runner = runner
        self.token = token

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    def _token_env(self) -> dict[str, str]:
        """Environment overrides carrying the token, if the tool reads it there."""
        return {}

    async def _run(
        self,
        args: list[str],
        *,
        cwd: str | None = None,
        input_text: str | None = None,
        inherit: bool = False,
    ) -> CommandResult:
        return await self.runner.run(
            self.binary,
            args,
            cwd=cwd,
            env=self._token_env(),
            input_text=input_text,
            inherit=inherit,
        )

    def _auth_failure(self) -> AuthStatus:
        """Remediation text differs depending on whether a token was supplied."""
        if self.has_token:
            return AuthStatus(
                ok=False,
                message=(
                    f"{self.token_var} is set but invalid. "
                    f"Fix it or unset to use `{self.login_hint}`."
                ),
            )
        return AuthStatus(
            ok=False,
            message=f"Not authenticated. Run `{self.login_hint}` or set {self.token_var}.",
        )

    async def _probe(self, args: list[str]) -> AuthStatus:
        result = await self._run(args)
        if result.ok:
            return AuthStatus(ok=True)
        return self._auth_failure()

    async def check_auth(self) -> AuthStatus:
        raise NotImplementedError

    async def list_resources(self, *args: str) -> list[str]:
        raise NotImplementedError

    async def resource_exists(self, name: str) -> bool:
        raise NotImplementedError
