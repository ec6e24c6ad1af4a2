"""Vercel adapter built on the ``vercel`` CLI.

``vercel`` takes its token and team scope as flags, so they are added to the
argument list rather than the environment.  The scope ``personal`` means the
operator's own account and is never passed as ``--scope``.
"""

from __future__ import annotations

from kickstart.platforms.base import (
    AuthStatus,
    PlatformAdapter,
    first_field,
    parse_json_output,
    records,
)
from kickstart.utils import CommandResult, CommandRunner

PERSONAL_SCOPE = "personal"
PROJECT_NAME_FIELDS = ("name", "projectName", "id")
ENV_TARGETS = ("preview", "production")


class VercelAdapter(PlatformAdapter):
    binary = "vercel"
    display_name = "Vercel"
    token_var = "VERCEL_TOKEN"
    login_hint = "vercel login"

    def __init__(
        self, runner: CommandRunner, token: str | None = None, scope: str | None = None
    ) -> None:
        super().__init__(runner, token)
        self.scope = scope

    def with_scope(self, scope: str | None) -> VercelAdapter:
        """Return a copy of this adapter bound to *scope*."""
        return VercelAdapter(self.runner, token=self.token, scope=scope)

    def global_args(self, cwd: str | None = None) -> list[str]:
        args: list[str] = []
        if cwd:
            args += ["--cwd", cwd]
        if self.token:
            args += ["--token", self.token]
        if self.scope and self.scope != PERSONAL_SCOPE:
            args += ["--scope", self.scope]
        return args

    async def _vercel(
        self,
        args: list[str],
        *,
        cwd: str | None = None,
        input_text: str | None = None,
        inherit: bool = False,
    ) -> CommandResult:
        return await self._run(
            [*self.global_args(cwd), *args], input_text=input_text, inherit=inherit
        )

    async def check_auth(self) -> AuthStatus:
        result = await self._vercel(["whoami"])
        if result.ok:
            return AuthStatus(ok=True)
        return self._auth_failure()

    async def list_resources(self) -> list[str]:
        result = await self._vercel(["project", "ls", "--json"])
        if not result.ok:
            return []
        names: list[str] = []
        for record in records(parse_json_output(result.stdout), "projects"):
            name = first_field(record, PROJECT_NAME_FIELDS)
            if name:
                names.append(name)
        return names

    async def resource_exists(self, name: str) -> bool:
        return name in await self.list_resources()

    async def create_resource(self, name: str) -> CommandResult:
        return await self._vercel(["project", "add", name], inherit=True)

    async def add_domain(self, domain: str, project: str) -> CommandResult:
        return await self._vercel(["domains", "add", domain, project], inherit=True)

    async def link(self, project: str, cwd: str) -> CommandResult:
        return await self._vercel(
            ["link", "--yes", "--project", project], cwd=cwd, inherit=True
        )

    async def set_environment_variable(
        self, target: str, key: str, value: str, cwd: str
    ) -> CommandResult:
        """Add or overwrite *key* for *target*; the value is piped on stdin."""
        if target not in ENV_TARGETS:
            raise ValueError(f"Unknown Vercel environment target: {target}")
        return await self._vercel(
            ["env", "add", key, target, "--force"],
            cwd=cwd,
            input_text=f"{value}\n",
            inherit=True,
        )

    async def connect_git(self, remote_url: str, cwd: str) -> CommandResult:
        return await self._vercel(["git", "connect", remote_url], cwd=cwd, inherit=True)

    async def deploy(self, cwd: str, production: bool = False) -> CommandResult:
        args = ["--prod", "--yes"] if production else ["--yes"]
        return await self._vercel(args, cwd=cwd, inherit=True)
