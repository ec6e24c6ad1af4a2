"""GitHub adapter built on the ``gh`` CLI.

When a token is configured it is handed to ``gh`` as ``GH_TOKEN`` for every
call, so an ambient ``gh auth login`` session is not required.
"""

from __future__ import annotations

from dataclasses import dataclass

from kickstart.platforms.base import (
    AuthStatus,
    PlatformAdapter,
    first_field,
    parse_json_output,
    records,
)
from kickstart.utils import CommandResult

NAME_FIELDS = ("name", "nameWithOwner", "full_name")
SSH_URL_FIELDS = ("sshUrl", "ssh_url")
HTTPS_URL_FIELDS = ("url", "html_url", "clone_url", "cloneUrl")


@dataclass
class RepoUrls:
    ssh: str = ""
    https: str = ""


class GitHubAdapter(PlatformAdapter):
    binary = "gh"
    display_name = "GitHub"
    token_var = "GITHUB_TOKEN/GH_TOKEN"
    login_hint = "gh auth login"

    def _token_env(self) -> dict[str, str]:
        return {"GH_TOKEN": self.token} if self.token else {}

    async def check_auth(self) -> AuthStatus:
        return await self._probe(["auth", "status", "-h", "github.com"])

    async def resource_exists(self, full_name: str) -> bool:
        """Return ``True`` if ``owner/name`` can be viewed."""
        result = await self._run(["repo", "view", full_name, "--json", "name"])
        return result.ok

    async def create_resource(
        self,
        full_name: str,
        visibility: str = "private",
        description: str | None = None,
    ) -> CommandResult:
        args = ["repo", "create", full_name, f"--{visibility}"]
        if description:
            args += ["--description", description]
        return await self._run(args, inherit=True)

    async def list_resources(self, owner: str = "") -> list[str]:
        args = ["repo", "list"]
        if owner:
            args.append(owner)
        args += ["--json", "name", "--limit", "1000"]
        result = await self._run(args)
        if not result.ok:
            return []
        names: list[str] = []
        for record in records(parse_json_output(result.stdout), "repositories"):
            name = first_field(record, NAME_FIELDS)
            if name:
                names.append(name)
        return names

    async def repo_urls(self, full_name: str) -> RepoUrls | None:
        """Fetch clone URLs.  ``None`` if the repo cannot be viewed or decoded."""
        result = await self._run(["repo", "view", full_name, "--json", "sshUrl,url"])
        if not result.ok:
            return None
        payload = parse_json_output(result.stdout)
        if not isinstance(payload, dict):
            return None
        return RepoUrls(
            ssh=first_field(payload, SSH_URL_FIELDS) or "",
            https=first_field(payload, HTTPS_URL_FIELDS) or "",
        )

    async def set_environment_variable(self, repo: str, key: str, value: str) -> CommandResult:
        """Store *value* as an Actions secret; the value travels on stdin."""
        return await self._run(
            ["secret", "set", key, "--repo", repo], input_text=value
        )
