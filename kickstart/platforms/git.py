"""Local git operations for the new project and the design-system clone.

Most commands run with the terminal inherited so the operator sees git's own
messages (hooks, credential prompts, push progress).
"""

from __future__ import annotations

from pathlib import Path

from kickstart.utils import CommandResult, CommandRunner

_HEAD_REF_PREFIX = "ref: refs/heads/"


def read_head_branch(repo_path: str | Path) -> str | None:
    """Return the branch ``.git/HEAD`` points at, or ``None`` if detached/absent."""
    head = Path(repo_path) / ".git" / "HEAD"
    if not head.is_file():
        return None
    content = head.read_text(encoding="utf-8").strip()
    if content.startswith(_HEAD_REF_PREFIX):
        return content[len(_HEAD_REF_PREFIX):] or None
    return None


class GitAdapter:
    """Thin wrapper over the ``git`` binary."""

    binary = "git"

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    async def _git(
        self, *args: str, cwd: str | Path | None = None, inherit: bool = True
    ) -> CommandResult:
        return await self.runner.run(self.binary, list(args), cwd=cwd, inherit=inherit)

    async def init(self, repo: str | Path, branch: str = "main") -> bool:
        """Initialise a repo on *branch*.

        Older git releases lack ``init -b``; those get a plain ``init`` followed
        by a branch rename.
        """
        if (await self._git("init", "-b", branch, cwd=repo)).ok:
            return True
        if not (await self._git("init", cwd=repo)).ok:
            return False
        await self._git("branch", "-M", branch, cwd=repo)
        return True

    async def add_all(self, repo: str | Path) -> CommandResult:
        return await self._git("add", ".", cwd=repo)

    async def commit(self, repo: str | Path, message: str) -> CommandResult:
        return await self._git("commit", "-m", message, cwd=repo)

    async def create_branch(self, repo: str | Path, branch: str) -> CommandResult:
        return await self._git("checkout", "-b", branch, cwd=repo)

    async def checkout(self, repo: str | Path, branch: str) -> CommandResult:
        return await self._git("checkout", branch, cwd=repo)

    async def remote_url(self, repo: str | Path, name: str = "origin") -> str | None:
        result = await self._git("remote", "get-url", name, cwd=repo, inherit=False)
        if not result.ok:
            return None
        return result.stdout.strip() or None

    async def set_remote(self, repo: str | Path, url: str, name: str = "origin") -> CommandResult:
        """Add *name*, or repoint it when it already exists."""
        if await self.remote_url(repo, name) is not None:
            return await self._git("remote", "set-url", name, url, cwd=repo)
        return await self._git("remote", "add", name, url, cwd=repo)

    async def push(self, repo: str | Path, branch: str, remote: str = "origin") -> CommandResult:
        return await self._git("push", "-u", remote, branch, cwd=repo)

    async def clone_shallow(self, url: str, dest: str | Path) -> CommandResult:
        return await self._git("clone", "--depth", "1", url, str(dest))
