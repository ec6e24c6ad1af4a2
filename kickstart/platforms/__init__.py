"""Adapters for the external command-line tools the bootstrap drives.

Each adapter wraps a :class:`~kickstart.utils.CommandRunner` and exposes typed
operations (authentication probe, existence check, creation, listing,
environment-variable injection, secret retrieval) over one platform's CLI.
"""

from kickstart.platforms.base import AuthStatus, PlatformAdapter, first_field, parse_json_output
from kickstart.platforms.git import GitAdapter, read_head_branch
from kickstart.platforms.github import GitHubAdapter, RepoUrls
from kickstart.platforms.supabase import SupabaseAdapter, SupabaseKeys, SupabaseProject
from kickstart.platforms.vercel import VercelAdapter

__all__ = [
    "AuthStatus",
    "GitAdapter",
    "GitHubAdapter",
    "PlatformAdapter",
    "RepoUrls",
    "SupabaseAdapter",
    "SupabaseKeys",
    "SupabaseProject",
    "VercelAdapter",
    "first_field",
    "parse_json_output",
    "read_head_branch",
]
