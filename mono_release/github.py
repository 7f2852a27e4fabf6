"""Commit history lookup and attribution.

Commits are fetched through the GitHub CLI (``gh api``), which supplies
authentication and host configuration. A commit is "known" when its message
carries a "(#123)" PR reference matching one of the release's changes.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable

from .errors import GitHubError
from .models import Change, Commit, MappedCommit
from .shell import gh

PR_PATTERN = re.compile(r"\(#([0-9]+)\)")


def extract_pr(message: str) -> str | None:
    """Return the PR number from the first "(#N)" in a commit message."""
    match = PR_PATTERN.search(message)
    return match.group(1) if match else None


def fetch_commits(repository: str) -> list[Commit]:
    """Fetch the latest commits of a repository.

    Args:
        repository: "owner/name" slug.

    Returns:
        One Commit per entry that has a linked author account. Commits made
        with an email that isn't linked to a GitHub user have no login and
        are skipped.

    Raises:
        subprocess.CalledProcessError: If the gh call fails.
        GitHubError: If the response isn't a JSON list of commits.
    """
    output = gh("api", f"repos/{repository}/commits")
    try:
        payload = json.loads(output)
    except json.JSONDecodeError as exc:
        raise GitHubError(f"Invalid commit list from {repository}: {exc}") from exc
    if not isinstance(payload, list):
        raise GitHubError(f"Expected a commit list from {repository}")

    commits: list[Commit] = []
    for item in payload:
        if not isinstance(item, dict):
            raise GitHubError(f"Unexpected commit entry from {repository}: {item!r}")
        author = item.get("author") or {}
        login = author.get("login")
        if not login:
            continue
        message = (item.get("commit") or {}).get("message") or ""
        commits.append(Commit(author=login, pr=extract_pr(message)))
    return commits


def map_commits(
    commits: Iterable[Commit], changes: Iterable[Change]
) -> list[MappedCommit]:
    """Flag each commit as known if its PR number belongs to a change.

    A commit without a PR number is never known.
    """
    known_prs = {c.pr for c in changes}
    return [
        MappedCommit(author=c.author, known=c.pr is not None and c.pr in known_prs)
        for c in commits
    ]
