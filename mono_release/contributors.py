"""Contributor list handling."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .models import MappedCommit


def read_contributors(path: Path) -> set[str]:
    """Read known contributor handles from a ``- handle`` list.

    Lines not starting with "- " are ignored.
    """
    return {
        line[2:].strip()
        for line in path.read_text(encoding="utf-8").splitlines()
        if line.startswith("- ") and line[2:].strip()
    }


def acknowledged_contributors(commits: Iterable[MappedCommit]) -> list[str]:
    """Authors of commits not tied to a known change, as "@login".

    Duplicates are removed, keeping first-seen order.
    """
    return list(dict.fromkeys(f"@{c.author}" for c in commits if not c.known))
