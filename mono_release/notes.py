"""Release notes rendering.

The template is plain text with %TOKEN placeholders:

    %PACKAGES          one "- name" line per affected package
    %MAJORS            one line per major change
    %MINORS            one line per minor change
    %PATCHES           one line per patch change
    %NEW_CONTRIBUTORS  placeholder text, filled in by hand
    %ACK_CONTRIBUTORS  @authors of commits without a matching change

The result is written to <YYYY-MM-DD>.RELEASE.md, replacing any notes
already written the same (UTC) day.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timezone
from pathlib import Path

from .config import ReleaseConfig
from .contributors import acknowledged_contributors, read_contributors
from .github import fetch_commits, map_commits
from .models import Change, MappedCommit, Package
from .registry import PackageRegistry
from .shell import step

NEW_CONTRIBUTORS_PLACEHOLDER = "TODO"


def format_change(change: Change) -> str:
    """Format one change as a release-note bullet."""
    thanks = ", ".join(change.by)
    return (
        f"- [{change.package.name}] {change.description} (#{change.pr}),"
        f" thanks {thanks}"
    )


def _changes_of(changes: Iterable[Change], kind: str) -> str:
    return "\n".join(format_change(c) for c in changes if c.type == kind)


def render_release_notes(
    template: str,
    affected: Sequence[Package],
    changes: Sequence[Change],
    commits: Sequence[MappedCommit],
) -> str:
    """Substitute every placeholder in the template.

    Substitution is a single pass, so placeholder text appearing inside a
    change description is left alone.
    """
    sections = {
        "%PACKAGES": "\n".join(f"- {p.name}" for p in affected),
        "%MAJORS": _changes_of(changes, "major"),
        "%MINORS": _changes_of(changes, "minor"),
        "%PATCHES": _changes_of(changes, "patch"),
        "%NEW_CONTRIBUTORS": NEW_CONTRIBUTORS_PLACEHOLDER,
        "%ACK_CONTRIBUTORS": ", ".join(acknowledged_contributors(commits)),
    }
    pattern = re.compile("|".join(re.escape(token) for token in sections))
    return pattern.sub(lambda m: sections[m.group(0)], template)


def release_notes_path(directory: Path, today: date | None = None) -> Path:
    """Path of the notes file for today's (UTC) date."""
    if today is None:
        today = datetime.now(timezone.utc).date()
    return directory / f"{today.isoformat()}.RELEASE.md"


def write_release_notes(
    config: ReleaseConfig, registry: PackageRegistry, changes: Sequence[Change]
) -> Path:
    """Render the release notes template and write the dated notes file.

    Returns:
        Path of the written file.
    """
    step("Writing release notes")

    # TODO: fill %NEW_CONTRIBUTORS from change authors missing from this list.
    contributors = read_contributors(config.contributors_path)
    print(f"  {len(contributors)} known contributors")

    commits = map_commits(fetch_commits(config.repository), changes)
    print(f"  {len(commits)} commits from {config.repository}")

    template = config.template_path.read_text(encoding="utf-8")
    notes = render_release_notes(template, registry.affected(), changes, commits)

    dest = release_notes_path(config.output_path)
    dest.write_text(notes, encoding="utf-8")
    print(f"  Wrote {dest}")
    return dest
