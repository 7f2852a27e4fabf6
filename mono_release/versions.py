"""Version parsing and bumping utilities.

Bumps follow npm semantics: "1.2.3" + minor → "1.3.0", and a prerelease is
released rather than skipped ("1.2.3-rc.1" + patch → "1.2.3").
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import semver

from .errors import VersionParseError
from .models import BUMP_ORDER, Change, VersionBump

if TYPE_CHECKING:
    from .registry import PackageRegistry


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Surrounding whitespace and a leading "v" are tolerated, as they are in
    package.json. Anything else that isn't a full major.minor.patch version
    raises VersionParseError.
    """
    text = version_str.strip()
    if text.startswith("v"):
        text = text[1:]
    try:
        return semver.Version.parse(text)
    except (TypeError, ValueError) as exc:
        raise VersionParseError(f"Invalid version {version_str!r}: {exc}") from exc


def bump_version(version_str: str, kind: str) -> str:
    """Increment a version by one bump kind and return it as a string.

    Examples:
        bump_version("1.2.3", "patch") → "1.2.4"
        bump_version("1.2.3", "minor") → "1.3.0"
        bump_version("1.2.3", "major") → "2.0.0"
    """
    if kind not in BUMP_ORDER:
        raise VersionParseError(f"Unknown bump kind {kind!r}")
    # Build metadata doesn't take part in precedence; drop it before bumping.
    version = parse_version(version_str).replace(build=None)
    return str(version.next_version(part=kind))


def affect(registry: PackageRegistry, change: Change) -> VersionBump:
    """Apply one change: bump its package's version and mark it affected."""
    return registry.bump(change.package.name, change.type)


def apply_changes(
    registry: PackageRegistry, changes: Iterable[Change]
) -> list[VersionBump]:
    """Apply every change, all patches first, then minors, then majors.

    Each bump starts from the version left by the previous one, so a package
    that receives several kinds of change ends at the largest bump.

    Returns:
        The bumps in the order they were applied.
    """
    changes = list(changes)
    bumps: list[VersionBump] = []
    for kind in BUMP_ORDER:
        for change in changes:
            if change.type != kind:
                continue
            bump = affect(registry, change)
            print(f"  {change.package.name}: {bump.old} → {bump.new} ({kind})")
            bumps.append(bump)
    return bumps
