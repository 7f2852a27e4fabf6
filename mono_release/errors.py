"""Exceptions raised by the release steps.

Every failure aborts the run; the CLI turns these into a one-line error
message and a non-zero exit status.
"""

from __future__ import annotations


class ReleaseError(Exception):
    """Base class for release failures."""


class ConfigError(ReleaseError):
    """release.toml could not be parsed or holds invalid values."""


class ManifestError(ReleaseError):
    """A package directory has a missing or unreadable package.json."""


class ChangeEntryError(ReleaseError):
    """A change block is missing a required field or has an invalid value."""


class UnknownPackageError(ReleaseError):
    """A change names a package that is not in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Could not find {name}")
        self.name = name


class VersionParseError(ReleaseError):
    """A version string is not valid semver, or the bump kind is unknown."""


class GitHubError(ReleaseError):
    """The commit API returned something other than a JSON commit list."""
