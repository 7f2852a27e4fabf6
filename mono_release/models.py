"""Data models for mono-release.

These Pydantic models represent the records that flow through a release:
packages read from the workspace, change entries read from the change file,
and commits fetched from the remote repository.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

BumpKind = Literal["patch", "minor", "major"]

# Changes are applied in this order so the largest requested bump wins.
BUMP_ORDER: tuple[BumpKind, ...] = ("patch", "minor", "major")


class Package(BaseModel):
    """A single package in the workspace.

    Attributes:
        name: Directory name under the packages directory. Change entries
              refer to packages by this name.
        path: Path to the package directory.
        affected: Set once any change has been applied during this run.
        manifest: Parsed package.json. The version is bumped in place and
                  the whole mapping is written back in bump mode.
    """

    name: str
    path: Path
    affected: bool = False
    manifest: dict[str, Any] = Field(default_factory=dict)

    @property
    def version(self) -> str:
        return str(self.manifest.get("version", ""))

    @property
    def manifest_name(self) -> str:
        """Published name from package.json (e.g. "@scope/foo")."""
        return str(self.manifest.get("name", self.name))

    @property
    def manifest_path(self) -> Path:
        return self.path / "package.json"


class ChangeEntry(BaseModel):
    """One block of the change file, before package expansion.

    Keys other than the required ones are kept as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    package: str
    type: BumpKind
    description: str
    pr: str
    by: str

    @field_validator("package")
    @classmethod
    def _names_a_package(cls, value: str) -> str:
        if not any(name.strip() for name in value.split(",")):
            raise ValueError("no package name given")
        return value


class Change(BaseModel):
    """One release action against a single resolved package."""

    package: Package
    type: BumpKind
    description: str
    pr: str
    by: list[str] = Field(default_factory=list)


class VersionBump(BaseModel):
    """Records a version change for a package.

    Attributes:
        old: The version before bumping.
        new: The version after bumping.
    """

    old: str
    new: str


class Commit(BaseModel):
    """A commit from the remote history, reduced to what attribution needs.

    Attributes:
        author: Login of the commit author.
        pr: PR number parsed from a "(#123)" suffix, or None.
    """

    author: str
    pr: str | None = None


class MappedCommit(BaseModel):
    """A commit author plus whether the commit belongs to a known change."""

    author: str
    known: bool
