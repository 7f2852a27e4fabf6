"""Workspace package discovery and manifest persistence.

Every immediate subdirectory of the packages directory is a package and must
carry a package.json. The registry owns the loaded packages; version bumps go
through it so there is a single place where manifests are mutated.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

from .errors import ManifestError, UnknownPackageError
from .models import Package, VersionBump
from .shell import step
from .versions import bump_version


class PackageRegistry:
    """The packages of one workspace, keyed by directory name."""

    def __init__(self, packages: list[Package]) -> None:
        self._packages = {p.name: p for p in packages}

    def __iter__(self) -> Iterator[Package]:
        return iter(self._packages.values())

    def __len__(self) -> int:
        return len(self._packages)

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def get(self, name: str) -> Package:
        """Look up a package by exact name.

        Raises:
            UnknownPackageError: If no package has that name.
        """
        try:
            return self._packages[name]
        except KeyError:
            raise UnknownPackageError(name) from None

    def bump(self, name: str, kind: str) -> VersionBump:
        """Bump a package's manifest version in place and mark it affected."""
        package = self.get(name)
        old = package.version
        new = bump_version(old, kind)
        package.manifest["version"] = new
        package.affected = True
        return VersionBump(old=old, new=new)

    def affected(self) -> list[Package]:
        """Packages with at least one applied change, in registry order."""
        return [p for p in self if p.affected]


def load_manifest(path: Path) -> dict:
    """Read and parse a package.json file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ManifestError(f"Cannot read {path}: {exc.strerror or exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ManifestError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError(f"Expected a JSON object in {path}")
    return data


def read_packages(packages_dir: Path) -> PackageRegistry:
    """Scan the packages directory and load every package manifest.

    Args:
        packages_dir: Directory whose subdirectories are packages.

    Returns:
        Registry of packages, ordered by directory name.

    Raises:
        ManifestError: If the directory is missing, or a package directory
            has no readable package.json.
    """
    step("Reading workspace packages")

    if not packages_dir.is_dir():
        raise ManifestError(f"Packages directory not found: {packages_dir}")

    packages: list[Package] = []
    for d in sorted(packages_dir.iterdir()):
        if not d.is_dir():
            continue
        manifest = load_manifest(d / "package.json")
        packages.append(Package(name=d.name, path=d, manifest=manifest))

    for p in packages:
        print(f"  {p.name} {p.version} ({p.path})")

    return PackageRegistry(packages)


def dump_manifest(manifest: dict) -> str:
    """Serialize a manifest the way npm writes package.json."""
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"


def write_manifests(registry: PackageRegistry) -> None:
    """Write every package's manifest back to its package.json.

    Unaffected packages are rewritten too; their content is unchanged apart
    from formatting.
    """
    step("Writing package manifests")

    for p in registry:
        p.manifest_path.write_text(dump_manifest(p.manifest), encoding="utf-8")
        print(f"  {p.name} {p.version}")
