"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mono_release.config import ReleaseConfig
from mono_release.models import Change, Package
from mono_release.registry import PackageRegistry


def write_package(root: Path, name: str, version: str, **extra: object) -> Path:
    """Create packages/<name>/package.json under root."""
    pkg_dir = root / "packages" / name
    pkg_dir.mkdir(parents=True)
    manifest = {"name": f"@acme/{name}", "version": version, **extra}
    (pkg_dir / "package.json").write_text(json.dumps(manifest, indent=2) + "\n")
    return pkg_dir


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A workspace with packages foo 1.0.0 and bar 2.3.4."""
    write_package(tmp_path, "foo", "1.0.0", description="The foo package")
    write_package(tmp_path, "bar", "2.3.4", dependencies={"@acme/foo": "^1.0.0"})
    return tmp_path


@pytest.fixture
def config(workspace: Path) -> ReleaseConfig:
    return ReleaseConfig(root=workspace)


@pytest.fixture
def registry(tmp_path: Path) -> PackageRegistry:
    """An in-memory registry that never touches disk."""
    return PackageRegistry(
        [
            Package(
                name="bar",
                path=tmp_path / "bar",
                manifest={"name": "@acme/bar", "version": "2.3.4"},
            ),
            Package(
                name="foo",
                path=tmp_path / "foo",
                manifest={"name": "@acme/foo", "version": "1.0.0"},
            ),
        ]
    )


def make_change(
    package: Package,
    type: str = "patch",
    description: str = "Fix things",
    pr: str = "1",
    by: list[str] | None = None,
) -> Change:
    return Change(
        package=package,
        type=type,
        description=description,
        pr=pr,
        by=by if by is not None else ["@alice"],
    )
