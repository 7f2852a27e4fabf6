"""Release pipeline: read → resolve → bump → notes | manifests | publish.

Every run performs the same prefix:
1. Read all packages from the workspace
2. Read the change file and resolve each change to a package
3. Apply changes (all patches, then minors, then majors)

and then at most one terminal action:
- notes:   render the dated release notes file
- bump:    write every package.json back with its new version
- publish: publish and tag each affected package, then push the tags
"""

from __future__ import annotations

import enum

from .changes import read_changes
from .config import ReleaseConfig
from .models import Change, Package
from .notes import write_release_notes
from .registry import PackageRegistry, read_packages, write_manifests
from .shell import git, run, step
from .versions import apply_changes


class ReleaseMode(enum.Enum):
    NONE = "none"
    NOTES = "notes"
    BUMP = "bump"
    PUBLISH = "publish-tag-push"


def prepare(config: ReleaseConfig) -> tuple[PackageRegistry, list[Change]]:
    """Read packages and changes, and apply the changes to the registry."""
    registry = read_packages(config.packages_path)
    changes = read_changes(config.changes_path, registry)

    step("Bumping versions")
    apply_changes(registry, changes)
    if not registry.affected():
        print("  No packages affected")

    return registry, changes


def package_tag(package: Package) -> str:
    """Git tag for a package release, e.g. "@scope/foo@1.2.0"."""
    return f"{package.manifest_name}@{package.version}"


def publish_tag_push(config: ReleaseConfig, affected: list[Package]) -> None:
    """Publish and tag each affected package, then push all tags.

    Packages are handled one at a time, publish before tag, so a failure
    never leaves a tag for an unpublished package. The first failing
    command aborts the run.
    """
    step(f"Publishing {len(affected)} packages")

    for p in affected:
        tag = package_tag(p)
        print(f"\n  {tag} ({p.path})")
        run(*config.publish_command, str(p.path))
        git("tag", tag)

    step("Pushing tags")
    git("push", "--tags")


def run_release(config: ReleaseConfig, mode: ReleaseMode = ReleaseMode.NONE) -> None:
    """Execute the release pipeline.

    Args:
        config: Paths and external settings.
        mode: Terminal action to run after versions are computed. NONE stops
              after the common prefix without touching anything.
    """
    registry, changes = prepare(config)

    if mode is ReleaseMode.NOTES:
        write_release_notes(config, registry, changes)
    elif mode is ReleaseMode.BUMP:
        write_manifests(registry)
    elif mode is ReleaseMode.PUBLISH:
        publish_tag_push(config, registry.affected())
