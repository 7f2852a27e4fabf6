"""CLI entry point for mono-release."""

from __future__ import annotations

import subprocess
from pathlib import Path

import click

from mono_release.config import load_config
from mono_release.errors import ReleaseError
from mono_release.pipeline import ReleaseMode, run_release


def _select_mode(notes: bool, bump: bool, publish_tag_push: bool) -> ReleaseMode:
    """Pick the terminal action; the first flag given in this order wins."""
    if notes:
        return ReleaseMode.NOTES
    if bump:
        return ReleaseMode.BUMP
    if publish_tag_push:
        return ReleaseMode.PUBLISH
    return ReleaseMode.NONE


@click.command()
@click.version_option(package_name="mono-release")
@click.option(
    "--notes", is_flag=True, help="Write <date>.RELEASE.md from the template."
)
@click.option(
    "--bump", is_flag=True, help="Write bumped versions to package.json files."
)
@click.option(
    "--publish-tag-push",
    is_flag=True,
    help="Publish and tag every affected package, then push tags.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file. (default: ./release.toml if present)",
)
def cli(
    notes: bool, bump: bool, publish_tag_push: bool, config_path: Path | None
) -> None:
    """Compute version bumps from changes.yaml and release affected packages.

    Without a flag, versions are computed and printed but nothing is written.
    """
    mode = _select_mode(notes, bump, publish_tag_push)
    try:
        run_release(load_config(config_path), mode)
    except subprocess.CalledProcessError as exc:
        cmd = exc.cmd if isinstance(exc.cmd, str) else " ".join(map(str, exc.cmd))
        raise click.ClickException(
            f"Command failed with exit code {exc.returncode}: {cmd}"
        ) from exc
    except (ReleaseError, OSError, UnicodeDecodeError) as exc:
        raise click.ClickException(str(exc)) from exc
