"""Shell, git and gh utilities.

Thin wrappers around subprocess calls for the external tools the release
steps drive (git, the GitHub CLI, the package manager), plus the step
header used to separate phases in terminal output.
"""

from __future__ import annotations

import subprocess


def git(*args: str, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "tag", "foo@1.0.0").
        check: If True (default), raise on non-zero exit.

    Returns:
        Stripped stdout from the git command.
    """
    result = subprocess.run(["git", *args], capture_output=True, text=True, check=check)
    return result.stdout.strip()


def gh(*args: str, check: bool = True) -> str:
    """Run a GitHub CLI command and return stdout.

    Used for read-only API queries (``gh api repos/<owner>/<repo>/commits``),
    so authentication and host configuration come from the user's gh setup.
    """
    result = subprocess.run(["gh", *args], capture_output=True, text=True, check=check)
    return result.stdout.strip()


def run(*args: str, check: bool = True) -> subprocess.CompletedProcess[bytes]:
    """Run an arbitrary command, streaming its output to the terminal.

    Args:
        *args: Command and arguments (e.g., "pnpm", "publish", "packages/foo").
        check: If True (default), raise on non-zero exit.
    """
    return subprocess.run(args, check=check)


def step(msg: str) -> None:
    """Print a visually distinct step header."""
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")
