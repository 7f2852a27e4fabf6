"""release.toml loading.

Uses tomlkit, like the rest of the workspace tooling, to read an optional
release.toml from the repository root. Every key is optional; relative paths
are resolved against the directory holding the config file.
"""

from __future__ import annotations

from pathlib import Path

import tomlkit
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from tomlkit.exceptions import TOMLKitError

from .errors import ConfigError

CONFIG_FILE = "release.toml"
DEFAULT_REPOSITORY = "dcousens/monorepo-typescript"
DEFAULT_PUBLISH_COMMAND = ["pnpm", "publish", "--access=public", "--tag", "latest"]


class ReleaseConfig(BaseModel):
    """Paths and external settings for a release run.

    Attributes:
        root: Directory the other paths are relative to.
        packages_dir: Directory whose subdirectories are packages.
        changes_file: Change file with one block per release-note item.
        contributors_file: "- handle" list of known contributors.
        template_file: Release notes template with %TOKEN placeholders.
        output_dir: Where the dated release notes file is written.
        repository: "owner/name" of the repository whose commits are scanned.
        publish_command: Command run per package, followed by its path.
    """

    model_config = ConfigDict(extra="forbid")

    root: Path = Field(default_factory=Path.cwd)
    packages_dir: Path = Path("packages")
    changes_file: Path = Path("changes.yaml")
    contributors_file: Path = Path("contributors.yaml")
    template_file: Path = Path("RELEASE.md.template")
    output_dir: Path = Path(".")
    repository: str = DEFAULT_REPOSITORY
    publish_command: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PUBLISH_COMMAND), min_length=1
    )

    def resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.root / path

    @property
    def packages_path(self) -> Path:
        return self.resolve(self.packages_dir)

    @property
    def changes_path(self) -> Path:
        return self.resolve(self.changes_file)

    @property
    def contributors_path(self) -> Path:
        return self.resolve(self.contributors_file)

    @property
    def template_path(self) -> Path:
        return self.resolve(self.template_file)

    @property
    def output_path(self) -> Path:
        return self.resolve(self.output_dir)


def load_config(path: Path | None = None) -> ReleaseConfig:
    """Load release settings, falling back to defaults.

    Args:
        path: Config file to read. Defaults to release.toml in the current
              directory. A missing file is not an error.

    Raises:
        ConfigError: If the file isn't valid TOML or holds unknown keys or
            values of the wrong type.
    """
    if path is None:
        path = Path.cwd() / CONFIG_FILE
    root = path.parent.resolve()
    if not path.exists():
        return ReleaseConfig(root=root)

    try:
        data = tomlkit.parse(path.read_text(encoding="utf-8")).unwrap()
    except TOMLKitError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    try:
        return ReleaseConfig.model_validate({"root": root, **data})
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigError(f"Invalid {path.name}: {problems}") from exc
