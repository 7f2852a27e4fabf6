"""Change file parsing.

The change file is a list of blocks separated by blank lines. Each block is a
set of ``key: value`` lines describing one release-note item::

    # comments are ignored
    package: foo, bar
    type: minor
    description: Add X
    pr: 12
    by: alice, bob

Despite the usual .yaml extension this is not parsed as YAML: values are
taken verbatim after the first colon.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError

from .errors import ChangeEntryError
from .models import Change, ChangeEntry
from .registry import PackageRegistry
from .shell import step


def _split_blocks(text: str) -> list[tuple[int, list[str]]]:
    """Split text into blocks of non-comment lines.

    Returns:
        (line number of the block's first line, lines) for each block that
        has at least one non-comment line.
    """
    blocks: list[tuple[int, list[str]]] = []
    current: list[str] = []
    start = 0
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            if current:
                blocks.append((start, current))
                current = []
            continue
        if line.lstrip().startswith("#"):
            continue
        if not current:
            start = lineno
        current.append(line)
    if current:
        blocks.append((start, current))
    return blocks


def _parse_fields(lines: list[str]) -> dict[str, str]:
    fields: dict[str, str] = {}
    for line in lines:
        key, _, value = line.partition(":")
        fields[key.strip()] = value.strip()
    return fields


def _describe_errors(exc: ValidationError) -> str:
    problems: list[str] = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"])
        if err["type"] == "missing":
            problems.append(f"missing field '{field}'")
        else:
            problems.append(f"invalid '{field}': {err['msg']}")
    return "; ".join(problems)


def parse_change_blocks(text: str) -> list[ChangeEntry]:
    """Parse change file text into validated entries.

    Raises:
        ChangeEntryError: If a block lacks a required field or names an
            unknown change type. The message names the field and the line
            the block starts on.
    """
    entries: list[ChangeEntry] = []
    for start, lines in _split_blocks(text):
        try:
            entries.append(ChangeEntry.model_validate(_parse_fields(lines)))
        except ValidationError as exc:
            raise ChangeEntryError(
                f"Change entry at line {start}: {_describe_errors(exc)}"
            ) from exc
    return entries


def split_list(value: str) -> list[str]:
    """Split a comma-separated list, dropping empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


def format_handle(handle: str) -> str:
    """Format an author handle as "@handle"."""
    return "@" + handle.strip().lstrip("@")


def expand_entry(entry: ChangeEntry, registry: PackageRegistry) -> list[Change]:
    """Expand an entry into one resolved Change per listed package.

    Raises:
        UnknownPackageError: If a listed package is not in the registry.
    """
    by = [format_handle(h) for h in split_list(entry.by)]
    return [
        Change(
            package=registry.get(name),
            type=entry.type,
            description=entry.description,
            pr=entry.pr,
            by=list(by),
        )
        for name in split_list(entry.package)
    ]


def read_changes(path: Path, registry: PackageRegistry) -> list[Change]:
    """Read the change file and resolve every change against the registry.

    Returns:
        Changes in file order, one per (entry, package) pair.
    """
    step("Reading changes")

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ChangeEntryError(f"Cannot decode {path}: {exc}") from exc

    entries = parse_change_blocks(text)
    changes = [change for entry in entries for change in expand_entry(entry, registry)]

    for c in changes:
        print(f"  [{c.package.name}] {c.type}: {c.description} (#{c.pr})")

    return changes
