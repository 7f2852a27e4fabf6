"""Tests for mono_release.changes."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from mono_release.changes import (
    expand_entry,
    format_handle,
    parse_change_blocks,
    read_changes,
    split_list,
)
from mono_release.errors import ChangeEntryError, ReleaseError, UnknownPackageError
from mono_release.models import ChangeEntry
from mono_release.registry import PackageRegistry

CHANGES = """\
# Release changes

package: foo, bar
type: minor
description: Add X
pr: 12
by: alice, bob

# trailing comment block only

package: bar
type: patch
description: Fix: handle empty input
pr: 13
by: @carol
"""


class TestParseChangeBlocks:
    def test_parses_blocks(self) -> None:
        """Each block becomes one entry with its fields."""
        entries = parse_change_blocks(CHANGES)

        assert len(entries) == 2
        assert entries[0].package == "foo, bar"
        assert entries[0].type == "minor"
        assert entries[0].description == "Add X"
        assert entries[0].pr == "12"
        assert entries[0].by == "alice, bob"

    def test_value_keeps_text_after_first_colon(self) -> None:
        """Only the first colon separates key from value."""
        entries = parse_change_blocks(CHANGES)

        assert entries[1].description == "Fix: handle empty input"

    def test_drops_comment_only_and_empty_blocks(self) -> None:
        """Blocks with nothing but comments produce no entries."""
        assert parse_change_blocks("# nothing here\n\n\n# at all\n") == []
        assert parse_change_blocks("") == []

    def test_whitespace_only_line_separates_blocks(self) -> None:
        """A line of spaces ends a block like an empty line."""
        text = (
            "package: foo\ntype: patch\ndescription: a\npr: 1\nby: x\n   \n"
            "package: bar\ntype: patch\ndescription: b\npr: 2\nby: y\n"
        )

        assert [e.package for e in parse_change_blocks(text)] == ["foo", "bar"]

    def test_unknown_keys_are_carried(self) -> None:
        """Extra keys are kept on the entry."""
        text = "package: foo\ntype: patch\ndescription: a\npr: 1\nby: x\nissue: 99\n"

        entry = parse_change_blocks(text)[0]

        assert entry.model_extra == {"issue": "99"}

    def test_missing_field_is_named(self) -> None:
        """The error says which required field is absent."""
        text = "package: foo\ntype: patch\ndescription: a\nby: x\n"

        with pytest.raises(ChangeEntryError, match="missing field 'pr'"):
            parse_change_blocks(text)

    def test_error_reports_block_line(self) -> None:
        """The error points at the first line of the block."""
        text = "# header\n\npackage: foo\ntype: patch\n"

        with pytest.raises(ChangeEntryError, match="line 3"):
            parse_change_blocks(text)

    def test_invalid_type(self) -> None:
        """A type outside patch/minor/major is rejected."""
        text = "package: foo\ntype: huge\ndescription: a\npr: 1\nby: x\n"

        with pytest.raises(ChangeEntryError, match="invalid 'type'"):
            parse_change_blocks(text)

    def test_empty_package_is_rejected(self) -> None:
        """A block with no package name fails instead of vanishing."""
        text = "# header\n\npackage:\ntype: minor\ndescription: a\npr: 1\nby: x\n"

        with pytest.raises(ChangeEntryError, match="line 3: invalid 'package'"):
            parse_change_blocks(text)

    def test_comma_only_package_is_rejected(self) -> None:
        """Only separators in the package list counts as no package."""
        text = "package: , ,\ntype: patch\ndescription: a\npr: 1\nby: x\n"

        with pytest.raises(ChangeEntryError, match="no package name given"):
            parse_change_blocks(text)


class TestHelpers:
    def test_split_list(self) -> None:
        """Items are trimmed and empty items dropped."""
        assert split_list(" foo ,bar,, baz ") == ["foo", "bar", "baz"]

    def test_format_handle(self) -> None:
        """Handles get exactly one leading @."""
        assert format_handle(" alice ") == "@alice"
        assert format_handle("@bob") == "@bob"


class TestExpandEntry:
    def test_one_change_per_package(self, registry: PackageRegistry) -> None:
        """N listed packages give N changes with shared fields."""
        entry = ChangeEntry(
            package="foo, bar",
            type="minor",
            description="Add X",
            pr="12",
            by="alice, bob",
        )

        changes = expand_entry(entry, registry)

        assert [c.package.name for c in changes] == ["foo", "bar"]
        for c in changes:
            assert c.type == "minor"
            assert c.description == "Add X"
            assert c.pr == "12"
            assert c.by == ["@alice", "@bob"]

    def test_resolves_to_registry_package(self, registry: PackageRegistry) -> None:
        """Changes point at the registry's own Package object."""
        entry = ChangeEntry(
            package="foo", type="patch", description="d", pr="1", by="x"
        )

        (change,) = expand_entry(entry, registry)

        assert change.package is registry.get("foo")

    def test_unknown_package_is_named(self, registry: PackageRegistry) -> None:
        """An unknown package aborts with its name."""
        entry = ChangeEntry(
            package="foo, qux", type="patch", description="d", pr="1", by="x"
        )

        with pytest.raises(UnknownPackageError, match="Could not find qux"):
            expand_entry(entry, registry)


@patch("mono_release.changes.step")
class TestReadChanges:
    def test_reads_and_expands(
        self, mock_step: MagicMock, tmp_path: Path, registry: PackageRegistry
    ) -> None:
        """Changes come back in file order, one per package."""
        path = tmp_path / "changes.yaml"
        path.write_text(CHANGES)

        changes = read_changes(path, registry)

        assert [(c.package.name, c.type, c.pr) for c in changes] == [
            ("foo", "minor", "12"),
            ("bar", "minor", "12"),
            ("bar", "patch", "13"),
        ]
        assert changes[2].by == ["@carol"]

    def test_missing_file(
        self, mock_step: MagicMock, tmp_path: Path, registry: PackageRegistry
    ) -> None:
        """A missing change file propagates FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            read_changes(tmp_path / "changes.yaml", registry)

    def test_entry_without_package_aborts(
        self, mock_step: MagicMock, tmp_path: Path, registry: PackageRegistry
    ) -> None:
        """An entry with an empty package list aborts the whole read."""
        path = tmp_path / "changes.yaml"
        path.write_text(
            "package:\ntype: minor\ndescription: Add X\npr: 12\nby: alice\n"
        )

        with pytest.raises(ReleaseError, match="package"):
            read_changes(path, registry)

    def test_undecodable_file(
        self, mock_step: MagicMock, tmp_path: Path, registry: PackageRegistry
    ) -> None:
        """Bytes that aren't UTF-8 raise a release error naming the file."""
        path = tmp_path / "changes.yaml"
        path.write_bytes(b"package: foo\ndescription: \xff\n")

        with pytest.raises(ChangeEntryError, match="changes.yaml"):
            read_changes(path, registry)
