"""Tests for the FileComparator class."""

from datetime import datetime, timedelta, timezone

from s3sync.models import File
from s3sync.sync.comparator import FileComparator, SyncAction

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _file(name: str, size: int = 10, mtime: int = 5) -> File:
    """Create a File for testing with mtime as seconds after BASE_TIME."""
    return File(
        filename=name, size=size, last_modified=BASE_TIME + timedelta(seconds=mtime)
    )


class TestCompareSourceFile:
    """Tests for decisions about files that exist on the source."""

    def test_identical_files_skip(self):
        """Equal size and mtime should be skipped."""
        comparator = FileComparator()

        decisions = comparator.compare_files(
            {"a.txt": _file("a.txt", 10, 5)}, {"a.txt": _file("a.txt", 10, 5)}
        )

        assert len(decisions) == 1
        assert decisions[0].action == SyncAction.SKIP
        assert decisions[0].reason == "Files are identical"

    def test_missing_on_destination_copies(self):
        """Source files absent from the destination should be copied."""
        comparator = FileComparator()

        decisions = comparator.compare_files({"a.txt": _file("a.txt")}, {})

        assert decisions[0].action == SyncAction.COPY
        assert decisions[0].reason == "New file"
        assert decisions[0].dest_file is None

    def test_size_mismatch_copies(self):
        """Different sizes should be copied even if the source is older."""
        comparator = FileComparator()

        decisions = comparator.compare_files(
            {"b.txt": _file("b.txt", 20, 10)}, {"b.txt": _file("b.txt", 15, 10)}
        )

        assert decisions[0].action == SyncAction.COPY
        assert "Size mismatch" in decisions[0].reason

    def test_newer_source_copies(self):
        """Strictly newer source files with equal size should be copied."""
        comparator = FileComparator()

        decisions = comparator.compare_files(
            {"a.txt": _file("a.txt", 10, 6)}, {"a.txt": _file("a.txt", 10, 5)}
        )

        assert decisions[0].action == SyncAction.COPY
        assert decisions[0].reason == "Source file is newer"

    def test_older_source_skips(self):
        """An older source with equal size never triggers a copy."""
        comparator = FileComparator()

        decisions = comparator.compare_files(
            {"a.txt": _file("a.txt", 10, 1)}, {"a.txt": _file("a.txt", 10, 5)}
        )

        assert decisions[0].action == SyncAction.SKIP

    def test_missing_timestamp_skips_when_size_matches(self):
        """Absent timestamps compare as not newer."""
        comparator = FileComparator()
        source = _file("a.txt", 10, 100)
        dest = File(filename="a.txt", size=10, last_modified=None)

        decisions = comparator.compare_files({"a.txt": source}, {"a.txt": dest})

        assert decisions[0].action == SyncAction.SKIP


class TestDestinationOnly:
    """Tests for files that only exist on the destination."""

    def test_delete_enabled_marks_delete(self):
        """Destination-only files are delete candidates when enabled."""
        comparator = FileComparator(delete_enabled=True)

        decisions = comparator.compare_files({}, {"c.txt": _file("c.txt")})

        assert len(decisions) == 1
        assert decisions[0].action == SyncAction.DELETE
        assert decisions[0].reason == "No source file"

    def test_delete_disabled_emits_nothing(self):
        """Deletion is not evaluated at all when disabled."""
        comparator = FileComparator(delete_enabled=False)

        decisions = comparator.compare_files({}, {"c.txt": _file("c.txt")})

        assert decisions == []

    def test_decisions_sorted_by_path(self):
        """Decisions are ordered by relative path."""
        comparator = FileComparator(delete_enabled=True)

        decisions = comparator.compare_files(
            {"b.txt": _file("b.txt"), "d.txt": _file("d.txt")},
            {"a.txt": _file("a.txt"), "c.txt": _file("c.txt")},
        )

        assert [d.relative_path for d in decisions] == [
            "a.txt",
            "b.txt",
            "c.txt",
            "d.txt",
        ]


class TestClassify:
    """Tests for the classify() convenience method."""

    def test_scenario_mixed(self):
        """Classify returns source files to copy and dest files to delete."""
        comparator = FileComparator(delete_enabled=True)
        source = [_file("same.txt"), _file("new.txt"), _file("grown.txt", size=20)]
        dest = [_file("same.txt"), _file("grown.txt", size=15), _file("old.txt")]

        to_copy, to_delete = comparator.classify(source, dest)

        assert sorted(f.filename for f in to_copy) == ["grown.txt", "new.txt"]
        assert [f.filename for f in to_delete] == ["old.txt"]
        # Copies carry the source metadata
        assert next(f for f in to_copy if f.filename == "grown.txt").size == 20

    def test_empty_source_deletes_everything(self):
        """An empty source with deletion enabled deletes every dest file."""
        comparator = FileComparator(delete_enabled=True)

        to_copy, to_delete = comparator.classify([], [_file("c.txt")])

        assert to_copy == []
        assert [f.filename for f in to_delete] == ["c.txt"]

    def test_classify_does_not_mutate_inputs(self):
        """Inputs are left untouched."""
        comparator = FileComparator(delete_enabled=True)
        source = [_file("a.txt")]
        dest = [_file("b.txt")]

        comparator.classify(source, dest)

        assert source == [_file("a.txt")]
        assert dest == [_file("b.txt")]

    def test_second_pass_after_copy_is_empty(self):
        """After copying, classifying again yields no actions."""
        comparator = FileComparator(delete_enabled=True)
        source = [_file("a.txt", 10, 5), _file("b.txt", 20, 5)]

        to_copy, _ = comparator.classify(source, [])
        # Destination now holds copies written after the source mtime
        dest = [_file(f.filename, f.size, 50) for f in to_copy]

        to_copy, to_delete = comparator.classify(source, dest)

        assert to_copy == []
        assert to_delete == []
