"""
Retention policy tests: the selected file is the one that survives cleanup,
so the choice must be correct and repeatable.
"""
import pytest

from reclaim.core.models import DuplicateGroup, FileRecord, RetentionPolicy
from reclaim.core.sorter import Sorter


def _group(*specs):
    """specs: (path, mtime, discovery_index)"""
    return DuplicateGroup(
        content_digest="sha256:test",
        file_size=100,
        files=[FileRecord(path, path.rsplit("/", 1)[-1], 100, mtime, index) for path, mtime, index in specs],
    )


class TestSelect:
    def test_keep_newest(self):
        group = _group(("/old", 100.0, 0), ("/new", 300.0, 1), ("/mid", 200.0, 2))
        selection = Sorter.select(group, RetentionPolicy.KEEP_NEWEST)

        assert selection.keep.path == "/new"
        assert [f.path for f in selection.remove] == ["/mid", "/old"]

    def test_keep_oldest(self):
        group = _group(("/old", 100.0, 0), ("/new", 300.0, 1), ("/mid", 200.0, 2))
        selection = Sorter.select(group, RetentionPolicy.KEEP_OLDEST)

        assert selection.keep.path == "/old"
        assert [f.path for f in selection.remove] == ["/mid", "/new"]

    @pytest.mark.parametrize("policy", list(RetentionPolicy))
    def test_equal_mtimes_resolved_by_discovery_order(self, policy):
        group = _group(("/third", 50.0, 2), ("/first", 50.0, 0), ("/second", 50.0, 1))
        assert Sorter.select(group, policy).keep.path == "/first"

    @pytest.mark.parametrize("policy", list(RetentionPolicy))
    def test_selection_is_deterministic(self, policy):
        group = _group(("/a", 10.0, 3), ("/b", 10.0, 1), ("/c", 5.0, 2), ("/d", 20.0, 0))
        first = Sorter.select(group, policy)
        second = Sorter.select(group, policy)
        assert first == second

    def test_exactly_one_file_kept(self):
        group = _group(("/a", 1.0, 0), ("/b", 2.0, 1), ("/c", 3.0, 2), ("/d", 4.0, 3))
        selection = Sorter.select(group)

        assert len(selection.remove) == 3
        assert selection.keep not in selection.remove
        assert {selection.keep, *selection.remove} == set(group.files)


class TestSortInsideGroups:
    def test_retained_file_moves_to_front(self):
        groups = [
            _group(("/a", 1.0, 0), ("/b", 2.0, 1)),
            _group(("/c", 9.0, 2), ("/d", 3.0, 3)),
        ]
        Sorter.sort_files_inside_groups(groups, RetentionPolicy.KEEP_OLDEST)

        assert [g.files[0].path for g in groups] == ["/a", "/d"]
