import pytest

from doctree_toolkit.core.exceptions import UnhandledEntryError
from doctree_toolkit.core.models import Directory, TextFile
from doctree_toolkit.core.traversal import (
    FileStats,
    FinderTraversal,
    SearchTraversal,
    StatisticsTraversal,
    count_nodes,
)


def test_count_nodes(tree):
    assert count_nodes(tree.root) == 4
    assert count_nodes(tree.file1) == 1


class TestStatisticsTraversal:
    def test_totals(self, tree):
        stats = StatisticsTraversal().walk(tree.root)
        assert stats.total_size == 2548
        assert stats.total_nodes == 4
        assert stats.dir_count == 2

    def test_results_per_file(self, tree):
        results = StatisticsTraversal().walk(tree.root).results()
        assert results.file_stats == FileStats(count=2, total_size=2548, max_size=2048, min_size=500, avg_size=1274.0)
        assert results.by_extension is None

    def test_group_by_extension(self, tree):
        tree.dir_a.add(TextFile("README", 4))
        tree.dir_a.add(TextFile("b.PDF", 100))
        results = StatisticsTraversal(group_by_extension=True).walk(tree.root).results()
        assert set(results.by_extension) == {".pdf", ".png", "no-ext"}
        assert results.by_extension[".pdf"].count == 2
        assert results.by_extension[".pdf"].total_size == 600
        assert results.by_extension["no-ext"].total_size == 4

    def test_empty_directory(self):
        results = StatisticsTraversal().walk(Directory("empty")).results()
        assert results.total_nodes == 1
        assert results.file_stats == FileStats()

    def test_one_progress_event_per_node(self, tree, recorder):
        stats = StatisticsTraversal()
        stats.channel.subscribe(recorder)
        stats.walk(tree.root)
        assert [e.data["count"] for e in recorder.events] == [1, 2, 3, 4]
        assert all(e.data["total"] == 4 for e in recorder.events)
        assert all(e.type == "progress" and e.source == "traversal" for e in recorder.events)
        assert [e.data["current_node"] for e in recorder.events] == ["root", "dirA", "report.pdf", "photo.png"]
        assert recorder.events[2].data["node_type"] == "Document"


class TestSearchTraversal:
    def test_case_insensitive(self, tree):
        assert SearchTraversal("REPORT").walk(tree.root).found_ids == ["file1"]

    def test_directories_are_never_matched(self, tree, recorder):
        search = SearchTraversal("dir")
        search.channel.subscribe(recorder)
        assert search.walk(tree.root).found_ids == []
        assert "Searching directory: dirA" in recorder.messages
        assert search.processed == 4

    def test_visit_order(self, tree):
        assert SearchTraversal("p").walk(tree.root).found_ids == ["file1", "file2"]

    def test_no_match(self, tree):
        assert SearchTraversal("zzz").walk(tree.root).found_ids == []

    def test_match_events(self, tree, recorder):
        search = SearchTraversal("photo")
        search.channel.subscribe(recorder)
        search.walk(tree.root)
        assert "[Match] photo.png" in recorder.messages


class TestFinderTraversal:
    def test_finds_entry_and_parent(self, tree):
        finder = FinderTraversal("file2").walk(tree.root)
        assert finder.found is tree.file2
        assert finder.parent is tree.dir_a

    def test_directory_parent(self, tree):
        finder = FinderTraversal("dirA").walk(tree.root)
        assert finder.found is tree.dir_a
        assert finder.parent is tree.root

    def test_root_has_no_parent(self, tree):
        finder = FinderTraversal("root").walk(tree.root)
        assert finder.found is tree.root
        assert finder.parent is None

    def test_absent(self, tree):
        finder = FinderTraversal("missing").walk(tree.root)
        assert finder.found is None
        assert finder.parent is None

    def test_stops_early(self, tree):
        finder = FinderTraversal("file1").walk(tree.root)
        assert finder.processed == 3


def test_dispatch_rejects_foreign_objects(tree):
    with pytest.raises(UnhandledEntryError):
        StatisticsTraversal().walk(object())  # type: ignore[arg-type]
