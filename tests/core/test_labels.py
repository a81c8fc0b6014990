import pytest

from doctree_toolkit.core.models import Label, LabelCache
from doctree_toolkit.core.tag_index import TagIndex


class TestLabelCache:
    def test_same_name_returns_identical_object(self, label_cache):
        assert label_cache.get_label("Urgent") is label_cache.get_label("Urgent")

    def test_colour_table_and_fallback(self, label_cache):
        assert label_cache.get_label("Urgent").color == "bg-red-500"
        assert label_cache.get_label("Work").color == "bg-blue-500"
        assert label_cache.get_label("Personal").color == "bg-green-500"
        assert label_cache.get_label("Archive").color == "bg-slate-500"

    def test_len_contains_clear(self, label_cache):
        label_cache.get_label("Work")
        assert "Work" in label_cache
        assert "Urgent" not in label_cache
        assert len(label_cache) == 1
        label_cache.clear()
        assert len(label_cache) == 0

    def test_defaults_come_from_packaged_config(self):
        cache = LabelCache()
        assert cache.get_label("Urgent").color == "bg-red-500"
        assert cache.get_label("Unknown").color == "bg-slate-500"

    def test_label_is_immutable(self):
        label = Label("Work", "bg-blue-500")
        with pytest.raises(AttributeError):
            label.color = "bg-red-500"  # type: ignore[misc]


class TestTagIndex:
    @pytest.fixture
    def index(self, label_cache):
        return TagIndex(label_cache)

    def test_attach_and_lookup_both_ways(self, index, label_cache):
        assert index.attach("file1", "Urgent") is True
        labels = index.get_labels("file1")
        assert labels == [Label("Urgent", "bg-red-500")]
        assert labels[0] is label_cache.get_label("Urgent")
        assert index.get_files("Urgent") == ["file1"]

    def test_attach_twice_is_noop(self, index):
        index.attach("file1", "Urgent")
        assert index.attach("file1", "Urgent") is False
        assert index.get_files("Urgent") == ["file1"]
        assert len(index.get_labels("file1")) == 1

    def test_detach_absent_pair_is_noop(self, index):
        assert index.detach("file1", "Urgent") is False
        index.attach("file1", "Work")
        assert index.detach("file1", "Urgent") is False
        assert [l.name for l in index.get_labels("file1")] == ["Work"]

    def test_insertion_order(self, index):
        index.attach("file1", "Work")
        index.attach("file1", "Urgent")
        index.attach("file2", "Urgent")
        assert [l.name for l in index.get_labels("file1")] == ["Work", "Urgent"]
        assert index.get_files("Urgent") == ["file1", "file2"]

    def test_maps_stay_symmetric(self, index):
        index.attach("a", "Work")
        index.attach("b", "Work")
        index.attach("a", "Urgent")
        index.detach("a", "Work")
        index.detach("b", "Work")
        forward = {(eid, l.name) for eid in ("a", "b") for l in index.get_labels(eid)}
        backward = {(eid, name) for name in index.label_names() for eid in index.get_files(name)}
        assert forward == backward == {("a", "Urgent")}
        assert set(index.pairs()) == forward
        assert index.label_names() == ["Urgent"]

    def test_unknown_keys_return_empty(self, index):
        assert index.get_labels("nope") == []
        assert index.get_files("nope") == []

    def test_clear(self, index):
        index.attach("a", "Work")
        index.clear()
        assert index.pairs() == []
        assert not index.has("a", "Work")
