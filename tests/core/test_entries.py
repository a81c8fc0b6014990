import re

import pytest

from doctree_toolkit.core.models import Directory, Document, Entry, EntryType, Image, TextFile
from doctree_toolkit.core.sorting import AttributeSortStrategy


class TestEntryBasics:
    def test_ids_are_unique_and_generated(self):
        a = TextFile("a.txt")
        b = TextFile("a.txt")
        assert a.id != b.id
        assert a.id.startswith("entry-")

    def test_explicit_id_is_kept(self):
        assert Directory("docs", entry_id="d1").id == "d1"

    def test_created_defaults_to_iso_date(self):
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", Document("x.doc").created)

    def test_negative_size_rejected(self):
        with pytest.raises(ValueError):
            Document("bad.doc", -1)

    def test_type_specific_attributes(self):
        assert dict(Document("a.doc", pages=12).attributes) == {"pages": 12}
        assert dict(Image("a.png", width=10, height=20).attributes) == {"res": "10x20"}
        assert dict(TextFile("a.txt", encoding="ASCII").attributes) == {"enc": "ASCII"}
        assert dict(Directory("d").attributes) == {}

    def test_attributes_are_read_only(self):
        doc = Document("a.doc", pages=2)
        with pytest.raises(TypeError):
            doc.attributes["pages"] = 5  # type: ignore[index]

    def test_types(self):
        assert Directory("d").type is EntryType.DIRECTORY
        assert Document("d").type is EntryType.DOCUMENT
        assert Image("i").type is EntryType.IMAGE
        assert TextFile("t").type is EntryType.TEXT
        assert Directory("d").is_directory()
        assert not TextFile("t").is_directory()

    def test_extension(self):
        assert Document("Report.PDF").extension == "pdf"
        assert TextFile("archive.tar.gz").extension == "gz"
        assert TextFile("Makefile").extension == ""
        assert TextFile(".bashrc").extension == ""
        assert Directory("photos.old").extension == ""

    def test_entry_without_dispatch_cannot_be_instantiated(self):
        class Orphan(Entry):
            @property
            def size(self):
                return 0

            def clone(self):
                return self

            def structure(self):
                return ()

        with pytest.raises(TypeError):
            Orphan("o", EntryType.TEXT)


class TestDirectory:
    def test_size_is_sum_of_descendants(self, tree):
        assert tree.dir_a.size == 2548
        assert tree.root.size == 2548
        assert Directory("empty").size == 0

    def test_size_follows_mutations(self, tree):
        tree.dir_a.remove("file2")
        assert tree.root.size == 500

    def test_add_appends_and_index_of(self, tree):
        extra = TextFile("notes.txt", 1)
        tree.dir_a.add(extra)
        assert tree.dir_a.index_of(extra.id) == 2
        assert tree.dir_a.index_of("missing") == -1

    def test_add_at_index(self, tree):
        extra = TextFile("notes.txt", 1)
        tree.dir_a.add(extra, 0)
        assert [c.id for c in tree.dir_a.get_children()] == [extra.id, "file1", "file2"]

    def test_add_reapplies_active_strategy(self, tree):
        tree.dir_a.sort(AttributeSortStrategy("size", "desc"))
        assert [c.id for c in tree.dir_a.get_children()] == ["file2", "file1"]
        medium = TextFile("m.txt", 1000, entry_id="m")
        tree.dir_a.add(medium)
        assert [c.id for c in tree.dir_a.get_children()] == ["file2", "m", "file1"]

    def test_remove_returns_child_and_ignores_unknown(self, tree):
        removed = tree.dir_a.remove("file1")
        assert removed is tree.file1
        assert tree.dir_a.remove("file1") is None
        assert [c.id for c in tree.dir_a.get_children()] == ["file2"]

    def test_get_children_is_a_copy(self, tree):
        children = tree.dir_a.get_children()
        children.clear()
        assert tree.dir_a.has_children()
        assert len(tree.dir_a.get_children()) == 2

    def test_restore_order(self, tree):
        strategy = AttributeSortStrategy("name")
        tree.dir_a.restore_order([tree.file2, tree.file1], strategy)
        assert tree.dir_a.get_children() == [tree.file2, tree.file1]
        assert tree.dir_a.sort_strategy is strategy


class TestClone:
    def _all_ids(self, entry):
        ids = [entry.id]
        if isinstance(entry, Directory):
            for child in entry.get_children():
                ids.extend(self._all_ids(child))
        return ids

    def test_clone_is_structurally_equal_with_fresh_ids(self, tree):
        copy = tree.root.clone()
        assert copy.structure() == tree.root.structure()
        assert set(self._all_ids(copy)).isdisjoint(self._all_ids(tree.root))

    def test_clone_keeps_leaf_fields(self, tree):
        copy = tree.file2.clone()
        assert isinstance(copy, Image)
        assert copy.name == "photo.png"
        assert copy.size == 2048
        assert copy.created == "2024-01-04"
        assert dict(copy.attributes) == {"res": "1920x1080"}

    def test_clone_is_independent(self, tree):
        copy = tree.dir_a.clone()
        copy.remove(copy.get_children()[0].id)
        assert len(tree.dir_a.get_children()) == 2

    def test_clone_keeps_sort_strategy(self, tree):
        strategy = AttributeSortStrategy("size", "desc")
        tree.dir_a.sort(strategy)
        assert tree.dir_a.clone().sort_strategy is strategy
