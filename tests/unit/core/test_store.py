"""
Unit tests for the Virtual File Store.
"""

import pytest

from appfs.core.errors import DisallowedFileKindError, InvalidPathError, NotFoundError
from appfs.core.store import VirtualFileStore, coerce_kind
from appfs.core.types import FileKind


class TestWrite:

    def test_create_sets_version_one(self, store):
        node = store.write("/App.jsx", "component", "export default function App() {}")
        assert node.path == "/App.jsx"
        assert node.kind == FileKind.COMPONENT
        assert node.version == 1

    def test_replace_bumps_version(self, store):
        store.write("/App.jsx", "component", "v1")
        node = store.write("/App.jsx", "component", "v2")
        assert node.version == 2
        assert store.read("/App.jsx").content == "v2"

    def test_path_is_normalized(self, store):
        store.write("components//ui/../Header.jsx", "component", "")
        assert store.list() == ["/components/Header.jsx"]
        assert store.exists("/components/Header.jsx")

    def test_kind_inferred_from_extension(self, store):
        assert store.write("/styles/app.css").kind == FileKind.STYLE
        assert store.write("/lib/util.js").kind == FileKind.OTHER_SOURCE
        assert store.write("/logo.svg").kind == FileKind.ASSET
        assert store.write("/Card.tsx").kind == FileKind.COMPONENT

    @pytest.mark.parametrize("path", ["/lib/worker.mjs", "/lib/legacy.cjs", "/lib/api.mts", "/Procfile"])
    def test_scripts_and_unknown_are_other_source(self, store, path):
        assert store.write(path).kind == FileKind.OTHER_SOURCE

    def test_kind_enum_accepted(self, store):
        assert store.write("/lib/api.ts", FileKind.OTHER_SOURCE).kind == FileKind.OTHER_SOURCE

    def test_generation_counters(self, store):
        store.write("/App.jsx", "component", "a")
        assert (store.generation, store.structure_generation) == (1, 1)
        store.write("/App.jsx", "component", "b")
        assert (store.generation, store.structure_generation) == (2, 1)


class TestDisallowedKinds:

    def test_markup_extension_rejected(self, store):
        with pytest.raises(DisallowedFileKindError):
            store.write("/index.html", "asset", "<html></html>")
        assert len(store) == 0
        assert store.generation == 0

    def test_markup_kind_rejected(self, store):
        store.write("/App.jsx", "component", "export default function App() {}")
        with pytest.raises(DisallowedFileKindError):
            store.write("/page.jsx", "markup", "")
        assert store.list() == ["/App.jsx"]

    def test_unknown_kind_rejected(self, store):
        with pytest.raises(DisallowedFileKindError):
            store.write("/App.jsx", "template", "")

    def test_rejected_replace_keeps_old_node(self, store):
        store.write("/App.jsx", "component", "old")
        with pytest.raises(DisallowedFileKindError):
            store.write("/App.jsx", "markup", "new")
        assert store.read("/App.jsx").content == "old"
        assert store.read("/App.jsx").version == 1

    @pytest.mark.parametrize("path", ["/a.html", "/b.HTM", "/c.xhtml"])
    def test_coerce_kind_markup_extensions(self, path):
        with pytest.raises(DisallowedFileKindError):
            coerce_kind(path, None)


class TestReadDelete:

    def test_read_missing(self, store):
        with pytest.raises(NotFoundError):
            store.read("/missing.jsx")

    def test_get_missing_returns_none(self, store):
        assert store.get("/missing.jsx") is None

    def test_delete_returns_node(self, store):
        store.write("/App.jsx", "component", "x")
        node = store.delete("/App.jsx")
        assert node.content == "x"
        assert "/App.jsx" not in store
        assert store.structure_generation == 2

    def test_delete_missing(self, store):
        with pytest.raises(NotFoundError):
            store.delete("/missing.jsx")
        assert store.generation == 0

    def test_recreate_after_delete_starts_at_version_one(self, store):
        store.write("/App.jsx", "component", "a")
        store.write("/App.jsx", "component", "b")
        store.delete("/App.jsx")
        assert store.write("/App.jsx", "component", "c").version == 1

    def test_list_preserves_insertion_order(self, store):
        for path in ["/b.js", "/a.js", "/c.js"]:
            store.write(path)
        assert store.list() == ["/b.js", "/a.js", "/c.js"]

    def test_clear(self, store):
        store.write("/a.js")
        store.clear()
        assert len(store) == 0
        assert store.generation == 2


class TestRename:

    def test_rename_moves_content(self, store):
        store.write("/components/Head.jsx", "component", "export default 1")
        store.write("/components/Head.jsx", "component", "export default 2")
        moved = store.rename("/components/Head.jsx", "/components/Header.jsx")

        assert moved.path == "/components/Header.jsx"
        assert moved.content == "export default 2"
        assert moved.version == 1
        assert store.list() == ["/components/Header.jsx"]

    def test_rename_missing(self, store):
        with pytest.raises(NotFoundError):
            store.rename("/a.js", "/b.js")

    def test_rename_onto_existing(self, store):
        store.write("/a.js")
        store.write("/b.js")
        with pytest.raises(InvalidPathError, match="already exists"):
            store.rename("/a.js", "/b.js")
        assert store.list() == ["/a.js", "/b.js"]

    def test_rename_to_markup_rejected(self, store):
        store.write("/a.jsx", "component", "")
        with pytest.raises(DisallowedFileKindError):
            store.rename("/a.jsx", "/a.html")
        assert store.exists("/a.jsx")

    def test_rename_bumps_structure_generation(self, store):
        store.write("/a.js")
        store.rename("/a.js", "/b.js")
        assert store.structure_generation == 2


class TestSnapshot:

    def test_snapshot_is_isolated_from_later_writes(self, store):
        store.write("/App.jsx", "component", "v1")
        snapshot = store.snapshot()
        store.write("/App.jsx", "component", "v2")
        store.write("/extra.js")

        assert snapshot.read("/App.jsx").content == "v1"
        assert snapshot.list() == ["/App.jsx"]
        assert snapshot.generation == 1
        assert store.generation == 3

    def test_snapshot_read_api(self, store):
        store.write("/a.js", None, "x")
        snapshot = store.snapshot()
        assert "/a.js" in snapshot
        assert len(snapshot) == 1
        assert [node.path for node in snapshot] == ["/a.js"]
        with pytest.raises(NotFoundError):
            snapshot.read("/b.js")

    def test_fresh_store_is_empty(self):
        store = VirtualFileStore()
        assert store.list() == []
        assert store.generation == 0
