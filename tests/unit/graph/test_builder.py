"""Unit tests for the Dependency Graph Builder."""

import pytest

from appfs.core.errors import NotFoundError
from appfs.core.types import ResolvedImport
from appfs.graph.builder import DependencyGraphBuilder

from tests.helpers import APP_WITH_HEADER, HEADER, component


@pytest.fixture
def builder(resolver):
    return DependencyGraphBuilder(resolver)


class TestEdgesFor:

    def test_header_edge(self, store, builder):
        store.write("/App.jsx", "component", APP_WITH_HEADER)
        store.write("/components/Header.jsx", "component", HEADER)

        assert builder.edges_for("/App.jsx") == {
            ResolvedImport(from_path="/App.jsx", to_path="/components/Header.jsx")
        }
        assert builder.edges_for("/components/Header.jsx") == set()

    def test_external_and_unresolved_reported_separately(self, store, builder):
        store.write("/App.jsx", "component", component("react", "@/components/Footer"))
        imports = builder.scan("/App.jsx")

        assert imports.edges == []
        assert imports.external == ["react"]
        assert [(u.from_path, u.specifier, u.line) for u in imports.unresolved] == [
            ("/App.jsx", "@/components/Footer", 2)
        ]

    def test_two_specifiers_same_target_one_edge(self, store, builder):
        store.write("/App.jsx", "component", component("./lib/util", "@/lib/util"))
        store.write("/lib/util.js", "other-source", "")
        imports = builder.scan("/App.jsx")
        assert len(imports.edges) == 1
        assert imports.edges[0].specifier == "./lib/util"

    def test_styles_and_assets_not_scanned(self, store, builder):
        store.write("/app.css", "style", '@import "./missing.css";')
        store.write("/data.json", "asset", '{"import": "x"}')
        assert builder.scan("/app.css").unresolved == []
        assert builder.scan("/data.json").edges == []

    def test_missing_file(self, builder):
        with pytest.raises(NotFoundError):
            builder.edges_for("/nope.jsx")


class TestCaching:

    def test_unchanged_file_reuses_scan(self, store, builder):
        store.write("/App.jsx", "component", component("./A"))
        store.write("/A.jsx", "component", component())
        first = builder.scan("/App.jsx")
        store.write("/A.jsx", "component", component("react"))
        assert builder.scan("/App.jsx") is first

    def test_replace_rescans(self, store, builder):
        store.write("/App.jsx", "component", component("./A"))
        store.write("/A.jsx", "component", component())
        store.write("/B.jsx", "component", component())
        builder.scan("/App.jsx")
        store.write("/App.jsx", "component", component("./B"))
        assert {e.to_path for e in builder.edges_for("/App.jsx")} == {"/B.jsx"}

    def test_new_file_resolves_dangling_import(self, store, builder):
        store.write("/App.jsx", "component", component("@/components/Footer"))
        assert builder.scan("/App.jsx").unresolved
        store.write("/components/Footer.jsx", "component", component())
        imports = builder.scan("/App.jsx")
        assert imports.unresolved == []
        assert imports.edges[0].to_path == "/components/Footer.jsx"

    def test_deleted_target_becomes_unresolved(self, store, builder):
        store.write("/App.jsx", "component", component("./A"))
        store.write("/A.jsx", "component", component())
        assert builder.edges_for("/App.jsx")
        store.delete("/A.jsx")
        assert builder.edges_for("/App.jsx") == set()
        assert builder.scan("/App.jsx").unresolved[0].specifier == "./A"

    def test_recreated_file_is_rescanned(self, store, builder):
        store.write("/App.jsx", "component", component("./A"))
        store.write("/A.jsx", "component", component())
        store.write("/B.jsx", "component", component())
        builder.scan("/App.jsx")
        store.delete("/App.jsx")
        store.write("/App.jsx", "component", component("./B"))
        assert {e.to_path for e in builder.edges_for("/App.jsx")} == {"/B.jsx"}

    def test_prune_drops_deleted_paths(self, store, builder):
        store.write("/App.jsx", "component", component())
        store.write("/A.jsx", "component", component())
        builder.full_graph(store, "/App.jsx")
        store.delete("/A.jsx")
        assert builder.prune() == 1
        assert builder.cached_paths == {"/App.jsx"}


class TestFullGraph:

    def test_reachable_and_orphans(self, store, builder):
        store.write("/App.jsx", "component", component("./A"))
        store.write("/Unused.jsx", "component", component("./A"))
        store.write("/A.jsx", "component", component())

        graph = builder.full_graph(store.snapshot(), "/App.jsx")
        assert graph.reachable == {"/App.jsx", "/A.jsx"}
        assert graph.orphans() == ["/Unused.jsx"]
        assert graph.has_edge("/Unused.jsx", "/A.jsx")

    def test_walk_yields_reachable_first(self, store, builder):
        store.write("/Unused.jsx", "component", component())
        store.write("/App.jsx", "component", component("./A"))
        store.write("/A.jsx", "component", component())

        walk = builder.iter_full_graph(store.snapshot(), "/App.jsx")
        order = []
        while True:
            try:
                order.append(next(walk))
            except StopIteration as done:
                graph = done.value
                break
        assert order == ["/App.jsx", "/A.jsx", "/Unused.jsx"]
        assert graph.file_count == 3

    def test_missing_entry_nothing_reachable(self, store, builder):
        store.write("/A.jsx", "component", component("./B"))
        graph = builder.full_graph(store, "/App.jsx")
        assert graph.reachable == set()
        assert [u.specifier for u in graph.unresolved] == ["./B"]

    def test_externals_collected(self, store, builder):
        store.write("/App.jsx", "component", component("react", "framer-motion"))
        graph = builder.full_graph(store, "/App.jsx")
        assert sorted(graph.external) == ["framer-motion", "react"]
        assert graph.external["react"] == {"/App.jsx"}
