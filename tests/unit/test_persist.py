"""
Persistence Tests

- Writing cache files and bundles
- Graph / file map state round trip and validation
"""

import json

import pytest

from bundlekit.bundler import BundleResult
from bundlekit.errors import ConfigurationError
from bundlekit.persist import STATE_VERSION, load_state, save_state, write_outputs
from bundlekit.types import GraphEntry, ImportSpec


class TestWriteOutputs:
    def test_cache_files_written_before_bundles(self, project):
        result = BundleResult(
            output_map={"dist/deps/a.js": "bundle"},
            cache_map={"dist/.cache/abc": "cached"},
            graph={},
        )

        written = write_outputs(result)

        assert written == ["dist/.cache/abc", "dist/deps/a.js"]
        assert (project / "dist/.cache/abc").read_text(encoding="utf-8") == "cached"
        assert (project / "dist/deps/a.js").read_text(encoding="utf-8") == "bundle"

    def test_empty_result_writes_nothing(self, project):
        assert write_outputs(BundleResult(output_map={}, cache_map={}, graph={})) == []
        assert not (project / "dist").exists()


class TestState:
    def test_round_trip(self, project):
        graph = {
            "a.js": GraphEntry(
                path="a.js",
                output="dist/deps/a.js",
                imports={"b.js": ImportSpec(), "c.js": ImportSpec(dynamic=True)},
                exports={"d.js": ["x", "y"]},
            )
        }
        file_map = {"a.js": "dist/deps/a.js"}

        save_state(project / "state" / "graph.json", graph, file_map)
        loaded_graph, loaded_file_map = load_state(project / "state" / "graph.json")

        assert loaded_graph == graph
        assert loaded_file_map == file_map

    def test_state_file_format(self, project):
        save_state(project / "graph.json", {}, {})

        data = json.loads((project / "graph.json").read_text(encoding="utf-8"))

        assert data == {"version": STATE_VERSION, "graph": {}, "file_map": {}}

    def test_missing_file_is_empty_state(self, project):
        assert load_state(project / "nope.json") == ({}, {})

    @pytest.mark.parametrize(
        "content",
        [
            "not json",
            '{"graph": {"a.js": {"imports": {}}}}',
            "[1, 2, 3]",
        ],
    )
    def test_invalid_state_raises(self, project, content):
        path = project / "graph.json"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            load_state(path)

        assert exc_info.value.code == "CONFIGURATION_ERROR"
        assert exc_info.value.context["path"] == str(path)
