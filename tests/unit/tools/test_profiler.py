"""Tests for the component hierarchy and Profiler wrapping."""

import pytest

from react_codemods.config.settings import CodemodConfig
from react_codemods.core.mutation import serialize
from react_codemods.core.runner import CodemodRunner
from react_codemods.tools.profiler import (
    ComponentGraph,
    ComponentProfiler,
    detect_component_type,
    group_token,
)

FILES = {
    "src/App.jsx": """\
        import React from 'react';
        import Layout from './layouts/Layout';
        import { Header } from './components/Header';

        export default function App() {
          return (
            <Layout>
              <Header />
            </Layout>
          );
        }
        """,
    "src/ThemeProvider.jsx": """\
        export function ThemeProvider({ children }) {
          return <>{children}</>;
        }
        """,
    "src/components/Header.jsx": """\
        export function Header() {
          return <h1>Title</h1>;
        }
        """,
    "src/components/Header.stories.jsx": """\
        import { Header } from './Header';
        export const Default = () => <Header />;
        """,
    "src/layouts/Layout.jsx": """\
        export default function Layout({ children }) {
          return <main>{children}</main>;
        }
        """,
    "src/pages/Home.jsx": """\
        import { Header } from '../components/Header';
        export const Home = () => <section><Header /></section>;
        """,
    "src/helpers.js": """\
        export const Widget = () => null;
        """,
}

HOME_PROFILED = """\
import { Header } from '../components/Header';
import { Profiler } from 'react';

function onRenderCallback(id, phase, actualDuration) {
  console.log(`Profiler [${id}] Phase: ${phase}, Actual Duration: ${actualDuration}ms`);
}

export const Home = () => <Profiler id='Home' onRender={onRenderCallback}><section><Header /></section></Profiler>;
"""


@pytest.fixture
def scanned(make_project):
    root = make_project(FILES)
    tool = ComponentProfiler()
    runner = CodemodRunner(tool, root)
    runner.scan()
    return root, tool, runner


class TestComponentType:
    @pytest.mark.parametrize(
        "path, name, expected",
        [
            ("src/pages/Home.jsx", "Home", "page"),
            ("src/screens/Login.tsx", "Login", "page"),
            ("src/layouts/Shell.jsx", "Shell", "layout"),
            ("src/components/AuthProvider.jsx", "AuthProvider", "component"),
            ("src/AuthProvider.jsx", "AuthProvider", "provider"),
            ("src/App.jsx", "App", "component"),
            ("src\\Pages\\Home.jsx", "Home", "page"),
        ],
    )
    def test_detect_component_type(self, path, name, expected):
        assert detect_component_type(path, name) == expected


class TestComponentGraph:
    def test_scan_builds_hierarchy(self, scanned):
        _, tool, _ = scanned
        graph = tool.graph
        assert set(graph.nodes) == {"App", "ThemeProvider", "Header", "Layout", "Home"}
        assert [(depth, node.name) for depth, node in graph.walk()] == [
            (0, "App"),
            (1, "Layout"),
            (1, "Header"),
            (0, "ThemeProvider"),
            (0, "Home"),
        ]
        assert graph.nodes["Header"].parents == {"App", "Home"}
        assert graph.nodes["Home"].type == "page"
        assert graph.group_counts() == {"page": 1, "layout": 1, "component": 2, "provider": 1}

    def test_as_tree(self, scanned):
        _, tool, _ = scanned
        tree = tool.graph.as_tree()
        assert [record["name"] for record in tree] == ["App", "ThemeProvider", "Home"]
        assert [child["name"] for child in tree[0]["children"]] == ["Layout", "Header"]
        assert tree[0]["file"] == "src/App.jsx"

    def test_cycles_are_walked_once(self):
        graph = ComponentGraph()
        graph.add_component("A", "A.jsx")
        graph.add_component("B", "B.jsx")
        graph.add_reference("A", "B")
        graph.add_reference("B", "A")
        graph.add_reference("B", "B")
        graph.add_reference("B", "Missing")
        graph.resolve()
        assert [(depth, node.name) for depth, node in graph.walk()] == [(0, "A"), (1, "B")]

    def test_first_declaration_wins(self):
        graph = ComponentGraph()
        graph.add_component("Card", "components/Card.jsx")
        graph.add_component("Card", "pages/Card.jsx")
        assert graph.nodes["Card"].type == "component"

    def test_expand_selection(self, scanned):
        graph = scanned[1].graph
        assert graph.expand_selection(["*all*"]) == set(graph.nodes)
        assert graph.expand_selection([group_token("layout"), "Header", "Nope"]) == {
            "Layout",
            "Header",
        }


class TestComponentProfiler:
    def test_wraps_selected_component(self, scanned):
        root, tool, runner = scanned
        tool.select(["*page*"])
        report = runner.run()
        assert [outcome.file_path for outcome in report.modified] == ["src/pages/Home.jsx"]
        assert report.modified[0].touched == ["Home"]
        assert (root / "src/pages/Home.jsx").read_text() == HOME_PROFILED

    def test_parenthesized_return(self, scanned):
        root, tool, runner = scanned
        tool.select(["App"])
        runner.run()
        output = (root / "src/App.jsx").read_text()
        assert "import { Profiler } from 'react';" in output
        assert "<Profiler id='App' onRender={onRenderCallback}><Layout>" in output
        assert "</Layout></Profiler>\n  );" in output

    def test_second_run_is_a_no_op(self, scanned):
        root, tool, runner = scanned
        tool.select(["*all*"])
        runner.run()
        snapshot = {path: path.read_bytes() for path in root.rglob("*.jsx")}
        report = runner.run()
        assert report.files_modified == 0
        assert {path: path.read_bytes() for path in root.rglob("*.jsx")} == snapshot

    def test_stories_and_plain_js_are_skipped(self, scanned):
        root, tool, runner = scanned
        tool.select(["*all*"])
        report = runner.run()
        files = {outcome.file_path for outcome in report.outcomes}
        assert "src/components/Header.stories.jsx" not in files
        assert "src/helpers.js" not in files

    def test_existing_import_and_callback_are_reused(self, parse):
        doc = parse(
            """\
            import React, { Profiler } from 'react';
            import { onRenderCallback } from './perf';

            export function Card() {
              return <div />;
            }
            """
        )
        tool = ComponentProfiler()
        tool.collect(doc)
        tool.finish_scan()
        tool.select(["Card"])
        output = serialize(tool.plan(doc))
        assert output.count("import") == 2
        assert "function onRenderCallback" not in output
        assert "return <Profiler id='Card' onRender={onRenderCallback}><div /></Profiler>;" in output

    def test_typescript_callback_and_double_quotes(self, parse):
        config = CodemodConfig.from_dict({"output": {"quote_style": "double"}})
        doc = parse(
            """\
            export function Card(): JSX.Element {
              return <div />;
            }
            """,
            name="Card.tsx",
        )
        tool = ComponentProfiler(config)
        tool.collect(doc)
        tool.finish_scan()
        tool.select(["Card"])
        output = serialize(tool.plan(doc))
        assert output.startswith('import { Profiler } from "react";\n')
        assert "function onRenderCallback(id: string, phase: string, actualDuration: number)" in output
        assert '<Profiler id="Card" onRender={onRenderCallback}><div /></Profiler>' in output

    def test_nothing_selected(self, parse):
        doc = parse("export function Card() {\n  return <div />;\n}\n")
        assert ComponentProfiler().plan(doc) is None
