"""Unit tests for usenest.lib.nester tree building, ordering and rendering."""

from __future__ import annotations

from pathlib import Path

import pytest

from usenest.exceptions import UseParseError
from usenest.lib.models import AppConfig
from usenest.lib.nester import (
    build_tree,
    nest_paths,
    nest_source,
    render_uses,
    sort_tree,
)


EDGE_CASES_DIR = Path(__file__).parent / "fixtures" / "edge_cases"


class TestBuildTree:
    """Tests for merging paths into a prefix tree."""

    def test_duplicates_collapse(self):
        tree = build_tree([("std", "env")] * 4)
        assert tree == {"std": {"env": {}}}

    def test_shared_prefix(self):
        tree = build_tree([("std", "sync", "Arc"), ("std", "sync", "Mutex")])
        assert tree == {"std": {"sync": {"Arc": {}, "Mutex": {}}}}

    def test_prefix_also_imported_gets_self(self):
        tree = build_tree([("std", "io"), ("std", "io", "Write")])
        assert tree == {"std": {"io": {"Write": {}, "self": {}}}}

    def test_prefix_order_independent(self):
        a = build_tree([("std", "io", "Write"), ("std", "io")])
        b = build_tree([("std", "io"), ("std", "io", "Write")])
        assert sort_tree(a) == sort_tree(b)


class TestSortTree:
    """Tests for sibling ordering."""

    def test_self_then_modules_then_types(self):
        tree = sort_tree({"Write": {}, "fmt": {}, "self": {}, "BufRead": {}, "env": {}})
        assert list(tree) == ["self", "env", "fmt", "BufRead", "Write"]

    def test_case_insensitive_within_class(self):
        tree = sort_tree({"HashMap": {}, "BTreeMap": {}, "Hasher": {}})
        assert list(tree) == ["BTreeMap", "Hasher", "HashMap"]

    def test_recursive(self):
        tree = sort_tree({"std": {"sync": {"Mutex": {}, "Arc": {}}, "env": {}}})
        assert list(tree["std"]) == ["env", "sync"]
        assert list(tree["std"]["sync"]) == ["Arc", "Mutex"]

    def test_underscore_after_prefix(self):
        assert list(sort_tree({"serde_json": {}, "serde": {}})) == ["serde", "serde_json"]


class TestRenderUses:
    """Tests for rendering with different layout settings."""

    def test_single_leaf(self, settings):
        assert nest_paths([("anyhow", "Result")], settings) == ["use anyhow::Result;"]

    def test_bare_crate(self, settings):
        assert nest_paths([("foo",)], settings) == ["use foo;"]

    def test_chain_collapses(self, settings):
        assert nest_paths([("tokio", "time", "sleep")], settings) == [
            "use tokio::time::sleep;"
        ]

    def test_leaves_over_threshold_go_vertical(self, settings):
        lines = nest_paths([("std", "sync", "Arc"), ("std", "sync", "Mutex")], settings)
        assert lines == [
            "use std::sync::{",
            "    Arc,",
            "    Mutex,",
            "};",
        ]

    def test_leaves_within_threshold_stay_inline(self):
        settings = AppConfig(single_line_threshold=2)
        lines = nest_paths([("std", "sync", "Arc"), ("std", "sync", "Mutex")], settings)
        assert lines == ["use std::sync::{Arc, Mutex};"]

    def test_no_trailing_comma(self):
        settings = AppConfig(trailing_comma=False)
        lines = nest_paths(
            [("std", "env"), ("std", "io", "Read"), ("std", "io", "Write")], settings
        )
        assert lines == [
            "use std::{",
            "    env,",
            "    io::{",
            "        Read,",
            "        Write",
            "    }",
            "};",
        ]

    def test_indent_width(self):
        settings = AppConfig(indent_width=2)
        lines = nest_paths([("a", "B"), ("a", "C")], settings)
        assert lines == ["use a::{", "  B,", "  C,", "};"]

    def test_lone_self_keeps_braces(self, settings):
        assert nest_paths([("std", "io", "self")], settings) == ["use std::io::{self};"]

    def test_lone_self_alias_keeps_braces(self, settings):
        assert nest_paths([("std", "fmt", "self as f")], settings) == [
            "use std::fmt::{self as f};"
        ]

    def test_zero_threshold_still_collapses_chain(self):
        settings = AppConfig(single_line_threshold=0)
        assert nest_paths([("rand", "thread_rng")], settings) == ["use rand::thread_rng;"]

    def test_one_statement_per_root(self, settings):
        tree = sort_tree(build_tree([("b", "X"), ("a", "Y")]))
        assert render_uses(tree, settings) == ["use a::Y;", "use b::X;"]


class TestNestSource:
    """Tests for rewriting whole source files."""

    def test_fixture_matches_expected(self, duplicated_source, nested_expected, settings):
        assert nest_source(duplicated_source, settings) == nested_expected

    def test_flat_fixture_same_block(self, flat_source, nested_expected, settings):
        """Already-sorted flat imports nest to the same block."""
        result = nest_source(flat_source, settings)
        expected = nested_expected.replace("mod messy;\n\n", "")
        assert result == expected

    def test_idempotent(self, duplicated_source, settings):
        once = nest_source(duplicated_source, settings)
        assert nest_source(once, settings) == once

    def test_no_declarations_unchanged(self, settings):
        source = (EDGE_CASES_DIR / "no_uses.rs").read_text(encoding="utf-8")
        assert nest_source(source, settings) is source

    def test_scoped_edge_cases(self, scoped_source, settings):
        assert nest_source(scoped_source, settings) == (
            "pub use crate::api::Client;\n"
            "use core::fmt as corefmt;\n"
            "use std::{\n"
            "    fmt,\n"
            "    io::{\n"
            "        self,\n"
            "        Write,\n"
            "    },\n"
            "};\n"
            "\n"
            "#[cfg(test)]\n"
            "use crate::testing::Harness;\n"
            "\n"
            "mod inner {\n"
            "    use super::*;\n"
            "}\n"
        )

    def test_interleaved_declarations(self, settings):
        source = "use b;\nmod x;\n\nuse a;\n\nfn f() {}\n"
        assert nest_source(source, settings) == "use a;\nuse b;\n\nmod x;\n\nfn f() {}\n"

    def test_no_trailing_newline_preserved(self, settings):
        assert nest_source("use b;\nuse a;", settings) == "use a;\nuse b;"

    def test_parse_error_propagates(self, settings):
        with pytest.raises(UseParseError):
            nest_source("use a::{b;\n", settings, "broken.rs")

    def test_commented_out_use_stays_in_comment(self, settings):
        source = "use a::B;\n\n/*\nuse old::Thing;\n*/\n\nfn main() {}\n"
        assert nest_source(source, settings) == source

    def test_use_in_raw_string_untouched(self, settings):
        source = 'use b::C;\nuse a::B;\n\nfn main() {\n    let s = r"\nuse x::Y;\n";\n}\n'
        assert nest_source(source, settings) == (
            'use a::B;\nuse b::C;\n\nfn main() {\n    let s = r"\nuse x::Y;\n";\n}\n'
        )

    def test_multiline_attribute_keeps_its_declaration(self, settings):
        source = (
            "use a::C;\n"
            "use a::B;\n"
            "\n"
            "#[cfg(all(\n"
            "    unix,\n"
            "    feature = \"x\"\n"
            "))]\n"
            "use a::D;\n"
            "\n"
            "fn main() {}\n"
        )
        assert nest_source(source, settings) == (
            "use a::{\n"
            "    B,\n"
            "    C,\n"
            "};\n"
            "\n"
            "#[cfg(all(\n"
            "    unix,\n"
            "    feature = \"x\"\n"
            "))]\n"
            "use a::D;\n"
            "\n"
            "fn main() {}\n"
        )


class TestCommentsAndLineEndings:
    """Comments travel with their declarations; line endings are kept."""

    def test_trailing_comment_moves_above_block(self, settings):
        source = "use std::fs; // files\nuse std::env;\n\nfn main() {}\n"
        assert nest_source(source, settings) == (
            "// files\n"
            "use std::{\n"
            "    env,\n"
            "    fs,\n"
            "};\n"
            "\n"
            "fn main() {}\n"
        )

    def test_group_comments_kept(self, settings):
        source = "use std::{\n    io, // streams\n    fs,\n};\n"
        assert nest_source(source, settings) == (
            "// streams\nuse std::{\n    fs,\n    io,\n};\n"
        )

    def test_commented_output_idempotent(self, settings):
        source = "use b; // second\nuse a::{\n    /* first */ X,\n    Y,\n};\n\nfn f() {}\n"
        once = nest_source(source, settings)
        assert nest_source(once, settings) == once

    def test_crlf_preserved(self, settings):
        source = "use b::X;\r\nuse a::Y;\r\n\r\nfn main() {}\r\n"
        assert nest_source(source, settings) == "use a::Y;\r\nuse b::X;\r\n\r\nfn main() {}\r\n"

    def test_crlf_multiline_block(self, settings):
        source = "use a::C;\r\nuse a::B;\r\nfn main() {}\r\n"
        result = nest_source(source, settings)
        assert result == "use a::{\r\n    B,\r\n    C,\r\n};\r\n\r\nfn main() {}\r\n"
        assert "\n" not in result.replace("\r\n", "")

    def test_crlf_without_trailing_newline(self, settings):
        assert nest_source("use b;\r\nuse a;", settings) == "use a;\r\nuse b;"
