"""parser — locate and flatten top-level Rust ``use`` declarations.

Source is parsed with tree-sitter's Rust grammar, and only ``use_declaration``
nodes that are direct children of the file root are considered.  Text inside
comments, string literals, macro bodies, modules and functions is never
mistaken for a declaration.  Two kinds of root declaration are left where
they are.  ``pub use`` re-exports are part of the public surface, and a
declaration carrying an outer attribute such as ``#[cfg(test)]`` is bound to
that attribute.  A declaration sharing a line with other code is also left
alone, since it cannot be removed without that code.

A use tree is flattened into full paths: ``std::{fs::File, io::{self, Write}}``
becomes ``("std", "fs", "File")``, ``("std", "io", "self")`` and
``("std", "io", "Write")``.  Aliases stay attached to their leaf
(``"Result as IoResult"``) so they survive regrouping.  Comments inside a
tree, or on the same line as a declaration, are kept on the declaration.
"""

from __future__ import annotations

import re
from typing import NoReturn, Optional

import tree_sitter_rust
from tree_sitter import Language, Node, Parser

from usenest.exceptions import UseParseError
from usenest.lib import config
from usenest.lib.models import UseDeclaration

_SKIP = re.compile(r"(?:\s+|//[^\n]*|/\*.*?\*/)*", re.DOTALL)
_TOKEN = re.compile(r"(?P<ident>r#[A-Za-z_]\w*|[A-Za-z_]\w*)|(?P<punct>::|[{},*])")

_COMMENT_TYPES = ("line_comment", "block_comment")

_parser: Optional[Parser] = None


def _rust_parser() -> Parser:
    """Return the cached tree-sitter parser for Rust."""
    global _parser  # noqa: PLW0603
    if _parser is None:
        _parser = Parser(Language(tree_sitter_rust.language()))
    return _parser


class _TreeParser:
    """Recursive-descent parser over the tokens of a single use tree."""

    def __init__(self, text: str) -> None:
        self.tokens = self._tokenize(text)
        self.pos = 0
        self.alias_kw = config.get_str("syntax.alias_keyword")
        self.glob = config.get_str("syntax.glob_segment")

    @staticmethod
    def _tokenize(text: str) -> list[str]:
        # whitespace and comments between tokens are dropped
        tokens: list[str] = []
        pos = _SKIP.match(text).end()
        while pos < len(text):
            m = _TOKEN.match(text, pos)
            if not m:
                raise ValueError(f"unexpected character {text[pos]!r}")
            tokens.append(m.group("ident") or m.group("punct"))
            pos = _SKIP.match(text, m.end()).end()
        return tokens

    def peek(self) -> Optional[str]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self) -> str:
        tok = self.peek()
        if tok is None:
            raise ValueError("unexpected end of use tree")
        self.pos += 1
        return tok

    def ident(self) -> str:
        tok = self.take()
        if tok in ("::", "{", "}", ",", self.glob):
            raise ValueError(f"expected identifier, got {tok!r}")
        return tok

    def parse(self) -> list[tuple[str, ...]]:
        paths = self.tree(())
        if self.peek() is not None:
            raise ValueError(f"unexpected token {self.peek()!r}")
        return paths

    def tree(self, prefix: tuple[str, ...]) -> list[tuple[str, ...]]:
        tok = self.peek()
        if tok == "{":
            self.take()
            return self.group(prefix)
        if tok == self.glob:
            self.take()
            return [prefix + (self.glob,)]

        leading = ""
        if tok == "::":
            self.take()
            leading = "::"
        segments = [leading + self.ident()]
        while self.peek() == "::":
            self.take()
            tok = self.peek()
            if tok == "{":
                self.take()
                return self.group(prefix + tuple(segments))
            if tok == self.glob:
                self.take()
                return [prefix + tuple(segments) + (self.glob,)]
            segments.append(self.ident())

        if self.peek() == self.alias_kw:
            self.take()
            segments[-1] = f"{segments[-1]} {self.alias_kw} {self.ident()}"
        return [prefix + tuple(segments)]

    def group(self, prefix: tuple[str, ...]) -> list[tuple[str, ...]]:
        # opening brace already consumed
        paths: list[tuple[str, ...]] = []
        while True:
            if self.peek() == "}":
                self.take()
                return paths
            paths.extend(self.tree(prefix))
            tok = self.take()
            if tok == "}":
                return paths
            if tok != ",":
                raise ValueError(f"expected ',' or '}}', got {tok!r}")


def parse_use_tree(text: str) -> list[tuple[str, ...]]:
    """Flatten one use tree (the text between ``use`` and ``;``) into paths.

    Args:
        text: Use tree source, e.g. ``"std::{fs::File, env}"``.

    Returns:
        One tuple of segments per imported item, in source order.

    Raises:
        ValueError: If the tree is malformed.
    """
    return _TreeParser(text).parse()


# ---------------------------------------------------------------------------
# Declaration discovery
# ---------------------------------------------------------------------------


def _node_text(data: bytes, node: Node) -> str:
    return data[node.start_byte:node.end_byte].decode("utf-8")


def _rows(node: Node) -> tuple[int, int]:
    """Return the 0-based first and last rows a node occupies."""
    start, end = node.start_point[0], node.end_point[0]
    # a token ending in a newline reports its end at column 0 of the next row
    if end > start and node.end_point[1] == 0:
        end -= 1
    return start, end


def _find_use_keyword(node: Node) -> Optional[Node]:
    for child in node.children:
        if child.type == "use":
            return child
        if child.type in ("ERROR", "use_declaration"):
            found = _find_use_keyword(child)
            if found is not None:
                return found
    return None


def _raise_parse_error(data: bytes, keyword: Node, filepath: str) -> NoReturn:
    """Raise a UseParseError for the broken declaration starting at ``keyword``."""
    line = keyword.start_point[0] + 1
    body, sep, _ = data[keyword.start_byte:].decode("utf-8").partition(";")
    if not sep:
        raise UseParseError(filepath, line, "missing ';'")
    try:
        parse_use_tree(body[len(config.get_str("syntax.use_keyword")):])
    except ValueError as exc:
        raise UseParseError(filepath, line, str(exc)) from exc
    raise UseParseError(filepath, line, "invalid syntax")


def _is_movable(node: Node) -> bool:
    if any(child.type == "visibility_modifier" for child in node.children):
        return False
    prev = node.prev_sibling
    while prev is not None and prev.type in _COMMENT_TYPES:
        prev = prev.prev_sibling
    return prev is None or prev.type != "attribute_item"


def _inner_comments(node: Node) -> list[Node]:
    found: list[Node] = []
    for child in node.children:
        if child.type in _COMMENT_TYPES:
            found.append(child)
        else:
            found.extend(_inner_comments(child))
    return found


def _line_comments(siblings: list[Node], idx: int) -> Optional[list[Node]]:
    """Collect the comments on a declaration's lines.

    Returns None when another item shares one of those lines, or a comment
    starts or ends outside them.
    """
    node = siblings[idx]
    first, last = _rows(node)
    comments = _inner_comments(node)

    j = idx - 1
    while j >= 0 and _rows(siblings[j])[1] >= first:
        sib = siblings[j]
        if sib.type not in _COMMENT_TYPES or _rows(sib)[0] < first:
            return None
        comments.append(sib)
        j -= 1

    j = idx + 1
    while j < len(siblings) and _rows(siblings[j])[0] <= last:
        sib = siblings[j]
        if sib.type not in _COMMENT_TYPES or _rows(sib)[1] > last:
            return None
        comments.append(sib)
        j += 1

    return sorted(comments, key=lambda c: c.start_byte)


def find_use_declarations(source: str, filepath: str = "") -> list[UseDeclaration]:
    """Find the top-level private ``use`` declarations in Rust source.

    Args:
        source: Rust source text.
        filepath: Used in error messages only.

    Returns:
        Declarations in source order.

    Raises:
        UseParseError: If a root-level declaration is syntactically broken,
            for example unbalanced braces or a missing ``;``.
    """
    data = source.encode("utf-8")
    siblings = _rust_parser().parse(data).root_node.children
    decls: list[UseDeclaration] = []

    for idx, node in enumerate(siblings):
        if node.type == "use":
            _raise_parse_error(data, node, filepath)
        if node.type == "ERROR" or (node.type == "use_declaration" and node.has_error):
            keyword = _find_use_keyword(node)
            if keyword is not None:
                _raise_parse_error(data, keyword, filepath)
            continue
        if node.type != "use_declaration" or not _is_movable(node):
            continue

        comments = _line_comments(siblings, idx)
        if comments is None:
            continue

        first, last = _rows(node)
        argument = node.child_by_field_name("argument")
        try:
            paths = parse_use_tree(_node_text(data, argument))
        except ValueError as exc:
            raise UseParseError(filepath, first + 1, str(exc)) from exc

        decls.append(UseDeclaration(
            start_line=first + 1,
            end_line=last + 1,
            text=_node_text(data, node),
            paths=paths,
            comments=[
                _node_text(data, c).replace("\r\n", "\n").rstrip() for c in comments
            ],
        ))

    return decls
