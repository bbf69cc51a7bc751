"""nester — coalesce flattened use paths into sorted, nested use statements.

Paths are merged into a prefix tree, so duplicate imports collapse and
siblings share a single brace group.  Each top-level root becomes one
``use`` statement.  Layout is controlled by :class:`AppConfig`:
``single_line_threshold`` decides when a group of leaves stays on one line,
``indent_width`` sets nesting depth, and ``trailing_comma`` toggles the comma
after the last item of a multi-line group.

Design notes:
    A path that is both imported itself and used as a prefix
    (``use std::io; use std::io::Write;``) is kept by adding a ``self``
    child, giving ``std::io::{self, Write}``.
"""

from __future__ import annotations

from usenest.lib import config
from usenest.lib.models import AppConfig, UseDeclaration
from usenest.lib.parser import find_use_declarations

UseTree = dict[str, "UseTree"]


# ---------------------------------------------------------------------------
# Tree construction
# ---------------------------------------------------------------------------


def build_tree(paths: list[tuple[str, ...]]) -> UseTree:
    """Merge flattened paths into a nested prefix tree.

    Args:
        paths: Segment tuples as produced by the parser.

    Returns:
        Nested mapping of segment name to child tree. Leaves map to ``{}``.
    """
    self_seg = config.get_str("syntax.self_segment")
    root: UseTree = {}
    for path in paths:
        node = root
        for segment in path:
            node = node.setdefault(segment, {})

    for path in paths:
        node = root
        for segment in path:
            node = node[segment]
        if node:
            node.setdefault(self_seg, {})
    return root


def _is_self(name: str, self_seg: str) -> bool:
    return name == self_seg or name.startswith(self_seg + " ")


def _sort_key(name: str, self_seg: str) -> tuple[int, str, str]:
    if _is_self(name, self_seg):
        rank = 0
    elif name[:1].islower():
        rank = 1
    else:
        rank = 2
    return (rank, name.casefold(), name)


def sort_tree(tree: UseTree) -> UseTree:
    """Return a copy of the tree with siblings ordered at every level.

    ``self`` comes first, then lowercase names (modules), then everything
    else (types, traits, macros, globs). Case-insensitive within a class.
    """
    self_seg = config.get_str("syntax.self_segment")
    return {
        name: sort_tree(tree[name])
        for name in sorted(tree, key=lambda n: _sort_key(n, self_seg))
    }


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _render_node(
    name: str, children: UseTree, indent: str, settings: AppConfig, self_seg: str
) -> list[str]:
    if not children:
        return [f"{indent}{name}"]

    keys = list(children)
    if len(keys) == 1 and _is_self(keys[0], self_seg):
        return [f"{indent}{name}::{{{keys[0]}}}"]

    # single-child chain: a::b::c
    if len(keys) == 1:
        lines = _render_node(keys[0], children[keys[0]], indent, settings, self_seg)
        lines[0] = f"{indent}{name}::{lines[0][len(indent):]}"
        return lines

    all_leaves = all(not sub for sub in children.values())
    if all_leaves and len(keys) <= settings.single_line_threshold:
        return [f"{indent}{name}::{{{', '.join(keys)}}}"]

    child_indent = indent + " " * settings.indent_width
    blocks = [
        _render_node(key, sub, child_indent, settings, self_seg)
        for key, sub in children.items()
    ]

    lines = [f"{indent}{name}::{{"]
    for idx, block in enumerate(blocks):
        lines.extend(block[:-1])
        tail = block[-1]
        if idx < len(blocks) - 1 or settings.trailing_comma:
            tail += ","
        lines.append(tail)
    lines.append(f"{indent}}}")
    return lines


def render_uses(tree: UseTree, settings: AppConfig) -> list[str]:
    """Render a sorted tree as ``use`` statements, one per top-level root.

    Args:
        tree: Tree from :func:`build_tree`, normally passed through
            :func:`sort_tree` first.
        settings: Layout settings.

    Returns:
        Source lines without newlines.
    """
    self_seg = config.get_str("syntax.self_segment")
    keyword = config.get_str("syntax.use_keyword")
    out: list[str] = []
    for name, children in tree.items():
        lines = _render_node(name, children, "", settings, self_seg)
        lines[0] = f"{keyword} {lines[0]}"
        lines[-1] += ";"
        out.extend(lines)
    return out


# ---------------------------------------------------------------------------
# Source rewriting
# ---------------------------------------------------------------------------


def nest_paths(paths: list[tuple[str, ...]], settings: AppConfig) -> list[str]:
    """Build, sort and render paths in one step."""
    return render_uses(sort_tree(build_tree(paths)), settings)


def nest_source(source: str, settings: AppConfig, filepath: str = "") -> str:
    """Replace the top-level use declarations of a Rust file with a nested block.

    The block goes where the first declaration was and is followed by
    exactly one blank line. Text outside the removed declarations is kept
    as is, apart from blank lines left doubled by a removal.

    Args:
        source: Rust source text.
        settings: Layout settings.
        filepath: Used in error messages only.

    Returns:
        The rewritten source, or ``source`` unchanged if it has no
        top-level use declarations.

    Raises:
        UseParseError: If any declaration cannot be parsed.
    """
    decls = find_use_declarations(source, filepath)
    if not decls:
        return source
    return rewrite_declarations(source, decls, settings)


def rewrite_declarations(
    source: str, decls: list[UseDeclaration], settings: AppConfig
) -> str:
    """Rewrite ``source`` given declarations already found in it.

    Comments attached to the declarations are placed above the block.  Line
    endings follow the source: a file containing any CRLF is written with
    CRLF throughout.
    """
    paths = [p for d in decls for p in d.paths]
    comments = [line for d in decls for c in d.comments for line in c.split("\n")]
    block = comments + nest_paths(paths, settings)

    removed = {
        n for d in decls for n in range(d.start_line - 1, d.end_line)
    }
    first = decls[0].start_line - 1

    newline = "\r\n" if "\r\n" in source else "\n"
    trailing_newline = source.endswith("\n")
    text = source[:-1] if trailing_newline else source
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]

    out: list[str] = []
    after_block = False
    just_removed = False
    for idx, line in enumerate(lines):
        blank = not line.strip()
        if idx == first:
            out.extend(block)
            after_block = True
        if idx in removed:
            just_removed = True
            continue
        if after_block:
            if blank:
                continue
            out.append("")
            after_block = False
        elif just_removed and blank and out and not out[-1].strip():
            continue
        just_removed = False
        out.append(line)

    # declarations removed from the end of the file leave no trailing blanks
    if just_removed:
        while out and not out[-1].strip():
            out.pop()

    return newline.join(out) + (newline if trailing_newline else "")
