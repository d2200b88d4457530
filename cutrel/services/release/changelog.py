"""Changelog parsing and per-version section extraction.

A changesets CHANGELOG.md is cumulative:

    # pkg-a

    ## 1.2.0

    ### Minor Changes

    - abc123: add the thing

    ## 1.1.0
    ...

Release notes for one version are the nodes between that version's heading
and the next heading of the same depth. Deeper headings ("### Minor Changes")
stay inside the section.

The document model is a flat list of block nodes, only as rich as the
extraction needs: headings keep their depth and inline text, everything else
is kept as raw text and written back untouched.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from cutrel.services.release.model import BumpLevel

_ATX_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
_SETEXT_RE = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")
_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_LIST_ITEM_RE = re.compile(r"^( {0,3})([-*+]|\d{1,9}[.)])( +|$)")
_LINK_RE = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
_MARKUP_RE = re.compile(r"\*+|`+")
_EMPHASIS_RE = re.compile(r"(?<!\w)_+|_+(?!\w)")
_HTML_RE = re.compile(r"</?[A-Za-z][^>]*>")
_BUMP_RE = re.compile(r"major|minor|patch")


@dataclass(frozen=True, slots=True)
class Heading:
    depth: int
    text: str
    raw: str


@dataclass(frozen=True, slots=True)
class Block:
    raw: str


Node = Heading | Block
ChangelogDocument = tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class ChangelogEntry:
    """Notes for one version plus the strongest bump seen in the document.

    Attributes:
        body: Markdown of the version's section ("" when nothing was found)
        highest_level: Max bump level over every heading in the document
        found: Whether a heading equal to the version exists
    """

    body: str
    highest_level: BumpLevel
    found: bool


def _inline_text(markdown: str) -> str:
    """Plain text of inline markdown: link text kept, markup and inline HTML dropped."""
    text = _HTML_RE.sub("", markdown)
    text = _LINK_RE.sub(r"\1", text)
    text = _MARKUP_RE.sub("", text)
    text = _EMPHASIS_RE.sub("", text)
    return " ".join(text.split())


def _is_closing_fence(line: str, opener: str) -> bool:
    stripped = line.strip()
    return (
        len(line) - len(line.lstrip(" ")) <= 3
        and stripped.startswith(opener[0] * len(opener))
        and set(stripped) == {opener[0]}
    )


def _indent(line: str) -> int:
    expanded = line.expandtabs(4)
    return len(expanded) - len(expanded.lstrip(" "))


def _list_item_content_column(line: str) -> int | None:
    """Column where a list item's content starts, None when *line* opens no item."""
    m = _LIST_ITEM_RE.match(line.expandtabs(4))
    if m is None:
        return None
    spacing = len(m.group(3))
    if spacing == 0 or spacing > 4:
        spacing = 1
    return m.end(2) + spacing


def _interrupts_paragraph(line: str) -> bool:
    return any(regex.match(line) for regex in (_ATX_RE, _FENCE_RE, _SETEXT_RE))


def parse_changelog(text: str) -> ChangelogDocument:
    """Split markdown text into heading and block nodes, in document order.

    Lines that belong to a list item (indented to the item's content column,
    or lazily continuing its paragraph) stay in blocks even when they look
    like headings, so "  ## Migration" under "- abc123: ..." does not end a
    version section.
    """
    lines = text.splitlines()
    nodes: list[Node] = []
    run: list[str] = []
    content_column: int | None = None

    def flush() -> None:
        if run:
            nodes.append(Block(raw="\n".join(run)))
            run.clear()

    i = 0
    while i < len(lines):
        line = lines[i]
        item_column = _list_item_content_column(line)

        if content_column is not None:
            after_blank = i == 0 or not lines[i - 1].strip()
            if not line.strip():
                flush()
                i += 1
                continue
            if _indent(line) >= content_column or (
                not after_blank and item_column is None and not _interrupts_paragraph(line)
            ):
                run.append(line)
                i += 1
                continue
            content_column = None

        fence = _FENCE_RE.match(line)
        if fence is not None:
            flush()
            opener = fence.group(1)
            fenced = [line]
            i += 1
            while i < len(lines):
                fenced.append(lines[i])
                i += 1
                if _is_closing_fence(fenced[-1], opener):
                    break
            nodes.append(Block(raw="\n".join(fenced)))
            continue

        atx = _ATX_RE.match(line)
        if atx is not None:
            flush()
            nodes.append(
                Heading(depth=len(atx.group(1)), text=_inline_text(atx.group(2) or ""), raw=line)
            )
            i += 1
            continue

        setext = _SETEXT_RE.match(line)
        if setext is not None and run and not any(map(_list_item_content_column, run)):
            depth = 1 if setext.group(1).startswith("=") else 2
            text_line = " ".join(part.strip() for part in run)
            nodes.append(
                Heading(depth=depth, text=_inline_text(text_line), raw="\n".join([*run, line]))
            )
            run.clear()
            i += 1
            continue

        if line.strip():
            if item_column is not None:
                content_column = item_column
            run.append(line)
        else:
            flush()
        i += 1

    flush()
    return tuple(nodes)


def render_nodes(nodes: Sequence[Node]) -> str:
    if not nodes:
        return ""
    return "\n\n".join(node.raw for node in nodes) + "\n"


def bump_level_of(heading_text: str) -> BumpLevel | None:
    """Bump level named by a heading ("Minor Changes" -> MINOR), first match wins."""
    m = _BUMP_RE.search(heading_text.lower())
    if m is None:
        return None
    return BumpLevel[m.group(0).upper()]


def extract_changelog_entry(document: ChangelogDocument, version: str) -> ChangelogEntry:
    """Extract the section for *version* and the document's highest bump level.

    The bump scan covers every heading of the document, not only the
    version's own section. A document without any heading is returned whole
    (with found=False); a document whose headings do not include *version*
    yields an empty body.
    """
    highest = BumpLevel.DEP
    start_index: int | None = None
    start_depth = 0
    end_index: int | None = None
    has_heading = False

    for index, node in enumerate(document):
        if not isinstance(node, Heading):
            continue
        has_heading = True

        level = bump_level_of(node.text)
        if level is not None:
            highest = max(highest, level)

        if start_index is None:
            if node.text == version:
                start_index = index
                start_depth = node.depth
            continue

        if end_index is None and node.depth == start_depth:
            end_index = index

    if start_index is None:
        body = "" if has_heading else render_nodes(document)
        return ChangelogEntry(body=body, highest_level=highest, found=False)

    section = document[start_index + 1 : end_index]
    return ChangelogEntry(body=render_nodes(section), highest_level=highest, found=True)


def get_changelog_entry(changelog: str, version: str) -> ChangelogEntry:
    return extract_changelog_entry(parse_changelog(changelog), version)
