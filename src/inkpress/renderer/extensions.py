"""Custom Markdown extensions for inkpress."""

from __future__ import annotations

import re
import typing as typ
from dataclasses import dataclass
from html import unescape

from markdown import Extension
from markdown.treeprocessors import Treeprocessor
from markdown.util import ETX, HTML_PLACEHOLDER_RE, STX

from inkpress.renderer.slug import slugify

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown

HEADING_TAGS = {f"h{level}": level for level in range(1, 7)}

# Backslash escapes are held as STX<codepoint>ETX until the unescape step
ESCAPED_CHAR_RE = re.compile(f"{STX}([0-9]+){ETX}")
TAG_RE = re.compile(r"<[^>]*>")
# Inline math markup from pymdownx.arithmatex; typeset client-side, not part of slugs
MATH_CLASS = "arithmatex"


@dataclass(frozen=True)
class TocEntry:
    """A heading that received an anchor id."""

    id: str
    text: str
    level: int

    def to_dict(self) -> dict[str, typ.Any]:
        """Serialize for JSON responses."""
        return {"id": self.id, "text": self.text, "level": self.level}


class HeadingAnchorProcessor(Treeprocessor):
    """Set ids on headings and record them as table-of-contents entries."""

    def __init__(
        self,
        md: Markdown,
        levels: tuple[int, ...],
        slugify: typ.Callable[[str], str],
    ) -> None:
        super().__init__(md)
        self.levels = frozenset(levels)
        self.slugify = slugify

    def run(self, root: Element) -> None:
        """Walk headings in document order."""
        entries: list[TocEntry] = self.md.heading_entries  # type: ignore[attr-defined]
        for element in root.iter():
            level = HEADING_TAGS.get(element.tag)
            if level is None or level not in self.levels:
                continue

            text = self._heading_text(element)
            if not text:
                continue

            anchor = self.slugify(text)
            element.set("id", anchor)
            entries.append(TocEntry(id=anchor, text=text, level=level))

    def _heading_text(self, element: Element) -> str:
        """Return the rendered inline content of a heading as plain text."""
        text = "".join(self._iter_text(element))
        text = HTML_PLACEHOLDER_RE.sub(self._unstash, text)
        text = ESCAPED_CHAR_RE.sub(lambda m: chr(int(m.group(1))), text)
        return unescape(TAG_RE.sub("", text)).strip()

    def _iter_text(self, element: Element) -> typ.Iterator[str]:
        """Yield heading text, leaving out inline math."""
        if element.text:
            yield element.text
        for child in element:
            if MATH_CLASS not in (child.get("class") or "").split():
                yield from self._iter_text(child)
            if child.tail:
                yield child.tail

    def _unstash(self, match: re.Match[str]) -> str:
        """Resolve a stashed raw-HTML placeholder (inline HTML, smart quotes)."""
        index = int(match.group(1))
        blocks = self.md.htmlStash.rawHtmlBlocks
        if index >= len(blocks):
            return ""
        block = blocks[index]
        if isinstance(block, str):
            return block
        return "".join(block.itertext())


class HeadingAnchorExtension(Extension):
    """Extension that anchors headings with a shared slug function."""

    def __init__(
        self,
        levels: tuple[int, ...] = (1, 2, 3),
        slugify: typ.Callable[[str], str] = slugify,
    ) -> None:
        super().__init__()
        self.levels = levels
        self.slugify = slugify
        self.md: Markdown | None = None

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the heading treeprocessor after inline processing."""
        self.md = md
        md.registerExtension(self)
        self.reset()
        processor = HeadingAnchorProcessor(md, self.levels, self.slugify)
        # Inline patterns run at 20; stashed HTML is still resolvable here
        md.treeprocessors.register(processor, "heading_anchors", 6)

    def reset(self) -> None:
        """Clear entries collected by a previous conversion."""
        if self.md is not None:
            self.md.heading_entries = []  # type: ignore[attr-defined]


def makeExtension(**kwargs):  # type: ignore
    """Create extension instance."""
    return HeadingAnchorExtension(**kwargs)
