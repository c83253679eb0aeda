# rich_text.py
"""
Item descriptions are edited in a rich-text box and stored as a small HTML
subset (<p>, <strong>/<b>, <ul>/<ol>/<li>). Table cells in the PDFs can only
hold plain lines, so the markup is flattened:

    <p>Valve</p><ul><li>DN50</li></ul>   ->   "Valve\n• DN50"
    <strong>Note</strong>                ->   "**Note**"

Bold markers are consumed by the table renderer (see split_bold).
"""
from __future__ import annotations

from html.parser import HTMLParser

BULLET = "• "
BOLD_MARK = "**"

_VOID_TAGS = {"br", "hr", "img", "input", "meta", "link", "wbr", "col", "source", "area", "base", "embed"}
_DROP_TAGS = {"script", "style", "template"}
_LIST_TAGS = {"ul", "ol"}
_BOLD_TAGS = {"strong", "b"}


class _Node:
    __slots__ = ("tag", "children", "text")

    def __init__(self, tag: str | None, text: str = ""):
        self.tag = tag
        self.children: list[_Node] = []
        self.text = text

    @property
    def is_text(self) -> bool:
        return self.tag is None

    def text_content(self, skip_lists: bool = False) -> str:
        if self.is_text:
            return self.text
        parts = []
        for child in self.children:
            if skip_lists and child.tag in _LIST_TAGS:
                continue
            parts.append(child.text_content(skip_lists))
        return "".join(parts)


class _TreeBuilder(HTMLParser):
    """Lenient tree builder; unbalanced or unknown tags never raise."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.root = _Node("#root")
        self._stack = [self.root]
        self._dropping = 0

    def handle_starttag(self, tag, attrs):
        if tag in _DROP_TAGS:
            self._dropping += 1
            return
        if self._dropping:
            return
        node = _Node(tag)
        self._stack[-1].children.append(node)
        if tag not in _VOID_TAGS:
            self._stack.append(node)

    def handle_startendtag(self, tag, attrs):
        if self._dropping or tag in _DROP_TAGS:
            return
        self._stack[-1].children.append(_Node(tag))

    def handle_endtag(self, tag):
        if tag in _DROP_TAGS:
            self._dropping = max(0, self._dropping - 1)
            return
        if self._dropping:
            return
        # Close up to the matching open tag; stray end tags are ignored.
        for idx in range(len(self._stack) - 1, 0, -1):
            if self._stack[idx].tag == tag:
                del self._stack[idx:]
                return

    def handle_data(self, data):
        if self._dropping or not data:
            return
        self._stack[-1].children.append(_Node(None, data))


def _list_lines(node: _Node, out: list[str]) -> None:
    for child in node.children:
        if child.tag == "li":
            text = child.text_content(skip_lists=True).strip()
            if text:
                out.append(f"{BULLET}{text}")
            for nested in child.children:
                if nested.tag in _LIST_TAGS:
                    _list_lines(nested, out)
        elif child.tag in _LIST_TAGS:
            _list_lines(child, out)
        elif not child.is_text:
            _list_lines(child, out)


def _walk(node: _Node, out: list[str]) -> None:
    if node.is_text:
        text = node.text.strip()
        if text:
            out.append(text)
        return

    tag = node.tag
    if tag == "p":
        text = node.text_content().strip()
        if text:
            out.append(text)
        return
    if tag in _BOLD_TAGS:
        text = node.text_content().strip()
        if text:
            out.append(f"{BOLD_MARK}{text}{BOLD_MARK}")
        return
    if tag in _LIST_TAGS:
        _list_lines(node, out)
        return
    if tag == "li":
        text = node.text_content(skip_lists=True).strip()
        if text:
            out.append(f"{BULLET}{text}")
        for nested in node.children:
            if nested.tag in _LIST_TAGS:
                _list_lines(nested, out)
        return

    for child in node.children:
        _walk(child, out)


def _cleanup(text: str) -> str:
    return (
        text.replace("●", "•")
        .replace("\xa0", " ")
        .replace("&nbsp;", " ")
        .replace("&amp;", "&")
    )


def flatten_html(html: str | None) -> str:
    if not html:
        return ""
    builder = _TreeBuilder()
    builder.feed(str(html))
    builder.close()

    lines: list[str] = []
    for child in builder.root.children:
        _walk(child, lines)
    return _cleanup("\n".join(lines))


def split_bold(line: str) -> tuple[str, bool]:
    """Return (text, is_bold) for one flattened line."""
    if len(line) > 2 * len(BOLD_MARK) and line.startswith(BOLD_MARK) and line.endswith(BOLD_MARK):
        return line[len(BOLD_MARK):-len(BOLD_MARK)], True
    return line.replace(BOLD_MARK, ""), False
