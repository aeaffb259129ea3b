"""Tree helpers for annotating text nodes in a parsed HTML document.

Wraps the selectolax Lexbor tree with the handful of operations the
annotation filters need:

- ``HTMLFragment``: parse a string as a minimal fragment
- ``walk_text_nodes``: every text node under a root, in document order
- ``has_disallowed_ancestor``: ancestor-chain query by tag name
- ``serialize_text`` / ``replace_text_node``: read and splice text nodes
"""

# Pattern: Functional Core (pure tree queries plus one in-place splice)

from __future__ import annotations

import html as html_module
from typing import Any

from selectolax.lexbor import LexborHTMLParser, LexborNode

# selectolax uses "-text" as the tag of character data nodes
TEXT_TAG = "-text"


class HTMLFragment:
    """A markup string parsed as a minimal fragment.

    The content is parsed after an explicit ``<body>`` start tag so that
    leading whitespace and ``<style>`` / ``<script>`` elements stay in the
    fragment instead of being moved into ``<head>`` by the HTML5 parser.
    """

    def __init__(self, markup: str) -> None:
        self.tree = LexborHTMLParser(f"<body>{markup}")
        root = self.tree.body
        if root is None:
            msg = "Lexbor produced a document without <body>"
            raise ValueError(msg)
        self.root: LexborNode = root

    def to_html(self) -> str:
        """Serialise the fragment content (without the wrapping body)."""
        return self.root.inner_html or ""

    def __repr__(self) -> str:
        return f"HTMLFragment({self.to_html()!r})"


type Document = HTMLFragment | LexborHTMLParser | LexborNode


def resolve_root(doc: Document) -> LexborNode:
    """Return the element whose descendants should be walked."""
    if isinstance(doc, HTMLFragment):
        return doc.root
    if isinstance(doc, LexborHTMLParser):
        root = doc.body if doc.body is not None else doc.root
        if root is None:
            msg = "Cannot annotate an empty document"
            raise ValueError(msg)
        return root
    if isinstance(doc, LexborNode):
        return doc
    msg = f"Unsupported document type: {type(doc).__name__}"
    raise TypeError(msg)


def fragment_to_html(doc: Document) -> str:
    """Serialise the content of any document ``resolve_root`` accepts."""
    if isinstance(doc, HTMLFragment):
        return doc.to_html()
    return resolve_root(doc).inner_html or ""


def walk_text_nodes(root: LexborNode) -> list[LexborNode]:
    """Collect every text node under *root* in document (pre-)order.

    Nodes are collected eagerly so callers can replace them afterwards
    without invalidating the traversal.  Re-invoke to observe mutations.
    """
    nodes: list[LexborNode] = []
    stack: list[Any] = _children(root)

    # Iterative: nesting depth is unbounded in adversarial input
    while stack:
        node = stack.pop()
        if node.tag == TEXT_TAG:
            nodes.append(node)
        else:
            stack.extend(_children(node))

    return nodes


def _children(node: Any) -> list[Any]:
    """Direct children of *node*, last first (pop order is document order)."""
    children = []
    child = node.child
    while child is not None:
        children.append(child)
        child = child.next
    children.reverse()
    return children


def has_disallowed_ancestor(node: LexborNode, names: frozenset[str]) -> bool:
    """Check whether any ancestor element of *node* has a tag in *names*.

    Starts from the direct parent and walks to the document root, so the
    cost is proportional to the node's depth.
    """
    parent = node.parent
    while parent is not None:
        tag = parent.tag
        if tag and tag.lower() in names:
            return True
        parent = parent.parent
    return False


def escape_text(text: str) -> str:
    """Escape character data for inclusion in markup (quotes left literal)."""
    return html_module.escape(text, quote=False)


def serialize_text(node: LexborNode) -> str:
    """Return the markup-escaped form of a text node."""
    return escape_text(node.text_content or "")


def replace_text_node(node: LexborNode, markup: str) -> None:
    """Replace a text node with the nodes parsed from *markup*.

    The replacement is parsed as a separate fragment and each top-level
    node is imported (deep copy) before the original text node, which is
    then removed.
    """
    fragment = HTMLFragment(markup)
    child = fragment.root.child
    while child is not None:
        next_child = child.next
        node.insert_before(child)
        child = next_child
    node.decompose()
