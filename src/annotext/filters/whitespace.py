"""Filter that turns linefeeds into the equivalent HTML tags.

Single linefeeds become <br>; runs of two or more become a paragraph
boundary and the whole text is then wrapped in <p>.  Strings within <p>,
<pre> and <code> elements are ignored, and text inside <q> only ever gets
<br> tags because quotations are inline.
"""

from __future__ import annotations

import re

from selectolax.lexbor import LexborNode

from annotext.dom import escape_text, has_disallowed_ancestor
from annotext.filters.base import AnnotationFilter, PatternRule, RuleMatch

# Any run of characters followed by a linefeed
LINEBREAK_PATTERN = re.compile(r"(?P<line>.*)\n")

# Multiple, consecutive <br> tags
PARAGRAPH_PATTERN = re.compile(r"(?:<br>){2,}")

# Don't convert consecutive <br> tags into <p> tags under these elements
IGNORE_PARAGRAPHS = frozenset(("q",))


def _linebreak(match: RuleMatch) -> str:
    return f"{escape_text(match['line'] or '')}<br>"


def linebreak_formatting_filter(text: str) -> str:
    """Replace every linefeed in *text* with <br>, escaping the rest."""
    return PatternRule(LINEBREAK_PATTERN, _linebreak).rewrite(text)


def paragraph_formatting_filter(html: str) -> str:
    """Turn runs of <br> in *html* into paragraph boundaries.

    When at least one boundary was introduced, the result is wrapped in an
    outer <p> pair; otherwise it is returned unchanged.
    """
    html, count = PARAGRAPH_PATTERN.subn("</p><p>", html)
    if count:
        return f"<p>{html}</p>"
    return html


def whitespace_formatting_filter(text: str) -> str:
    """Linebreaks first, then paragraphs."""
    return paragraph_formatting_filter(linebreak_formatting_filter(text))


class WhitespaceFilter(AnnotationFilter):
    name = "whitespace"
    ignore_parents = frozenset(("p", "pre", "code"))

    def should_process(self, text: str) -> bool:
        return "\n" in text

    def rewrite(self, node: LexborNode, text: str) -> str:
        if has_disallowed_ancestor(node, IGNORE_PARAGRAPHS):
            return linebreak_formatting_filter(text)
        return whitespace_formatting_filter(text)
