"""Filter that wraps double-quoted strings with <q> tags.

Strings within <pre>, <code> and <q> elements are ignored, so quotations
that were already wrapped are never wrapped again.
"""

from __future__ import annotations

import re

from selectolax.lexbor import LexborNode

from annotext.dom import escape_text
from annotext.filters.base import AnnotationFilter, PatternRule, RuleMatch

QUOTATION_PATTERN = re.compile(
    r"""
    (?:\A|(?<=\s))   # the start of the string or a leading whitespace char
    "[^"]*"          # anything enclosed in quotation marks
    """,
    re.VERBOSE,
)


def wrap_result(text: str) -> str:
    """Wrap already-escaped quoted text in a <q> tag."""
    return f"<q>{text}</q>"


def _replace(match: RuleMatch) -> str:
    return wrap_result(escape_text(match.text.replace('"', "")))


def quotation_filter(text: str) -> str:
    """Replace quoted strings in *text* with <q> tags, dropping the quotes."""
    return PatternRule(QUOTATION_PATTERN, _replace).rewrite(text)


class QuotationFilter(AnnotationFilter):
    name = "quotation"
    ignore_parents = frozenset(("pre", "code", "q"))

    def should_process(self, text: str) -> bool:
        return '"' in text

    def rewrite(self, node: LexborNode, text: str) -> str:
        return quotation_filter(text)
