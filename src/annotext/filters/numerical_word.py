"""Filter that wraps any word containing a digit.

Strings within <pre>, <code>, <style> and <script> elements are ignored;
links are not.  Certain non-alphanumeric characters are included in the
match ($, :, -, +, (, ), [, ], etc.) so the entire "word" is wrapped, while
a trailing dot, comma or slash is left outside.

Context options:
    numerical_word_tag_builder: callable accepting a numerical word, returns
        an HTML string.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from selectolax.lexbor import LexborNode

from annotext.dom import escape_text
from annotext.filters.base import AnnotationFilter, PatternRule, RuleMatch
from annotext.filters.result import NUMERICAL_WORDS

NUMERICAL_WORD_PATTERN = re.compile(
    r"""
    (?:^|\W)                        # beginning of line or non-word char
    (?P<numerical_word>(?>
      \w*                           # any word prefix
      (?:
        (?>[^a-z|\s|,|\.])*         # any non-word prefix (+ - $ etc.)
        \d                          # any digit
        (?>[^a-z|\s|,|\.|/])*       # any non-word suffix (: ! etc.)
      )+
      (?>[,\.]\d+)*                 # comma or dot delimited digit groups
      \w*                           # any word suffix
    ))
    """,
    re.IGNORECASE | re.MULTILINE | re.VERBOSE,
)

_DIGIT = re.compile(r"\d")


def numerical_words_in(text: str) -> Iterator[RuleMatch]:
    """Find numerical words in *text* (the ``numerical_word`` group)."""
    return PatternRule(NUMERICAL_WORD_PATTERN, lambda _m: None).matches(text)


class NumericalWordFilter(AnnotationFilter):
    name = "numerical_word"
    ignore_parents = frozenset(("pre", "code", "style", "script"))
    result_keys = (NUMERICAL_WORDS,)

    def should_process(self, text: str) -> bool:
        return _DIGIT.search(text) is not None

    def rewrite(self, node: LexborNode, text: str) -> str:
        return self.numerical_word_formatting_filter(text)

    def numerical_word_formatting_filter(self, text: str) -> str:
        """Wrap numerical words in *text*, returning markup."""
        return PatternRule(NUMERICAL_WORD_PATTERN, self._replace).rewrite(text)

    def _replace(self, match: RuleMatch) -> str | None:
        numerical_word = match["numerical_word"]
        if not numerical_word:
            return None
        self.result.add(NUMERICAL_WORDS, numerical_word)

        tag = self.context.numerical_word_tag_builder(numerical_word)
        if not tag:
            return None
        if not isinstance(tag, str):
            msg = f"tag builder must return a string, got {type(tag).__name__}"
            raise TypeError(msg)
        # The word always ends the match; only the boundary char precedes it.
        boundary = match.text[: -len(numerical_word)]
        return escape_text(boundary) + tag
