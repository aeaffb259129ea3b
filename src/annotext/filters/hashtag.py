"""Filter that replaces #hashtag strings with markup.

Hashtags within <pre>, <code>, <a>, <style> and <script> elements are
ignored.

Context options:
    hashtag_validator: callable accepting a hashtag, returns True/False.
    hashtag_tag_builder: callable accepting a hashtag, returns an HTML string.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from selectolax.lexbor import LexborNode

from annotext.filters.base import (
    AnnotationFilter,
    PatternRule,
    RuleMatch,
    replace_literal,
)
from annotext.filters.result import HASHTAGS

# Pattern used to extract #hashtags from text.
HASHTAG_PATTERN = re.compile(
    r"""
    (?:^|\W)                        # beginning of line or non-word char
    \#(?P<hashtag>(?>[a-z][a-z-]*)) # hashtag containing only letters and hyphens
    (?!/)                           # without a trailing slash
    (?=
      \.+[ \t\W]|                   # dots followed by space or non-word character
      \.+$|                         # dots at end of line
      [^0-9a-zA-Z_.]|               # non-word character except dot
      $                             # end of line
    )
    """,
    re.IGNORECASE | re.MULTILINE | re.VERBOSE,
)


def hashtags_in(text: str) -> Iterator[RuleMatch]:
    """Find #hashtags in *text*; each match's ``hashtag`` group is the name."""
    return PatternRule(HASHTAG_PATTERN, lambda _m: None).matches(text)


class HashtagFilter(AnnotationFilter):
    name = "hashtag"
    ignore_parents = frozenset(("pre", "code", "a", "style", "script"))
    result_keys = (HASHTAGS,)

    def should_process(self, text: str) -> bool:
        return "#" in text

    def rewrite(self, node: LexborNode, text: str) -> str:
        return self.hashtag_link_filter(text)

    def hashtag_link_filter(self, text: str) -> str:
        """Replace #hashtags in *text*, returning markup.

        Hashtags rejected by the validator are kept as literal ``#name``.
        """
        return PatternRule(HASHTAG_PATTERN, self._replace).rewrite(text)

    def _replace(self, match: RuleMatch) -> str | None:
        hashtag = match["hashtag"]
        if hashtag is None:
            return None
        self.result.add(HASHTAGS, hashtag)

        if not self.context.hashtag_validator(hashtag):
            return None
        return replace_literal(
            match.text, f"#{hashtag}", self.context.hashtag_tag_builder(hashtag)
        )
