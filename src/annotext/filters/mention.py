"""Filter that replaces @user mentions (with optional !attention) with markup.

Mentions within <pre>, <code>, <a>, <style> and <script> elements are
ignored.  ``@name!urgent`` yields the mention ``name`` and the attention
``urgent``; the attention markup follows the mention, separated by a space.

Context options:
    username_pattern: regular expression identifying usernames.
    mention_validator: callable accepting a mention, returns True/False.
    mention_tag_builder: callable accepting a mention, returns an HTML string.
    attention_tag_builder: callable accepting attention and mention strings,
        returns an HTML string.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from functools import lru_cache

from selectolax.lexbor import LexborNode

from annotext.dom import escape_text
from annotext.filters.base import (
    AnnotationFilter,
    PatternRule,
    RuleMatch,
    replace_literal,
)
from annotext.filters.context import DEFAULT_USERNAME_PATTERN
from annotext.filters.result import ATTENTIONS, MENTIONS


# Flags of a compiled username pattern that survive as inline scoped flags
_INLINE_FLAGS = (
    (re.ASCII, "a"),
    (re.IGNORECASE, "i"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.VERBOSE, "x"),
)


def _username_group(username_pattern: str, flags: int) -> str:
    """Wrap *username_pattern* in a group scoped to its own *flags*."""
    on = "".join(letter for flag, letter in _INLINE_FLAGS if flags & flag)
    if flags & re.VERBOSE:
        # a trailing comment in a verbose pattern must not swallow the ")"
        return f"(?{on}:{username_pattern}\n)"
    return f"(?{on}-x:{username_pattern})"


@lru_cache(maxsize=32)
def mention_pattern(
    username_pattern: str = DEFAULT_USERNAME_PATTERN,
    flags: int = 0,
) -> re.Pattern[str]:
    """Compile the mention grammar around a username grammar.

    Groups inside *username_pattern* do not shift the ``mention`` and
    ``attention`` captures, which are named.  *flags* are those of a
    compiled username pattern and apply to the username grammar only.
    """
    username_group = _username_group(username_pattern, flags)
    return re.compile(
        rf"""
        (?:^|\W)                                 # beginning of line or non-word char
        @(?P<mention>(?>{username_group}))                # @username
        (?:!(?P<attention>(?>[a-z0-9][a-z0-9_\-]*)))?  # !attention_tag
        (?!/)                                    # without a trailing slash
        (?=
          \.+[ \t\W]|                            # dots then space or non-word char
          \.+$|                                  # dots at end of line
          [^0-9a-zA-Z_.]|                        # non-word character except dot
          $                                      # end of line
        )
        """,
        re.IGNORECASE | re.MULTILINE | re.VERBOSE,
    )


def mentioned_usernames_in(
    text: str, username_pattern: str | re.Pattern[str] = DEFAULT_USERNAME_PATTERN
) -> Iterator[RuleMatch]:
    """Find @mentions in *text*.

    Each match carries the ``mention`` group and, when present, the
    ``attention`` group; ``index`` counts matches within *text*.  A compiled
    *username_pattern* keeps its own flags.
    """
    if isinstance(username_pattern, re.Pattern):
        pattern = mention_pattern(username_pattern.pattern, username_pattern.flags)
    else:
        pattern = mention_pattern(username_pattern)
    return PatternRule(pattern, lambda _m: None).matches(text)


class MentionAttentionFilter(AnnotationFilter):
    name = "mention"
    ignore_parents = frozenset(("pre", "code", "a", "style", "script"))
    result_keys = (MENTIONS, ATTENTIONS)

    @property
    def username_pattern(self) -> str:
        return self.context.username_pattern.pattern

    @property
    def username_flags(self) -> int:
        return self.context.username_pattern.flags

    def should_process(self, text: str) -> bool:
        return "@" in text

    def rewrite(self, node: LexborNode, text: str) -> str:
        return self.mention_tag_filter(text)

    def mention_tag_filter(self, text: str) -> str:
        """Replace @mentions in *text* with HTML tags."""
        pattern = mention_pattern(self.username_pattern, self.username_flags)
        return PatternRule(pattern, self._replace).rewrite(text)

    def _replace(self, match: RuleMatch) -> str | None:
        mention = match["mention"]
        attention = match["attention"]
        if mention is None:
            return None
        self.result.add(MENTIONS, mention)
        self.result.add(ATTENTIONS, attention)

        mention_tag = None
        if self.context.mention_validator(mention):
            mention_tag = self.context.mention_tag_builder(mention)

        if not attention:
            return replace_literal(match.text, f"@{mention}", mention_tag)

        # The attention is always the tail of the match.
        head = match.text[: -len(attention) - 1]
        attention_tag = self.context.attention_tag_builder(attention, mention)
        if not attention_tag:
            attention_markup = escape_text(f"!{attention}")
        elif isinstance(attention_tag, str):
            attention_markup = f" {attention_tag}"
        else:
            msg = (
                "attention tag builder must return a string, "
                f"got {type(attention_tag).__name__}"
            )
            raise TypeError(msg)
        return replace_literal(head, f"@{mention}", mention_tag) + attention_markup
