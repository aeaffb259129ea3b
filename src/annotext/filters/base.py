"""Shared shape of every annotation filter.

A filter walks the text nodes of a document, skips nodes that fail a cheap
trigger check or sit under a disallowed ancestor, rewrites the remaining
text with a ``PatternRule`` and splices the rewritten markup back in place
of the node.  Entities found along the way go into a ``ResultAccumulator``
shared by every filter of a pipeline run.
"""

# Pattern: Template Method (subclasses supply trigger, guard set and rewrite)

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from selectolax.lexbor import LexborNode

from annotext.config import get_settings
from annotext.dom import (
    Document,
    HTMLFragment,
    escape_text,
    has_disallowed_ancestor,
    replace_text_node,
    resolve_root,
    serialize_text,
    walk_text_nodes,
)
from annotext.filters.context import FilterContext
from annotext.filters.result import ResultAccumulator

logger = logging.getLogger(__name__)


class AnnotationError(RuntimeError):
    """A filter failed while rewriting a document."""

    def __init__(self, filter_name: str, message: str) -> None:
        self.filter_name = filter_name
        super().__init__(f"{filter_name}: {message}")


@dataclass(frozen=True, slots=True)
class RuleMatch:
    """One match of a rule's pattern within a single text."""

    text: str  # raw matched substring, boundary characters included
    groups: dict[str, str | None]
    index: int  # sequential index within the current text
    start: int
    end: int

    def __getitem__(self, name: str) -> str | None:
        return self.groups[name]


type Replacement = Callable[[RuleMatch], str | None]


class PatternRule:
    """A regular expression plus a per-match markup callback.

    ``rewrite`` runs over decoded text.  Unmatched segments are escaped;
    each match is replaced by the callback's markup, or escaped verbatim
    when the callback returns ``None``.
    """

    def __init__(self, pattern: re.Pattern[str], replace: Replacement) -> None:
        self.pattern = pattern
        self.replace = replace

    def matches(self, text: str) -> Iterator[RuleMatch]:
        for index, m in enumerate(self.pattern.finditer(text)):
            yield RuleMatch(
                text=m.group(),
                groups=m.groupdict(),
                index=index,
                start=m.start(),
                end=m.end(),
            )

    def rewrite(self, text: str) -> str:
        parts: list[str] = []
        pos = 0
        for match in self.matches(text):
            parts.append(escape_text(text[pos : match.start]))
            markup = self.replace(match)
            if markup is None:
                markup = escape_text(match.text)
            elif not isinstance(markup, str):
                msg = f"replacement must be a string, got {type(markup).__name__}"
                raise TypeError(msg)
            parts.append(markup)
            pos = match.end
        parts.append(escape_text(text[pos:]))
        return "".join(parts)


def replace_literal(match_text: str, literal: str, markup: str | None) -> str:
    """Escape *match_text* with the first *literal* swapped for *markup*.

    An empty or ``None`` markup leaves the match as plain text.
    """
    before, found, after = match_text.partition(literal)
    if not found or not markup:
        return escape_text(match_text)
    if not isinstance(markup, str):
        msg = f"tag builder must return a string, got {type(markup).__name__}"
        raise TypeError(msg)
    return escape_text(before) + markup + escape_text(after)


class AnnotationFilter:
    """Base class for the text-node annotation filters.

    Subclasses set ``ignore_parents`` and implement ``should_process`` and
    ``rewrite``.  ``result_keys`` lists the accumulator keys the filter
    owns; each is created (empty) when the filter runs.
    """

    name: ClassVar[str] = "annotation"
    ignore_parents: ClassVar[frozenset[str]] = frozenset()
    result_keys: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        doc: Document | str | None,
        context: FilterContext | Mapping[str, Any] | None = None,
        result: ResultAccumulator | None = None,
    ) -> None:
        if isinstance(doc, str):
            doc = HTMLFragment(doc)
        self.doc = doc
        self.context = FilterContext.from_value(context)
        self.result = result if result is not None else ResultAccumulator()

    @classmethod
    def call(
        cls,
        doc: Document | str | None,
        context: FilterContext | Mapping[str, Any] | None = None,
        result: ResultAccumulator | None = None,
    ) -> Any:
        """Run the filter and return the (mutated) document."""
        return cls(doc, context, result).run()

    def should_process(self, text: str) -> bool:
        """Cheap pre-check on a node's decoded text."""
        return True

    def ignore_node(self, node: LexborNode) -> bool:
        return has_disallowed_ancestor(node, self.ignore_parents)

    def rewrite(self, node: LexborNode, text: str) -> str:
        """Return the markup that should replace *node*."""
        raise NotImplementedError

    def run(self) -> Any:
        for key in self.result_keys:
            self.result.ensure(key)
        if self.doc is None:
            return None

        max_length = get_settings().filters.max_text_length
        root = resolve_root(self.doc)
        try:
            nodes = walk_text_nodes(root)
        except Exception as exc:
            raise AnnotationError(type(self).__name__, str(exc)) from exc
        rewritten = 0

        for node in nodes:
            text = node.text_content
            if not text or not self.should_process(text):
                continue
            if self.ignore_node(node):
                continue
            if len(text) > max_length:
                logger.warning(
                    "[FILTER] %s: skipping text node of %d chars (limit %d)",
                    self.name,
                    len(text),
                    max_length,
                )
                continue

            try:
                html = self.rewrite(node, text)
                if html == serialize_text(node):
                    continue
                replace_text_node(node, html)
            except AnnotationError:
                raise
            except Exception as exc:
                raise AnnotationError(type(self).__name__, str(exc)) from exc
            rewritten += 1

        logger.debug(
            "[FILTER] %s: %d text nodes, %d rewritten",
            self.name,
            len(nodes),
            rewritten,
        )
        return self.doc
