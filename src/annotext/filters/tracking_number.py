"""Filter that auto-links identifiable tracking numbers.

Numbers within <pre>, <code>, <a> and <q> elements are ignored.  Numbers
from a carrier with a known tracking URL become links; any other
recognised number is wrapped in a <span> with the same attributes.

Context options:
    tracking_number_link_attributes: attributes for the generated tags
        (default ``{"class": "tracking-number"}``).
    carrier_recognizer: object whose ``scan(text)`` returns the candidate
        numbers (default: the built-in checksum recogniser).
"""

from __future__ import annotations

import html as html_module
import re

from selectolax.lexbor import LexborNode

from annotext.carriers.recognizer import TrackingCandidate
from annotext.carriers.templates import url_for
from annotext.dom import escape_text
from annotext.filters.base import AnnotationFilter

_DIGIT = re.compile(r"\d")


class TrackingNumberFilter(AnnotationFilter):
    name = "tracking_number"
    ignore_parents = frozenset(("pre", "code", "a", "q"))

    def should_process(self, text: str) -> bool:
        return _DIGIT.search(text) is not None

    def rewrite(self, node: LexborNode, text: str) -> str:
        return self.content_with_tracking_links(text)

    def content_with_tracking_links(self, text: str) -> str:
        """Replace each recognised number in *text* with a tag.

        Every distinct matched substring is substituted literally.  All
        substitutions happen in one left-to-right pass, so a number inside
        an already generated tag is never replaced again.
        """
        tags: dict[str, str] = {}
        for candidate in self.context.carrier_recognizer.scan(text):
            if candidate.matched and candidate.matched not in tags:
                tags[candidate.matched] = self.tracking_number_tag(candidate)
        if not tags:
            return escape_text(text)

        literals = sorted(tags, key=len, reverse=True)
        pattern = re.compile("|".join(re.escape(literal) for literal in literals))

        parts: list[str] = []
        pos = 0
        for m in pattern.finditer(text):
            parts.append(escape_text(text[pos : m.start()]))
            parts.append(tags[m.group()])
            pos = m.end()
        parts.append(escape_text(text[pos:]))
        return "".join(parts)

    def tracking_number_tag(self, candidate: TrackingCandidate) -> str:
        """Return an <a> tag when a tracking URL exists, otherwise a <span>."""
        tracking_url = url_for(candidate.carrier, candidate.number)
        attributes = dict(self.context.tracking_number_link_attributes)
        tag = "span"
        if tracking_url is not None:
            tag = "a"
            attributes["href"] = tracking_url

        attrs = "".join(
            f' {name}="{html_module.escape(str(value), quote=True)}"'
            for name, value in attributes.items()
        )
        return f"<{tag}{attrs}>{escape_text(candidate.matched)}</{tag}>"
