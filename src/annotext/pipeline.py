"""Minimal pipeline host: runs filters in sequence over one document.

Every filter in a run sees the same document (and every mutation made by
the filters before it), the same merged context, and the same
``ResultAccumulator``.  The final document is stored in ``result.output``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from annotext.filters.context import FilterContext
from annotext.filters.hashtag import HashtagFilter
from annotext.filters.mention import MentionAttentionFilter
from annotext.filters.numerical_word import NumericalWordFilter
from annotext.filters.quotation import QuotationFilter
from annotext.filters.result import ResultAccumulator
from annotext.filters.tracking_number import TrackingNumberFilter
from annotext.filters.whitespace import WhitespaceFilter

logger = logging.getLogger(__name__)


class Filter(Protocol):
    name: str

    @classmethod
    def call(cls, doc: Any, context: Any = None, result: Any = None) -> Any: ...


DEFAULT_FILTERS: tuple[type[Filter], ...] = (
    WhitespaceFilter,
    QuotationFilter,
    TrackingNumberFilter,
    HashtagFilter,
    MentionAttentionFilter,
    NumericalWordFilter,
)

FILTERS_BY_NAME: dict[str, type[Filter]] = {f.name: f for f in DEFAULT_FILTERS}


class Pipeline:
    """An ordered list of filters plus a default context."""

    def __init__(
        self,
        filters: Sequence[type[Filter]],
        default_context: Mapping[str, Any] | None = None,
    ) -> None:
        self.filters = tuple(filters)
        self.default_context = FilterContext.from_value(default_context)

    def call(
        self,
        doc: Any,
        context: Mapping[str, Any] | None = None,
        result: ResultAccumulator | None = None,
    ) -> ResultAccumulator:
        """Run every filter over *doc* and return the shared result."""
        merged = self.default_context.merged(context)
        if result is None:
            result = ResultAccumulator()

        for filter_cls in self.filters:
            logger.debug("[PIPELINE] Running %s", filter_cls.__name__)
            doc = filter_cls.call(doc, merged, result)

        result.output = doc
        return result

    def to_document(self, doc: Any, context: Mapping[str, Any] | None = None) -> Any:
        """Run the pipeline and return only the output document."""
        return self.call(doc, context).output
