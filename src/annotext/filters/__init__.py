"""Text-node annotation filters."""

from annotext.filters.base import (
    AnnotationError,
    AnnotationFilter,
    PatternRule,
    RuleMatch,
)
from annotext.filters.context import ConfigurationError, FilterContext
from annotext.filters.hashtag import HashtagFilter
from annotext.filters.mention import MentionAttentionFilter
from annotext.filters.numerical_word import NumericalWordFilter
from annotext.filters.plain_text import PlainTextInputFilter
from annotext.filters.quotation import QuotationFilter
from annotext.filters.result import ResultAccumulator
from annotext.filters.tracking_number import TrackingNumberFilter
from annotext.filters.whitespace import WhitespaceFilter

__all__ = [
    "AnnotationError",
    "AnnotationFilter",
    "ConfigurationError",
    "FilterContext",
    "HashtagFilter",
    "MentionAttentionFilter",
    "NumericalWordFilter",
    "PatternRule",
    "PlainTextInputFilter",
    "QuotationFilter",
    "ResultAccumulator",
    "RuleMatch",
    "TrackingNumberFilter",
    "WhitespaceFilter",
]
