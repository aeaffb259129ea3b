"""annotext - annotate free-running text inside parsed HTML documents.

Finds hashtags, @mentions with !attentions, numerical words, quotations,
tracking numbers and raw line breaks in the text nodes of an HTML tree and
rewrites them into markup, leaving code blocks, links and other disallowed
ancestors untouched.
"""

from annotext.dom import HTMLFragment, fragment_to_html
from annotext.filters import (
    AnnotationError,
    ConfigurationError,
    FilterContext,
    HashtagFilter,
    MentionAttentionFilter,
    NumericalWordFilter,
    PlainTextInputFilter,
    QuotationFilter,
    ResultAccumulator,
    TrackingNumberFilter,
    WhitespaceFilter,
)
from annotext.pipeline import DEFAULT_FILTERS, Pipeline

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_FILTERS",
    "AnnotationError",
    "ConfigurationError",
    "FilterContext",
    "HTMLFragment",
    "HashtagFilter",
    "MentionAttentionFilter",
    "NumericalWordFilter",
    "Pipeline",
    "PlainTextInputFilter",
    "QuotationFilter",
    "ResultAccumulator",
    "TrackingNumberFilter",
    "WhitespaceFilter",
    "fragment_to_html",
]
