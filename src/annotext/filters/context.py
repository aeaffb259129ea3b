"""Per-run filter context: validators, tag builders and link options.

Hosts pass a plain mapping (or a ``FilterContext``) to each filter.  Every
recognised key is optional and falls back to the default documented on the
field.  Unknown keys are kept so a host can carry its own options through
the same mapping.
"""

from __future__ import annotations

import html as html_module
import re
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from annotext.carriers.recognizer import DEFAULT_RECOGNIZER, CarrierRecognizer
from annotext.dom import escape_text

type EntityValidator = Callable[[str], bool]
type TagBuilder = Callable[[str], str]
type AttentionTagBuilder = Callable[[str, str], str]

DEFAULT_USERNAME_PATTERN = r"[a-z0-9][a-z0-9-]*"


class ConfigurationError(ValueError):
    """A filter context value has the wrong shape."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(f"invalid filter context value for {key!r}: {message}")


def accept_all(_value: str) -> bool:
    return True


def _classed_span(prefix: str, value: str) -> str:
    """``<span class="PREFIX-VALUE">VALUE</span>`` with *value* escaped."""
    attr = html_module.escape(value, quote=True)
    return f'<span class="{prefix}-{attr}">{escape_text(value)}</span>'


def build_hashtag_tag(hashtag: str) -> str:
    return _classed_span("hashtag", hashtag)


def build_mention_tag(mention: str) -> str:
    return _classed_span("mention", mention)


def build_attention_tag(attention: str, _mention: str) -> str:
    return _classed_span("attention", attention)


def build_numerical_word_tag(numerical_word: str) -> str:
    # Numerical words may carry markup-significant symbols such as "<" or "&".
    return _classed_span("numerical-word", numerical_word)


def _default_link_attributes() -> dict[str, str]:
    return {"class": "tracking-number"}


class FilterContext(BaseModel):
    """Validated, immutable view of the options a pipeline run carries."""

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        arbitrary_types_allowed=True,
    )

    hashtag_validator: EntityValidator = accept_all
    hashtag_tag_builder: TagBuilder = build_hashtag_tag
    username_pattern: re.Pattern[str] = re.compile(DEFAULT_USERNAME_PATTERN)
    mention_validator: EntityValidator = accept_all
    mention_tag_builder: TagBuilder = build_mention_tag
    attention_tag_builder: AttentionTagBuilder = build_attention_tag
    numerical_word_tag_builder: TagBuilder = build_numerical_word_tag
    tracking_number_link_attributes: dict[str, str] = Field(
        default_factory=_default_link_attributes
    )
    carrier_recognizer: CarrierRecognizer = DEFAULT_RECOGNIZER

    @classmethod
    def from_value(
        cls, value: FilterContext | Mapping[str, Any] | None
    ) -> FilterContext:
        """Build a context from a mapping, dropping keys whose value is ``None``.

        Raises:
            ConfigurationError: naming the first offending key.
        """
        if isinstance(value, FilterContext):
            return value
        if value is None:
            return cls()
        if not isinstance(value, Mapping):
            msg = f"expected a mapping, got {type(value).__name__}"
            raise ConfigurationError("context", msg)

        options = {str(k): v for k, v in value.items() if v is not None}
        try:
            return cls(**options)
        except ValidationError as exc:
            error = exc.errors()[0]
            loc = error.get("loc") or ("context",)
            raise ConfigurationError(str(loc[0]), error.get("msg", str(exc))) from exc

    def explicit_options(self) -> dict[str, Any]:
        """Options that were set explicitly, host-specific keys included."""
        options = {name: getattr(self, name) for name in self.model_fields_set}
        options.update(self.model_extra or {})
        return options

    def merged(
        self, overrides: FilterContext | Mapping[str, Any] | None
    ) -> FilterContext:
        """Return a new context with *overrides* applied on top of this one."""
        if overrides is None:
            return self
        if isinstance(overrides, FilterContext):
            overrides = overrides.explicit_options()
        if not overrides:
            return self
        options = self.explicit_options()
        options.update(overrides)
        return FilterContext.from_value(options)
