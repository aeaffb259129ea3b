"""Input filter that turns a plain string into a document."""

from __future__ import annotations

from typing import Any

from annotext.dom import HTMLFragment, escape_text


class PlainTextInputFilter:
    """Escape a plain-text string and wrap it in a <div>.

    Runs first in a pipeline whose input is user text rather than HTML.
    """

    name = "plain_text"

    @classmethod
    def call(cls, text: Any, context: Any = None, result: Any = None) -> HTMLFragment:
        if not isinstance(text, str):
            msg = f"{cls.__name__} expects a string, got {type(text).__name__}"
            raise TypeError(msg)
        return HTMLFragment(f"<div>{escape_text(text)}</div>")
