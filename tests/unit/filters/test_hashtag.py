"""Tests for the #hashtag filter."""

from __future__ import annotations

import pytest

from annotext.dom import HTMLFragment, fragment_to_html
from annotext.filters import (
    HashtagFilter,
    PlainTextInputFilter,
    ResultAccumulator,
)
from annotext.filters.hashtag import hashtags_in
from annotext.pipeline import Pipeline

HAPPY_TAG = '<span class="hashtag-happy-coding">happy-coding</span>'

TEXT_PIPELINE = Pipeline([PlainTextInputFilter, HashtagFilter])


def matched_hashtags(body: str) -> list[str]:
    return TEXT_PIPELINE.call(body)["hashtags"]


class TestHashtagFilterDocument:
    """Rewriting of document text nodes."""

    def test_filtering_a_document_fragment(self) -> None:
        """A parsed fragment is mutated in place and returned."""
        doc = HTMLFragment("<p>#happy-coding: check it out.</p>")

        res = HashtagFilter.call(doc)

        assert res is doc
        assert res.to_html() == f"<p>{HAPPY_TAG}: check it out.</p>"

    def test_filtering_plain_html_string(self) -> None:
        """A string is auto-wrapped into a fragment."""
        res = HashtagFilter.call("<p>#happy-coding: check it out.</p>")
        assert fragment_to_html(res) == f"<p>{HAPPY_TAG}: check it out.</p>"

    @pytest.mark.parametrize(
        "body",
        [
            "<pre>#happy-coding: okay</pre>",
            "<p><code>#happy-coding:</code> okay</p>",
            "<p><a>#happy-coding</a> okay</p>",
            "<p><a href='/x'><em>#happy-coding</em></a> okay</p>",
            "<style>#happy-coding { color: red; }</style>",
        ],
    )
    def test_not_replacing_under_ignored_parents(self, body: str) -> None:
        """Text under pre, code, a, style or script is never rewritten."""
        expected = HTMLFragment(body).to_html()
        assert HashtagFilter.call(body).to_html() == expected

    def test_entity_encoding(self) -> None:
        """A character reference spelling the name is decoded first."""
        body = "<p>#&#104;appy-coding what's up</p>"
        assert HashtagFilter.call(body).to_html() == f"<p>{HAPPY_TAG} what's up</p>"

    def test_html_injection(self) -> None:
        """Escaped markup around a hashtag stays escaped."""
        body = "<p>#happy-coding &lt;script>alert(0)&lt;/script></p>"
        assert HashtagFilter.call(body).to_html() == (
            f"<p>{HAPPY_TAG} &lt;script&gt;alert(0)&lt;/script&gt;</p>"
        )

    def test_unchanged_text_keeps_node(self) -> None:
        """Text without a valid hashtag is left exactly as it was."""
        body = "<p>issue #123 and a#b</p>"
        assert HashtagFilter.call(body).to_html() == body

    def test_second_pass_is_noop(self) -> None:
        """Running the filter on its own output changes nothing."""
        once = HashtagFilter.call("<p>#defunkt and #atmos</p>").to_html()
        assert HashtagFilter.call(once).to_html() == once

    def test_deeply_nested_hashtag(self) -> None:
        """Deep nesting is annotated rather than crashing the walk."""
        depth = 3000
        result = ResultAccumulator()

        doc = HashtagFilter.call(
            "<div>" * depth + "#deep" + "</div>" * depth, None, result
        )

        assert result["hashtags"] == ["deep"]
        assert '<span class="hashtag-deep">deep</span>' in doc.to_html()

    def test_none_document(self) -> None:
        """Absent input is returned unchanged."""
        assert HashtagFilter.call(None) is None


class TestHashtagExtraction:
    """Hashtags collected in the result accumulator."""

    def test_matches_hashtags_in_body(self) -> None:
        assert matched_hashtags("#test how are you?") == ["test"]

    def test_matches_list_of_names(self) -> None:
        assert matched_hashtags("#defunkt #atmos #happy-coding") == [
            "defunkt",
            "atmos",
            "happy-coding",
        ]

    def test_matches_list_of_names_with_commas(self) -> None:
        assert matched_hashtags("/cc #defunkt, #atmos, #happy-coding") == [
            "defunkt",
            "atmos",
            "happy-coding",
        ]

    def test_matches_inside_brackets(self) -> None:
        assert matched_hashtags("(#mislav) and [#rtomayko]") == ["mislav", "rtomayko"]

    def test_doesnt_ignore_invalid_hashtags(self) -> None:
        assert matched_hashtags("#defunkt #mojombo and #somedude") == [
            "defunkt",
            "mojombo",
            "somedude",
        ]

    def test_returns_distinct_set(self) -> None:
        body = "#defunkt, #atmos, #happy-coding, #defunkt, #defunkt"
        assert matched_hashtags(body) == ["defunkt", "atmos", "happy-coding"]

    def test_hashtag_at_end_of_parenthetical_sentence(self) -> None:
        assert matched_hashtags("(We're talking 'bout #ymendel.)") == ["ymendel"]

    def test_does_not_match_slash_suffixed_names(self) -> None:
        assert matched_hashtags("see #atmos/atmos") == []

    def test_does_not_match_numeric_or_embedded(self) -> None:
        assert matched_hashtags("issue #123 and foo#bar") == []

    def test_does_not_match_inside_code(self) -> None:
        result = ResultAccumulator()
        HashtagFilter.call("<p><code>#defunkt #atmos</code></p>", result=result)
        assert result["hashtags"] == []

    def test_each_hashtag_becomes_classed_span(self) -> None:
        doc = TEXT_PIPELINE.call("#defunkt #mojombo and #somedude").output
        assert doc.to_html() == (
            '<div><span class="hashtag-defunkt">defunkt</span> '
            '<span class="hashtag-mojombo">mojombo</span> and '
            '<span class="hashtag-somedude">somedude</span></div>'
        )


class TestHashtagContext:
    """Validator and tag builder customisation."""

    def test_rejected_hashtag_stays_literal(self) -> None:
        """Rejected names are recorded but not rewritten."""
        result = ResultAccumulator()
        context = {"hashtag_validator": lambda name: name != "atmos"}

        doc = HashtagFilter.call("<p>#defunkt #atmos</p>", context, result)

        assert doc.to_html() == (
            '<p><span class="hashtag-defunkt">defunkt</span> #atmos</p>'
        )
        assert result["hashtags"] == ["defunkt", "atmos"]

    def test_custom_tag_builder(self) -> None:
        context = {
            "hashtag_tag_builder": lambda name: f'<a href="/tags/{name}">#{name}</a>'
        }
        doc = HashtagFilter.call("<p>see #release</p>", context)
        assert doc.to_html() == '<p>see <a href="/tags/release">#release</a></p>'


class TestHashtagsIn:
    """The bare pattern helper."""

    def test_yields_names_with_sequential_index(self) -> None:
        matches = list(hashtags_in("#one, #two and #three"))
        assert [m["hashtag"] for m in matches] == ["one", "two", "three"]
        assert [m.index for m in matches] == [0, 1, 2]

    def test_case_insensitive(self) -> None:
        assert [m["hashtag"] for m in hashtags_in("#Release")] == ["Release"]
