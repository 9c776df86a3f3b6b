"""End-to-end tests for highlight().

Covers the pass-through paths, structural preservation, opaque containers,
entity boundaries and matches spanning inline elements.
"""

from __future__ import annotations

import re

import pytest

from phrasemark import HighlightOptions, count_matches, highlight
from phrasemark.config import get_settings
from phrasemark.highlight.core import find_in_html, highlight_with_count


class TestPassThrough:
    """Empty query and zero matches return the input unchanged."""

    @pytest.mark.parametrize(
        "html", ["", "text", "<p>A &amp; B</p>", "<td>stray cell", "<!-- c -->"]
    )
    def test_empty_query(self, html: str) -> None:
        assert highlight("", html) == html
        assert highlight(None, html) == html

    @pytest.mark.parametrize(
        "html", ["<p>this is a test</p>", "<table><td>odd</table>", "<p>&nbsp;x</p>"]
    )
    def test_no_occurrence(self, html: str) -> None:
        assert highlight("zebra", html) == html

    def test_comments_ignored(self) -> None:
        assert highlight("text", "<!-- text -->") == "<!-- text -->"

    def test_script_ignored(self) -> None:
        html = "<div><script>var thing = 'testing'</script></div>"
        assert highlight("var", html) == html

    def test_regex_metacharacters_do_not_raise(self) -> None:
        assert highlight("(a+", "<p>b</p>") == "<p>b</p>"


class TestSingleNode:
    """Matches inside one text node."""

    def test_text(self) -> None:
        assert highlight("text", "text") == "<mark>text</mark>"

    def test_markup(self) -> None:
        assert highlight("test", "<p>this is a test</p>") == (
            "<p>this is a <mark>test</mark></p>"
        )

    def test_single_letters(self) -> None:
        assert highlight("o", "<p>Lorem ipsum dolor sit amet.</p>") == (
            "<p>L<mark>o</mark>rem ipsum d<mark>o</mark>l<mark>o</mark>r sit amet.</p>"
        )

    def test_first_and_last(self) -> None:
        assert highlight("highlight", "<p>highlight text highlight</p>") == (
            "<p><mark>highlight</mark> text <mark>highlight</mark></p>"
        )

    def test_simple_middle(self) -> None:
        assert highlight("highlight", "<p>text highlight text</p>") == (
            "<p>text <mark>highlight</mark> text</p>"
        )

    def test_many_in_one_node(self) -> None:
        html = "<p>highlight text highlight text text highlight highlight text</p>"
        assert highlight("highlight", html) == (
            "<p><mark>highlight</mark> text <mark>highlight</mark> text text "
            "<mark>highlight</mark> <mark>highlight</mark> text</p>"
        )

    def test_case_insensitive_keeps_source_case(self) -> None:
        html = (
            '<ul class="reference-index__index-columns">'
            '<li><a href="#">Abbott, Hiram</a></li>'
            '<li><a href="#">Abbott, Lewis</a></li></ul>'
        )
        assert highlight("abbott", html) == (
            '<ul class="reference-index__index-columns">'
            '<li><a href="#"><mark>Abbott</mark>, Hiram</a></li>'
            '<li><a href="#"><mark>Abbott</mark>, Lewis</a></li></ul>'
        )

    def test_mark_not_pushed_to_end_of_parent(self) -> None:
        assert highlight("highlight", "<p> text highlight <b>text</b> text</p>") == (
            "<p> text <mark>highlight</mark> <b>text</b> text</p>"
        )


class TestMultiNode:
    """Matches that cross element boundaries keep inner nesting."""

    def test_a_lot_of_tests(self) -> None:
        html = "<p>there are a <em>lot</em> of tests man</p>"
        assert highlight("a lot of tests", html) == (
            "<p>there are <mark>a </mark><em><mark>lot</mark></em>"
            "<mark> of tests</mark> man</p>"
        )

    def test_end_inside_element(self) -> None:
        assert highlight("a test", "<p>this is a <b>test suite</b></p>") == (
            "<p>this is <mark>a </mark><b><mark>test</mark> suite</b></p>"
        )

    def test_repeated_across_paragraphs(self) -> None:
        html = "<p>this is a <b>test suite</b></p><p>this is a <b>test suite</b></p>"
        expected = "<p>this is <mark>a </mark><b><mark>test</mark> suite</b></p>"
        assert highlight("a test", html) == expected * 2

    def test_start_on_element_boundary(self) -> None:
        html = "<div>Movie: <p><b>What</b> about Bob?</p></div>"
        assert highlight("what about bob", html) == (
            "<div>Movie: <p><b><mark>What</mark></b><mark> about Bob</mark>?</p></div>"
        )

    def test_end_deeper_than_start(self) -> None:
        html = "<p><i>x <b>abc</b> y</i> zz</p>"
        assert highlight("abc y zz", html) == (
            "<p><i>x <b><mark>abc</mark></b><mark> y</mark></i><mark> zz</mark></p>"
        )

    def test_script_between_endpoints_untouched(self) -> None:
        html = "<p>foo<script>bar</script>bar</p>"
        assert highlight("foobar", html) == (
            "<p><mark>foo</mark><script>bar</script><mark>bar</mark></p>"
        )

    def test_back_to_back_multi_node_matches(self) -> None:
        html = "<p>ab<b>c</b>ab<b>c</b></p>"
        assert highlight("abc", html) == (
            "<p><mark>ab</mark><b><mark>c</mark></b><mark>ab</mark><b><mark>c</mark></b></p>"
        )


class TestEntities:
    """Marker boundaries sit on encoded entity boundaries."""

    def test_pre_nbsp(self) -> None:
        assert highlight("highlight", "<p>&nbsp;highlight</p>") == (
            "<p>&nbsp;<mark>highlight</mark></p>"
        )

    def test_post_nbsp(self) -> None:
        assert highlight("highlight", "<p>highlight&nbsp;</p>") == (
            "<p><mark>highlight</mark>&nbsp;</p>"
        )

    def test_inner_nbsp_between_matches(self) -> None:
        assert highlight("highlight", "<p>highlight&nbsp;highlight</p>") == (
            "<p><mark>highlight</mark>&nbsp;<mark>highlight</mark></p>"
        )

    def test_nested_nbsp(self) -> None:
        assert highlight("broke it", "<p>I broke<span>&nbsp;</span>itforever</p>") == (
            "<p>I <mark>broke</mark><span><mark>&nbsp;</mark></span>"
            "<mark>it</mark>forever</p>"
        )

    def test_pre_nested_post_hex_entities(self) -> None:
        html = "<p>I&#xa0;broke<span>&nbsp;</span>it&#xa0;forever</p>"
        assert highlight("broke it", html) == (
            "<p>I&#xa0;<mark>broke</mark><span><mark>&nbsp;</mark></span>"
            "<mark>it</mark>&#xa0;forever</p>"
        )

    def test_multiple_nested_entities(self) -> None:
        html = "<p>I highlight<span>&nbsp;all the&#xa0;<b>things</b></span> man</p>"
        assert highlight("highlight all the things man", html) == (
            "<p>I <mark>highlight</mark><span><mark>&nbsp;all the&#xa0;</mark>"
            "<b><mark>things</mark></b></span><mark> man</mark></p>"
        )

    def test_entity_inside_match(self) -> None:
        assert highlight("tom & jerry", "<p>Tom &amp; Jerry</p>") == (
            "<p><mark>Tom &amp; Jerry</mark></p>"
        )

    def test_malformed_entity_is_literal(self) -> None:
        assert highlight("&bogus", "<p>a &bogus b</p>") == (
            "<p>a <mark>&bogus</mark> b</p>"
        )

    def test_unknown_reference_is_plain_text(self) -> None:
        assert highlight("foo", "<p>a&nbsp;&foo;</p>") == (
            "<p>a&nbsp;&<mark>foo</mark>;</p>"
        )


class TestStructuralPreservation:
    """Tags and attributes outside markers survive unchanged."""

    def test_attributes_survive(self) -> None:
        html = '<div id="d" data-x="1"><a href="/a?b=1&amp;c=2" title="t">find me</a></div>'
        out = highlight("find", html)
        assert out == (
            '<div id="d" data-x="1"><a href="/a?b=1&amp;c=2" title="t">'
            "<mark>find</mark> me</a></div>"
        )

    def test_stripping_markers_restores_input(self) -> None:
        html = "<p>I highlight<span>&nbsp;all the&#xa0;<b>things</b></span> man</p>"
        out = highlight("highlight all the things man", html)
        assert re.sub(r"</?mark>", "", out) == html

    def test_authored_body_attributes_survive(self) -> None:
        html = "<head><title>t</title></head><body class='b'><p>test</p></body>"
        out = highlight("test", html)
        assert out == (
            "<html><head><title>t</title></head>"
            '<body class="b"><p><mark>test</mark></p></body></html>'
        )

    def test_comment_before_html_keeps_html_attributes(self) -> None:
        html = "<!-- c --><html lang=en><body><p>test</p></body></html>"
        out = highlight("test", html)
        assert out.startswith('<!-- c --><html lang="en">')
        assert "<body><p><mark>test</mark></p></body></html>" in out


class TestOptions:
    """HighlightOptions and settings fallbacks."""

    def test_marker_tag_option(self) -> None:
        options = HighlightOptions(marker_tag="em")
        assert highlight("test", "<p>a test</p>", options) == "<p>a <em>test</em></p>"

    def test_marker_tag_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HIGHLIGHT__MARKER_TAG", "strong")
        get_settings.cache_clear()
        assert highlight("x", "<p>x</p>") == "<p><strong>x</strong></p>"

    def test_extra_opaque_tag(self) -> None:
        options = HighlightOptions(opaque_tags=("script", "style"))
        html = "<div><style>.a{}</style><p>a</p></div>"
        assert highlight("a", html, options) == (
            "<div><style>.a{}</style><p><mark>a</mark></p></div>"
        )

    def test_injected_decoder(self) -> None:
        """A synthetic decoder changes what an entity matches as."""
        options = HighlightOptions(decode=lambda s: s.replace("&star;", "*"))
        assert highlight("a*b", "<p>a&star;b</p>", options) == (
            "<p><mark>a&star;b</mark></p>"
        )


class TestCounting:
    """count_matches / find_in_html."""

    def test_count(self) -> None:
        assert count_matches("o", "<p>Lorem dolor</p><script>o</script>") == 3

    def test_count_empty_query(self) -> None:
        assert count_matches("", "<p>x</p>") == 0

    def test_highlight_with_count(self) -> None:
        out, total = highlight_with_count("o", "<p>Lorem dolor</p>")
        assert out == "<p>L<mark>o</mark>rem d<mark>o</mark>l<mark>o</mark>r</p>"
        assert total == 3

    def test_highlight_with_count_no_match(self) -> None:
        assert highlight_with_count("zz", "<p>x</p>") == ("<p>x</p>", 0)

    def test_template_content_not_searched(self) -> None:
        assert count_matches("x", "<template><b>x</b></template><p>x</p>") == 1

    def test_find_in_html_offsets_are_raw(self) -> None:
        (m,) = find_in_html("highlight", "<p>&nbsp;highlight</p>")
        assert (m.start.index, m.end.index) == (6, 15)
