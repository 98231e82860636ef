"""Tests for the HTML to ENML sanitization policy."""

from xml.etree import ElementTree

import pytest

from enml_notes.core.markup import wrap_body
from enml_notes.core.resources import media_tag
from enml_notes.core.sanitizer import is_allowed_url, sanitize_html_to_body


def test_allowed_markup_is_kept():
    html = "<p>Hello <b>bold</b> and <i>italic</i></p><ul><li>one</li></ul>"
    assert sanitize_html_to_body(html) == html


def test_disallowed_attributes_are_removed():
    html = '<div onclick="steal()" style="color:red" class="x">Hi</div>'
    assert sanitize_html_to_body(html) == '<div style="color:red">Hi</div>'


def test_disallowed_element_is_unwrapped_and_children_kept():
    html = '<font color="red"><b>bold</b> text</font>'
    assert sanitize_html_to_body(html) == "<b>bold</b> text"


def test_nested_disallowed_elements_are_unwrapped():
    html = "<form><blink><p>kept</p></blink></form>"
    assert sanitize_html_to_body(html) == "<p>kept</p>"


def test_script_and_style_are_removed_with_content():
    html = "<p>a<script>alert(1)</script>b<style>p {}</style></p>"
    assert sanitize_html_to_body(html) == "<p>ab</p>"


def test_comments_are_removed():
    assert sanitize_html_to_body("<!-- hidden --><p>x</p>") == "<p>x</p>"


def test_javascript_links_lose_href():
    assert sanitize_html_to_body('<a href="javascript:alert(1)">x</a>') == "<a>x</a>"


def test_obfuscated_javascript_scheme_is_rejected():
    assert not is_allowed_url("java\tscript:alert(1)")
    assert not is_allowed_url(" JAVASCRIPT:alert(1)")


@pytest.mark.parametrize(
    "url",
    ["https://example.com", "http://example.com/a?b=c", "mailto:a@example.com", "/relative/path", "#anchor"],
)
def test_safe_urls_are_allowed(url):
    assert is_allowed_url(url)


def test_safe_link_keeps_allowed_attributes_only():
    html = '<a href="https://example.com" target="_blank" title="t">x</a>'
    assert sanitize_html_to_body(html) == '<a href="https://example.com" title="t">x</a>'


def test_void_elements_are_self_closed():
    assert sanitize_html_to_body("line<br>next<hr>") == "line<br/>next<hr/>"


def test_media_tag_is_self_closed():
    html = '<en-media type="image/png" hash="abc"></en-media>'
    assert sanitize_html_to_body(html) == '<en-media type="image/png" hash="abc"/>'


def test_images_are_dropped():
    assert sanitize_html_to_body('<p><img src="a.png">x</p>') == "<p>x</p>"


def test_full_document_uses_body_only():
    html = "<html><head><title>T</title></head><body><p>x</p></body></html>"
    assert sanitize_html_to_body(html) == "<p>x</p>"


def test_text_is_escaped():
    assert sanitize_html_to_body("Tom &amp; Jerry") == "Tom &amp; Jerry"


def test_empty_input():
    assert sanitize_html_to_body("") == ""


def test_attributes_keep_source_order():
    html = '<a title="t" href="https://example.com">x</a>'
    assert sanitize_html_to_body(html) == html


def test_sanitized_media_tag_matches_resource_builder():
    tag = media_tag("image/png", "5d41402abc4b2a76b9719d911017c592")
    assert sanitize_html_to_body(tag) == tag


def test_control_characters_are_removed():
    assert sanitize_html_to_body("<p>\x01ctrl\x1f</p>") == "<p>ctrl</p>"
    assert sanitize_html_to_body('<a title="a\x02b">x</a>') == '<a title="ab">x</a>'


def test_tab_and_newline_are_kept():
    assert sanitize_html_to_body("<pre>a\tb\nc</pre>") == "<pre>a\tb\nc</pre>"


@pytest.mark.parametrize(
    "html",
    [
        "<p>\x01ctrl</p>",
        "<p title='a\x0bb'>x\x0c</p>",
        "<p>&#1;entity</p>",
        "<![CDATA[x]]><p>y</p>",
        "<?php echo 1; ?><p>pi</p>",
        "<p>unclosed <b>bold",
        "Tom & Jerry <3",
        "<a href='https://x.example/?a=1&b=2' title='say \"hi\"'>l</a>",
        "<div><p>stray</body> end</p></div>",
        '<en-media type="image/png" hash="00"><b>child</b></en-media>',
    ],
)
def test_output_wraps_into_well_formed_xml(html):
    document = wrap_body(sanitize_html_to_body(html))
    root = ElementTree.fromstring(document.encode("utf-8"))
    assert root.tag == "en-note"


def test_media_longdesc_is_checked_like_a_link():
    html = '<en-media type="image/png" hash="00" longdesc="javascript:alert(1)"/>'
    assert sanitize_html_to_body(html) == '<en-media type="image/png" hash="00"/>'
    kept = '<en-media type="image/png" hash="00" longdesc="https://example.com/d"/>'
    assert sanitize_html_to_body(kept) == kept
