"""Tests for the ENML document shell and plain text / HTML encoding."""

from xml.etree import ElementTree

import pytest

from enml_notes.constants import ENML_DOCTYPE, XML_PROLOG
from enml_notes.core.markup import (
    ContentFormat,
    append_to_body,
    encode_content,
    enml_to_html,
    escape_text,
    plain_text_to_enml,
    unwrap_body,
    wrap_body,
)


def test_wrap_body_adds_prolog_doctype_and_root():
    document = wrap_body("<div>x</div>")
    assert document == f"{XML_PROLOG}\n{ENML_DOCTYPE}<en-note><div>x</div></en-note>"


@pytest.mark.parametrize(
    "body",
    [
        "",
        "<p>Hello</p>",
        "Tom &amp; Jerry",
        "<div><div><div>nested</div></div></div>",
        "<div>a<br/>b</div>" + '<en-media type="image/png" hash="00"/>',
        "line\nbreak",
    ],
)
def test_unwrap_body_round_trips(body):
    assert unwrap_body(wrap_body(body)) == body


def test_unwrap_body_tolerates_root_attributes():
    assert unwrap_body('<en-note style="color:red"><b>x</b></en-note>') == "<b>x</b>"


def test_unwrap_body_without_root_is_empty():
    assert unwrap_body("<div>no root</div>") == ""
    assert unwrap_body("") == ""


def test_escape_text_escapes_all_xml_metacharacters():
    assert escape_text("<a & 'b' \"c\">") == "&lt;a &amp; &apos;b&apos; &quot;c&quot;&gt;"


def test_plain_text_keeps_line_breaks():
    assert plain_text_to_enml("one\ntwo\r\nthree") == wrap_body("<div>one<br/>two<br/>three</div>")


def test_plain_text_is_escaped():
    assert plain_text_to_enml("Tom & Jerry <3") == wrap_body("<div>Tom &amp; Jerry &lt;3</div>")


def test_encode_content_html_is_sanitized():
    document = encode_content(ContentFormat.HTML, "<p onclick='x()'>Hi <b>there</b></p>")
    assert unwrap_body(document) == "<p>Hi <b>there</b></p>"


def test_encode_content_accepts_string_format():
    assert encode_content("plain_text", "x") == wrap_body("<div>x</div>")


def test_append_to_body_places_fragments_after_body():
    document = wrap_body("<div>a</div>")
    appended = append_to_body(document, ['<en-media type="image/png" hash="00"/>'])
    assert unwrap_body(appended) == '<div>a</div><en-media type="image/png" hash="00"/>'


def test_append_to_body_without_fragments_is_unchanged():
    document = wrap_body("<div>a</div>")
    assert append_to_body(document, []) is document


def test_enml_to_html_converts_root_and_checkboxes():
    document = wrap_body('<en-todo checked="true"/>done<en-todo checked="false"/>open<en-todo/>bare')
    html = enml_to_html(document)
    assert html == (
        '<div><input type="checkbox" checked disabled>done'
        '<input type="checkbox" disabled>open'
        '<input type="checkbox" disabled>bare</div>'
    )


def test_plain_text_drops_characters_xml_forbids():
    document = plain_text_to_enml("bell\x07 ring\x00\tend")
    assert document == wrap_body("<div>bell ring\tend</div>")
    assert ElementTree.fromstring(document.encode("utf-8")).tag == "en-note"
