"""Tests for relay contact scrubbing."""

from cep_autofill.dom.page import Window
from cep_autofill.pipeline.scrubber import clean_phone, scrub_window

SUFFIXES = ["@guest.booking.com", "@cvccorp.com"]


def _value(window, element_id):
    doc = window.document
    return doc.wrap(doc.get_element_by_id(element_id)).value


class TestCleanPhone:
    def test_strips_country_prefix_and_spaces(self):
        assert clean_phone("+55 16 99999 0000") == "16999990000"

    def test_plain_digits_unchanged(self):
        assert clean_phone("16999990000") == "16999990000"

    def test_other_country_loses_plus(self):
        assert clean_phone("+1 555 0100") == "15550100"

    def test_non_phone_text_unchanged(self):
        assert clean_phone("Rua A, 12") == "Rua A, 12"
        assert clean_phone("") == ""


class TestScrubWindow:
    def test_cleans_phone_and_relay_email(self):
        window = Window.from_html("""
            <input id="tel" type="tel" value="+55 11 98888 7777">
            <input id="mail" type="email" value="joao.123@Guest.Booking.com">
            <input id="own" type="email" value="joao@example.com">
        """)
        assert scrub_window(window, SUFFIXES) == 2
        assert _value(window, "tel") == "11988887777"
        assert _value(window, "mail") == ""
        assert _value(window, "own") == "joao@example.com"

    def test_numeric_inputmode_counts_as_phone(self):
        window = Window.from_html('<input id="p" type="search" inputmode="numeric" value="+55 21 3333 4444">')
        scrub_window(window, SUFFIXES)
        assert _value(window, "p") == "2133334444"

    def test_non_text_inputs_ignored(self):
        window = Window.from_html('<input id="h" type="hidden" value="+55 11 1">')
        assert scrub_window(window, SUFFIXES) == 0
        assert _value(window, "h") == "+55 11 1"

    def test_reaches_same_origin_frames_and_skips_blocked(self):
        window = Window.from_html(
            '<iframe name="guest" srcdoc="<input id=&quot;t&quot; type=&quot;tel&quot; value=&quot;+55 11 2&quot;>">'
            '</iframe>'
            '<iframe name="ads" src="https://ads.example.com/x"></iframe>'
        )
        assert scrub_window(window, SUFFIXES) == 1
        assert _value(window.frames[0], "t") == "112"

    def test_idempotent(self):
        window = Window.from_html('<input id="tel" type="tel" value="+55 11 98888 7777">')
        scrub_window(window, SUFFIXES)
        assert scrub_window(window, SUFFIXES) == 0

    def test_textarea_left_alone(self):
        window = Window.from_html("""
            <textarea id="notes">+55 11 98888 7777</textarea>
            <textarea id="relay">joao@guest.booking.com</textarea>
        """)
        assert scrub_window(window, SUFFIXES) == 0
        assert _value(window, "notes") == "+55 11 98888 7777"
        assert _value(window, "relay") == "joao@guest.booking.com"
