"""Tests for the headless page model: frames, element values, event listeners."""

import pytest

from cep_autofill.dom.page import Document, FrameAccessError, Window, is_text_control


class TestTextControls:
    def test_text_like_inputs(self):
        doc = Document('<input id="a"><input id="b" type="tel"><textarea id="c"></textarea>')
        assert [e.id for e in doc.text_controls()] == ["a", "b", "c"]

    def test_excludes_buttons_and_hidden(self):
        doc = Document('<input type="hidden"><input type="submit"><input type="checkbox"><select></select>')
        assert doc.text_controls() == []

    def test_non_tag(self):
        assert is_text_control(None) is False


class TestElement:
    def test_value_roundtrip_input(self):
        doc = Document('<input id="x" value="old">')
        el = doc.wrap(doc.get_element_by_id("x"))
        assert el.value == "old"
        el.value = "new"
        assert 'value="new"' in doc.to_html()

    def test_value_textarea(self):
        doc = Document('<textarea id="t">abc</textarea>')
        el = doc.wrap(doc.get_element_by_id("t"))
        assert el.value == "abc"
        el.value = "xyz"
        assert el.value == "xyz"

    def test_wrap_is_stable(self):
        doc = Document('<input id="x">')
        tag = doc.get_element_by_id("x")
        assert doc.wrap(tag) is doc.wrap(tag)

    def test_is_connected_after_removal(self):
        doc = Document('<form><input id="x"></form>')
        el = doc.wrap(doc.get_element_by_id("x"))
        assert el.is_connected
        el.tag.decompose()
        assert not el.is_connected

    def test_prune_drops_only_detached_handles(self):
        doc = Document('<form><input id="a"><input id="b"></form>')
        kept = doc.wrap(doc.get_element_by_id("a"))
        gone = doc.wrap(doc.get_element_by_id("b"))
        gone.tag.extract()

        assert doc.prune() == 1
        assert doc.wrap(kept.tag) is kept
        assert doc.prune() == 0

    def test_window_prunes_frames(self):
        window = Window.from_html('<input id="top"><iframe srcdoc="<input id=&quot;f&quot;>"></iframe>')
        frame_doc = window.frames[0].document
        frame_doc.wrap(frame_doc.get_element_by_id("f")).tag.extract()
        window.document.wrap(window.document.get_element_by_id("top"))

        assert window.prune_handles() == 1

    async def test_dispatch_sync_and_async_handlers(self):
        doc = Document('<input id="x">')
        el = doc.wrap(doc.get_element_by_id("x"))
        seen = []

        def sync_handler(event):
            seen.append(("sync", event.target.value))

        async def async_handler(event):
            seen.append(("async", event.type))

        el.add_event_listener("input", sync_handler)
        el.add_event_listener("input", async_handler)
        await el.type("0131")
        assert seen == [("sync", "0131"), ("async", "input")]

    def test_same_listener_added_once(self):
        doc = Document('<input id="x">')
        el = doc.wrap(doc.get_element_by_id("x"))

        def handler(event):
            pass

        el.add_event_listener("input", handler)
        el.add_event_listener("input", handler)
        assert el.listener_count("input") == 1
        el.remove_event_listener("input", handler)
        assert el.listener_count("input") == 0


class TestWindowFrames:
    def test_srcdoc_frame_is_readable(self):
        window = Window.from_html('<iframe name="f" srcdoc="<input id=&quot;i&quot;>"></iframe>')
        assert len(window.frames) == 1
        assert window.frames[0].name == "f"
        assert window.frames[0].document.get_element_by_id("i") is not None

    def test_cross_origin_frame_blocks_document(self):
        window = Window.from_html('<iframe src="https://pay.example.com/form"></iframe>')
        frame = window.frames[0]
        assert frame.origin == "https://pay.example.com"
        with pytest.raises(FrameAccessError, match="cross-origin"):
            frame.document

    def test_same_origin_local_file_frame(self, tmp_path):
        (tmp_path / "inner.html").write_text('<input id="inner">', encoding="utf-8")
        window = Window.from_html('<iframe src="inner.html"></iframe>', base_path=tmp_path)
        assert window.frames[0].document.get_element_by_id("inner") is not None

    def test_missing_local_frame_is_inaccessible(self, tmp_path):
        window = Window.from_html('<iframe src="nope.html"></iframe>', base_path=tmp_path)
        with pytest.raises(FrameAccessError):
            window.frames[0].document

    def test_about_blank_frame_is_empty(self):
        window = Window.from_html('<iframe src="about:blank"></iframe>')
        assert window.frames[0].document.labels() == []

    def test_nested_frames_depth_first(self):
        inner = "<iframe name='c' srcdoc=''></iframe>"
        html = f'<iframe name="a" srcdoc="{inner}"></iframe><iframe name="b" srcdoc=""></iframe>'
        window = Window.from_html(html)
        assert [f.name for f in window.iter_frames()] == ["a", "c", "b"]

    def test_to_html_writes_back_srcdoc_frames(self):
        window = Window.from_html('<iframe srcdoc="<input id=&quot;i&quot;>"></iframe>')
        frame_doc = window.frames[0].document
        frame_doc.wrap(frame_doc.get_element_by_id("i")).value = "filled"
        assert "filled" in window.to_html()
