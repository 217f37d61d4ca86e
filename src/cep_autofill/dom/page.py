"""Minimal page model over BeautifulSoup: windows, frames, elements, events.

The orchestrator only reads labels and their associations, reads and writes
input values, and subscribes to ``input`` events. This module provides that
on top of parsed HTML so the resolver and orchestrator run headless.

Frames follow browser rules: a frame whose origin differs from its parent's
cannot be read, and touching its ``document`` raises ``FrameAccessError``.
"""

import inspect
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

# <input> types that never hold free text
NON_TEXT_INPUT_TYPES = {
    "button", "checkbox", "color", "file", "hidden", "image",
    "radio", "range", "reset", "submit",
}


class FrameAccessError(Exception):
    """Raised when reading the document of a cross-origin or unloaded frame."""


def is_text_control(tag: object) -> bool:
    """True for <textarea> and text-like <input> elements."""
    if not isinstance(tag, Tag):
        return False
    if tag.name == "textarea":
        return True
    if tag.name != "input":
        return False
    return str(tag.get("type", "text")).lower() not in NON_TEXT_INPUT_TYPES


@dataclass
class Event:
    type: str
    target: "Element"


class Element:
    """Handle to a live form control, with a value and event listeners."""

    def __init__(self, tag: Tag, document: "Document") -> None:
        self.tag = tag
        self.document = document
        self._listeners: dict[str, list[Callable[[Event], Any]]] = {}

    def __repr__(self) -> str:
        return f"<Element {self.tag.name} id={self.id!r}>"

    @property
    def id(self) -> str:
        return str(self.tag.get("id", ""))

    @property
    def value(self) -> str:
        if self.tag.name == "textarea":
            return self.tag.get_text()
        return str(self.tag.get("value", ""))

    @value.setter
    def value(self, new_value: str) -> None:
        if self.tag.name == "textarea":
            self.tag.string = new_value
        else:
            self.tag["value"] = new_value

    @property
    def is_connected(self) -> bool:
        """False once the underlying node has been removed from its document."""
        if getattr(self.tag, "decomposed", False):
            return False
        return any(parent is self.document.soup for parent in self.tag.parents)

    # -- events -------------------------------------------------------------

    def add_event_listener(self, event_type: str, handler: Callable[[Event], Any]) -> None:
        handlers = self._listeners.setdefault(event_type, [])
        # browsers ignore re-adding the same listener
        if not any(h is handler for h in handlers):
            handlers.append(handler)

    def remove_event_listener(self, event_type: str, handler: Callable[[Event], Any]) -> None:
        handlers = self._listeners.get(event_type, [])
        self._listeners[event_type] = [h for h in handlers if h is not handler]

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners.get(event_type, []))

    async def dispatch_event(self, event_type: str) -> None:
        """Call every listener in registration order, awaiting async ones."""
        event = Event(type=event_type, target=self)
        for handler in list(self._listeners.get(event_type, [])):
            result = handler(event)
            if inspect.isawaitable(result):
                await result

    async def type(self, text: str) -> None:
        """Replace the value and fire ``input``, as a user edit would."""
        self.value = text
        await self.dispatch_event("input")


class Document:
    """A parsed HTML document that hands out stable Element handles."""

    def __init__(self, html: str | BeautifulSoup) -> None:
        self.soup = html if isinstance(html, BeautifulSoup) else BeautifulSoup(html, "html.parser")
        self._handles: dict[int, Element] = {}

    def wrap(self, tag: Tag) -> Element:
        """Return the handle for ``tag``; the same tag always yields the same handle."""
        handle = self._handles.get(id(tag))
        if handle is None or handle.tag is not tag:
            handle = Element(tag, self)
            self._handles[id(tag)] = handle
        return handle

    def prune(self) -> int:
        """Forget handles whose node left the document. Returns how many were dropped."""
        stale = [key for key, handle in self._handles.items() if not handle.is_connected]
        for key in stale:
            del self._handles[key]
        return len(stale)

    @property
    def body(self) -> Tag:
        return self.soup.body or self.soup

    def labels(self) -> list[Tag]:
        return self.soup.find_all("label")

    def get_element_by_id(self, element_id: str) -> Tag | None:
        if not element_id:
            return None
        return self.soup.find(id=element_id)

    def text_controls(self) -> list[Element]:
        return [self.wrap(tag) for tag in self.soup.find_all(["input", "textarea"]) if is_text_control(tag)]

    def to_html(self) -> str:
        return str(self.soup)


def _origin_of(url: str) -> str | None:
    parsed = urlparse(url)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return f"{parsed.scheme}://{parsed.netloc}"
    return None


class Window:
    """A browsing context: a document (unless inaccessible) plus child frames."""

    def __init__(
        self,
        document: Document | None,
        *,
        name: str = "top",
        origin: str = "null",
        frames: list["Window"] | None = None,
        frame_element: Tag | None = None,
        blocked_reason: str = "",
    ) -> None:
        self._document = document
        self.name = name
        self.origin = origin
        self.frames: list[Window] = frames or []
        self.frame_element = frame_element
        self._blocked_reason = blocked_reason

    def __repr__(self) -> str:
        return f"<Window {self.name} origin={self.origin}>"

    @property
    def document(self) -> Document:
        if self._document is None:
            raise FrameAccessError(
                f"Blocked access to frame {self.name!r} ({self.origin}): "
                f"{self._blocked_reason or 'cross-origin'}"
            )
        return self._document

    def iter_frames(self):
        """Descendant frames, depth-first in document order."""
        for frame in self.frames:
            yield frame
            yield from frame.iter_frames()

    def prune_handles(self) -> int:
        """Prune detached element handles in this window and every readable frame."""
        return sum(
            scope._document.prune()
            for scope in (self, *self.iter_frames())
            if scope._document is not None
        )

    @classmethod
    def from_html(
        cls,
        html: str,
        *,
        name: str = "top",
        origin: str = "null",
        base_path: Path | None = None,
        frame_element: Tag | None = None,
    ) -> "Window":
        """Parse a page, loading same-origin frames from srcdoc or local files."""
        document = Document(html)
        frames: list[Window] = []
        for index, iframe in enumerate(document.soup.find_all("iframe")):
            frame_name = str(iframe.get("name") or iframe.get("id") or f"{name}.frames[{index}]")
            frames.append(cls._load_frame(iframe, frame_name, origin, base_path))
        return cls(document, name=name, origin=origin, frames=frames, frame_element=frame_element)

    @classmethod
    def _load_frame(cls, iframe: Tag, name: str, origin: str, base_path: Path | None) -> "Window":
        if iframe.has_attr("srcdoc"):
            return cls.from_html(
                str(iframe["srcdoc"]), name=name, origin=origin,
                base_path=base_path, frame_element=iframe,
            )

        src = str(iframe.get("src", "")).strip()
        if not src or src == "about:blank":
            return cls(Document(""), name=name, origin=origin, frame_element=iframe)

        frame_origin = _origin_of(src)
        if frame_origin is not None and frame_origin != origin:
            return cls(None, name=name, origin=frame_origin, frame_element=iframe,
                       blocked_reason="cross-origin")

        if frame_origin is None and base_path is not None:
            path = (base_path / src).resolve()
            if path.is_file():
                return cls.from_html(
                    path.read_text(encoding="utf-8"), name=name, origin=origin,
                    base_path=path.parent, frame_element=iframe,
                )

        logger.debug("Frame %s (%s) could not be loaded", name, src)
        return cls(None, name=name, origin=frame_origin or origin, frame_element=iframe,
                   blocked_reason=f"unable to load {src}")

    def to_html(self) -> str:
        """Serialize the page, writing srcdoc frames' current state back into their iframes."""
        for frame in self.frames:
            if frame._document is not None and frame.frame_element is not None \
                    and frame.frame_element.has_attr("srcdoc"):
                frame.frame_element["srcdoc"] = frame.to_html()
        return self.document.to_html()
