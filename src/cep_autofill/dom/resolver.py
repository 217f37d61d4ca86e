"""Label-driven field resolution across a window and its frames.

A field is located through the text of its caption rather than any id or
name, because host pages re-render and rename their controls freely. For a
matching ``<label>`` the control is taken from, in order:

  1. the element referenced by the label's ``for`` attribute
  2. a control nested inside the label
  3. the first control among the label's following siblings

Resolution never mutates the page.
"""

import logging

from bs4 import Tag

from cep_autofill.core.normalize import normalize
from cep_autofill.core.types import (
    AccessDenied,
    FieldName,
    LabelMap,
    NotReady,
    ResolvedFieldSet,
)
from cep_autofill.dom.page import Document, Element, FrameAccessError, Window, is_text_control

logger = logging.getLogger(__name__)

LABELS_NOT_LOADED = NotReady("labels not loaded")


def probe(scope: Window) -> Document | AccessDenied:
    """Read a scope's document, turning a blocked frame into a value."""
    try:
        return scope.document
    except FrameAccessError as e:
        return AccessDenied(scope=scope.name, reason=str(e))


def _label_text(label: Tag) -> str:
    return normalize(label.get_text().strip())


def _control_for_label(label: Tag, document: Document) -> Tag | None:
    target_id = label.get("for")
    if target_id:
        target = document.get_element_by_id(str(target_id))
        if is_text_control(target):
            return target

    nested = label.find(is_text_control)
    if nested is not None:
        return nested

    for sibling in label.find_next_siblings():
        if is_text_control(sibling):
            return sibling
    return None


def find_field_by_label(candidates: tuple[str, ...], document: Document) -> Element | None:
    """First control whose label matches a candidate, candidates tried in order."""
    labels = [(label, _label_text(label)) for label in document.labels()]
    for candidate in candidates:
        wanted = normalize(candidate.strip())
        if not wanted:
            continue
        label = next((lbl for lbl, text in labels if text == wanted), None)
        if label is None:
            continue
        control = _control_for_label(label, document)
        if control is not None:
            return document.wrap(control)
    return None


def resolve(label_map: LabelMap, scope: Window) -> ResolvedFieldSet | NotReady:
    """Resolve every labelled field inside one scope.

    Returns ``NotReady`` when translations are not loaded or the scope's
    document cannot be read. The returned set may be partial; callers decide
    whether it is usable.
    """
    if label_map.is_empty:
        return LABELS_NOT_LOADED

    document = probe(scope)
    if isinstance(document, AccessDenied):
        logger.debug("Skipping frame %s: %s", document.scope, document.reason, extra={"scope": document.scope})
        return NotReady(f"access denied: {document.scope}")

    fields: dict[FieldName, Element] = {}
    for name in FieldName:
        candidates = label_map.get(name)
        if not candidates:
            continue
        element = find_field_by_label(candidates, document)
        if element is not None:
            fields[name] = element
    return ResolvedFieldSet(fields=fields, scope=scope)


def resolve_page(
    label_map: LabelMap,
    window: Window,
    required: list[FieldName] | tuple[FieldName, ...],
) -> ResolvedFieldSet | None:
    """Find one usable field set: the top window first, then frames in document order.

    Fields are never merged across scopes.
    """
    for scope in (window, *window.iter_frames()):
        result = resolve(label_map, scope)
        if isinstance(result, NotReady):
            if result is LABELS_NOT_LOADED:
                return None
            continue
        if result.is_usable(required):
            if scope is not window:
                logger.info("Address inputs found in frame %s", scope.name, extra={"scope": scope.name})
            return result
        logger.debug("Scope %s missing fields: %s", scope.name, [f.value for f in result.missing(required)])
    return None
