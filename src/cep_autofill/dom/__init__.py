"""Headless page model, label-driven field resolution, and the confirmation banner."""

from cep_autofill.dom.page import Document, Element, FrameAccessError, Window
from cep_autofill.dom.resolver import find_field_by_label, probe, resolve, resolve_page

__all__ = [
    "Document",
    "Element",
    "FrameAccessError",
    "Window",
    "find_field_by_label",
    "probe",
    "resolve",
    "resolve_page",
]
