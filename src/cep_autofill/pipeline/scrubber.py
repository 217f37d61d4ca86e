"""Post-fill scrubbing of partner-relay contact data.

Booking channels prefill guest forms with relay addresses and
internationally formatted phone numbers. After an autofill, and on every
tick, those values are cleaned across the window and every readable frame:

  - phone-like values ("+55 16 99999 0000") lose the +55 prefix, spaces and '+'
  - emails ending in a relay suffix (@guest.booking.com, ...) are cleared
"""

import logging
import re

from cep_autofill.core.types import AccessDenied
from cep_autofill.dom.page import Element, Window
from cep_autofill.dom.resolver import probe

logger = logging.getLogger(__name__)

PHONE_VALUE = re.compile(r"^[\d\s+]+$")
COUNTRY_PREFIX = re.compile(r"^\+55")


def _input_type(element: Element) -> str:
    return str(element.tag.get("type", "text")).lower()


def _is_phone_like(element: Element) -> bool:
    return _input_type(element) in ("tel", "text") or element.tag.get("inputmode") == "numeric"


def _is_email_like(element: Element) -> bool:
    return _input_type(element) in ("email", "text")


def clean_phone(value: str) -> str:
    """'+55 16 99999 0000' → '16999990000'. Non-phone values are returned as-is."""
    if not value or not PHONE_VALUE.match(value):
        return value
    return COUNTRY_PREFIX.sub("", value).replace(" ", "").replace("+", "")


def scrub_window(window: Window, email_suffixes: list[str]) -> int:
    """Scrub one window and its readable frames. Returns how many inputs changed."""
    changed = 0
    for scope in (window, *window.iter_frames()):
        document = probe(scope)
        if isinstance(document, AccessDenied):
            continue
        for element in document.text_controls():
            if element.tag.name != "input":
                continue
            value = element.value
            if not value:
                continue
            if _is_phone_like(element):
                cleaned = clean_phone(value)
                if cleaned != value:
                    element.value = cleaned
                    changed += 1
                    logger.info("Phone cleaned: %r -> %r", value, cleaned, extra={"scope": scope.name})
                    continue
            if _is_email_like(element) and value.lower().endswith(tuple(email_suffixes)):
                element.value = ""
                changed += 1
                logger.info("Relay email cleared: %r", value, extra={"scope": scope.name})
    return changed
