"""Text normalization shared by label matching and provider mapping."""

import re
import unicodedata

_NON_DIGIT = re.compile(r"\D")


def normalize(text: object) -> str:
    """Strip diacritics: 'São Paulo' → 'Sao Paulo'.

    Total: anything that is not a non-empty string maps to ''.
    """
    if not isinstance(text, str) or not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def digits_only(value: object) -> str:
    """'01310-930' → '01310930'. Non-strings map to ''."""
    if not isinstance(value, str):
        return ""
    return _NON_DIGIT.sub("", value)
