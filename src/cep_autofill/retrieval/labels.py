"""Label translation loading.

The translation document maps each logical field to the label captions it
may appear under, in any language the host pages use:

    {"cep": ["CEP", "Código Postal", "Zip code"], "street": ["Rua", "Street"], ...}

Older documents use Portuguese keys (``rua``, ``bairro``, ...); those are
accepted as aliases. A failed load never raises. It yields an empty map,
which the resolver reads as "not ready".
"""

import json
import logging
from pathlib import Path

import httpx
from pydantic import TypeAdapter, ValidationError

from cep_autofill.core.types import FieldName, LabelMap

logger = logging.getLogger(__name__)

KEY_ALIASES = {
    "rua": FieldName.STREET,
    "logradouro": FieldName.STREET,
    "bairro": FieldName.NEIGHBORHOOD,
    "cidade": FieldName.CITY,
    "estado": FieldName.STATE,
    "complemento": FieldName.COMPLEMENT,
    "numero": FieldName.NUMBER,
}

_document_adapter = TypeAdapter(dict[str, list[str]])


def parse_label_document(data: object) -> LabelMap:
    """Validate a decoded translation document and build a LabelMap.

    Raises:
        ValidationError: if the document is not a mapping of string lists.
    """
    raw = _document_adapter.validate_python(data)
    entries: dict[FieldName, list[str]] = {}
    for key, labels in raw.items():
        normalized_key = key.strip().lower()
        try:
            name = KEY_ALIASES.get(normalized_key) or FieldName(normalized_key)
        except ValueError:
            logger.warning("Ignoring unknown label key: %s", key)
            continue
        merged = entries.setdefault(name, [])
        merged.extend(label for label in labels if label.strip() and label not in merged)
    return LabelMap({name: tuple(labels) for name, labels in entries.items()})


async def fetch_label_map(url: str, timeout: float = 10.0) -> LabelMap:
    """Fetch and parse the translation document. Empty map on any failure."""
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            resp = await client.get(url)
            resp.raise_for_status()
            data = resp.json()
        label_map = parse_label_document(data)
    except (httpx.HTTPError, ValueError, ValidationError) as e:
        logger.error("Failed to load label translations from %s: %s", url, e)
        return LabelMap()

    logger.info("Loaded label translations for %d fields", len(label_map))
    return label_map


def read_label_map(path: Path) -> LabelMap:
    """Read a translation document from disk. Empty map on any failure."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return parse_label_document(data)
    except (OSError, ValueError, ValidationError) as e:
        logger.error("Failed to read label translations from %s: %s", path, e)
        return LabelMap()


async def load_label_map(source: str, timeout: float = 10.0) -> LabelMap:
    """Load translations from an http(s) URL or a local file path."""
    if source.startswith(("http://", "https://")):
        return await fetch_label_map(source, timeout=timeout)
    return read_label_map(Path(source.removeprefix("file://")))
