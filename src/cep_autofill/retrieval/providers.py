"""Address provider adapters.

Every provider exposes ``await provider.lookup(code)`` returning a
``ProviderResult``, so the gateway never branches on provider identity.
Public CEP services differ only in URL, payload keys and how they say "not
found", which ``ProviderSpec`` captures as data; ``HttpProvider`` is the
single adapter that interprets it.
"""

import asyncio
import logging
import time
from typing import Protocol

import httpx

from cep_autofill.config import ProviderSpec
from cep_autofill.core.normalize import digits_only, normalize
from cep_autofill.core.types import (
    AddressRecord,
    Found,
    NotFound,
    ProviderResult,
    TransientError,
)

logger = logging.getLogger(__name__)

# record fields that must carry text for a payload to count as found
REQUIRED_VALUES = ("state", "city")
# record fields whose key must exist, though the value may be empty
REQUIRED_KEYS = ("street", "neighborhood")

ANY_VALUE = "*"


class AddressProvider(Protocol):
    name: str

    async def lookup(self, code: str) -> ProviderResult: ...


def _matches_marker(payload: dict, marker: dict[str, object]) -> bool:
    for key, expected in marker.items():
        if key not in payload:
            return False
        actual = payload[key]
        if expected == ANY_VALUE:
            if not actual:
                return False
        elif actual != expected:
            return False
    return True


def map_payload(spec: ProviderSpec, payload: dict, code: str) -> AddressRecord | None:
    """Map a provider payload onto the canonical record, or None if incomplete."""
    def raw(field_name: str) -> object:
        key = spec.field_map.get(field_name)
        return payload.get(key) if key else None

    for name in REQUIRED_VALUES:
        if not normalize(raw(name)).strip():
            return None
    for name in REQUIRED_KEYS:
        key = spec.field_map.get(name)
        if not key or key not in payload:
            return None

    return AddressRecord(
        code=digits_only(raw("code")) or code,
        state=normalize(raw("state")).strip(),
        city=normalize(raw("city")).strip(),
        neighborhood=normalize(raw("neighborhood")).strip(),
        street=normalize(raw("street")).strip(),
        complement=normalize(raw("complement")).strip() or None,
    )


class HttpProvider:
    """Generic JSON-over-HTTP provider driven by a ProviderSpec."""

    def __init__(
        self,
        spec: ProviderSpec,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.spec = spec
        self.name = spec.name
        self.timeout = spec.timeout or timeout
        self._transport = transport

    def __repr__(self) -> str:
        return f"<HttpProvider {self.name}>"

    async def lookup(self, code: str) -> ProviderResult:
        url = self.spec.url_template.format(cep=code)
        start = time.monotonic()
        try:
            # httpx timeouts are per phase; the deadline covers the whole exchange
            async with asyncio.timeout(self.timeout):
                async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                    resp = await client.get(url, headers={"Accept": "application/json"})
        except (httpx.TimeoutException, TimeoutError):
            return TransientError(f"timeout after {self.timeout}s")
        except httpx.HTTPError as e:
            return TransientError(f"network error: {e}")

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.debug(
            "%s answered %d for %s", self.name, resp.status_code, code,
            extra={"provider": self.name, "cep": code, "duration_ms": duration_ms},
        )

        if resp.status_code in self.spec.not_found_statuses:
            return NotFound(f"HTTP {resp.status_code}")
        if not resp.is_success:
            return TransientError(f"HTTP {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError:
            return TransientError("malformed payload: invalid JSON")
        if not isinstance(payload, dict):
            return TransientError("malformed payload: expected an object")

        for marker in self.spec.not_found_markers:
            if _matches_marker(payload, marker):
                return NotFound(f"marker {marker}")

        record = map_payload(self.spec, payload, code)
        if record is None:
            return TransientError("malformed payload: missing address fields")
        return Found(record)


def build_providers(
    specs: list[ProviderSpec],
    timeout: float = 5.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[HttpProvider]:
    """Instantiate adapters in priority order."""
    return [HttpProvider(spec, timeout=timeout, transport=transport) for spec in specs]
