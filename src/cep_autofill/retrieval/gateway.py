"""Address Provider Gateway: ordered fallback over CEP providers.

Providers are tried in priority order. The first ``Found`` wins; ``NotFound``
and ``TransientError`` move on to the next provider, and a failing provider
is never retried. Nothing raises past ``lookup``: the worst outcome is None.
"""

import logging
import re

from cep_autofill.config import Settings, settings as default_settings
from cep_autofill.core.normalize import digits_only
from cep_autofill.core.types import AddressRecord, Found, NotFound, TransientError
from cep_autofill.observability.tracing import start_span
from cep_autofill.retrieval.providers import AddressProvider, build_providers

logger = logging.getLogger(__name__)

CEP_PATTERN = re.compile(r"^\d{8}$")


class InvalidCEPError(ValueError):
    """The value does not reduce to exactly eight digits."""


def clean_cep(raw: str, strict: bool = False) -> str | None:
    """Strip non-digits; return the 8-digit code, or None (raise when strict)."""
    digits = digits_only(raw)
    if CEP_PATTERN.match(digits):
        return digits
    if strict:
        raise InvalidCEPError(f"CEP must have 8 digits, got {raw!r}")
    return None


class AddressGateway:
    """Query providers in order until one finds the code."""

    def __init__(self, providers: list[AddressProvider], config: Settings | None = None) -> None:
        self.providers = list(providers)
        self.config = config or default_settings

    @classmethod
    def from_settings(cls, config: Settings | None = None, **kwargs) -> "AddressGateway":
        config = config or default_settings
        return cls(build_providers(config.providers, timeout=config.provider_timeout, **kwargs), config)

    async def lookup(self, code: str) -> AddressRecord | None:
        if not isinstance(code, str) or not CEP_PATTERN.match(code):
            logger.debug("Rejected malformed CEP %r", code)
            return None

        with start_span("cep_lookup", enabled=self.config.tracing_enabled, span_type="TOOL") as span:
            span.set_inputs({"cep": code})
            record = await self._first_found(code)
            span.set_outputs(record.to_dict() if record else {"found": False})
        return record

    async def _first_found(self, code: str) -> AddressRecord | None:
        for provider in self.providers:
            try:
                result = await provider.lookup(code)
            except Exception as e:
                result = TransientError(f"unhandled provider error: {e!r}")

            if isinstance(result, Found):
                logger.info(
                    "CEP %s found by %s", code, provider.name,
                    extra={"cep": code, "provider": provider.name},
                )
                return result.record
            if isinstance(result, NotFound):
                logger.info(
                    "CEP %s not found by %s (%s)", code, provider.name, result.reason,
                    extra={"cep": code, "provider": provider.name},
                )
            else:
                logger.warning(
                    "Provider %s failed for CEP %s: %s", provider.name, code, result.reason,
                    extra={"cep": code, "provider": provider.name},
                )

        logger.info("No provider could resolve CEP %s", code, extra={"cep": code})
        return None
