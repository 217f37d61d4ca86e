"""One-shot autofill of a static HTML page.

Runs the same orchestrator a live session uses (load labels, one tick, then
a simulated keystroke into the bound CEP field) and returns the resulting
markup.
"""

import logging
from pathlib import Path

from cep_autofill.config import Settings, settings as default_settings
from cep_autofill.core.types import OrchestratorState
from cep_autofill.dom.page import Window
from cep_autofill.pipeline.orchestrator import AutofillOrchestrator, LabelSource
from cep_autofill.retrieval.gateway import AddressGateway, clean_cep

logger = logging.getLogger(__name__)


def _log_confirmation(window: Window, text: str, duration: float) -> None:
    # headless output never carries the banner
    logger.info("Autofill confirmed in %s", window.name)


async def autofill_html(
    html: str,
    cep: str,
    *,
    base_path: Path | None = None,
    gateway: AddressGateway | None = None,
    label_source: LabelSource | None = None,
    config: Settings | None = None,
) -> tuple[bool, str]:
    """Fill the address form found in ``html`` for ``cep``.

    Returns (filled, html). ``filled`` is False when no form was found, the
    code is malformed, or no provider knew the code.
    """
    config = config or default_settings
    window = Window.from_html(html, base_path=base_path)
    orchestrator = AutofillOrchestrator(
        window, gateway=gateway, label_source=label_source,
        notifier=_log_confirmation, config=config,
    )
    await orchestrator.init()
    await orchestrator.tick()

    filled = False
    if orchestrator.state is OrchestratorState.BOUND and clean_cep(cep) is not None:
        binding = orchestrator.binding
        await binding.element.type(cep)
        filled = bool(orchestrator.last_fill)
    else:
        logger.warning("No address form bound (state=%s)", orchestrator.state.value)

    await orchestrator.dispose()
    return filled, window.to_html()
