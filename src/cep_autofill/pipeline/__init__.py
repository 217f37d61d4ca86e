"""Autofill pipeline: orchestrator state machine, scrubbing, headless runs."""

from cep_autofill.pipeline.headless import autofill_html
from cep_autofill.pipeline.orchestrator import AutofillOrchestrator
from cep_autofill.pipeline.scrubber import scrub_window

__all__ = ["AutofillOrchestrator", "autofill_html", "scrub_window"]
