"""MLflow tracing, switched per call from the caller's settings.

Usage:

    configure_tracing(config)            # once, at CLI/API startup

    with start_span("cep_lookup", enabled=config.tracing_enabled, span_type="TOOL") as span:
        span.set_inputs({...})

Tracing is off by default. A disabled span is a no-op and never touches an
MLflow store; an enabled one writes to ``mlflow_tracking_uri``.
"""

import logging
from contextlib import contextmanager

import mlflow

from cep_autofill.config import Settings

logger = logging.getLogger(__name__)


def configure_tracing(config: Settings) -> bool:
    """Point MLflow at the configured store. Returns whether tracing is on."""
    if not config.tracing_enabled:
        mlflow.tracing.disable()
        return False
    mlflow.set_tracking_uri(config.mlflow_tracking_uri)
    mlflow.set_experiment(config.mlflow_experiment_name)
    mlflow.tracing.enable()
    logger.info("MLflow tracing enabled: %s", config.mlflow_tracking_uri)
    return True


@contextmanager
def start_span(name: str = "span", *, enabled: bool = False, **kwargs):
    """MLflow span when ``enabled``, otherwise a no-op span."""
    if not enabled:
        yield _NoOpSpan()
        return
    with mlflow.start_span(name=name, **kwargs) as span:
        yield span


class _NoOpSpan:
    """Stand-in span that accepts set_inputs/set_outputs without recording."""

    def set_inputs(self, inputs: dict) -> None:
        pass

    def set_outputs(self, outputs: dict) -> None:
        pass

    def set_attribute(self, key: str, value: object) -> None:
        pass
