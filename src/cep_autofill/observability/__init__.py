"""Structured logging and MLflow tracing helpers."""

from cep_autofill.observability.logging import get_session_id, session_scope, setup_logging
from cep_autofill.observability.tracing import configure_tracing, start_span

__all__ = ["configure_tracing", "get_session_id", "session_scope", "setup_logging", "start_span"]
