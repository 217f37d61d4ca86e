"""Core domain types shared across all cep_autofill modules."""

from cep_autofill.core.types import (
    AccessDenied,
    AddressRecord,
    FieldName,
    Found,
    LabelMap,
    ListenerBinding,
    NotFound,
    NotReady,
    OrchestratorState,
    ProviderResult,
    ResolvedFieldSet,
    TransientError,
)

__all__ = [
    "AccessDenied",
    "AddressRecord",
    "FieldName",
    "Found",
    "LabelMap",
    "ListenerBinding",
    "NotFound",
    "NotReady",
    "OrchestratorState",
    "ProviderResult",
    "ResolvedFieldSet",
    "TransientError",
]
