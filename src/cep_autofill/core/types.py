"""Domain types for the cep-autofill orchestrator.

All shared dataclasses and result types live here to prevent circular
imports and establish a single source of truth for the domain model.
Every other module imports from here.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from cep_autofill.dom.page import Element, Window


class FieldName(str, Enum):
    """Logical address fields the resolver knows how to find."""

    CEP = "cep"
    STREET = "street"
    NEIGHBORHOOD = "neighborhood"
    CITY = "city"
    STATE = "state"
    COMPLEMENT = "complement"
    NUMBER = "number"


# ---------------------------------------------------------------------------
# Label translations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LabelMap:
    """Acceptable label strings per field, in preference order.

    Immutable once built. An empty map means "translations not loaded".
    """

    entries: Mapping[FieldName, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {FieldName(k): tuple(v) for k, v in self.entries.items()}
        object.__setattr__(self, "entries", MappingProxyType(frozen))

    def get(self, name: FieldName) -> tuple[str, ...]:
        return self.entries.get(name, ())

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __iter__(self) -> Iterator[FieldName]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not any(self.entries.values())


# ---------------------------------------------------------------------------
# Resolution results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NotReady:
    """A scope could not be resolved yet. Expected, never an error."""

    reason: str


@dataclass(frozen=True)
class AccessDenied:
    """A frame's document could not be read (cross-origin)."""

    scope: str
    reason: str = ""


@dataclass
class ResolvedFieldSet:
    """Live form controls found in exactly one scope."""

    fields: dict[FieldName, "Element"]
    scope: "Window"

    def get(self, name: FieldName) -> "Element | None":
        return self.fields.get(name)

    @property
    def cep(self) -> "Element | None":
        return self.fields.get(FieldName.CEP)

    def missing(self, required: "list[FieldName] | tuple[FieldName, ...]") -> list[FieldName]:
        return [name for name in required if name not in self.fields]

    def is_usable(self, required: "list[FieldName] | tuple[FieldName, ...]") -> bool:
        return self.cep is not None and not self.missing(required)


# ---------------------------------------------------------------------------
# Address lookup
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AddressRecord:
    """Canonical address for a CEP. Text is already diacritic-free."""

    code: str
    state: str
    city: str
    neighborhood: str
    street: str
    complement: str | None = None

    def value_for(self, name: FieldName) -> str | None:
        """Record value that belongs in a form field (None if the record has none)."""
        return {
            FieldName.CEP: self.code,
            FieldName.STATE: self.state,
            FieldName.CITY: self.city,
            FieldName.NEIGHBORHOOD: self.neighborhood,
            FieldName.STREET: self.street,
            FieldName.COMPLEMENT: self.complement,
        }.get(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "state": self.state,
            "city": self.city,
            "neighborhood": self.neighborhood,
            "street": self.street,
            "complement": self.complement,
        }


@dataclass(frozen=True)
class Found:
    record: AddressRecord


@dataclass(frozen=True)
class NotFound:
    reason: str = ""


@dataclass(frozen=True)
class TransientError:
    reason: str


ProviderResult = Found | NotFound | TransientError


# ---------------------------------------------------------------------------
# Orchestrator state
# ---------------------------------------------------------------------------

class OrchestratorState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    IDLE = "idle"
    BOUND = "bound"
    DISPOSED = "disposed"


@dataclass
class ListenerBinding:
    """The single input handler attached to a resolved code field."""

    element: "Element"
    handler: Callable[..., Any]
    fields: ResolvedFieldSet
    event: str = "input"
