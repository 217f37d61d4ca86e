"""Shared test fixtures."""

import mlflow
import pytest

from cep_autofill.config import Settings
from cep_autofill.core.types import AddressRecord, FieldName, Found, LabelMap


@pytest.fixture(autouse=True)
def _disable_mlflow_tracing():
    """Disable MLflow tracing during tests so nothing is written to mlruns/."""
    mlflow.tracing.disable()
    yield
    mlflow.tracing.enable()


ADDRESS_FORM = """
<html><body>
<form>
  <label for="cep">CEP</label><input id="cep" type="text">
  <label for="rua">Rua</label><input id="rua" type="text">
  <label for="num">Número</label><input id="num" type="text" value="12">
  <label for="bairro">Bairro</label><input id="bairro" type="text">
  <label for="cidade">Cidade</label><input id="cidade" type="text">
  <label for="uf">Estado</label><input id="uf" type="text">
  <label for="comp">Complemento</label><input id="comp" type="text" value="apto 1">
</form>
</body></html>
"""


class FakeProvider:
    """Provider double that records calls and returns a canned result."""

    def __init__(self, name: str, result):
        self.name = name
        self.result = result
        self.calls: list[str] = []

    async def lookup(self, code: str):
        self.calls.append(code)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def labels() -> LabelMap:
    return LabelMap({
        FieldName.CEP: ("CEP", "Código Postal"),
        FieldName.STREET: ("Rua", "Street"),
        FieldName.NUMBER: ("Numero", "Number"),
        FieldName.NEIGHBORHOOD: ("Bairro",),
        FieldName.CITY: ("Cidade",),
        FieldName.STATE: ("Estado", "UF"),
        FieldName.COMPLEMENT: ("Complemento",),
    })


@pytest.fixture
def paulista() -> AddressRecord:
    return AddressRecord(
        code="01310930",
        state="SP",
        city="Sao Paulo",
        neighborhood="Bela Vista",
        street="Avenida Paulista",
        complement=None,
    )


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def found(paulista):
    return Found(paulista)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        tracing_enabled=False,
        scrub_on_tick=False,
        poll_interval=0.01,
        notification_duration=0.01,
    )


@pytest.fixture
def address_form() -> str:
    return ADDRESS_FORM
