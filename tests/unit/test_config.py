"""Tests for settings defaults and validation."""

from cep_autofill.config import Settings
from cep_autofill.core.types import FieldName


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert [p.name for p in s.providers] == ["viacep", "brasilapi", "opencep"]
        assert s.required_fields == [FieldName.CEP, FieldName.STREET, FieldName.NUMBER]
        assert s.number_overrides == {"14027250": "780"}
        assert s.clear_on_failure is False
        assert s.notification_text == "Feito!"

    def test_cep_always_required(self):
        s = Settings(required_fields=[FieldName.STREET])
        assert s.required_fields == [FieldName.CEP, FieldName.STREET]

    def test_suffixes_lowercased(self):
        s = Settings(scrub_email_suffixes=["@Guest.Booking.COM", "  "])
        assert s.scrub_email_suffixes == ["@guest.booking.com"]

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CEP_AUTOFILL_POLL_INTERVAL", "0.5")
        monkeypatch.setenv("CEP_AUTOFILL_CLEAR_ON_FAILURE", "true")
        monkeypatch.setenv("CEP_AUTOFILL_NUMBER_OVERRIDES", '{"01310930": "1578"}')
        s = Settings()
        assert s.poll_interval == 0.5
        assert s.clear_on_failure is True
        assert s.number_overrides == {"01310930": "1578"}
