"""Tests for diacritic stripping and digit extraction."""

from cep_autofill.core.normalize import digits_only, normalize


class TestNormalize:
    def test_strips_accents(self):
        assert normalize("São Paulo") == "Sao Paulo"

    def test_mixed_diacritics(self):
        assert normalize("Ribeirão Preto — Jardim Irajá") == "Ribeirao Preto — Jardim Iraja"
        assert normalize("Praça da Sé, Niterói, Açaí") == "Praca da Se, Niteroi, Acai"

    def test_plain_ascii_unchanged(self):
        assert normalize("Avenida Paulista") == "Avenida Paulista"

    def test_idempotent(self):
        for text in ("São Paulo", "Número", "ÁÉÍÓÚ çãõ", ""):
            assert normalize(normalize(text)) == normalize(text)

    def test_non_string_maps_to_empty(self):
        assert normalize(None) == ""
        assert normalize(123) == ""
        assert normalize(["São"]) == ""

    def test_empty_string(self):
        assert normalize("") == ""


class TestDigitsOnly:
    def test_hyphenated_cep(self):
        assert digits_only("01310-930") == "01310930"

    def test_spaces_and_dots(self):
        assert digits_only(" 01.310 930 ") == "01310930"

    def test_non_string(self):
        assert digits_only(None) == ""
