"""cep-autofill: label-driven CEP address autofill."""

__version__ = "1.0.0"
