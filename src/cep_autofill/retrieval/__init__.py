"""Label translations and CEP address providers."""

from cep_autofill.retrieval.gateway import AddressGateway, InvalidCEPError, clean_cep
from cep_autofill.retrieval.labels import load_label_map, parse_label_document
from cep_autofill.retrieval.providers import AddressProvider, HttpProvider, build_providers

__all__ = [
    "AddressGateway",
    "AddressProvider",
    "HttpProvider",
    "InvalidCEPError",
    "build_providers",
    "clean_cep",
    "load_label_map",
    "parse_label_document",
]
