"""Pydantic request/response models for the autofill API."""

from pydantic import BaseModel, Field


class AddressResponse(BaseModel):
    code: str
    state: str
    city: str
    neighborhood: str
    street: str
    complement: str | None = None


class AutofillRequest(BaseModel):
    html: str = Field(..., min_length=1, description="Page markup containing the address form")
    cep: str = Field(..., min_length=8, max_length=9, description="CEP, with or without the hyphen")


class AutofillResponse(BaseModel):
    filled: bool
    html: str
