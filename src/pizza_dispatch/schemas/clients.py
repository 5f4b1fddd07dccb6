"""Client API schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models.domain import ClientData


class ClientModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    full_name: str
    street_and_number: str
    neighborhood: str
    phone: Optional[str] = None


class ClientRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    full_name: str = Field(..., min_length=1)
    street_and_number: str = Field(..., min_length=1)
    neighborhood: str = Field(..., min_length=1)
    phone: Optional[str] = None

    def to_domain(self) -> ClientData:
        return ClientData(
            full_name=self.full_name,
            street_and_number=self.street_and_number,
            neighborhood=self.neighborhood,
            phone=self.phone,
        )
