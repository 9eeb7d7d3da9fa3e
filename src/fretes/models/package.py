"""Package models: records returned by the API and the commands sent to it."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from ..config import BRAZILIAN_STATES
from .enums import status_label


class Package(BaseModel):
    """
    A shippable item as stored by the shipping backend.

    Every field is optional because the API may omit any of them.
    The hired carrier, contracted price and contracted lead time are
    only set once the package went through the hire workflow.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    tracking_code: Optional[str] = Field(default=None, alias="codigo_rastreio")
    product: Optional[str] = Field(default=None, alias="produto")
    weight_kg: Optional[float] = Field(default=None, alias="peso_kg")
    destination_state: Optional[str] = Field(default=None, alias="estado_destino")
    status: Optional[str] = None

    # Hire
    carrier_id: Optional[str] = Field(default=None, alias="transportadora_id")
    contracted_price: Optional[str] = Field(default=None, alias="preco_contratado")
    contracted_days: Optional[int] = Field(default=None, alias="prazo_contratado_dias")

    # Timestamps
    created_at: Optional[datetime] = Field(default=None, alias="criado_em")
    updated_at: Optional[datetime] = Field(default=None, alias="atualizado_em")

    @computed_field
    @property
    def is_hired(self) -> bool:
        """A carrier has already been hired for this package."""
        return bool(self.carrier_id)

    @computed_field
    @property
    def can_be_quoted(self) -> bool:
        """Weight and destination are known, so a quote can be requested."""
        return bool(self.weight_kg) and bool(self.destination_state)

    @property
    def status_label(self) -> str:
        return status_label(self.status)

    def __str__(self) -> str:
        return f"{self.tracking_code or self.id} - {self.product or '?'} ({self.weight_kg or '?'}kg)"


class NewPackage(BaseModel):
    """Payload for creating a package."""

    model_config = ConfigDict(populate_by_name=True)

    product: str = Field(..., alias="produto", min_length=1)
    weight_kg: float = Field(..., alias="peso_kg", gt=0)
    destination_state: str = Field(..., alias="estado_destino")

    @field_validator("product")
    @classmethod
    def _strip_product(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("product must not be blank")
        return value

    @field_validator("destination_state")
    @classmethod
    def _check_state(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in BRAZILIAN_STATES:
            raise ValueError(f"unknown destination state: {value}")
        return value

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class HireRequest(BaseModel):
    """Payload binding a carrier, price and lead time to a package."""

    model_config = ConfigDict(populate_by_name=True)

    carrier_id: str = Field(..., alias="transportadora_id", min_length=1)
    price: str = Field(..., alias="preco", min_length=1)
    delivery_days: int = Field(..., alias="prazo_dias", gt=0)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)
