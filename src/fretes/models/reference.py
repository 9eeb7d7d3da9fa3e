"""Reference data: carriers, destination states and freight quotes."""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Carrier(BaseModel):
    """A company that can transport packages."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: Optional[str] = Field(default=None, alias="nome")
    created_at: Optional[datetime] = Field(default=None, alias="criado_em")

    def __str__(self) -> str:
        return self.name or self.id or "?"


class State(BaseModel):
    """A destination state (UF)."""

    model_config = ConfigDict(populate_by_name=True)

    code: Optional[str] = Field(default=None, alias="codigo")
    name: Optional[str] = Field(default=None, alias="nome")
    region_name: Optional[str] = Field(default=None, alias="nome_regiao")


class Quote(BaseModel):
    """
    Price and lead time estimate from one carrier.

    Quotes are computed per (destination state, weight) query and never
    stored. The service identifies the carrier by display name; a carrier
    id is only present if the backend chooses to send one.
    """

    model_config = ConfigDict(populate_by_name=True)

    carrier_name: Optional[str] = Field(default=None, alias="transportadora")
    estimated_price: Optional[float] = Field(default=None, alias="preco_estimado")
    estimated_days: Optional[int] = Field(default=None, alias="prazo_estimado_dias")
    carrier_id: Optional[str] = Field(default=None, alias="transportadora_id")

    @property
    def price_text(self) -> str:
        """Estimated price as decimal text with two places, e.g. "23.50"."""
        if self.estimated_price is None:
            return ""
        value = Decimal(str(self.estimated_price)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        return f"{value}"

    @property
    def is_bookable(self) -> bool:
        """Price and a positive lead time are present, so a hire can be sent."""
        return (
            self.estimated_price is not None
            and self.estimated_days is not None
            and self.estimated_days > 0
        )

    def matches(self, carrier: Carrier) -> bool:
        """Check whether this quote belongs to the given carrier.

        Uses the carrier id when the quote carries one, otherwise the
        display name. Two carriers sharing a name are indistinguishable
        by name.
        """
        if self.carrier_id:
            return self.carrier_id == carrier.id
        return self.carrier_name is not None and self.carrier_name == carrier.name
