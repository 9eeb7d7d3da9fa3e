"""Free-form freight quote lookup."""

import logging

from ..api import ShippingApiClient
from ..config import BRAZILIAN_STATES
from ..errors import ValidationError
from ..models import Quote

logger = logging.getLogger(__name__)


def normalize_state(destination_state: str) -> str:
    """Upper-cased state code without surrounding whitespace."""
    return (destination_state or "").strip().upper()


class QuoteLookup:
    """Lists every carrier's quote for a destination state and weight."""

    def __init__(self, client: ShippingApiClient):
        self.client = client

    async def lookup(self, destination_state: str, weight_kg: float) -> list[Quote]:
        state = normalize_state(destination_state)
        if state not in BRAZILIAN_STATES:
            raise ValidationError(f"Estado de destino inválido: {destination_state}")
        if weight_kg is None or weight_kg <= 0:
            raise ValidationError("O peso deve ser maior que zero.")

        quotes = await self.client.list_quotes(state, weight_kg)
        if not quotes:
            logger.info(f"No quotes for {state} / {weight_kg}kg")
        return quotes
