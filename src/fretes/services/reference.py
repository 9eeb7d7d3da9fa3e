"""Reference data loader: carriers and destination states."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from pydantic import ValidationError as PydanticValidationError

from ..api import ShippingApiClient
from ..errors import ShippingError
from ..models import Carrier, State

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ReferenceDataLoader:
    """
    Loads carriers and destination states once per session.

    Both lists are fetched in parallel and are static afterwards; there is
    no refresh path. A failed fetch is logged and leaves that list empty so
    the rest of the client keeps working.
    """

    def __init__(self, client: ShippingApiClient):
        self.client = client
        self.carriers: list[Carrier] = []
        self.states: list[State] = []
        self.loaded = False

    async def load(self) -> "ReferenceDataLoader":
        """Fetch carriers and states concurrently; no-op once loaded."""
        if self.loaded:
            return self

        self.carriers, self.states = await asyncio.gather(
            self._fetch("carriers", self.client.list_carriers),
            self._fetch("states", self.client.list_states),
        )
        self.loaded = True
        logger.debug(f"Loaded {len(self.carriers)} carriers and {len(self.states)} states")
        return self

    async def _fetch(self, name: str, fetcher: Callable[[], Awaitable[list[T]]]) -> list[T]:
        try:
            return await fetcher()
        except (ShippingError, PydanticValidationError) as e:
            logger.warning(f"Could not load {name}, continuing with an empty list: {e}")
            return []

    def carrier_by_id(self, carrier_id: Optional[str]) -> Optional[Carrier]:
        if not carrier_id:
            return None
        return next((c for c in self.carriers if c.id == carrier_id), None)

    def carrier_name(self, carrier_id: Optional[str]) -> str:
        """Display name for a carrier id, falling back to the id itself."""
        carrier = self.carrier_by_id(carrier_id)
        if carrier and carrier.name:
            return carrier.name
        return carrier_id or "N/A"

    @property
    def state_codes(self) -> list[str]:
        return [s.code for s in self.states if s.code]
