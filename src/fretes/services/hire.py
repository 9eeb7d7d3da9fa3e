"""
Hire Workflow

Ties together a chosen package, a chosen carrier and the quote service.
A hire command is only sent once a quote for exactly that pairing has
been resolved.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from ..api import ShippingApiClient
from ..config import settings
from ..errors import ShippingError, ValidationError
from ..models import Carrier, HireRequest, Package, Quote
from .directory import PackageDirectory

logger = logging.getLogger(__name__)


def find_carrier_quote(quotes: Sequence[Quote], carrier: Carrier) -> Optional[Quote]:
    """
    Pick the quote that belongs to a carrier.

    The quote service names carriers by display name, so this is a name
    match unless the quote also carries an id. With duplicated names the
    first quote in response order wins.
    """
    return next((q for q in quotes if q.matches(carrier)), None)


class HireWorkflow:
    """
    Stateful package/carrier/quote reconciliation.

    Every selection change bumps a generation counter. A quote lookup
    remembers the generation it was issued under, and its result is
    dropped if the selection changed while it was in flight, so the
    last request wins regardless of arrival order. With
    ``discard_stale_quotes=False`` the last response to arrive wins
    instead, even when it belongs to an old selection.
    """

    def __init__(
        self,
        client: ShippingApiClient,
        directory: PackageDirectory,
        carriers: Sequence[Carrier],
        discard_stale_quotes: Optional[bool] = None,
    ):
        self.client = client
        self.directory = directory
        self.carriers = list(carriers)
        self.discard_stale_quotes = (
            settings.DISCARD_STALE_QUOTES if discard_stale_quotes is None else discard_stale_quotes
        )

        self.selected_package_id: Optional[str] = None
        self.selected_carrier_id: Optional[str] = None
        self.resolved_quote: Optional[Quote] = None
        self.submitting = False

        self._generation = 0
        self._lookups_in_flight = 0

    # ==========================================================================
    # Derived state
    # ==========================================================================

    @property
    def quote_loading(self) -> bool:
        return self._lookups_in_flight > 0

    @property
    def candidates(self) -> list[Package]:
        """Packages offered for hire: those without a hired carrier."""
        return self.directory.hireable()

    @property
    def selected_package(self) -> Optional[Package]:
        return self.directory.get(self.selected_package_id)

    @property
    def selected_carrier(self) -> Optional[Carrier]:
        return self._carrier(self.selected_carrier_id)

    @property
    def can_submit(self) -> bool:
        return (
            self.selected_package_id is not None
            and self.selected_carrier_id is not None
            and self.resolved_quote is not None
        )

    def _carrier(self, carrier_id: Optional[str]) -> Optional[Carrier]:
        if not carrier_id:
            return None
        return next((c for c in self.carriers if c.id == carrier_id), None)

    # ==========================================================================
    # Selection
    # ==========================================================================

    async def select_package(self, package_id: Optional[str]) -> Optional[Quote]:
        """Select a package (None clears it) and resolve a quote if possible."""
        if package_id and not any(p.id == package_id for p in self.candidates):
            raise ValidationError("Pacote não disponível para contratação.")
        self.selected_package_id = package_id or None
        return await self._selection_changed()

    async def select_carrier(self, carrier_id: Optional[str]) -> Optional[Quote]:
        """Select a carrier (None clears it) and resolve a quote if possible."""
        if carrier_id and self._carrier(carrier_id) is None:
            raise ValidationError("Transportadora desconhecida.")
        self.selected_carrier_id = carrier_id or None
        return await self._selection_changed()

    async def _selection_changed(self) -> Optional[Quote]:
        self._generation += 1
        self.resolved_quote = None

        package = self.selected_package
        carrier = self.selected_carrier
        if package is None or carrier is None:
            return None
        return await self.resolve_quote(package, carrier)

    def reset(self) -> None:
        """Clear all selections; lookups still in flight become stale."""
        self._generation += 1
        self.selected_package_id = None
        self.selected_carrier_id = None
        self.resolved_quote = None

    # ==========================================================================
    # Quote resolution
    # ==========================================================================

    @contextmanager
    def _quote_lookup(self) -> Iterator[None]:
        self._lookups_in_flight += 1
        try:
            yield
        finally:
            self._lookups_in_flight -= 1

    async def resolve_quote(self, package: Package, carrier: Carrier) -> Optional[Quote]:
        """
        Ask the quote service for this package and bind the carrier's quote.

        Args:
            package: Package to quote; needs weight and destination state
            carrier: Carrier whose quote should be bound

        Returns:
            The matched quote, or None (no match, quote without price or
            lead time, lookup failure, stale response, or nothing to quote)
        """
        if not package.can_be_quoted:
            return None

        generation = self._generation
        with self._quote_lookup():
            try:
                quotes = await self.client.list_quotes(package.destination_state, package.weight_kg)
            except ShippingError as e:
                logger.warning(f"Quote lookup failed for package {package.id}: {e.message}")
                return None
            except PydanticValidationError as e:
                logger.warning(f"Malformed quote response for package {package.id}: {e}")
                return None

        if self.discard_stale_quotes and generation != self._generation:
            logger.debug(
                f"Discarding stale quote response for package {package.id} / carrier {carrier.id}"
            )
            return None

        quote = find_carrier_quote(quotes, carrier)
        if quote is None:
            logger.info(f"No quote from {carrier.name} for package {package.id}")
            return None
        if not quote.is_bookable:
            logger.info(f"Quote from {carrier.name} for package {package.id} has no usable price or lead time")
            return None

        self.resolved_quote = quote
        return quote

    # ==========================================================================
    # Submission
    # ==========================================================================

    async def submit(self) -> Optional[Package]:
        """
        Hire the selected carrier at the resolved quote's price and lead time.

        On success the selection is cleared and the package directory is
        refreshed. On failure the selection is kept so the user can retry.

        Raises:
            ValidationError: Package, carrier or quote missing; nothing is sent
            RequestError: The API rejected the hire
            ConnectivityError: The API could not be reached
        """
        if not self.can_submit:
            raise ValidationError("Por favor, selecione um pacote e uma transportadora.")

        package_id = self.selected_package_id
        quote = self.resolved_quote
        try:
            hire = HireRequest(
                carrier_id=self.selected_carrier_id,
                price=quote.price_text,
                delivery_days=quote.estimated_days,
            )
        except PydanticValidationError as e:
            raise ValidationError("Cotação incompleta, não é possível contratar.") from e

        self.submitting = True
        try:
            hired = await self.client.hire_carrier(package_id, hire)
        finally:
            self.submitting = False

        logger.info(
            f"Hired carrier {hire.carrier_id} for package {package_id}: "
            f"R$ {hire.price}, {hire.delivery_days} days"
        )
        self.reset()
        await self.directory.refresh_after_mutation()
        return hired
