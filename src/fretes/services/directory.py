"""Package directory: the session's view of the backend's packages."""

import logging
from datetime import datetime
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..api import ShippingApiClient
from ..errors import ShippingError, ValidationError
from ..models import NewPackage, Package, PackageStatus

logger = logging.getLogger(__name__)


def _describe_validation_error(error: PydanticValidationError) -> str:
    parts = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item.get("loc", ()))
        parts.append(f"{field}: {item.get('msg')}" if field else str(item.get("msg")))
    return "Dados inválidos - " + "; ".join(parts)


class PackageDirectory:
    """
    Holds the full package list in server order.

    Mutations are never patched locally: after every create, status
    update or hire the whole list is fetched again, so the view always
    mirrors the backend.
    """

    def __init__(self, client: ShippingApiClient):
        self.client = client
        self._packages: list[Package] = []
        self.refreshed_at: Optional[datetime] = None

    @property
    def packages(self) -> list[Package]:
        return list(self._packages)

    def __len__(self) -> int:
        return len(self._packages)

    async def refresh(self) -> list[Package]:
        """Replace the local list with the backend's. Raises on failure."""
        self._packages = await self.client.list_packages()
        self.refreshed_at = datetime.now()
        logger.debug(f"Package directory refreshed: {len(self._packages)} packages")
        return self.packages

    async def refresh_after_mutation(self) -> None:
        """Refresh after a successful mutation; a failure here is only logged."""
        try:
            await self.refresh()
        except ShippingError as e:
            logger.warning(f"Package list refresh failed after update: {e.message}")

    def get(self, package_id: Optional[str]) -> Optional[Package]:
        if not package_id:
            return None
        return next((p for p in self._packages if p.id == package_id), None)

    def hireable(self) -> list[Package]:
        """Packages that have no carrier hired yet."""
        return [p for p in self._packages if not p.is_hired]

    # ==========================================================================
    # Lookups
    # ==========================================================================

    async def fetch_detail(self, package_id: str) -> Optional[Package]:
        return await self.client.get_package(package_id)

    async def track(self, tracking_code: str) -> Optional[Package]:
        """Find a package by tracking code; None when it does not exist."""
        code = (tracking_code or "").strip()
        if not code:
            raise ValidationError("Por favor, informe o código de rastreamento.")
        return await self.client.get_package_by_tracking(code)

    # ==========================================================================
    # Mutations
    # ==========================================================================

    async def create_package(
        self,
        product: str,
        weight_kg: float,
        destination_state: str,
    ) -> Optional[Package]:
        try:
            new_package = NewPackage(
                product=product,
                weight_kg=weight_kg,
                destination_state=destination_state,
            )
        except PydanticValidationError as e:
            raise ValidationError(_describe_validation_error(e)) from e

        created = await self.client.create_package(new_package)
        logger.info(f"Package created: {new_package.product} -> {new_package.destination_state}")
        await self.refresh_after_mutation()
        return created

    async def update_status(
        self,
        package_id: str,
        status: Union[PackageStatus, str],
    ) -> Optional[Package]:
        """Set any status on a package; transitions are not checked here."""
        if not package_id:
            raise ValidationError("Por favor, selecione um pacote.")
        try:
            new_status = PackageStatus(status)
        except ValueError as e:
            raise ValidationError(f"Status inválido: {status}") from e

        updated = await self.client.update_status(package_id, new_status)
        logger.info(f"Package {package_id} status set to {new_status.value}")
        await self.refresh_after_mutation()
        return updated
