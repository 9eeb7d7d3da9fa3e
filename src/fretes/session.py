"""Admin session: one client, its reference data, packages and workflows."""

import logging
from typing import Optional

from .api import ShippingApiClient
from .errors import ShippingError
from .services import HireWorkflow, PackageDirectory, QuoteLookup, ReferenceDataLoader

logger = logging.getLogger(__name__)


class AdminSession:
    """
    Owns every piece of session state; nothing is process-global.

    Startup order: reference data (carriers and states in parallel),
    then the package list.
    """

    def __init__(
        self,
        client: Optional[ShippingApiClient] = None,
        base_url: Optional[str] = None,
    ):
        self.client = client or ShippingApiClient(base_url=base_url)
        self.reference = ReferenceDataLoader(self.client)
        self.directory = PackageDirectory(self.client)
        self.quotes = QuoteLookup(self.client)

    async def __aenter__(self) -> "AdminSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.client.aclose()

    async def start(self, load_packages: bool = True) -> "AdminSession":
        await self.reference.load()
        if load_packages:
            try:
                await self.directory.refresh()
            except ShippingError as e:
                logger.warning(f"Could not load packages: {e.message}")
        return self

    def hire_workflow(self, discard_stale_quotes: Optional[bool] = None) -> HireWorkflow:
        """Create a fresh hire workflow bound to this session's data."""
        return HireWorkflow(
            client=self.client,
            directory=self.directory,
            carriers=self.reference.carriers,
            discard_stale_quotes=discard_stale_quotes,
        )
