import logging
from typing import List

from recycleme.core.errors import BarcodeValidationError
from recycleme.core.models import Material, MaterialOptions, Product
from recycleme.services.recycle_api import RecycleApiClient
from recycleme.services.workflow import WorkflowOrchestrator

logger = logging.getLogger(__name__)


class _ProductContribution:
    def __init__(self, client: RecycleApiClient, orchestrator: WorkflowOrchestrator):
        self.client = client
        self.orchestrator = orchestrator

    def _current_product(self) -> Product:
        product = self.orchestrator.product
        if product is None:
            raise BarcodeValidationError("Look up a product first")
        return product

    async def _refresh(self, product: Product):
        # Show the server's updated answer for the same product
        await self.orchestrator.submit(product.ean)


class MaterialSuggester(_ProductContribution):
    """Lets the user tell the server which packaging materials a product has."""

    async def load_options(self) -> MaterialOptions:
        materials = await self.client.get_materials()
        known_ids = {m.id for m in materials}

        selected_ids = []
        product = self.orchestrator.product
        if product is not None:
            selected_ids = [m.id for m in product.materials if m.id in known_ids]

        return MaterialOptions(materials=materials, selected_ids=selected_ids)

    async def suggest(self, selected: List[Material]):
        if not selected:
            raise BarcodeValidationError("Select at least one material")
        product = self._current_product()

        await self.client.add_package(product.ean, selected)
        await self._refresh(product)


class Blacklister(_ProductContribution):
    """Reports that the page a product was found on describes another product."""

    async def report(self, name: str):
        name = (name or "").strip()
        if not name:
            raise BarcodeValidationError("Please enter the real product name")
        product = self._current_product()

        await self.client.add_blacklist(name=name, url=product.url, ean=product.ean,
                                        website=product.website_name)
        await self._refresh(product)
