import logging
from typing import Any, Dict, List, Optional

from app.client.api_client import CatalogClient, CatalogClientError
from app.schemas.variant import VariantSelector
from app.services.variant_service import build_variant_selectors, switch_variant

logger = logging.getLogger(__name__)


class VariantSwitcher:
    """
    Product-page variant picker. Switching resolves to the URL of the best
    matching sibling; the caller navigates there (full page transition).
    """

    def __init__(self, client: CatalogClient):
        self.client = client
        self.product: Optional[Dict[str, Any]] = None
        self.variants: List[Dict[str, Any]] = []

    async def load(self, key_name: str) -> None:
        self.product = await self.client.product(key_name)
        self.variants = []

        vertical_id = self.product.get("vertical_id")
        if not vertical_id:
            logger.error("Product %s has no vertical information", key_name)
            return
        try:
            self.variants = await self.client.variants(vertical_id)
        except CatalogClientError:
            logger.exception("Failed to fetch product variants for vertical %s", vertical_id)

    def selectors(self) -> List[VariantSelector]:
        if self.product is None:
            return []
        return build_variant_selectors(self.variants, self.product)

    def switch(self, attribute: str, value: str) -> Optional[str]:
        if self.product is None:
            return None
        return switch_variant(self.variants, self.product, attribute, value)
