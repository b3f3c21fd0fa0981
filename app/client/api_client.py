import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class CatalogClientError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CatalogClient:
    """
    Async client for the catalogue JSON API. Every call raises
    CatalogClientError on transport failures and non-2xx responses.
    """

    def __init__(
        self,
        base_url: str = "",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        clean_params = {k: v for k, v in (params or {}).items() if v is not None}
        try:
            response = await self._client.get(path, params=clean_params)
        except httpx.HTTPError as exc:
            raise CatalogClientError(f"GET {path} failed: {exc}") from exc

        if response.is_error:
            try:
                detail = response.json().get("detail", response.text)
            except (ValueError, AttributeError):
                detail = response.text
            raise CatalogClientError(f"GET {path} returned {response.status_code}: {detail}", response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise CatalogClientError(f"GET {path} returned a non-JSON body", response.status_code) from exc

    async def search(
        self,
        q: str = "",
        page: int = 1,
        limit: int = 20,
        entity_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if entity_id is not None:
            params["entityid"] = entity_id
        elif q:
            params["q"] = q
        return await self._get("/api/products/search", params)

    async def popular_pills(self) -> List[Dict[str, Any]]:
        return await self._get("/api/products/popular-pills")

    async def product(self, key_name: str) -> Dict[str, Any]:
        return await self._get(f"/api/products/{key_name}")

    async def variants(self, vertical_id: int) -> List[Dict[str, Any]]:
        return await self._get("/api/products/product-variants", {"vertical_id": vertical_id})

    async def stores(
        self,
        key_name: str,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
    ) -> List[Dict[str, Any]]:
        return await self._get(f"/api/stores/for-product/{key_name}", {"lat": lat, "lon": lon})

    async def gallery(self, key_name: str) -> List[Dict[str, Any]]:
        return await self._get(f"/api/images/gallery/{key_name}")
