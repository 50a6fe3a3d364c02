"""
Catalog Service

Reads categories, image galleries and products from the hosted Firebase
Realtime Database through its REST interface (`<path>.json`).

Reads fail soft: a network or decoding problem is logged and the caller
gets an empty result, so a screen shows nothing instead of crashing.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from storefront import config
from storefront.db import create_http_client, get_catalog_url
from storefront.errors import CatalogError
from storefront.logging import get_logger, sanitize_for_logging
from storefront.services.models import CatalogImage, Category, Product

logger = get_logger(__name__)

IMAGES_NODE = "images"
PRODUCTS_NODE = "products"
DEFAULT_SUBCATEGORY = "Otros"


class CatalogService:
    """
    Catalog reader.

    Args:
        base_url: Database root, e.g. https://xepi-default-rtdb.firebaseio.com
        client: Optional shared httpx.AsyncClient (created lazily otherwise)
        auth: Optional database secret / ID token sent as ?auth=
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        auth: Optional[str] = None,
    ):
        self.base_url = (base_url or get_catalog_url()).rstrip("/")
        self.auth = auth if auth is not None else config.FIREBASE_AUTH
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = create_http_client()
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "CatalogService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ==================== HTTP ====================

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _get(self, url: str, params: Dict[str, str]) -> httpx.Response:
        return await self.client.get(url, params=params)

    async def _get_node(self, path: str) -> Any:
        """
        Fetch one database node as decoded JSON (None when absent).

        Raises:
            CatalogError: On transport, HTTP status or decoding errors
        """
        url = f"{self.base_url}/{path}.json"
        params = {"auth": self.auth} if self.auth else {}
        try:
            response = await self._get(url, params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise CatalogError(path, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise CatalogError(path, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise CatalogError(path, f"invalid JSON: {e}") from e

    # ==================== CATEGORIES ====================

    async def fetch_categories(self) -> List[Category]:
        """All categories with at least one image, in database order."""
        try:
            data = await self._get_node(IMAGES_NODE)
        except CatalogError as e:
            logger.error(f"Error fetching categories: {e}")
            return []

        if not data:
            logger.info("No categories available")
            return []

        return parse_categories(data)

    async def fetch_category_images(self, code: str) -> List[str]:
        """Image URLs of one category."""
        try:
            data = await self._get_node(f"{IMAGES_NODE}/{quote(code, safe='')}")
        except CatalogError as e:
            logger.error(f"Error fetching images for {sanitize_for_logging(code, 8)}: {e}")
            return []
        if not isinstance(data, dict):
            return []
        return [image.url for image in _parse_images(data)]

    # ==================== PRODUCTS ====================

    async def fetch_products(self, category_code: str) -> List[Product]:
        """Products of one category; invalid records are skipped."""
        path = f"{PRODUCTS_NODE}/{quote(category_code, safe='')}"
        try:
            data = await self._get_node(path)
        except CatalogError as e:
            logger.error(f"Error fetching products: {e}")
            return []

        if not isinstance(data, dict):
            return []

        products = []
        for product_id, record in data.items():
            if not isinstance(record, dict):
                continue
            try:
                products.append(
                    Product(**{"category_code": category_code, **record, "id": str(product_id)})
                )
            except ValidationError as e:
                logger.warning(
                    f"Skipping invalid product {sanitize_for_logging(product_id, 8)}: "
                    f"{e.error_count()} error(s)"
                )
        return products


def _parse_images(value: Dict[Any, Any]) -> List[CatalogImage]:
    return [
        CatalogImage(key=str(key), url=url)
        for key, url in value.items()
        if isinstance(url, str) and url
    ]


def parse_categories(data: Any) -> List[Category]:
    """
    Parse the images node: {category: {image_key: url}}.

    Null and non-string values are skipped; categories left without
    images are omitted.
    """
    if not isinstance(data, dict):
        return []

    categories = []
    for code, value in data.items():
        if not isinstance(value, dict):
            continue
        images = _parse_images(value)
        if images:
            categories.append(Category(code=str(code), images=images))
    return categories


def group_by_subcategory(products: List[Product]) -> Dict[str, List[Product]]:
    """Products grouped by subcategory, in first-seen order."""
    groups: Dict[str, List[Product]] = {}
    for product in products:
        groups.setdefault(product.subcategory or DEFAULT_SUBCATEGORY, []).append(product)
    return groups
