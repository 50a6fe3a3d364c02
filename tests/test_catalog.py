"""Tests for catalog reads"""
from decimal import Decimal

import httpx
import pytest
from pydantic import ValidationError

from storefront.services.catalog import CatalogService, group_by_subcategory, parse_categories
from storefront.services.models import Product

BASE_URL = "https://xepi-test.firebaseio.com"


def make_service(handler, auth=""):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CatalogService(base_url=BASE_URL, client=client, auth=auth)


def test_parse_categories_skips_nulls_and_empty():
    data = {
        "cuadros": {"a": "https://img/a.jpg", "b": None},
        "juguetes": {"x": None},
        "cajitas": "not a map",
        "rotulos": {"r": "https://img/r.jpg"},
    }

    categories = parse_categories(data)

    assert [c.code for c in categories] == ["cuadros", "rotulos"]
    assert categories[0].image_urls == ["https://img/a.jpg"]
    assert categories[0].title == "CUADROS"


def test_parse_categories_non_mapping():
    assert parse_categories(None) == []
    assert parse_categories(["a"]) == []


@pytest.mark.asyncio
async def test_fetch_categories():
    """Test the images node is read and parsed"""
    seen = []

    def handler(request):
        seen.append(request.url)
        return httpx.Response(200, json={"cuadros": {"a": "https://img/a.jpg"}})

    async with make_service(handler, auth="secret") as service:
        categories = await service.fetch_categories()

    assert [c.code for c in categories] == ["cuadros"]
    assert seen[0].path == "/images.json"
    assert seen[0].params["auth"] == "secret"


@pytest.mark.asyncio
async def test_fetch_categories_absent_node():
    service = make_service(lambda request: httpx.Response(200, json=None))

    assert await service.fetch_categories() == []


@pytest.mark.asyncio
async def test_fetch_categories_http_error_returns_empty():
    service = make_service(lambda request: httpx.Response(503, text="unavailable"))

    assert await service.fetch_categories() == []


@pytest.mark.asyncio
async def test_fetch_categories_invalid_json_returns_empty():
    service = make_service(lambda request: httpx.Response(200, text="<html>"))

    assert await service.fetch_categories() == []


@pytest.mark.asyncio
async def test_transport_errors_are_retried():
    """Test a dropped connection is retried before giving up"""
    attempts = {"n": 0}

    def handler(request):
        attempts["n"] += 1
        if attempts["n"] < 2:
            raise httpx.ConnectError("connection reset", request=request)
        return httpx.Response(200, json={"rotulos": {"r": "https://img/r.jpg"}})

    service = make_service(handler)

    categories = await service.fetch_categories()

    assert attempts["n"] == 2
    assert [c.code for c in categories] == ["rotulos"]


@pytest.mark.asyncio
async def test_fetch_category_images():
    def handler(request):
        assert request.url.path == "/images/cuadros.json"
        return httpx.Response(200, json={"a": "https://img/a.jpg", "b": None})

    service = make_service(handler)

    assert await service.fetch_category_images("cuadros") == ["https://img/a.jpg"]


@pytest.mark.asyncio
async def test_fetch_products(sample_product):
    """Test products are keyed by id and invalid records skipped"""
    def handler(request):
        assert request.url.path == "/products/cuadros.json"
        return httpx.Response(200, json={
            "p1": sample_product,
            "p2": {"name": "Sin precio"},
            "p3": None,
        })

    service = make_service(handler)

    products = await service.fetch_products("cuadros")

    assert len(products) == 1
    product = products[0]
    assert product.id == "p1"
    assert product.category_code == "cuadros"
    assert product.price == Decimal("40")


def test_product_to_cart_line(sample_product):
    product = Product(id="p1", category_code="cuadros", **sample_product)

    line = product.to_cart_line(quantity=2)

    assert line.product_id == "p1"
    assert line.quantity == 2
    assert line.unit_price == Decimal("40")
    assert line.subcategory_label == "Cuadros 20x30"
    assert line.label == "CU-014"


def test_group_by_subcategory():
    products = [
        Product(id="1", name="A", category_code="c", price=1, subcategory="Grandes"),
        Product(id="2", name="B", category_code="c", price=1),
        Product(id="3", name="C", category_code="c", price=1, subcategory="Grandes"),
    ]

    groups = group_by_subcategory(products)

    assert list(groups) == ["Grandes", "Otros"]
    assert [p.id for p in groups["Grandes"]] == ["1", "3"]


@pytest.mark.asyncio
@pytest.mark.parametrize("price", ["Q25", None, "abc", "NaN", True])
async def test_fetch_products_skips_unparseable_price(sample_product, price):
    def handler(request):
        return httpx.Response(200, json={
            "p1": sample_product,
            "p2": {**sample_product, "price": price},
        })

    service = make_service(handler)

    products = await service.fetch_products("cuadros")

    assert [p.id for p in products] == ["p1"]


def test_product_rejects_non_numeric_price():
    with pytest.raises(ValidationError):
        Product(id="p1", name="A", category_code="c", price="Q25")
