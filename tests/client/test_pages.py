"""Tests for the storefront page controllers."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from storefront.catalog.pipeline import SortMode
from storefront.client.api_client import APIError, APIResponse, StorefrontAPIClient
from storefront.client.pages import (
    FetchGeneration,
    NoticeVariant,
    ProductDetailPage,
    RegionPage,
    ShopPage,
    ShopState,
    page_size_for_viewport,
)
from storefront.domain.exceptions import InsufficientStockError, OptionRequiredError
from storefront.infrastructure.config import Settings


def make_success_response(data) -> APIResponse:
    """Create a successful API response."""
    return APIResponse(success=True, data=data)


def make_error_response(error_code: str, message: str, status_code: int = 500) -> APIResponse:
    """Create an error API response."""
    return APIResponse(
        success=False,
        error=APIError(error_code=error_code, message=message, status_code=status_code),
    )


def records(count: int, **extra) -> list[dict]:
    """Build raw product records priced 100, 200, ..."""
    return [
        {"_id": f"p{i}", "title": f"Product {i}", "price": 100 * (i + 1), **extra}
        for i in range(count)
    ]


@pytest.fixture
def mock_api_client() -> MagicMock:
    """Create a mock Storefront API client."""
    client = MagicMock(spec=StorefrontAPIClient)
    client.list_products = AsyncMock()
    client.get_product = AsyncMock()
    client.list_regions = AsyncMock()
    client.close = AsyncMock()
    return client


class TestShopState:
    """Tests for shop page state transitions."""

    def test_defaults(self) -> None:
        state = ShopState()
        assert state.category == "All"
        assert state.quantity_label == "All"
        assert state.price_range == (0, 5000)
        assert state.sort is SortMode.NONE
        assert state.page == 1

    def test_changes_reset_page(self) -> None:
        state = ShopState().with_page(4)
        assert state.with_category("Snacks").page == 1
        assert state.with_quantity_label("80g").page == 1
        assert state.with_price_range(10, 20).page == 1
        assert state.with_sort("low-to-high").page == 1
        assert state.with_search("ghee").page == 1

    def test_transitions_return_new_state(self) -> None:
        state = ShopState()
        changed = state.with_category("Snacks")
        assert state.category == "All"
        assert changed.category == "Snacks"

    def test_reset_filters_keeps_search(self) -> None:
        state = ShopState().with_search("ghee").with_category("Dairy").with_sort("desc")
        reset = state.reset_filters()
        assert reset == ShopState(search="ghee")

    def test_page_never_below_one(self) -> None:
        assert ShopState().with_page(-3).page == 1


class TestPageSize:
    """Tests for viewport-dependent page size."""

    @pytest.mark.parametrize("width,expected", [(320, 8), (767, 8), (768, 16), (1440, 16)])
    def test_breakpoint(self, width, expected) -> None:
        assert page_size_for_viewport(width) == expected

    def test_custom_settings(self) -> None:
        config = Settings(mobile_breakpoint=1000, mobile_page_size=4, desktop_page_size=12)
        assert page_size_for_viewport(900, config) == 4
        assert page_size_for_viewport(1000, config) == 12


class TestFetchGeneration:
    """Tests for the fetch generation counter."""

    def test_only_latest_token_is_current(self) -> None:
        generation = FetchGeneration()
        first = generation.begin()
        second = generation.begin()
        assert not generation.is_current(first)
        assert generation.is_current(second)


class TestShopPage:
    """Tests for the shop page controller."""

    @pytest.mark.asyncio
    async def test_refresh_sends_filters_and_views(self, mock_api_client: MagicMock) -> None:
        mock_api_client.list_products.return_value = make_success_response(records(17))
        page = ShopPage(mock_api_client)
        state = ShopState().with_category("Snacks").with_search(" ghee ")

        assert await page.refresh(state) is True

        mock_api_client.list_products.assert_awaited_once_with(
            q="ghee",
            category="Snacks",
            quantities=None,
            min_price=0,
            max_price=5000,
            active="all",
            limit=200,
        )
        assert page.loading is False
        assert len(page.records) == 17

    @pytest.mark.asyncio
    async def test_view_paginates_for_viewport(self, mock_api_client: MagicMock) -> None:
        mock_api_client.list_products.return_value = make_success_response(records(17))
        page = ShopPage(mock_api_client)
        await page.refresh(ShopState())

        desktop = page.view(ShopState().with_page(2), viewport_width=1280)
        assert desktop.total_pages == 2
        assert [c.id for c in desktop.items] == ["p16"]

        mobile = page.view(ShopState(), viewport_width=375)
        assert mobile.total_pages == 3
        assert len(mobile.items) == 8

    @pytest.mark.asyncio
    async def test_filters_reapplied_to_unfiltered_response(self, mock_api_client: MagicMock) -> None:
        data = records(3)
        data[0]["category"] = "Snacks"
        data[2]["category"] = "snack"
        mock_api_client.list_products.return_value = make_success_response(data)
        page = ShopPage(mock_api_client)
        state = ShopState().with_category("Snacks").with_sort("high-to-low")
        await page.refresh(state)

        view = page.view(state, viewport_width=1280)
        assert [c.id for c in view.items] == ["p2", "p0"]

    @pytest.mark.asyncio
    async def test_error_adds_notice_and_empties_list(self, mock_api_client: MagicMock) -> None:
        mock_api_client.list_products.return_value = make_success_response(records(2))
        page = ShopPage(mock_api_client)
        await page.refresh(ShopState())

        mock_api_client.list_products.return_value = make_error_response("TIMEOUT", "Request timed out")
        await page.refresh(ShopState())

        assert page.records == []
        assert len(page.notices) == 1
        assert page.notices[0].variant is NoticeVariant.DESTRUCTIVE
        assert page.notices[0].description == "Request timed out"
        assert page.view(ShopState(), 1280).is_empty

    @pytest.mark.asyncio
    async def test_stale_fetch_is_discarded(self, mock_api_client: MagicMock) -> None:
        slow_started = asyncio.Event()
        release_slow = asyncio.Event()

        async def list_products(**params):
            if params["q"] == "slow":
                slow_started.set()
                await release_slow.wait()
                return make_success_response(records(5))
            return make_success_response(records(1))

        mock_api_client.list_products.side_effect = list_products
        page = ShopPage(mock_api_client)

        slow = asyncio.create_task(page.refresh(ShopState(search="slow")))
        await slow_started.wait()
        assert await page.refresh(ShopState(search="fast")) is True
        release_slow.set()

        assert await slow is False
        assert [r["_id"] for r in page.records] == ["p0"]

    @pytest.mark.asyncio
    async def test_newest_listing_mode(self, mock_api_client: MagicMock) -> None:
        mock_api_client.list_products.return_value = make_success_response(
            [
                {"_id": "old", "price": 1, "createdAt": "2024-01-01T00:00:00Z"},
                {"_id": "new", "price": 1, "createdAt": "2024-05-01T00:00:00Z"},
            ]
        )
        page = ShopPage(mock_api_client, listing_mode="newest")
        await page.refresh(ShopState())
        assert [r["_id"] for r in page.records] == ["new", "old"]

    def test_quantity_labels(self, mock_api_client: MagicMock) -> None:
        labels = ShopPage(mock_api_client).quantity_labels
        assert labels[0] == "All"
        assert "300ml" in labels

    @pytest.mark.asyncio
    async def test_notify_product_created_refetches(self, mock_api_client: MagicMock) -> None:
        mock_api_client.list_products.return_value = make_success_response(records(1))
        page = ShopPage(mock_api_client)
        await page.refresh(ShopState(search="oil"))

        mock_api_client.list_products.return_value = make_success_response(records(2))
        await page.notify_product_created()

        assert mock_api_client.list_products.await_count == 2
        assert mock_api_client.list_products.call_args.kwargs["q"] == "oil"
        assert len(page.records) == 2


class TestRegionPage:
    """Tests for the region page controller."""

    @pytest.mark.asyncio
    async def test_load_and_paginate(self, mock_api_client: MagicMock) -> None:
        mock_api_client.list_regions.return_value = make_success_response(
            [{"_id": "r1", "name": "North", "slug": "north"}]
        )
        mock_api_client.list_products.return_value = make_success_response(records(20))
        page = RegionPage(mock_api_client, "north")

        await page.load()

        assert page.not_found is False
        assert page.region["name"] == "North"
        mock_api_client.list_products.assert_awaited_once_with(region="north", limit=200)
        first = page.view(1)
        assert len(first.items) == 16
        assert first.total_pages == 2
        assert len(page.view(2).items) == 4

    @pytest.mark.asyncio
    async def test_unknown_region(self, mock_api_client: MagicMock) -> None:
        mock_api_client.list_regions.return_value = make_success_response([])
        page = RegionPage(mock_api_client, "atlantis")

        await page.load()

        assert page.not_found is True
        mock_api_client.list_products.assert_not_awaited()


class TestProductDetailPage:
    """Tests for the product detail page controller."""

    @pytest.fixture
    def record(self) -> dict:
        return {
            "_id": "ghee",
            "title": "Ghee",
            "slug": "ghee",
            "price": 500,
            "quantityOptions": [
                {"id": "250", "quantity": 250, "unit": "ml", "price": 300, "stock": 2},
                {"id": "500", "quantity": 500, "unit": "ml", "stock": 0},
            ],
        }

    @pytest.mark.asyncio
    async def test_load_and_options(self, mock_api_client: MagicMock, record: dict) -> None:
        mock_api_client.get_product.return_value = make_success_response(record)
        page = ProductDetailPage(mock_api_client, "ghee")

        await page.load()

        mock_api_client.get_product.assert_awaited_once_with("ghee")
        options = page.options
        assert [o.display_label for o in options] == ["250ml", "500ml"]
        assert [o.is_active for o in options] == [True, False]
        assert options[1].price == 500
        assert page.stock_for("250") == 2

    @pytest.mark.asyncio
    async def test_add_to_cart(self, mock_api_client: MagicMock, record: dict) -> None:
        mock_api_client.get_product.return_value = make_success_response(record)
        page = ProductDetailPage(mock_api_client, "ghee")
        await page.load()

        page.add_to_cart(1, option_id="250")
        page.add_to_cart(1, option_id="250")

        assert page.cart.item_count == 2
        assert page.cart.subtotal == 600
        with pytest.raises(OptionRequiredError):
            page.add_to_cart(1)

    @pytest.mark.asyncio
    async def test_add_to_cart_counts_units_already_in_cart(
        self, mock_api_client: MagicMock, record: dict
    ) -> None:
        mock_api_client.get_product.return_value = make_success_response(record)
        page = ProductDetailPage(mock_api_client, "ghee")
        await page.load()

        page.add_to_cart(2, option_id="250")
        with pytest.raises(InsufficientStockError) as exc_info:
            page.add_to_cart(1, option_id="250")

        assert exc_info.value.available == 2
        assert page.cart.item_count == 2

    @pytest.mark.asyncio
    async def test_not_found(self, mock_api_client: MagicMock) -> None:
        mock_api_client.get_product.return_value = make_error_response(
            "PRODUCT_NOT_FOUND", "Not found", 404
        )
        page = ProductDetailPage(mock_api_client, "nothing")

        await page.load()

        assert page.not_found is True
        assert page.options == []
