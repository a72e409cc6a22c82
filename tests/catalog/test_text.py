"""Tests for catalog text and value helpers."""

import pytest

from storefront.catalog.text import (
    PLACEHOLDER_IMAGE,
    normalize_category_key,
    resolve_image,
    slugify,
)
from storefront.catalog.values import round_half_up, to_int, to_number


class TestNormalizeCategoryKey:
    """Tests for category key normalization."""

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("T-Shirts", "tshirt"),
            ("Tshirt", "tshirt"),
            ("  Dry Fruits ", "dryfruit"),
            ("ALL", "all"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_keys(self, label, expected) -> None:
        assert normalize_category_key(label) == expected

    def test_trailing_s_stripped_from_singulars(self) -> None:
        """Singular labels ending in "s" lose it too."""
        assert normalize_category_key("Glass") == "glas"

    @pytest.mark.parametrize("label", ["T-Shirts", "Snacks", "Oils & Ghee", "Rice", "1L Packs"])
    def test_idempotent(self, label) -> None:
        key = normalize_category_key(label)
        assert normalize_category_key(key) == key


class TestSlugify:
    """Tests for slug generation."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("North India", "north-india"),
            ("  Spices & Masalas!! ", "spices-masalas"),
            ("Café Blend", "caf-blend"),
            ("---", ""),
        ],
    )
    def test_slugify(self, text, expected) -> None:
        assert slugify(text) == expected


class TestResolveImage:
    """Tests for image reference resolution."""

    def test_empty_is_placeholder(self) -> None:
        assert resolve_image("") == PLACEHOLDER_IMAGE
        assert resolve_image(None) == PLACEHOLDER_IMAGE

    def test_absolute_url_unchanged(self) -> None:
        url = "https://cdn.example.com/a.png"
        assert resolve_image(url, api_base="https://api.example.com") == url

    def test_upload_path_prefixed(self) -> None:
        assert (
            resolve_image("/uploads/a.png", api_base="https://api.example.com/")
            == "https://api.example.com/uploads/a.png"
        )
        assert (
            resolve_image("uploads/a.png", api_base="https://api.example.com")
            == "https://api.example.com/uploads/a.png"
        )

    def test_local_base_on_https_page_unchanged(self) -> None:
        result = resolve_image("/uploads/a.png", api_base="http://localhost:5000", https_page=True)
        assert result == "/uploads/a.png"

    def test_local_base_on_http_page_prefixed(self) -> None:
        result = resolve_image("/uploads/a.png", api_base="http://127.0.0.1:5000")
        assert result == "http://127.0.0.1:5000/uploads/a.png"

    def test_upload_without_base_unchanged(self) -> None:
        assert resolve_image("uploads/a.png") == "uploads/a.png"

    def test_other_paths_unchanged(self) -> None:
        assert resolve_image("/images/a.png", api_base="https://api.example.com") == "/images/a.png"


class TestValues:
    """Tests for tolerant value coercion."""

    @pytest.mark.parametrize(
        "value,expected",
        [(5, 5.0), ("2.5", 2.5), (" 7 ", 7.0), ("abc", 0.0), (None, 0.0), (float("nan"), 0.0), ([], 0.0)],
    )
    def test_to_number(self, value, expected) -> None:
        assert to_number(value) == expected

    def test_to_int_truncates(self) -> None:
        assert to_int("3.9") == 3
        assert to_int(None, default=9) == 9

    @pytest.mark.parametrize("value,places,expected", [(2.5, 0, 3.0), (4.25, 1, 4.3), (4.35, 1, 4.4), (1.05, 1, 1.1)])
    def test_round_half_up(self, value, places, expected) -> None:
        assert round_half_up(value, places) == expected
