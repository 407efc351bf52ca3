import pytest

from shoplist.domain.cart.cart_id import extract_cart_id


@pytest.mark.parametrize(
    "text, expected",
    [
        ("https://share-a-cart.com/get/T4GEU", "T4GEU"),
        ("https://share-a-cart.com/get/t4geu", "T4GEU"),
        ("  https://www.share-a-cart.com/get/T4GEU?utm=x ", "T4GEU"),
        ("http://share-a-cart.com/get/ab12", "AB12"),
        ("t4geu", "T4GEU"),
        ("T4GEU", "T4GEU"),
    ],
)
def test_extracts_canonical_id(text, expected):
    assert extract_cart_id(text) == expected


@pytest.mark.parametrize(
    "text",
    ["not a url", "", None, "https://example.com/get/T4GEU", "T4-GEU"],
)
def test_rejects_input_without_id(text):
    assert extract_cart_id(text) is None
