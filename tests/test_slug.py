import pytest

from catalog.services.slug import slugify


@pytest.mark.parametrize(
    "text, suffix, expected",
    [
        ("Red T-Shirt!!", 42, "red-t-shirt-42"),
        ("  Summer   Sale  ", None, "summer-sale"),
        ("a -- b", 1, "a-b-1"),
        ("Кофта", 7, "7"),
        ("!!!", None, ""),
        ("Snake_case Name", 3, "snake_case-name-3"),
    ],
)
def test_slugify(text, suffix, expected):
    assert slugify(text, suffix) == expected


def test_slugify_strips_edge_hyphens():
    assert slugify("-Hello World-") == "hello-world"


@pytest.mark.parametrize(
    "text, suffix, max_length, expected",
    [
        ("Red T-Shirt", 42, 10, "red-t-s-42"),
        ("Red T-Shirt", None, 5, "red-t"),
        ("Red T-Shirt", 42, 7, "red-42"),
        ("Short", 1, 255, "short-1"),
        ("Anything", 12345, 5, "12345"),
    ],
)
def test_slugify_fits_max_length(text, suffix, max_length, expected):
    slug = slugify(text, suffix, max_length)

    assert slug == expected
    assert len(slug) <= max_length
