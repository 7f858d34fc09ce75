import pytest
from sqlalchemy import select

from catalog.core.errors import ConflictError, NotFoundError, ValidationError
from catalog.db.models import Product, ProductCollection, ProductImage
from catalog.schemas.pagination import OffsetPagination
from catalog.schemas.product import (
    ImageIn,
    ProductCreate,
    ProductFilters,
    ProductUpdate,
    VariantIn,
)
from catalog.services import product_service


def test_create_generates_slug_from_title_and_id(db):
    product = product_service.create_product(db, ProductCreate(title="Red T-Shirt!!", price=19.99))

    assert product.slug == f"red-t-shirt-{product.id}"
    assert product.meta_title == "Red T-Shirt!!"


def test_generated_slug_fits_column_for_longest_title(db):
    product = product_service.create_product(db, ProductCreate(title="a" * 255, price=1))

    assert len(product.slug) <= 255
    assert product.slug.endswith(f"-{product.id}")

    updated = product_service.update_product(db, product.id, ProductUpdate(title="b" * 255))
    assert len(updated.slug) <= 255
    assert updated.slug.startswith("b")


def test_create_keeps_explicit_slug_and_rejects_duplicates(db):
    product_service.create_product(db, ProductCreate(title="A", price=1, slug="custom"))

    with pytest.raises(ConflictError):
        product_service.create_product(db, ProductCreate(title="B", price=1, slug="custom"))


@pytest.mark.parametrize(
    "payload",
    [
        {"title": "  ", "price": 1},
        {"title": "Shirt", "price": -1},
        {"title": "Shirt", "price": 1, "stock": -5},
    ],
)
def test_create_validation(db, payload):
    with pytest.raises(ValidationError):
        product_service.create_product(db, ProductCreate(**payload))
    assert db.scalars(select(Product)).all() == []


def test_create_skips_blob_images_and_links_known_collections(db, make_collection):
    sale = make_collection("Sale")
    product = product_service.create_product(
        db,
        ProductCreate(
            title="Shirt",
            price=5,
            images=[
                ImageIn(src="https://cdn.example.com/1.jpg", is_primary=True),
                ImageIn(src="blob:http://localhost/abc"),
                ImageIn(alt="no source"),
            ],
            variants=[VariantIn(size="M", color="Red")],
            collections=[sale.id, 999],
        ),
    )

    images = db.scalars(select(ProductImage)).all()
    assert [image.src for image in images] == ["https://cdn.example.com/1.jpg"]
    assert images[0].alt == "Image for Shirt"
    assert [v.color for v in product.variants] == ["Red"]
    links = db.scalars(select(ProductCollection.collection_id)).all()
    assert links == [sale.id]


def test_update_title_regenerates_slug(db, make_product):
    product = make_product("Old name")

    updated = product_service.update_product(db, product.id, ProductUpdate(title="New Name"))

    assert updated.slug == f"new-name-{product.id}"
    assert updated.title == "New Name"


def test_update_partial_leaves_other_fields(db, make_product):
    product = make_product("Shirt", price=10, brand="Acme")

    product_service.update_product(db, product.id, ProductUpdate(price=12.5))
    db.expire_all()
    reloaded = db.get(Product, product.id)

    assert reloaded.price == 12.5
    assert reloaded.brand == "Acme"
    assert reloaded.title == "Shirt"


def test_update_and_delete_missing_product(db):
    with pytest.raises(NotFoundError):
        product_service.update_product(db, 1, ProductUpdate(title="x"))
    with pytest.raises(NotFoundError):
        product_service.delete_product(db, 1)


def test_delete_removes_variants(db, make_product):
    product = make_product("Shirt", colors=["Red", "Blue"])

    product_service.delete_product(db, product.id)

    assert db.get(Product, product.id) is None
    assert product_service.list_colors(db) == []


def test_pagination_metadata(db, make_product):
    for i in range(25):
        make_product(f"Product {i}")

    page = product_service.list_products(
        db, ProductFilters(), OffsetPagination(index_from=20, limit=10)
    )

    assert page.total == 25
    assert page.total_pages == 3
    assert page.current_page == 3
    assert page.has_more is False
    assert len(page.products) == 5


@pytest.mark.parametrize(
    "index_from, limit, expected_page",
    [(5, 10, 1), (15, 10, 2), (24, 10, 3), (7, 3, 3)],
)
def test_current_page_for_unaligned_offset(
    db, make_product, index_from, limit, expected_page
):
    for i in range(25):
        make_product(f"Product {i}")

    page = product_service.list_products(
        db, ProductFilters(), OffsetPagination(index_from=index_from, limit=limit)
    )

    assert page.current_page == expected_page
    assert page.current_page * limit >= index_from
    assert (page.current_page - 1) * limit <= index_from
    assert len(page.products) == min(limit, 25 - index_from)


def test_pagination_empty(db):
    page = product_service.list_products(db)

    assert page.total == 0
    assert page.total_pages == 0
    assert page.current_page == 1
    assert page.has_more is False


def test_pages_do_not_overlap(db, make_product):
    for i in range(7):
        make_product(f"Product {i}", price=10)

    seen = []
    for index_from in range(0, 7, 3):
        page = product_service.list_products(
            db,
            ProductFilters(sort="price"),
            OffsetPagination(index_from=index_from, limit=3),
        )
        seen.extend(p.id for p in page.products)

    assert len(seen) == len(set(seen)) == 7


def test_filters(db, make_product, make_collection):
    sale = make_collection("Sale")
    shirt = make_product("Red shirt", price=20, type="Shirts", brand="Acme", colors=["Red"])
    jeans = make_product("Blue jeans", price=50, category="jeans", brand="Denim", is_sale=True)
    make_product("Green hat", price=5, type="Hats", brand="Acme", colors=["Green"])
    db.add(ProductCollection(product_id=jeans.id, collection_id=sale.id))
    db.commit()

    def ids(**filters):
        return [p.id for p in product_service.list_products(db, ProductFilters(**filters)).products]

    assert ids(type="shirts") == [shirt.id]
    assert ids(type="JEANS") == [jeans.id]
    assert len(ids(type="all")) == 3
    assert ids(price_min=10, price_max=30) == [shirt.id]
    assert ids(brand=["Denim"]) == [jeans.id]
    assert ids(color=["Red", "Purple"]) == [shirt.id]
    assert ids(is_sale=True) == [jeans.id]
    assert ids(collection="sale") == [jeans.id]
    assert ids(search="JEANS") == [jeans.id]


def test_search_treats_wildcards_literally(db, make_product):
    make_product("Summer shirt")
    discounted = make_product("Hat 50% off", description="wool_blend")

    def ids(search):
        return [p.id for p in product_service.list_products(db, ProductFilters(search=search)).products]

    assert ids("%") == [discounted.id]
    assert ids("r_s") == []
    assert ids("L_B") == [discounted.id]


def test_sort_by_price_desc(db, make_product):
    cheap = make_product("Cheap", price=1)
    pricey = make_product("Pricey", price=100)

    page = product_service.list_products(db, ProductFilters(sort="price", direction="desc"))

    assert [p.id for p in page.products] == [pricey.id, cheap.id]


def test_set_featured_counts_rows(db, make_product):
    first = make_product("First")
    second = make_product("Second")

    updated = product_service.set_featured(db, [first.id, second.id, 999], True)

    assert updated == 2
    featured = product_service.list_products(db, ProductFilters(is_featured=True))
    assert featured.total == 2


def test_lookup_lists(db, make_product):
    make_product("A", brand="Zeta", category="Shirts", type="tops", colors=["Red"])
    make_product("B", brand="Acme", category="Jeans", type="bottoms", colors=["Blue", "Red"])
    make_product("C")

    assert product_service.list_brands(db) == ["Acme", "Zeta"]
    assert product_service.list_categories(db) == ["Jeans", "Shirts"]
    assert product_service.list_colors(db) == ["Blue", "Red"]
    assert product_service.list_colors(db, "tops") == ["Red"]


def test_set_product_collections(db, make_product, make_collection):
    first = make_collection("First")
    second = make_collection("Second")
    product = make_product("Shirt")

    product_service.set_product_collections(db, product.id, [first.id])
    result = product_service.set_product_collections(db, product.id, [second.id])

    assert [c.id for c in result.collections] == [second.id]
