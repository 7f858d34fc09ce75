import pytest
from sqlalchemy import select

from catalog.core.errors import ConflictError, NotFoundError, ValidationError
from catalog.db.models import Collection, MegaMenuCollection, ProductCollection
from catalog.schemas.collection import (
    CollectionCreate,
    CollectionQueryOptions,
    CollectionUpdate,
)
from catalog.services import collection_service


def test_create_derives_slug_and_level(db):
    root = collection_service.create_collection(db, CollectionCreate(name="Men's Wear"))
    child = collection_service.create_collection(
        db, CollectionCreate(name="Shirts", parent_id=root.id)
    )

    assert root.slug == "mens-wear"
    assert root.level == 0
    assert child.level == 1


def test_create_duplicate_slug_conflicts(db):
    collection_service.create_collection(db, CollectionCreate(name="Sale"))
    with pytest.raises(ConflictError):
        collection_service.create_collection(db, CollectionCreate(name="Other", slug="sale"))


def test_create_with_unknown_parent_fails(db):
    with pytest.raises(ValidationError):
        collection_service.create_collection(db, CollectionCreate(name="Orphan", parent_id=999))


def test_create_requires_name(db):
    with pytest.raises(ValidationError):
        collection_service.create_collection(db, CollectionCreate(name="   "))


def test_tree_attaches_children_and_counts(db, make_collection, make_product):
    root = make_collection("Root")
    child = make_collection("Child", parent=root)
    make_collection("Grandchild", parent=child)
    product = make_product("Shirt")
    db.add(ProductCollection(product_id=product.id, collection_id=child.id))
    db.commit()

    tree = collection_service.get_collection_tree(db)

    assert [node.name for node in tree] == ["Root"]
    assert tree[0].children[0].name == "Child"
    assert tree[0].children[0].children[0].name == "Grandchild"
    assert tree[0].children[0].products_count == 1
    assert tree[0].total_products_count == 1


def test_inactive_excluded_unless_requested(db, make_collection):
    make_collection("Visible")
    make_collection("Hidden", is_active=False)

    active = collection_service.list_collections(db, CollectionQueryOptions(flat=True))
    everything = collection_service.list_collections(
        db, CollectionQueryOptions(flat=True, include_inactive=True)
    )

    assert [c.name for c in active] == ["Visible"]
    assert [c.name for c in everything] == ["Visible", "Hidden"]


def test_tree_drops_nodes_with_filtered_parent(db, make_collection):
    hidden = make_collection("Hidden", is_active=False)
    make_collection("Child", parent=hidden)

    assert collection_service.get_collection_tree(db) == []


def test_flat_parent_filter(db, make_collection):
    root = make_collection("Root")
    make_collection("A", parent=root)
    make_collection("B", parent=root)

    roots = collection_service.list_collections(
        db, CollectionQueryOptions(flat=True, parent_id=None)
    )
    children = collection_service.list_collections(
        db, CollectionQueryOptions(flat=True, parent_id=root.id)
    )

    assert [c.name for c in roots] == ["Root"]
    assert [c.name for c in children] == ["A", "B"]


@pytest.mark.parametrize(
    "search, expected",
    [("SALE", ["Summer Sale"]), ("%", ["50% Off"]), ("r_s", []), ("0% o", ["50% Off"])],
)
def test_search_matches_literal_substring(db, make_collection, search, expected):
    make_collection("Summer Sale")
    make_collection("50% Off", slug="50-off")

    found = collection_service.list_collections(
        db, CollectionQueryOptions(flat=True, search=search)
    )

    assert [c.name for c in found] == expected


def test_reparent_under_descendant_is_rejected(db, make_collection):
    root = make_collection("Root")
    child = make_collection("Child", parent=root)
    grandchild = make_collection("Grandchild", parent=child)

    with pytest.raises(ValidationError):
        collection_service.update_collection(
            db, root.id, CollectionUpdate(parent_id=grandchild.id)
        )
    with pytest.raises(ValidationError):
        collection_service.update_collection(db, root.id, CollectionUpdate(parent_id=root.id))


def test_reparent_recomputes_levels(db, make_collection):
    a = make_collection("A")
    b = make_collection("B")
    b_child = make_collection("B child", parent=b)

    collection_service.update_collection(db, b.id, CollectionUpdate(parent_id=a.id))
    db.expire_all()

    assert db.get(Collection, b.id).level == 1
    assert db.get(Collection, b_child.id).level == 2

    collection_service.update_collection(db, b.id, CollectionUpdate(parent_id=None))
    db.expire_all()

    assert db.get(Collection, b.id).level == 0
    assert db.get(Collection, b_child.id).level == 1


def test_update_slug_conflict(db, make_collection):
    make_collection("First")
    second = make_collection("Second")

    with pytest.raises(ConflictError):
        collection_service.update_collection(db, second.id, CollectionUpdate(slug="first"))


def test_update_unknown_collection(db):
    with pytest.raises(NotFoundError):
        collection_service.update_collection(db, 404, CollectionUpdate(name="x"))


def test_delete_cascades_to_descendants(db, make_collection, make_product):
    parent = make_collection("Parent")
    first = make_collection("First", parent=parent)
    second = make_collection("Second", parent=parent)
    other = make_collection("Other")
    product = make_product("Shirt")
    db.add_all(
        [
            ProductCollection(product_id=product.id, collection_id=first.id),
            ProductCollection(product_id=product.id, collection_id=second.id),
            ProductCollection(product_id=product.id, collection_id=other.id),
            MegaMenuCollection(collection_id=first.id, position=0),
        ]
    )
    db.commit()
    # После удаления экземпляры истекают, id нужны заранее
    expected = sorted([parent.id, first.id, second.id])
    other_id = other.id

    deleted = collection_service.delete_collection(db, parent.id)

    assert sorted(deleted) == expected
    remaining = db.scalars(select(Collection.id)).all()
    assert remaining == [other_id]
    links = db.scalars(select(ProductCollection.collection_id)).all()
    assert links == [other_id]
    assert db.scalars(select(MegaMenuCollection)).all() == []


def test_batch_add_propagates_to_ancestors(db, make_collection, make_product):
    root = make_collection("Root")
    child = make_collection("Child", parent=root)
    leaf = make_collection("Leaf", parent=child)
    first = make_product("First")
    second = make_product("Second")

    current = collection_service.add_products(db, leaf.id, [first.id, second.id, 999])

    assert current == [first.id, second.id]
    for collection_id in (root.id, child.id):
        linked = db.scalars(
            select(ProductCollection.product_id).where(
                ProductCollection.collection_id == collection_id
            )
        ).all()
        assert sorted(linked) == [first.id, second.id]


def test_batch_full_update_removes_unlisted(db, make_collection, make_product):
    collection = make_collection("Sale")
    keep = make_product("Keep")
    drop = make_product("Drop")
    collection_service.add_products(db, collection.id, [keep.id, drop.id])

    current = collection_service.add_products(db, collection.id, [keep.id], full_update=True)

    assert current == [keep.id]


def test_add_product_is_idempotent(db, make_collection, make_product):
    collection = make_collection("Sale")
    product = make_product("Shirt")

    assert collection_service.add_product(db, collection.id, product.id) is True
    assert collection_service.add_product(db, collection.id, product.id) is False


def test_remove_product_from_parents(db, make_collection, make_product):
    root = make_collection("Root")
    child = make_collection("Child", parent=root)
    product = make_product("Shirt")
    collection_service.add_products(db, child.id, [product.id])

    removed = collection_service.remove_product(
        db, child.id, product.id, remove_from_parents=True
    )

    assert removed == [child.id, root.id]
    assert db.scalars(select(ProductCollection)).all() == []


def test_remove_missing_relation(db, make_collection, make_product):
    collection = make_collection("Sale")
    product = make_product("Shirt")

    with pytest.raises(NotFoundError):
        collection_service.remove_product(db, collection.id, product.id)


def test_featured_brand_toggle(db, make_collection):
    brand = make_collection("Acme", collection_type="brand")
    custom = make_collection("Custom")
    db.add(MegaMenuCollection(collection_id=brand.id, position=0))
    db.commit()

    collection_service.set_brand_featured(db, brand.id, True)

    assert [b.name for b in collection_service.list_featured_brands(db)] == ["Acme"]
    entry = db.scalar(select(MegaMenuCollection))
    db.refresh(entry)
    assert entry.is_featured is True
    with pytest.raises(NotFoundError):
        collection_service.set_brand_featured(db, custom.id, True)


def test_get_by_slug_with_products(db, make_collection, make_product):
    collection = make_collection("Sale")
    product = make_product("Shirt")
    collection_service.add_product(db, collection.id, product.id)

    found, products = collection_service.get_by_slug_with_products(db, "sale")

    assert found.id == collection.id
    assert [p.id for p in products] == [product.id]
    with pytest.raises(NotFoundError):
        collection_service.get_by_slug_with_products(db, "missing")
