"""
Схемы коллекций.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CollectionBase(BaseModel):
    description: Optional[str] = None
    parent_id: Optional[int] = None
    collection_type: str = Field("custom", max_length=50)
    is_active: bool = True
    image_url: Optional[str] = None


class CollectionCreate(CollectionBase):
    """Создание коллекции. Без slug он строится из названия."""

    name: str = Field(max_length=100)
    slug: Optional[str] = Field(None, max_length=150)


class CollectionUpdate(BaseModel):
    """
    Частичное обновление коллекции.

    Применяются только переданные поля; parent_id=null делает
    коллекцию корневой.
    """

    name: Optional[str] = Field(None, max_length=100)
    slug: Optional[str] = Field(None, max_length=150)
    description: Optional[str] = None
    parent_id: Optional[int] = None
    collection_type: Optional[str] = Field(None, max_length=50)
    is_active: Optional[bool] = None
    image_url: Optional[str] = None


class CollectionQueryOptions(BaseModel):
    """
    Параметры выборки коллекций.

    parent_id учитывается, только если передан явно: число отбирает
    прямых потомков, None - корневые коллекции.
    """

    parent_id: Optional[int] = None
    collection_type: Optional[str] = None
    include_inactive: bool = False
    flat: bool = False
    search: Optional[str] = None

    @property
    def filters_parent(self) -> bool:
        return "parent_id" in self.model_fields_set


class CollectionRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    collection_type: Optional[str] = None
    parent_id: Optional[int] = None


class CollectionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: Optional[str] = None
    parent_id: Optional[int] = None
    collection_type: str
    level: int
    is_active: bool
    is_featured: bool = False
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    products_count: int = 0


class CollectionNode(CollectionOut):
    """Узел дерева коллекций."""

    total_products_count: int = 0
    children: List["CollectionNode"] = Field(default_factory=list)


class ProductLink(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(alias="productId")


class ProductBatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_ids: List[int] = Field(alias="productIds", min_length=1)


class FeaturedToggle(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_featured: bool = Field(alias="isFeatured")


CollectionNode.model_rebuild()
