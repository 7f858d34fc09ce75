from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catalog.schemas.collection import CollectionRef

SortField = Literal["id", "title", "price", "created_at"]


class ImageIn(BaseModel):
    """Изображение товара. С id - существующее, без id - новое."""

    id: Optional[int] = None
    image_id: Optional[int] = None
    alt: Optional[str] = None
    src: Optional[str] = None
    is_primary: bool = False


class ImageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    image_id: Optional[int] = None
    alt: Optional[str] = None
    src: str
    is_primary: bool


class VariantIn(BaseModel):
    sku: Optional[str] = Field(None, max_length=50)
    size: Optional[str] = Field(None, max_length=20)
    color: Optional[str] = Field(None, max_length=50)
    image_id: Optional[int] = None
    image_url: Optional[str] = None
    price: Optional[float] = None


class VariantOut(VariantIn):
    model_config = ConfigDict(from_attributes=True)

    id: int


class ProductCreate(BaseModel):
    """Создание товара. Цена и остаток проверяются сервисом."""

    title: str = Field(max_length=255)
    description: Optional[str] = None
    type: Optional[str] = Field(None, max_length=50)
    brand: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = Field(None, max_length=100)
    price: float
    is_new: bool = False
    is_sale: bool = False
    is_featured: bool = False
    discount: int = 0
    stock: int = 0
    slug: Optional[str] = Field(None, max_length=255)
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = None
    meta_image: Optional[str] = Field(None, max_length=255)
    meta_keywords: Optional[str] = None
    images: List[ImageIn] = Field(default_factory=list)
    variants: List[VariantIn] = Field(default_factory=list)
    collections: List[int] = Field(default_factory=list)


class ProductUpdate(BaseModel):
    """Частичное обновление товара; списки заменяют текущие наборы."""

    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    type: Optional[str] = Field(None, max_length=50)
    brand: Optional[str] = Field(None, max_length=100)
    category: Optional[str] = Field(None, max_length=100)
    price: Optional[float] = None
    is_new: Optional[bool] = None
    is_sale: Optional[bool] = None
    is_featured: Optional[bool] = None
    discount: Optional[int] = None
    stock: Optional[int] = None
    slug: Optional[str] = Field(None, max_length=255)
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = None
    meta_image: Optional[str] = Field(None, max_length=255)
    meta_keywords: Optional[str] = None
    images: Optional[List[ImageIn]] = None
    variants: Optional[List[VariantIn]] = None
    collections: Optional[List[int]] = None


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    type: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    price: float
    is_new: bool
    is_sale: bool
    is_featured: bool
    discount: int
    stock: int
    slug: Optional[str] = Field(None, max_length=255)
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = None
    meta_image: Optional[str] = Field(None, max_length=255)
    meta_keywords: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    images: List[ImageOut] = Field(default_factory=list)
    variants: List[VariantOut] = Field(default_factory=list)
    collections: List[CollectionRef] = Field(default_factory=list)


class ProductFilters(BaseModel):
    """
    Фильтры списка товаров.

    brand и color сопоставляются по ИЛИ внутри набора.
    """

    type: Optional[str] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    brand: List[str] = Field(default_factory=list)
    color: List[str] = Field(default_factory=list)
    is_new: Optional[bool] = None
    is_sale: Optional[bool] = None
    is_featured: Optional[bool] = None
    collection: Optional[str] = None
    search: Optional[str] = None
    sort: SortField = "id"
    direction: Literal["asc", "desc"] = "asc"


class ProductPage(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    products: List[ProductOut]
    total: int
    total_pages: int
    has_more: bool
    current_page: int


class FeaturedUpdate(BaseModel):
    ids: List[int] = Field(min_length=1)
    value: bool = True


class ProductCollectionsUpdate(BaseModel):
    collections: List[int] = Field(default_factory=list)
