"""
Схемы мега-меню.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from catalog.schemas.collection import CollectionRef


class MegaMenuUpsert(BaseModel):
    collection_id: int
    position: Optional[int] = None
    is_active: bool = True
    display_subcollections: Optional[bool] = None


class MegaMenuUpdate(BaseModel):
    position: Optional[int] = None
    is_active: Optional[bool] = None
    display_subcollections: Optional[bool] = None


class MegaMenuEntryOut(BaseModel):
    """Пункт мега-меню вместе с данными коллекции."""

    id: int
    collection_id: int
    position: int
    is_active: bool
    display_subcollections: bool
    is_featured: bool
    name: str
    slug: str
    collection_type: Optional[str] = None
    image_url: Optional[str] = None
    children: List[CollectionRef] = Field(default_factory=list)


class ReorderItem(BaseModel):
    id: int
    position: int


class ReorderRequest(BaseModel):
    items: List[ReorderItem] = Field(min_length=1)
