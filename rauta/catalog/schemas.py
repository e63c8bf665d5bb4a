# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the catalog endpoints."""

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, Field


def _empty_or_http_url(value: Optional[str]) -> Optional[str]:
    # "" is accepted and means "no image"
    if value is None or value == "":
        return value
    if not value.startswith(("http://", "https://")):
        raise ValueError("image_url must be an http(s) URL or empty")
    return value


ImageUrl = Annotated[Optional[str], AfterValidator(_empty_or_http_url)]


# -- Requests --------------------------------------------------------------


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    description: Optional[str] = None
    parent_id: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None


class TagCreate(BaseModel):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    category_id: str


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: int = Field(gt=0)  # cents
    category_id: str
    tag_id: Optional[str] = None
    image_url: ImageUrl = None
    custom_message: Optional[str] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[int] = Field(None, gt=0)
    category_id: Optional[str] = None
    tag_id: Optional[str] = None
    image_url: ImageUrl = None
    custom_message: Optional[str] = None


# -- Responses -------------------------------------------------------------


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str]
    parent_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TagResponse(BaseModel):
    id: str
    name: str
    slug: str
    category_id: str

    model_config = {"from_attributes": True}


class ProductResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]
    price: int
    category_id: str
    tag_id: Optional[str]
    image_url: Optional[str]
    custom_message: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CategoryListResponse(BaseModel):
    categories: List[CategoryResponse]


class TagListResponse(BaseModel):
    tags: List[TagResponse]


class ProductListResponse(BaseModel):
    products: List[ProductResponse]
