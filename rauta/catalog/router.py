# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Catalog endpoints – categories (with one level of subcategories), product
tags, and products.

Reads are public; every mutation is guarded by ``require_admin`` and is
rejected with 403 before any row is touched.  Products are soft-deleted so
that old WhatsApp links keep resolving to a product id.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from rauta.database import generate_id, get_db
from rauta.core.security import get_client_ip, require_admin
from rauta.models.user import User
from rauta.models.category import Category, ProductTag
from rauta.models.product import Product
from rauta.models.audit_log import AuditLog
from rauta.auth.schemas import SuccessResponse
from rauta.catalog.schemas import (
    CategoryCreate,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
    TagCreate,
    TagListResponse,
    TagResponse,
)

router = APIRouter(tags=["catalog"])


def _get_category(category_id: str, db: Session) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


def _get_product(product_id: str, db: Session) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


def _ensure_slug_free(slug: str, db: Session, exclude_id: str | None = None) -> None:
    q = db.query(Category).filter(Category.slug == slug)
    if exclude_id:
        q = q.filter(Category.id != exclude_id)
    if q.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slug already in use")


def _changes(body, required: set) -> dict:
    """Fields the client sent, minus explicit nulls on NOT NULL columns."""
    return {
        key: value
        for key, value in body.model_dump(exclude_unset=True).items()
        if value is not None or key not in required
    }


# ===========================================================================
# Categories
# ===========================================================================


@router.get("/categories", response_model=CategoryListResponse)
def list_categories(db: Session = Depends(get_db)):
    return CategoryListResponse(categories=db.query(Category).order_by(Category.name).all())


@router.get("/categories/slug/{slug}", response_model=CategoryResponse)
def get_category_by_slug(slug: str, db: Session = Depends(get_db)):
    category = db.query(Category).filter(Category.slug == slug).first()
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.get("/categories/{category_id}", response_model=CategoryResponse)
def get_category(category_id: str, db: Session = Depends(get_db)):
    return _get_category(category_id, db)


@router.get("/categories/{category_id}/subcategories", response_model=CategoryListResponse)
def list_subcategories(category_id: str, db: Session = Depends(get_db)):
    rows = (
        db.query(Category)
        .filter(Category.parent_id == category_id)
        .order_by(Category.name)
        .all()
    )
    return CategoryListResponse(categories=rows)


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryCreate,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    _ensure_slug_free(body.slug, db)
    if body.parent_id:
        _get_category(body.parent_id, db)

    category = Category(id=generate_id("cat"), **body.model_dump())
    db.add(category)
    db.add(AuditLog(actor_id=admin.id, action="category_create",
                    detail=f"slug={body.slug}", request_ip=get_client_ip(request)))
    db.commit()
    db.refresh(category)
    return category


@router.put("/categories/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: str,
    body: CategoryUpdate,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    category = _get_category(category_id, db)
    changes = _changes(body, required={"name", "slug"})
    if "slug" in changes:
        _ensure_slug_free(changes["slug"], db, exclude_id=category_id)

    for key, value in changes.items():
        setattr(category, key, value)
    db.add(AuditLog(actor_id=admin.id, action="category_update",
                    detail=f"id={category_id}", request_ip=get_client_ip(request)))
    db.commit()
    db.refresh(category)
    return category


@router.delete("/categories/{category_id}", response_model=SuccessResponse)
def delete_category(
    category_id: str,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Delete a category together with its direct subcategories."""
    category = _get_category(category_id, db)
    db.query(Category).filter(Category.parent_id == category_id).delete(synchronize_session=False)
    db.delete(category)
    db.add(AuditLog(actor_id=admin.id, action="category_delete",
                    detail=f"slug={category.slug}", request_ip=get_client_ip(request)))
    db.commit()
    return SuccessResponse(success=True)


# ===========================================================================
# Tags
# ===========================================================================


@router.get("/categories/{category_id}/tags", response_model=TagListResponse)
def list_tags(category_id: str, db: Session = Depends(get_db)):
    rows = db.query(ProductTag).filter(ProductTag.category_id == category_id).all()
    return TagListResponse(tags=rows)


@router.post("/tags", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(
    body: TagCreate,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    _get_category(body.category_id, db)
    tag = ProductTag(id=generate_id("tag"), **body.model_dump())
    db.add(tag)
    db.add(AuditLog(actor_id=admin.id, action="tag_create",
                    detail=f"slug={body.slug}, category={body.category_id}",
                    request_ip=get_client_ip(request)))
    db.commit()
    db.refresh(tag)
    return tag


# ===========================================================================
# Products
# ===========================================================================


@router.get("/products", response_model=ProductListResponse)
def list_products(db: Session = Depends(get_db)):
    """Active products only."""
    rows = (
        db.query(Product)
        .filter(Product.is_active.is_(True))
        .order_by(Product.created_at.desc())
        .all()
    )
    return ProductListResponse(products=rows)


@router.get("/categories/{category_id}/products", response_model=ProductListResponse)
def list_products_by_category(category_id: str, db: Session = Depends(get_db)):
    rows = (
        db.query(Product)
        .filter(Product.category_id == category_id, Product.is_active.is_(True))
        .order_by(Product.created_at.desc())
        .all()
    )
    return ProductListResponse(products=rows)


@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(product_id: str, db: Session = Depends(get_db)):
    return _get_product(product_id, db)


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    body: ProductCreate,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    _get_category(body.category_id, db)
    product = Product(id=generate_id("prod"), is_active=True, **body.model_dump())
    db.add(product)
    db.add(AuditLog(actor_id=admin.id, action="product_create",
                    detail=f"name={body.name}, price={body.price}",
                    request_ip=get_client_ip(request)))
    db.commit()
    db.refresh(product)
    return product


@router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: str,
    body: ProductUpdate,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    product = _get_product(product_id, db)
    changes = _changes(body, required={"name", "price", "category_id"})
    if "category_id" in changes:
        _get_category(changes["category_id"], db)

    for key, value in changes.items():
        setattr(product, key, value)
    db.add(AuditLog(actor_id=admin.id, action="product_update",
                    detail=f"id={product_id}", request_ip=get_client_ip(request)))
    db.commit()
    db.refresh(product)
    return product


@router.delete("/products/{product_id}", response_model=SuccessResponse)
def delete_product(
    product_id: str,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Soft delete – the row stays, ``is_active`` goes False."""
    product = _get_product(product_id, db)
    product.is_active = False
    db.add(AuditLog(actor_id=admin.id, action="product_delete",
                    detail=f"id={product_id}", request_ip=get_client_ip(request)))
    db.commit()
    return SuccessResponse(success=True)
