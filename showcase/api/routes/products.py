from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import case
from sqlalchemy.orm import Session

from showcase.core.config import PRODUCT_DESCRIPTION_PREVIEW, PRODUCT_STATUS_ORDER
from showcase.db.session import get_db
from showcase.db.models import Product
from showcase.schemas.product import ProductOut, ProductListOut

router = APIRouter(prefix="/products", tags=["Products"])

"""
PRODUCT ROUTES => PUBLIC SHOWCASE

Read-only listing of products, available ones first.
"""

#Explicit rank so ordering does not depend on enum names sorting alphabetically
STATUS_RANK = case(
    {status: rank for rank, status in enumerate(PRODUCT_STATUS_ORDER)},
    value=Product.status,
    else_=len(PRODUCT_STATUS_ORDER),
)


def truncate_description(description: str, limit: int = PRODUCT_DESCRIPTION_PREVIEW) -> str:
    if len(description) > limit:
        return f"{description[:limit]}..."
    return description


#List every product ordered by status then name, with short descriptions
@router.get("", response_model=ProductListOut)
def list_products(
    response: Response,
    db: Session = Depends(get_db),
):
    products = (
        db.query(Product)
        .order_by(STATUS_RANK, Product.name.asc())
        .all()
    )

    items = []
    for product in products:
        item = ProductOut.model_validate(product)
        item.description = truncate_description(item.description)
        items.append(item)

    response.headers["Cache-Control"] = "public, s-maxage=3600, stale-while-revalidate=86400"
    return ProductListOut(products=items)


@router.get("/{slug}", response_model=ProductOut)
def get_product(
    slug: str,
    db: Session = Depends(get_db),
):
    product = (
        db.query(Product)
        .filter(Product.slug == slug)
        .first()
    )

    if not product:
        raise HTTPException(404, "Product not found")

    return ProductOut.model_validate(product)
