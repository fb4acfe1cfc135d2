from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from showcase.db.models import ProductStatus

"""
PRODUCT SCHEMA
"""


#Public representation of a showcased product
class ProductOut(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str
    slug: str
    name: str
    tagline: Optional[str] = None
    description: str
    status: ProductStatus
    thumbnail: Optional[str] = None
    github_url: Optional[str] = None
    youtube_url: Optional[str] = None
    demo_url: Optional[str] = None
    pricing: Optional[Any] = None
    created_at: datetime
    updated_at: datetime


class ProductListOut(BaseModel):
    products: list[ProductOut]
