from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from typing import Annotated, Optional

# Prices stay Decimal in Python but go over the wire as JSON numbers
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class Product(BaseModel):
    """Catalog product. ``product_id`` is assigned by the store on create"""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "product_id": 1,
                "name": "Smartphone",
                "price": 499.99,
                "category_id": 1,
                "description": "A powerful and feature-rich smartphone for all your communication needs.",
                "color": "Black",
                "stock": 50,
                "featured": False,
                "image_url": "smartphone.jpg"
            }
        }
    )

    product_id: Optional[int] = Field(None, description="Product ID (ignored on create)", examples=[1])
    name: str = Field(..., description="Product name", examples=["Smartphone"])
    price: Price = Field(..., description="Unit price", examples=[499.99])
    category_id: int = Field(..., description="ID of the owning category", examples=[1])
    description: Optional[str] = Field(None, description="Product description")
    color: Optional[str] = Field(None, description="Product color", examples=["Black"])
    stock: int = Field(0, description="Units in stock", examples=[50])
    featured: bool = Field(False, description="Shown on the storefront landing page")
    image_url: Optional[str] = Field(None, description="Image URL or file name", examples=["smartphone.jpg"])
