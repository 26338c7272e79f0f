from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class Category(BaseModel):
    """Catalog category. ``category_id`` is assigned by the store on create"""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "category_id": 1,
                "name": "Electronics",
                "description": "Explore the latest gadgets and electronic devices."
            }
        }
    )

    category_id: Optional[int] = Field(None, description="Category ID (ignored on create)", examples=[1])
    name: str = Field(..., description="Category name", examples=["Electronics"])
    description: Optional[str] = Field(None, description="Category description")
