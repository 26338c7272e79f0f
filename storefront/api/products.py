from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from typing import List, Optional
import logging

from storefront.schemas.product import Product
from storefront.auth.dependencies import require_admin
from storefront.stores import ProductStore, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/products",
    tags=["Products"]
)


def get_product_store(request: Request) -> ProductStore:
    """Dependency to get the product store"""
    return request.app.state.product_store


@router.get(
    "",
    response_model=List[Product],
    summary="Search products",
    description="""
    Search products. This is a public endpoint - no authentication required.

    **Filtering (all optional, combined with AND):**
    - `categoryId`: exact category match
    - `minPrice` / `maxPrice`: inclusive price bounds
    - `color`: case-insensitive exact match; products without a color are excluded while this is set
    - `name`: case-insensitive substring of the product name

    Omitting every filter returns the whole catalog.
    """,
    responses={
        200: {"description": "Products matching every supplied filter"},
        500: {"description": "Data store failure"}
    }
)
def search_products(
    category_id: Optional[int] = Query(None, alias="categoryId", description="Filter by category ID"),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", description="Lowest price, inclusive"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", description="Highest price, inclusive"),
    color: Optional[str] = Query(None, description="Color, case-insensitive"),
    name: Optional[str] = Query(None, description="Substring of the product name, case-insensitive"),
    product_store: ProductStore = Depends(get_product_store)
):
    """Search products (public endpoint)"""
    try:
        return product_store.search(
            category_id=category_id,
            min_price=min_price,
            max_price=max_price,
            color=color,
            name=name
        )
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while searching products"
        )


@router.get(
    "/{product_id}",
    response_model=Product,
    summary="Get product by ID",
    responses={
        200: {"description": "Product found"},
        404: {"description": "Product not found"},
        500: {"description": "Data store failure"}
    }
)
def get_product(
    product_id: int,
    product_store: ProductStore = Depends(get_product_store)
):
    """Get product by ID (public endpoint)"""
    try:
        product = product_store.get_by_id(product_id)
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An unexpected error occurred while retrieving product {product_id}"
        )
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} not found"
        )
    return product


@router.post(
    "",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
    description="""
    Create a new product and return it as stored. Any `product_id` in the body is ignored.

    **Requirements:**
    - Authentication: Required (JWT token)
    - Role: ROLE_ADMIN
    """,
    responses={
        201: {"description": "Product created"},
        401: {"description": "Authentication required"},
        403: {"description": "Requires admin role"},
        500: {"description": "Data store failure"}
    }
)
def create_product(
    product: Product,
    current_user: dict = Depends(require_admin),
    product_store: ProductStore = Depends(get_product_store)
):
    """Create a product (admin only)"""
    try:
        return product_store.create(product)
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while adding the product"
        )


@router.put(
    "/{product_id}",
    status_code=status.HTTP_200_OK,
    summary="Replace a product",
    description="""
    Overwrite every field of a product. There are no partial updates: omitted optional
    fields are reset to their defaults. Updating an ID that does not exist succeeds and changes nothing.

    **Requirements:**
    - Authentication: Required (JWT token)
    - Role: ROLE_ADMIN
    """,
    responses={
        200: {"description": "Product updated (empty body)"},
        401: {"description": "Authentication required"},
        403: {"description": "Requires admin role"},
        500: {"description": "Data store failure"}
    }
)
def update_product(
    product_id: int,
    product: Product,
    current_user: dict = Depends(require_admin),
    product_store: ProductStore = Depends(get_product_store)
):
    """Update a product (admin only)"""
    try:
        product_store.update(product_id, product)
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An error occurred while updating the product with ID {product_id}"
        )
    return Response(status_code=status.HTTP_200_OK)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
    description="""
    Delete a product. Deleting an ID that does not exist still succeeds.

    **Requirements:**
    - Authentication: Required (JWT token)
    - Role: ROLE_ADMIN
    """,
    responses={
        204: {"description": "Product deleted"},
        401: {"description": "Authentication required"},
        403: {"description": "Requires admin role"},
        500: {"description": "Data store failure"}
    }
)
def delete_product(
    product_id: int,
    current_user: dict = Depends(require_admin),
    product_store: ProductStore = Depends(get_product_store)
):
    """Delete a product (admin only)"""
    try:
        product_store.delete(product_id)
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An error occurred while deleting the product with ID {product_id}"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
