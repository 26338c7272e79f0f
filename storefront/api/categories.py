from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from typing import List
import logging

from storefront.schemas.category import Category
from storefront.schemas.product import Product
from storefront.auth.dependencies import require_admin
from storefront.stores import CategoryStore, ProductStore, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/categories",
    tags=["Categories"]
)


def get_category_store(request: Request) -> CategoryStore:
    """Dependency to get the category store"""
    return request.app.state.category_store


def get_product_store(request: Request) -> ProductStore:
    """Dependency to get the product store"""
    return request.app.state.product_store


@router.get(
    "",
    response_model=List[Category],
    summary="List all categories",
    responses={
        200: {"description": "List of categories"},
        500: {"description": "Data store failure"}
    }
)
def list_categories(category_store: CategoryStore = Depends(get_category_store)):
    """List all categories (public endpoint)"""
    try:
        return category_store.get_all()
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving categories"
        )


@router.get(
    "/{category_id}",
    response_model=Category,
    summary="Get category by ID",
    responses={
        200: {"description": "Category found"},
        404: {"description": "Category not found"},
        500: {"description": "Data store failure"}
    }
)
def get_category(
    category_id: int,
    category_store: CategoryStore = Depends(get_category_store)
):
    """Get category by ID (public endpoint)"""
    try:
        category = category_store.get_by_id(category_id)
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An unexpected error occurred while retrieving category {category_id}"
        )
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category with ID {category_id} not found"
        )
    return category


@router.get(
    "/{category_id}/products",
    response_model=List[Product],
    summary="List products in a category",
    responses={
        200: {"description": "Products in the category (empty when none)"},
        500: {"description": "Data store failure"}
    }
)
def list_category_products(
    category_id: int,
    product_store: ProductStore = Depends(get_product_store)
):
    """List all products of a category (public endpoint)"""
    try:
        return product_store.list_by_category_id(category_id)
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An unexpected error occurred while retrieving products for category ID {category_id}"
        )


@router.post(
    "",
    response_model=Category,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
    description="""
    Create a new category. Any `category_id` in the body is ignored; the store assigns one.

    **Requirements:**
    - Authentication: Required (JWT token)
    - Role: ROLE_ADMIN
    """,
    responses={
        201: {"description": "Category created"},
        401: {"description": "Authentication required"},
        403: {"description": "Requires admin role"},
        500: {"description": "Data store failure"}
    }
)
def create_category(
    category: Category,
    current_user: dict = Depends(require_admin),
    category_store: CategoryStore = Depends(get_category_store)
):
    """Create a category (admin only)"""
    try:
        return category_store.create(category)
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while adding the category"
        )


@router.put(
    "/{category_id}",
    status_code=status.HTTP_200_OK,
    summary="Replace a category",
    description="""
    Overwrite every field of a category. Updating an ID that does not exist succeeds and changes nothing.

    **Requirements:**
    - Authentication: Required (JWT token)
    - Role: ROLE_ADMIN
    """,
    responses={
        200: {"description": "Category updated (empty body)"},
        401: {"description": "Authentication required"},
        403: {"description": "Requires admin role"},
        500: {"description": "Data store failure"}
    }
)
def update_category(
    category_id: int,
    category: Category,
    current_user: dict = Depends(require_admin),
    category_store: CategoryStore = Depends(get_category_store)
):
    """Update a category (admin only)"""
    try:
        category_store.update(category_id, category)
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An error occurred while updating the category with ID {category_id}"
        )
    return Response(status_code=status.HTTP_200_OK)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
    description="""
    Delete a category. Deleting an ID that does not exist still succeeds.
    Products referencing the category are left untouched.

    **Requirements:**
    - Authentication: Required (JWT token)
    - Role: ROLE_ADMIN
    """,
    responses={
        204: {"description": "Category deleted"},
        401: {"description": "Authentication required"},
        403: {"description": "Requires admin role"},
        500: {"description": "Data store failure"}
    }
)
def delete_category(
    category_id: int,
    current_user: dict = Depends(require_admin),
    category_store: CategoryStore = Depends(get_category_store)
):
    """Delete a category (admin only)"""
    try:
        category_store.delete(category_id)
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An error occurred while deleting the category with ID {category_id}"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
