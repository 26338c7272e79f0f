from decimal import Decimal
from sqlalchemy import Boolean, Integer, Numeric, String, bindparam, text
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
import logging

from storefront.schemas.product import Product
from storefront.stores.base import StoreBase, StoreError

logger = logging.getLogger(__name__)

COLUMNS = "product_id, name, price, category_id, description, color, image_url, stock, featured"

# Parameters shared by INSERT and UPDATE. Typed so Decimal prices bind on every driver.
ROW_PARAMS = (
    bindparam("name", type_=String),
    bindparam("price", type_=Numeric(10, 2)),
    bindparam("category_id", type_=Integer),
    bindparam("description", type_=String),
    bindparam("color", type_=String),
    bindparam("image_url", type_=String),
    bindparam("stock", type_=Integer),
    bindparam("featured", type_=Boolean),
)

# One static query for every filter combination: a NULL parameter switches its predicate off.
# A NULL color column never satisfies an active color filter.
SEARCH = text(f"""
    SELECT {COLUMNS} FROM products
    WHERE (:category_id IS NULL OR category_id = :category_id)
      AND (:min_price IS NULL OR price >= :min_price)
      AND (:max_price IS NULL OR price <= :max_price)
      AND (:color IS NULL OR LOWER(color) = LOWER(:color))
      AND (:name_pattern IS NULL OR LOWER(name) LIKE LOWER(:name_pattern) ESCAPE '\\')
    ORDER BY product_id
""").bindparams(
    bindparam("category_id", type_=Integer),
    bindparam("min_price", type_=Numeric(10, 2)),
    bindparam("max_price", type_=Numeric(10, 2)),
    bindparam("color", type_=String),
    bindparam("name_pattern", type_=String),
)

SELECT_BY_CATEGORY = text(
    f"SELECT {COLUMNS} FROM products WHERE category_id = :category_id ORDER BY product_id"
)

SELECT_BY_ID = text(f"SELECT {COLUMNS} FROM products WHERE product_id = :product_id")

INSERT = text("""
    INSERT INTO products (name, price, category_id, description, color, image_url, stock, featured)
    VALUES (:name, :price, :category_id, :description, :color, :image_url, :stock, :featured)
    RETURNING product_id
""").bindparams(*ROW_PARAMS)

UPDATE = text("""
    UPDATE products
    SET name = :name, price = :price, category_id = :category_id, description = :description,
        color = :color, image_url = :image_url, stock = :stock, featured = :featured
    WHERE product_id = :product_id
""").bindparams(*ROW_PARAMS, bindparam("product_id", type_=Integer))

DELETE = text("DELETE FROM products WHERE product_id = :product_id")


def _like_pattern(fragment: str) -> str:
    """Substring LIKE pattern with the caller's wildcards matched literally"""
    escaped = fragment.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ProductStore(StoreBase):
    """Hand-written SQL over the products table, including the multi-filter search"""

    def search(
        self,
        category_id: Optional[int] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        color: Optional[str] = None,
        name: Optional[str] = None
    ) -> List[Product]:
        """Products matching every filter that is set.

        Each argument is optional; ``None`` disables that filter. Empty strings
        for ``color`` and ``name`` also mean "no filter". Price bounds are
        inclusive, color is a case-insensitive exact match and name a
        case-insensitive substring match.
        """
        params = {
            "category_id": category_id,
            "min_price": min_price,
            "max_price": max_price,
            "color": color or None,
            "name_pattern": _like_pattern(name) if name else None,
        }
        logger.debug(f"Searching products with {params}")

        try:
            with self.provider.connect() as conn:
                rows = conn.execute(SEARCH, params).mappings().all()
        except SQLAlchemyError as e:
            logger.error(f"Error executing product search: {e}", exc_info=True)
            raise StoreError("Error executing search query") from e
        return [self._map_row(row) for row in rows]

    def list_by_category_id(self, category_id: int) -> List[Product]:
        try:
            with self.provider.connect() as conn:
                rows = conn.execute(SELECT_BY_CATEGORY, {"category_id": category_id}).mappings().all()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching products for category {category_id}: {e}", exc_info=True)
            raise StoreError("Error fetching products by category ID") from e
        return [self._map_row(row) for row in rows]

    def get_by_id(self, product_id: int) -> Optional[Product]:
        try:
            with self.provider.connect() as conn:
                row = conn.execute(SELECT_BY_ID, {"product_id": product_id}).mappings().first()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching product {product_id}: {e}", exc_info=True)
            raise StoreError("Error fetching product by ID") from e
        return self._map_row(row) if row else None

    def create(self, product: Product) -> Product:
        """Insert the product and return the row as persisted, store defaults included"""
        try:
            with self.provider.begin() as conn:
                new_id = conn.execute(INSERT, self._row_params(product)).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error inserting product {product.name!r}: {e}", exc_info=True)
            raise StoreError("Error inserting product") from e

        logger.info(f"Created product {new_id} ({product.name})")
        created = self.get_by_id(new_id)
        if created is None:
            raise StoreError(f"Product {new_id} missing right after insert")
        return created

    def update(self, product_id: int, product: Product) -> None:
        """Overwrite every column of the row; matching nothing is not an error"""
        params = self._row_params(product)
        params["product_id"] = product_id
        try:
            with self.provider.begin() as conn:
                conn.execute(UPDATE, params)
        except SQLAlchemyError as e:
            logger.error(f"Error updating product {product_id}: {e}", exc_info=True)
            raise StoreError("Error updating product") from e

    def delete(self, product_id: int) -> None:
        try:
            with self.provider.begin() as conn:
                conn.execute(DELETE, {"product_id": product_id})
        except SQLAlchemyError as e:
            logger.error(f"Error deleting product {product_id}: {e}", exc_info=True)
            raise StoreError("Error deleting product") from e

    @staticmethod
    def _row_params(product: Product) -> dict:
        return {
            "name": product.name,
            "price": product.price,
            "category_id": product.category_id,
            "description": product.description,
            "color": product.color,
            "image_url": product.image_url,
            "stock": product.stock,
            "featured": product.featured,
        }

    @staticmethod
    def _map_row(row) -> Product:
        # SQLite hands back floats for NUMERIC columns
        return Product(
            product_id=row["product_id"],
            name=row["name"],
            price=Decimal(str(row["price"])),
            category_id=row["category_id"],
            description=row["description"],
            color=row["color"],
            stock=row["stock"],
            featured=bool(row["featured"]),
            image_url=row["image_url"],
        )
