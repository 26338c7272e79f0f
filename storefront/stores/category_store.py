from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
import logging

from storefront.schemas.category import Category
from storefront.stores.base import StoreBase, StoreError

logger = logging.getLogger(__name__)

SELECT_ALL = text("SELECT category_id, name, description FROM categories ORDER BY category_id")

SELECT_BY_ID = text(
    "SELECT category_id, name, description FROM categories WHERE category_id = :category_id"
)

INSERT = text(
    "INSERT INTO categories (name, description) VALUES (:name, :description) "
    "RETURNING category_id"
)

UPDATE = text(
    "UPDATE categories SET name = :name, description = :description "
    "WHERE category_id = :category_id"
)

DELETE = text("DELETE FROM categories WHERE category_id = :category_id")


class CategoryStore(StoreBase):
    """Hand-written SQL over the categories table"""

    def get_all(self) -> List[Category]:
        try:
            with self.provider.connect() as conn:
                rows = conn.execute(SELECT_ALL).mappings().all()
        except SQLAlchemyError as e:
            logger.error(f"Error listing categories: {e}", exc_info=True)
            raise StoreError("Error listing categories") from e
        return [self._map_row(row) for row in rows]

    def get_by_id(self, category_id: int) -> Optional[Category]:
        try:
            with self.provider.connect() as conn:
                row = conn.execute(SELECT_BY_ID, {"category_id": category_id}).mappings().first()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching category {category_id}: {e}", exc_info=True)
            raise StoreError(f"Error fetching category with ID {category_id}") from e
        return self._map_row(row) if row else None

    def create(self, category: Category) -> Category:
        try:
            with self.provider.begin() as conn:
                new_id = conn.execute(INSERT, {
                    "name": category.name,
                    "description": category.description,
                }).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error inserting category {category.name!r}: {e}", exc_info=True)
            raise StoreError("Error inserting category") from e
        logger.info(f"Created category {new_id} ({category.name})")
        return category.model_copy(update={"category_id": new_id})

    def update(self, category_id: int, category: Category) -> None:
        """Overwrite every column of the row; matching nothing is not an error"""
        try:
            with self.provider.begin() as conn:
                conn.execute(UPDATE, {
                    "category_id": category_id,
                    "name": category.name,
                    "description": category.description,
                })
        except SQLAlchemyError as e:
            logger.error(f"Error updating category {category_id}: {e}", exc_info=True)
            raise StoreError(f"Error updating category with ID {category_id}") from e

    def delete(self, category_id: int) -> None:
        try:
            with self.provider.begin() as conn:
                conn.execute(DELETE, {"category_id": category_id})
        except SQLAlchemyError as e:
            logger.error(f"Error deleting category {category_id}: {e}", exc_info=True)
            raise StoreError(f"Error deleting category with ID {category_id}") from e

    @staticmethod
    def _map_row(row) -> Category:
        return Category(
            category_id=row["category_id"],
            name=row["name"],
            description=row["description"],
        )
