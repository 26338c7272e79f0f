from sqlalchemy import Boolean, Column, Integer, MetaData, Numeric, String, Table, Text, Index, false, text

metadata = MetaData()

categories = Table(
    "categories",
    metadata,
    Column("category_id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(50), nullable=False),
    Column("description", Text),
    sqlite_autoincrement=True,
)

# category_id is a loose reference: no foreign key, deleting a category leaves its products alone
products = Table(
    "products",
    metadata,
    Column("product_id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(50), nullable=False),
    Column("price", Numeric(10, 2), nullable=False),
    Column("category_id", Integer, nullable=False),
    Column("description", Text),
    Column("color", String(20)),
    Column("image_url", String(200)),
    Column("stock", Integer, nullable=False, default=0, server_default=text("0")),
    Column("featured", Boolean, nullable=False, default=False, server_default=false()),
    Index("idx_products_category", "category_id"),
    sqlite_autoincrement=True,
)
