# Package exports - these allow cleaner imports like:
# from storefront.schemas import Category, Product
from storefront.schemas.category import Category
from storefront.schemas.product import Product, Price
