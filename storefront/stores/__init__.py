# Package exports - these allow cleaner imports like:
# from storefront.stores import CategoryStore, ProductStore
from storefront.stores.base import StoreError
from storefront.stores.category_store import CategoryStore
from storefront.stores.product_store import ProductStore
