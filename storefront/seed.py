#!/usr/bin/env python3
"""
Seed categories and products from a CSV file via the Catalog API

This script:
1. Reads a product CSV
2. Maps each row to the catalog product schema
3. Creates any category that does not exist yet
4. Creates the products (admin token required)

Expected columns: name, price, category, description, color, stock, featured, image_url

Usage:
    storefront-seed \\
        --csv datasets/products.csv \\
        --token YOUR_ADMIN_AUTH_TOKEN \\
        --catalog-url http://localhost:8080
"""

import argparse
import csv
import logging
import time
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes", "y"}


class CatalogAPIClient:
    """Client for Catalog Service API"""

    def __init__(self, base_url: str, auth_token: str, timeout: float = 10):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {auth_token}',
            'Content-Type': 'application/json',
        })
        self.category_cache: Dict[str, int] = {}

    def get_categories(self) -> Dict[str, int]:
        """Get all categories and return mapping: lowercased name -> category_id"""
        if self.category_cache:
            return self.category_cache

        logger.info(f"Fetching categories from {self.base_url}/categories...")
        response = self.session.get(f'{self.base_url}/categories', timeout=self.timeout)
        response.raise_for_status()
        self.category_cache = {
            cat['name'].lower(): cat['category_id'] for cat in response.json()
        }
        logger.info(f"Loaded {len(self.category_cache)} categories")
        return self.category_cache

    def ensure_category(self, name: str) -> int:
        """Return the ID of the named category, creating it when missing"""
        categories = self.get_categories()
        key = name.lower()
        if key in categories:
            return categories[key]

        response = self.session.post(
            f'{self.base_url}/categories',
            json={'name': name, 'description': None},
            timeout=self.timeout
        )
        response.raise_for_status()
        category_id = response.json()['category_id']
        categories[key] = category_id
        logger.info(f"Created category {name!r} (ID={category_id})")
        return category_id

    def create_product(self, product_data: Dict[str, Any]) -> Optional[int]:
        """Create a product and return product ID"""
        start_time = time.time()
        try:
            response = self.session.post(
                f'{self.base_url}/products',
                json=product_data,
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            logger.error(f"HTTP {e.response.status_code} creating {product_data['name']!r}: {e.response.text}")
            return None
        except requests.exceptions.RequestException as e:
            logger.error(f"Error creating {product_data['name']!r}: {e}")
            return None

        product_id = response.json().get('product_id')
        logger.info(f"Product created: ID={product_id} ({time.time() - start_time:.2f}s)")
        return product_id


def load_csv(file_path: str) -> List[Dict[str, str]]:
    """Load CSV file and return list of rows with stripped values"""
    logger.info(f"Reading CSV file: {file_path}")
    with open(file_path, 'r', encoding='utf-8', newline='') as f:
        rows = [
            {k.strip(): (v.strip() if v else '') for k, v in row.items() if k}
            for row in csv.DictReader(f)
        ]
    logger.info(f"Loaded {len(rows):,} rows from CSV")
    return rows


def map_row(row: Dict[str, str]) -> Dict[str, Any]:
    """Map a CSV row to a product payload (without category_id).

    Raises ValueError when the row has no name or an unparseable price.
    """
    name = row.get('name', '')
    if not name:
        raise ValueError("row has no product name")

    try:
        price = Decimal(row.get('price', '').replace('$', '').replace(',', ''))
    except InvalidOperation:
        raise ValueError(f"invalid price {row.get('price')!r} for {name!r}")

    stock = row.get('stock', '')
    return {
        'name': name,
        'price': float(price),
        'description': row.get('description') or None,
        'color': row.get('color') or None,
        'stock': int(stock) if stock else 0,
        'featured': row.get('featured', '').lower() in TRUE_VALUES,
        'image_url': row.get('image_url') or None,
    }


def seed(client: CatalogAPIClient, rows: List[Dict[str, str]], default_category: str = 'General') -> int:
    """Create every valid row; returns the number of products created"""
    created = 0
    for row_num, row in enumerate(rows, start=1):
        try:
            payload = map_row(row)
        except ValueError as e:
            logger.warning(f"Skipping row {row_num}: {e}")
            continue

        payload['category_id'] = client.ensure_category(row.get('category') or default_category)
        if client.create_product(payload) is not None:
            created += 1
    return created


def main(argv: Optional[List[str]] = None):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    parser = argparse.ArgumentParser(
        description='Seed categories and products from a CSV file via Catalog API'
    )
    parser.add_argument('--csv', required=True, help='Path to products CSV file')
    parser.add_argument('--token', required=True, help='Admin auth token (JWT)')
    parser.add_argument('--catalog-url', default='http://localhost:8080', help='Catalog service URL')
    parser.add_argument('--default-category', default='General', help='Category for rows without one')
    args = parser.parse_args(argv)

    rows = load_csv(args.csv)
    if not rows:
        logger.error("CSV file is empty")
        return 1

    client = CatalogAPIClient(args.catalog_url, args.token)
    created = seed(client, rows, default_category=args.default_category)
    logger.info(f"Created {created}/{len(rows)} products")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
