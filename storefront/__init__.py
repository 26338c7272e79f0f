"""Storefront catalog service: categories and products over hand-written SQL."""
