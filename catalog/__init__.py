"""
Catalog module - Products, categories, brands and banners.

This module handles:
- Catalog entities read from the remote tables
- Storefront queries (listings, product detail, live banners)
- WhatsApp order links
- Stock adjustments and the inventory log
"""
