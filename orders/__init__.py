"""
Orders module - Customer orders placed through the storefront.

This module handles:
- Order entity, status and payment status
- Order status transitions and lifecycle timestamps
- Order listings with customer details and dashboard summaries
"""
