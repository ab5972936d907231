"""
Core module for the remote table layer.

This module contains:
- Table queries, domain events and exceptions
- Ports for the remote table service and the session provider
- LiveTable, TableOperations and the activity-log writer
- Supabase and in-memory adapters, middleware and metrics
"""
