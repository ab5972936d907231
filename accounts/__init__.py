"""
Accounts module - Back-office identities.

This module handles:
- Admin role checks for authenticated actors
- Admin sign-in and sign-out
- Admin user management over the admin_users table
- Activity log browsing
"""
