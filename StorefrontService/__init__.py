"""
Storefront Service Django project.
"""
