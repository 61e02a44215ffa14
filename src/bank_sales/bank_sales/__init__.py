"""Bank Sales package.

This package is organized by feature modules (catalog, users, sales, stats, ...)
with a thin Flask controller layer and SOLID service/repository layers.
"""
