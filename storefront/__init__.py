"""Storefront cart engine over a remote commerce GraphQL API."""

__version__ = "1.0.0"
