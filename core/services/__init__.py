"""Service layer exports."""

from .product_sync import ProductSyncService  # noqa: F401

__all__ = ["ProductSyncService"]
