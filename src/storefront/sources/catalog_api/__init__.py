from .source import CatalogApiSource, CatalogLoader, ensure_device_id

__all__ = ["CatalogApiSource", "CatalogLoader", "ensure_device_id"]
