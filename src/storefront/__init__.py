"""Variant pricing, receipt reconstruction and content sanitizing for the storefront."""

__version__ = "0.1.0"
