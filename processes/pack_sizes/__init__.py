"""Server-wide pack size registry."""

from .registry import PackSizeRegistry

__all__ = ["PackSizeRegistry"]
